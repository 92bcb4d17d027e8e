# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from fsmon.exporters import register
from fsmon.monitoring.sink.protocol import SinkAdditionalParams
from fsmon.schemas.log import Log


@register("do_nothing")
class DoNothing:
    """Placeholder Sink"""

    def write(
        self,
        data: Log,
        additional_params: SinkAdditionalParams,
    ) -> None:
        pass
