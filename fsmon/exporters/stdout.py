# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import logging
from dataclasses import asdict

from fsmon.exporters import register
from fsmon.monitoring.sink.protocol import SinkAdditionalParams
from fsmon.schemas.log import Log

logger = logging.getLogger(__name__)


@register("stdout")
class Stdout:
    """Write each batch of records to stdout as a JSON list."""

    def write(
        self,
        data: Log,
        additional_params: SinkAdditionalParams,
    ) -> None:
        if additional_params.data_type is None:
            logger.warning(
                f"Stdout writes expect data_type to be specified: {additional_params}"
            )
        print(json.dumps([asdict(message) for message in data.message]))
