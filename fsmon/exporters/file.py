# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import logging
import os
from dataclasses import asdict
from typing import Dict, Optional

from fsmon.exporters import register
from fsmon.monitoring.sink.protocol import DataIdentifier, SinkAdditionalParams

from fsmon.monitoring.utils.monitor import init_logger
from fsmon.schemas.log import Log


def _file_logger(file_path: str) -> logging.Logger:
    logger, _ = init_logger(
        logger_name=__name__ + file_path,
        log_dir=os.path.dirname(file_path),
        log_name=os.path.basename(file_path),
        log_formatter=None,
    )
    # records must not end up in the collector's own log
    logger.propagate = False
    return logger


@register("file")
class File:
    """Append one JSON object per line to a file. `file_store_file_path` and
    `file_descriptors_file_path` override `file_path` for their records."""

    def __init__(
        self,
        *,
        file_path: Optional[str] = None,
        file_store_file_path: Optional[str] = None,
        file_descriptors_file_path: Optional[str] = None,
    ):
        paths = {
            DataIdentifier.GENERIC: file_path,
            DataIdentifier.FILE_STORE: file_store_file_path,
            DataIdentifier.FILE_DESCRIPTORS: file_descriptors_file_path,
        }
        if all(path is None for path in paths.values()):
            raise ValueError(
                "When using the file sink at least one file_path needs to be specified. See fsmon %collector% --help"
            )
        self.data_identifier_to_logger_map: Dict[DataIdentifier, logging.Logger] = {
            identifier: _file_logger(path)
            for identifier, path in paths.items()
            if path is not None
        }

    def write(
        self,
        data: Log,
        additional_params: SinkAdditionalParams,
    ) -> None:
        identifier = additional_params.data_identifier or DataIdentifier.GENERIC
        logger = self.data_identifier_to_logger_map.get(
            identifier,
            self.data_identifier_to_logger_map.get(DataIdentifier.GENERIC),
        )
        if logger is None:
            raise AssertionError(
                f"The file sink has no file for {identifier}. Pass file_path or the specific path option."
            )
        for payload in data.message:
            logger.info(json.dumps(asdict(payload)))
