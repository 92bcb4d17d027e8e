# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
from typing import Collection, List, Literal

import click
from fsmon.monitoring.cli.file_stores import CliObject
from fsmon.monitoring.click import (
    chunk_size_option,
    dry_run_option,
    interval_option,
    log_folder_option,
    log_level_option,
    once_option,
    retries_option,
    sink_option,
    sink_opts_option,
    stdout_option,
)
from fsmon.monitoring.filesystem.enumerator import FileStoreEnumerator
from fsmon.monitoring.sink.protocol import (
    DataIdentifier,
    DataType,
    SinkAdditionalParams,
)
from fsmon.monitoring.utils.monitor import run_data_collection_loop
from fsmon.schemas.filesystem.descriptors import FileDescriptors
from typeguard import typechecked

LOGGER_NAME = "file_descriptors"


def collect_file_descriptors(
    enumerator: FileStoreEnumerator, hostname: str
) -> FileDescriptors:
    return FileDescriptors(
        hostname=hostname,
        open_file_descriptors=enumerator.get_open_file_descriptors(),
        max_file_descriptors=enumerator.get_max_file_descriptors(),
        max_file_descriptors_per_process=enumerator.get_max_file_descriptors_per_process(),
    )


@click.command()
@sink_option
@sink_opts_option
@log_level_option
@log_folder_option
@stdout_option
@interval_option(default=60)
@once_option
@retries_option
@dry_run_option
@chunk_size_option
@click.pass_obj
@typechecked
def main(
    obj: CliObject,
    sink: str,
    sink_opts: Collection[str],
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    log_folder: str,
    stdout: bool,
    interval: int,
    once: bool,
    retries: int,
    dry_run: bool,
    chunk_size: int,
) -> None:
    """Collects open and maximum file descriptor counts and sends them to sink."""
    enumerator = FileStoreEnumerator(client=obj.fs_client)

    def _collect(hostname: str, logger: logging.Logger) -> List[FileDescriptors]:
        return [collect_file_descriptors(enumerator, hostname)]

    run_data_collection_loop(
        logger_name=LOGGER_NAME,
        log_folder=log_folder,
        stdout=stdout,
        log_level=log_level,
        hostname=obj.hostname(),
        clock=obj.clock,
        once=once,
        interval=interval,
        data_collection_tasks=[
            (
                _collect,
                SinkAdditionalParams(
                    data_type=DataType.METRIC,
                    data_identifier=DataIdentifier.FILE_DESCRIPTORS,
                ),
            )
        ],
        sink=sink,
        sink_opts=sink_opts,
        retries=retries,
        chunk_size=chunk_size,
        dry_run=dry_run,
        registry=obj.registry,
    )
