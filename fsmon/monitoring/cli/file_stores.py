# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
import re
import socket
from dataclasses import asdict, dataclass, field
from typing import (
    Collection,
    List,
    Literal,
    Mapping,
    Optional,
    Protocol,
    runtime_checkable,
)

import click
from fsmon.exporters import registry
from fsmon.monitoring.click import (
    chunk_size_option,
    dry_run_option,
    interval_option,
    log_folder_option,
    log_level_option,
    once_option,
    pattern_option,
    retries_option,
    sink_option,
    sink_opts_option,
    stdout_option,
)
from fsmon.monitoring.clock import Clock, ClockImpl
from fsmon.monitoring.filesystem.client import FileSystemCliClient, FileSystemClient
from fsmon.monitoring.filesystem.enumerator import FileStoreEnumerator
from fsmon.monitoring.filesystem.policy import FilterPolicy
from fsmon.monitoring.sink.protocol import (
    DataIdentifier,
    DataType,
    SinkAdditionalParams,
    SinkImpl,
)
from fsmon.monitoring.sink.utils import Factory, HasRegistry
from fsmon.monitoring.utils.monitor import run_data_collection_loop
from fsmon.schemas.filesystem.file_store import FileStore, FileStoreMessage
from typeguard import typechecked

LOGGER_NAME = "file_stores"


@runtime_checkable
class CliObject(HasRegistry[SinkImpl], Protocol):
    @property
    def clock(self) -> Clock: ...

    def hostname(self) -> str: ...

    @property
    def fs_client(self) -> FileSystemClient: ...


@dataclass
class CliObjectImpl:
    clock: Clock = field(default_factory=ClockImpl)
    fs_client: FileSystemClient = field(default_factory=FileSystemCliClient)
    registry: Mapping[str, Factory[SinkImpl]] = field(default_factory=lambda: registry)

    def hostname(self) -> str:
        return socket.gethostname()


def as_file_store_messages(
    stores: List[FileStore], hostname: str
) -> List[FileStoreMessage]:
    return [FileStoreMessage(hostname=hostname, **asdict(s)) for s in stores]


def build_policy(
    path_includes: Collection[str],
    path_excludes: Collection[str],
    volume_includes: Collection[str],
    volume_excludes: Collection[str],
) -> FilterPolicy:
    try:
        return FilterPolicy.from_config(
            path_includes=path_includes,
            path_excludes=path_excludes,
            volume_includes=volume_includes,
            volume_excludes=volume_excludes,
        )
    except re.error as e:
        raise click.BadParameter(f"Invalid file store pattern: {e}") from e


@click.command()
@sink_option
@sink_opts_option
@log_level_option
@log_folder_option
@stdout_option
@interval_option(default=300)
@once_option
@retries_option
@dry_run_option
@chunk_size_option
@click.option(
    "--local-only",
    is_flag=True,
    default=False,
    help="Skip network file systems.",
)
@click.option(
    "--name",
    default=None,
    help="Only report the file store with this name, e.g. 'home' for /home.",
)
@pattern_option("--path-excludes", "mount points to skip")
@pattern_option("--path-includes", "mount points to report even if excluded")
@pattern_option("--volume-excludes", "volumes to skip")
@pattern_option("--volume-includes", "volumes to report even if excluded")
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
    local_only: bool,
    name: Optional[str],
    path_excludes: Collection[str],
    path_includes: Collection[str],
    volume_excludes: Collection[str],
    volume_includes: Collection[str],
) -> None:
    """Collects capacity and inode usage of the mounted file stores and sends them to sink."""
    enumerator = FileStoreEnumerator(
        client=obj.fs_client,
        policy=build_policy(
            path_includes, path_excludes, volume_includes, volume_excludes
        ),
    )

    def collect_file_stores(
        hostname: str, logger: logging.Logger
    ) -> List[FileStoreMessage]:
        if name is None:
            stores = enumerator.get_file_stores(local_only=local_only)
        else:
            stores = enumerator.get_file_store_matching(name, local_only=local_only)
        logger.info(f"collected {len(stores)} file stores")
        return as_file_store_messages(stores, hostname)

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
                collect_file_stores,
                SinkAdditionalParams(
                    data_type=DataType.LOG,
                    data_identifier=DataIdentifier.FILE_STORE,
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
