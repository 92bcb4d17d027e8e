# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from fsmon.monitoring.filesystem.assembler import assemble, display_name
from fsmon.monitoring.filesystem.client import FileSystemCliClient, FileSystemClient
from fsmon.monitoring.filesystem.constants import (
    LIMITS_FILE,
    LSOF_COMMAND,
    MOUNT_COMMAND,
    ULIMIT_COMMAND,
    usage_command,
)
from fsmon.monitoring.filesystem.descriptors import (
    count_open_file_descriptors,
    parse_max_file_descriptors,
    parse_max_file_descriptors_per_process,
)
from fsmon.monitoring.filesystem.mounts import parse_mounts
from fsmon.monitoring.filesystem.policy import FilterPolicy
from fsmon.monitoring.filesystem.usage import parse_usage
from fsmon.schemas.filesystem.file_store import FileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileStoreEnumerator:
    """Lists the mounted file stores of the host.

    The usage report (`df`) and the mount table (`mount`) are fetched on every call
    and joined on the volume. The enumerator itself holds no mutable state, so a
    single instance may be shared between threads.
    """

    client: FileSystemClient = field(default_factory=FileSystemCliClient)
    policy: FilterPolicy = field(default_factory=FilterPolicy)

    def get_file_stores(self, local_only: bool = False) -> List[FileStore]:
        return self._get_file_stores_matching(None, local_only)

    def get_file_store_matching(
        self, name: str, local_only: bool = False
    ) -> List[FileStore]:
        """Same as `get_file_stores`, restricted to the stores named `name`."""
        return self._get_file_stores_matching(name, local_only)

    def update_attributes(self, store: FileStore) -> Optional[FileStore]:
        """Get a fresh copy of `store`, or None if it is no longer mounted."""
        for candidate in self.get_file_store_matching(store.name):
            if candidate.volume == store.volume and candidate.mount == store.mount:
                return candidate
        logger.debug(f"File store '{store.name}' at '{store.mount}' is gone")
        return None

    def _get_file_stores_matching(
        self, name: Optional[str], local_only: bool
    ) -> List[FileStore]:
        usage = parse_usage(
            self.client.run_command(usage_command(local_only)), local_only
        )
        stores = []
        for mount in parse_mounts(self.client.run_command(MOUNT_COMMAND)):
            if not self.policy.is_eligible(
                mount.path, mount.volume, mount.fs_type, local_only
            ):
                continue
            if name is not None and name != display_name(mount.path, mount.volume):
                continue
            store = assemble(
                mount, usage, self.client.probe, self.policy.network_fs_types
            )
            if store is not None:
                stores.append(store)
        logger.debug(f"Found {len(stores)} file stores")
        return stores

    def get_open_file_descriptors(self) -> int:
        return count_open_file_descriptors(self.client.run_command(LSOF_COMMAND))

    def get_max_file_descriptors(self) -> int:
        return parse_max_file_descriptors(self.client.first_line(ULIMIT_COMMAND))

    def get_max_file_descriptors_per_process(self) -> int:
        return parse_max_file_descriptors_per_process(
            self.client.read_lines(LIMITS_FILE)
        )
