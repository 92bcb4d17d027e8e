# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
from typing import Callable, FrozenSet, Mapping, Optional

from fsmon.monitoring.filesystem.constants import (
    DEVICE_PREFIX,
    LOCAL_DISK,
    MOUNT_POINT,
    NETWORK_DISK,
    NETWORK_FS_TYPES,
    RAM_DISK,
    RAM_DISK_VOLUME,
    ROOT_PATH,
)
from fsmon.schemas.filesystem.capacity import Capacity
from fsmon.schemas.filesystem.file_store import FileStore
from fsmon.schemas.filesystem.mount import MountRecord, UsageEntry

logger = logging.getLogger(__name__)

NO_USAGE = UsageEntry(inodes_free=0, inodes_total=0)


def display_name(path: str, volume: str) -> str:
    """The last component of the mount point, or of the volume for the root.

    >>> display_name("/var/adm/ras/livedump", "/dev/livedump")
    'livedump'
    >>> display_name("/", "/dev/hd4")
    'hd4'
    """
    name = path[path.rfind("/") + 1 :]  # noqa: E203
    if not name:
        name = volume[volume.rfind("/") + 1 :]  # noqa: E203
    return name


def describe(
    path: str,
    volume: str,
    fs_type: str,
    network_fs_types: FrozenSet[str] = NETWORK_FS_TYPES,
) -> str:
    if volume.startswith(DEVICE_PREFIX) or path == ROOT_PATH:
        return LOCAL_DISK
    if volume == RAM_DISK_VOLUME:
        return RAM_DISK
    if fs_type in network_fs_types:
        return NETWORK_DISK
    return MOUNT_POINT


def assemble(
    mount: MountRecord,
    usage: Mapping[str, UsageEntry],
    probe: Callable[[str], Capacity],
    network_fs_types: FrozenSet[str] = NETWORK_FS_TYPES,
) -> Optional[FileStore]:
    """Join a mount with its inode usage and capacity.

    Returns None if the mount point could not be probed. Volumes missing from the
    usage report get zero inode counts.
    """
    capacity = probe(mount.path)
    if not capacity.exists or capacity.total < 0:
        logger.debug(f"Dropping unreachable mount '{mount.path}'")
        return None

    name = display_name(mount.path, mount.volume)
    inodes = usage.get(mount.volume, NO_USAGE)
    return FileStore(
        name=name,
        volume=mount.volume,
        label=name,
        mount=mount.path,
        options=mount.options,
        description=describe(
            mount.path, mount.volume, mount.fs_type, network_fs_types
        ),
        fs_type=mount.fs_type,
        free_space=capacity.free,
        usable_space=capacity.usable,
        total_space=capacity.total,
        free_inodes=inodes.inodes_free,
        total_inodes=inodes.inodes_total,
    )
