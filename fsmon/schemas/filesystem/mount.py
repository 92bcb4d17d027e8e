# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass


@dataclass(frozen=True)
class MountRecord:
    """One row of the `mount` table."""

    volume: str
    path: str
    fs_type: str
    options: str


@dataclass(frozen=True)
class UsageEntry:
    """Inode usage of a device as reported by `df -F %l %n`."""

    inodes_free: int
    inodes_total: int
