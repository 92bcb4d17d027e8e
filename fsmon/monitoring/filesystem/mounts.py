# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Parsing for the output of `mount`.

Sample output:

      node       mounted        mounted over    vfs       date        options
    -------- ---------------  ---------------  ------ ------------ ---------------
             /dev/hd4         /                jfs2   Jun 16 09:12 rw,log=/dev/hd8
             /proc            /proc            procfs Jun 16 09:13 rw
    foo      /dev/fslv00      /home            jfs2   Jun 16 09:13 rw,log=/dev/loglv00
"""
import logging
from typing import Iterable, List, Optional

from fsmon.monitoring.filesystem.constants import MOUNT_LINE_SENTINEL, MOUNT_MIN_FIELDS
from fsmon.schemas.filesystem.mount import MountRecord

logger = logging.getLogger(__name__)


def split_mount_line(line: str) -> List[str]:
    """Split a mount table line so that the volume is always at index 1.

    >>> split_mount_line("         /proc  /proc  procfs Jun 16 09:13 rw")[1]
    '/proc'
    >>> split_mount_line("foo  /dev/fslv00  /home  jfs2 Jun 16 09:13 rw")[1]
    '/dev/fslv00'
    """
    return (MOUNT_LINE_SENTINEL + line).split()


def as_mount_record(line: str) -> Optional[MountRecord]:
    fields = split_mount_line(line)
    if len(fields) < MOUNT_MIN_FIELDS:
        return None
    # fields 4 to 6 are the mount date, so the options are field 7
    return MountRecord(
        volume=fields[1],
        path=fields[2],
        fs_type=fields[3],
        options=fields[7],
    )


def parse_mounts(lines: Iterable[str]) -> List[MountRecord]:
    """Parse the mount table, preserving its order. Header and malformed rows are
    skipped."""
    records = []
    for line in lines:
        record = as_mount_record(line)
        if record is None:
            logger.debug(f"Skipping mount row: '{line}'")
            continue
        records.append(record)
    return records
