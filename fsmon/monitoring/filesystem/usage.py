# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Parsing for the inode usage report of `df -F %l %n`.

Sample output:

    Filesystem    512-blocks     Iused    Ifree
    /dev/hd4         1441792    18137    58069
    /dev/hd2         5636096    44046   102455
    /proc                  -        -        -
    192.168.253.80:/usr/sys/inst.images   461373440    84670  5662375
"""
import logging
from typing import Dict, Iterable, List, Optional

from fsmon.monitoring.coerce import int_or_default
from fsmon.monitoring.filesystem.constants import DEVICE_ROW_PATTERN
from fsmon.schemas.filesystem.mount import UsageEntry

logger = logging.getLogger(__name__)

USAGE_MIN_FIELDS = 3


def is_device_row(line: str) -> bool:
    """True if the line starts with a device path (`/dev/hd4`) or a network
    volume (`host:/export`).

    >>> is_device_row("/dev/hd4   1441792   18137   58071")
    True
    >>> is_device_row("Filesystem    512-blocks     Iused    Ifree")
    False
    """
    return DEVICE_ROW_PATTERN.match(line) is not None


def as_usage_entry(fields: List[str]) -> Optional[UsageEntry]:
    if len(fields) < USAGE_MIN_FIELDS:
        return None
    # the last two columns are the ones requested with `%n`
    used = int_or_default(fields[-2], 0)
    free = int_or_default(fields[-1], 0)
    return UsageEntry(inodes_free=free, inodes_total=used + free)


def parse_usage(
    lines: Iterable[str], local_only: bool = False
) -> Dict[str, UsageEntry]:
    """Map each device in the report to its inode usage.

    `local_only` only selects the command variant, see `usage_command`. Rows which are
    not device rows or are too short are skipped. Non-numeric counts are read as 0.
    """
    usage: Dict[str, UsageEntry] = {}
    for line in lines:
        if not is_device_row(line):
            continue
        fields = line.split()
        entry = as_usage_entry(fields)
        if entry is None:
            logger.debug(f"Skipping short usage row: '{line}'")
            continue
        usage[fields[0]] = entry
    return usage
