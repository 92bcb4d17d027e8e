# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import Iterable

from fsmon.monitoring.coerce import int_or_default, last_int_or_default
from fsmon.monitoring.filesystem.constants import (
    LIMITS_NOFILES_KEY,
    LSOF_HEADER,
    UNLIMITED,
)


def count_open_file_descriptors(lines: Iterable[str]) -> int:
    """Count the rows of `lsof -nl` following its header. Output without a header
    counts as 0."""
    header = False
    open_files = 0
    for line in lines:
        if not header:
            header = line.startswith(LSOF_HEADER)
        else:
            open_files += 1
    return open_files


def parse_max_file_descriptors(first_line: str) -> int:
    """Parse the answer of `ulimit -n`. Anything but a number, including
    `unlimited`, is 0."""
    return int_or_default(first_line.strip(), 0)


def parse_max_file_descriptors_per_process(lines: Iterable[str]) -> int:
    """Find the `nofiles` limit in /etc/security/limits, e.g.

        default:
            fsize = 2097151
            nofiles = 2000

    Returns `UNLIMITED` if the limit is not set or not numeric.
    """
    for line in lines:
        if line.strip().startswith(LIMITS_NOFILES_KEY):
            return last_int_or_default(line, UNLIMITED)
    return UNLIMITED
