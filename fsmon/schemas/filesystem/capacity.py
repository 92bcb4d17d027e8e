# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass


@dataclass(frozen=True)
class Capacity:
    """https://man7.org/linux/man-pages/man3/statvfs.3.html

    Sizes are in bytes. `exists` is False when the path could not be probed.
    """

    exists: bool
    total: int = 0
    free: int = 0
    usable: int = 0
