# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass


@dataclass
class FileStore:
    name: str
    volume: str
    label: str
    mount: str
    options: str
    description: str
    fs_type: str
    free_space: int
    usable_space: int
    total_space: int
    free_inodes: int
    total_inodes: int


@dataclass
class FileStoreMessage(FileStore):
    hostname: str
