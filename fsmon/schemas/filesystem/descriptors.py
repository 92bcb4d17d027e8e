# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass


@dataclass
class FileDescriptors:
    hostname: str
    open_file_descriptors: int
    max_file_descriptors: int
    max_file_descriptors_per_process: int
