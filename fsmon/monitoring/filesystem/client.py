# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
import os
from typing import List, Protocol

from fsmon.monitoring.utils.shell import get_command_lines, get_first_answer
from fsmon.schemas.filesystem.capacity import Capacity

logger = logging.getLogger(__name__)


class FileSystemClient(Protocol):
    """A low-level client for the host's file system information."""

    def run_command(self, cmd: List[str]) -> List[str]:
        """Get the lines of output of a command, without trailing newlines.

        If the command cannot be run, RuntimeError should be raised.
        """

    def first_line(self, cmd: str) -> str:
        """Get the first line of output of a shell command, or "" if there is none."""

    def read_lines(self, path: str) -> List[str]:
        """Get the lines of a text file, or an empty list if it cannot be read."""

    def probe(self, path: str) -> Capacity:
        """Get the capacity of the file system containing `path`."""


def probe_statvfs(path: str) -> Capacity:
    try:
        st = os.statvfs(path)
    except OSError:
        logger.debug(f"Could not statvfs '{path}'", exc_info=True)
        return Capacity(exists=False)
    return Capacity(
        exists=True,
        total=st.f_blocks * st.f_frsize,
        free=st.f_bfree * st.f_frsize,
        usable=st.f_bavail * st.f_frsize,
    )


class FileSystemCliClient(FileSystemClient):
    def __init__(self, timeout_secs: int = 60) -> None:
        self.timeout_secs = timeout_secs

    def run_command(self, cmd: List[str]) -> List[str]:
        logger.debug(f"Running command {cmd}")
        return get_command_lines(cmd, timeout_secs=self.timeout_secs)

    def first_line(self, cmd: str) -> str:
        logger.debug(f"Running command '{cmd}'")
        return get_first_answer(cmd, timeout_secs=self.timeout_secs)

    def read_lines(self, path: str) -> List[str]:
        try:
            with open(path, "r") as f:
                return f.read().splitlines()
        except OSError:
            logger.debug(f"Could not read '{path}'", exc_info=True)
            return []

    def probe(self, path: str) -> Capacity:
        return probe_statvfs(path)
