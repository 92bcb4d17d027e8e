# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import subprocess
import time
from pathlib import Path

import pytest

from fsmon.monitoring.filesystem.client import FileSystemCliClient, probe_statvfs
from fsmon.monitoring.utils.shell import get_command_lines, get_first_answer


def test_get_command_lines() -> None:
    assert get_command_lines(["printf", "a b\\nc\\n"]) == ["a b", "c"]


def test_get_command_lines_keeps_output_of_failed_command() -> None:
    assert get_command_lines(["sh", "-c", "echo partial; exit 2"]) == ["partial"]


def test_missing_executable() -> None:
    with pytest.raises(RuntimeError, match="Could not find executable"):
        get_command_lines(["surely-not-an-executable-fsmon"])


def test_get_first_answer() -> None:
    assert get_first_answer("echo 1024; echo 2048") == "1024"
    assert get_first_answer("true") == ""


def test_probe_statvfs(tmp_path: Path) -> None:
    capacity = probe_statvfs(str(tmp_path))

    assert capacity.exists
    assert capacity.total >= capacity.free >= 0
    assert capacity.total >= capacity.usable >= 0


def test_probe_missing_path(tmp_path: Path) -> None:
    assert not probe_statvfs(str(tmp_path / "missing")).exists


def test_read_lines(tmp_path: Path) -> None:
    limits = tmp_path / "limits"
    limits.write_text("default:\n\tnofiles = 2000\n")
    client = FileSystemCliClient()

    assert client.read_lines(str(limits)) == ["default:", "\tnofiles = 2000"]
    assert client.read_lines(str(tmp_path / "missing")) == []


def test_stalled_command_is_killed_after_timeout() -> None:
    client = FileSystemCliClient(timeout_secs=1)
    start = time.monotonic()

    with pytest.raises(subprocess.TimeoutExpired):
        client.run_command(["sh", "-c", "sleep 4"])

    assert time.monotonic() - start < 2
