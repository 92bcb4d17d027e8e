# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from click.testing import CliRunner
from fsmon.exporters.stdout import Stdout
from fsmon.monitoring.cli import file_descriptors, file_stores
from fsmon.monitoring.cli.file_stores import CliObject
from fsmon.monitoring.cli.fsmon import main
from fsmon.monitoring.clock import Clock
from fsmon.monitoring.filesystem.client import FileSystemClient
from fsmon.monitoring.sink.protocol import SinkImpl
from fsmon.monitoring.sink.utils import Factory
from fsmon.tests.fakes import FakeClock, FakeFileSystemClient, GIB

TEST_HOSTNAME = "fake_host"

HOME = {
    "name": "home",
    "volume": "/dev/fslv00",
    "label": "home",
    "mount": "/home",
    "options": "rw,log=/dev/loglv00",
    "description": "Local Disk",
    "fs_type": "jfs2",
    "free_space": 4 * GIB,
    "usable_space": 3 * GIB,
    "total_space": 10 * GIB,
    "free_inodes": 0,
    "total_inodes": 0,
    "hostname": TEST_HOSTNAME,
}


@dataclass
class FakeCliObject:
    clock: Clock = field(default_factory=FakeClock)
    fs_client: FileSystemClient = field(default_factory=FakeFileSystemClient)
    registry: Mapping[str, Factory[SinkImpl]] = field(
        default_factory=lambda: {"stdout": Stdout}
    )

    def hostname(self) -> str:
        return TEST_HOSTNAME


def test_file_stores_by_name(tmp_path: Path) -> None:
    runner = CliRunner()
    fake_obj: CliObject = FakeCliObject()

    result = runner.invoke(
        file_stores.main,
        ["--once", "--log-folder", str(tmp_path), "--name", "home"],
        obj=fake_obj,
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [HOME]


def test_file_stores_all(tmp_path: Path) -> None:
    runner = CliRunner()
    fake_obj: CliObject = FakeCliObject()

    result = runner.invoke(
        file_stores.main,
        [
            "--once",
            "--log-folder",
            str(tmp_path),
            "--local-only",
            "--path-excludes",
            "/var/**,/tmp",
            "--volume-excludes",
            "regex:tmp.*",
        ],
        obj=fake_obj,
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert [store["mount"] for store in json.loads(result.stdout)] == [
        "/",
        "/usr",
        "/var",
        "/admin",
        "/opt",
        "/home",
    ]


def test_file_stores_invalid_pattern(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        file_stores.main,
        ["--once", "--log-folder", str(tmp_path), "--path-excludes", "regex:("],
        obj=FakeCliObject(),
    )

    assert result.exit_code == 2
    assert "Invalid file store pattern" in result.output


def test_unknown_sink(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        file_stores.main,
        ["--once", "--log-folder", str(tmp_path), "--sink", "nope"],
        obj=FakeCliObject(),
    )

    assert result.exit_code == 2
    assert "Sink 'nope' could not be found" in result.output


def test_file_descriptors(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        file_descriptors.main,
        ["--once", "--log-folder", str(tmp_path)],
        obj=FakeCliObject(),
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {
            "hostname": TEST_HOSTNAME,
            "open_file_descriptors": 4,
            "max_file_descriptors": 2048,
            "max_file_descriptors_per_process": 2000,
        }
    ]


def test_config_file_configures_subcommand(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        f"""
        [fsmon.file_stores]
        once = true
        name = "home"
        log_folder = "{tmp_path}"
        path_excludes = ["/home"]
        path_includes = ["/home"]
        """
    )
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["--config", str(config), "file_stores"],
        obj=FakeCliObject(),
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [HOME]
