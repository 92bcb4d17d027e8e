# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
from pathlib import Path

import pytest

from fsmon.exporters import registry
from fsmon.exporters.file import File
from fsmon.monitoring.sink.protocol import (
    DataIdentifier,
    DataType,
    SinkAdditionalParams,
    SinkImpl,
)
from fsmon.schemas.filesystem.descriptors import FileDescriptors
from fsmon.schemas.log import Log

RECORD = FileDescriptors(
    hostname="fake_host",
    open_file_descriptors=4,
    max_file_descriptors=2048,
    max_file_descriptors_per_process=2000,
)


def test_registry_discovers_sinks() -> None:
    assert {"stdout", "file", "do_nothing"} <= set(registry.keys())
    for name in ("stdout", "do_nothing"):
        assert isinstance(registry[name](), SinkImpl)


def test_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    registry["stdout"]().write(
        Log(ts=0, message=[RECORD]), SinkAdditionalParams(data_type=DataType.METRIC)
    )

    assert json.loads(capsys.readouterr().out) == [
        {
            "hostname": "fake_host",
            "open_file_descriptors": 4,
            "max_file_descriptors": 2048,
            "max_file_descriptors_per_process": 2000,
        }
    ]


def test_file_sink_routes_by_data_identifier(tmp_path: Path) -> None:
    generic = tmp_path / "generic.json"
    descriptors = tmp_path / "descriptors.json"
    sink = File(file_path=str(generic), file_descriptors_file_path=str(descriptors))

    sink.write(
        Log(ts=0, message=[RECORD]),
        SinkAdditionalParams(
            data_type=DataType.METRIC,
            data_identifier=DataIdentifier.FILE_DESCRIPTORS,
        ),
    )
    sink.write(
        Log(ts=0, message=[RECORD, RECORD]),
        SinkAdditionalParams(
            data_type=DataType.LOG, data_identifier=DataIdentifier.FILE_STORE
        ),
    )

    assert len(descriptors.read_text().splitlines()) == 1
    lines = generic.read_text().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["open_file_descriptors"] == 4


def test_file_sink_requires_a_path() -> None:
    with pytest.raises(ValueError):
        File()
