# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import List

import pytest

from fsmon.monitoring.filesystem.constants import usage_command
from fsmon.monitoring.filesystem.usage import is_device_row, parse_usage
from fsmon.schemas.filesystem.mount import UsageEntry
from fsmon.tests.fakes import read_data
from typeguard import typechecked


@pytest.mark.parametrize(
    "line, expected",
    [
        ("/dev/hd4         1441792    18137    58069", True),
        ("192.168.253.80:/usr/sys/inst.images   461373440    84670  5662375", True),
        ("node1.example:/export  10  1  2", True),
        ("node-1:/export  10  1  2", False),
        ("Filesystem    512-blocks     Iused    Ifree", False),
        ("  /dev/hd4  1  2  3", False),
        ("", False),
    ],
)
@typechecked
def test_is_device_row(line: str, expected: bool) -> None:
    assert is_device_row(line) is expected


def test_parse_usage_sample() -> None:
    usage = parse_usage(read_data("sample-df-output.txt"))

    assert usage["/dev/hd4"] == UsageEntry(inodes_free=58069, inodes_total=76206)
    assert usage[
        "192.168.253.80:/usr/sys/inst.images/mozilla_3513"
    ] == UsageEntry(inodes_free=5662375, inodes_total=5747045)
    assert "Filesystem" not in usage
    assert len(usage) == 12


def test_parse_usage_single_row() -> None:
    usage = parse_usage(["/dev/hd4   1441792   18137   58071"], local_only=True)

    assert usage == {"/dev/hd4": UsageEntry(inodes_free=58071, inodes_total=76208)}


def test_non_numeric_counts_are_zero() -> None:
    usage = parse_usage(["/proc                  -        -        -"])

    assert usage == {"/proc": UsageEntry(inodes_free=0, inodes_total=0)}


@pytest.mark.parametrize(
    "lines",
    [
        ["/proc -"],
        ["/dev/hd4"],
        ["/dev/hd4 1441792"],
        ["Filesystem    512-blocks     Iused    Ifree"],
        ["-------------------------------------------"],
        [],
    ],
)
@typechecked
def test_short_or_header_rows_are_skipped(lines: List[str]) -> None:
    assert parse_usage(lines) == {}


def test_last_row_for_a_device_wins() -> None:
    usage = parse_usage(["/dev/hd4 1 10 20", "/dev/hd4 1 30 40"])

    assert usage == {"/dev/hd4": UsageEntry(inodes_free=40, inodes_total=70)}


def test_usage_command() -> None:
    assert usage_command(local_only=False) == ["df", "-F", "%l", "%n"]
    assert usage_command(local_only=True) == ["df", "-F", "%l", "%n", "-T", "local"]
