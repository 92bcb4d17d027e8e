# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import pytest

from fsmon.tests.fakes import FakeFileSystemClient


@pytest.fixture
def fs_client() -> FakeFileSystemClient:
    return FakeFileSystemClient()
