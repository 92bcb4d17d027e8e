# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import sys
from dataclasses import replace

from fsmon.monitoring.filesystem.constants import MOUNT_COMMAND, usage_command
from fsmon.monitoring.filesystem.enumerator import FileStoreEnumerator
from fsmon.monitoring.filesystem.policy import FilterPolicy
from fsmon.schemas.filesystem.capacity import Capacity
from fsmon.schemas.filesystem.file_store import FileStore
from fsmon.tests.fakes import FakeFileSystemClient, GIB


def test_get_file_stores(fs_client: FakeFileSystemClient) -> None:
    stores = FileStoreEnumerator(client=fs_client).get_file_stores()

    # /proc is a pseudo file system and the header row is not a reachable path
    assert [s.mount for s in stores] == [
        "/",
        "/usr",
        "/var",
        "/tmp",
        "/admin",
        "/opt",
        "/var/adm/ras/livedump",
        "/home",
        "/ramdisk",
        "/mnt/images",
    ]
    assert [s.name for s in stores] == [
        "hd4",
        "usr",
        "var",
        "tmp",
        "admin",
        "opt",
        "livedump",
        "home",
        "ramdisk",
        "images",
    ]
    assert stores[0] == FileStore(
        name="hd4",
        volume="/dev/hd4",
        label="hd4",
        mount="/",
        options="rw,log=/dev/hd8",
        description="Local Disk",
        fs_type="jfs2",
        free_space=4 * GIB,
        usable_space=3 * GIB,
        total_space=10 * GIB,
        free_inodes=58069,
        total_inodes=76206,
    )
    by_name = {s.name: s for s in stores}
    assert by_name["ramdisk"].description == "Ram Disk"
    assert by_name["images"].description == "Network Disk"
    # mount and df disagree on the volume name of network mounts
    assert (by_name["images"].free_inodes, by_name["images"].total_inodes) == (0, 0)
    assert (by_name["home"].free_inodes, by_name["home"].total_inodes) == (0, 0)


def test_local_only(fs_client: FakeFileSystemClient) -> None:
    stores = FileStoreEnumerator(client=fs_client).get_file_stores(local_only=True)

    assert "images" not in [s.name for s in stores]
    assert stores[0].free_inodes == 58071
    assert fs_client.commands == [
        tuple(usage_command(local_only=True)),
        tuple(MOUNT_COMMAND),
    ]


def test_single_example() -> None:
    client = FakeFileSystemClient(
        outputs={
            tuple(usage_command(False)): ["/dev/hd4   1441792   18137   58071"],
            tuple(MOUNT_COMMAND): ["x   /dev/hd4   /   jfs2   Jun 16 09:12   rw"],
        },
        capacities={"/": Capacity(exists=True, total=100, free=50, usable=40)},
    )

    stores = FileStoreEnumerator(client=client).get_file_stores()

    assert len(stores) == 1
    assert stores[0].name == "hd4"
    assert stores[0].mount == "/"
    assert stores[0].description == "Local Disk"
    assert stores[0].free_inodes == 58071
    assert stores[0].total_inodes == 76208


def test_get_file_store_matching(fs_client: FakeFileSystemClient) -> None:
    enumerator = FileStoreEnumerator(client=fs_client)

    assert [s.mount for s in enumerator.get_file_store_matching("home")] == ["/home"]
    assert [s.mount for s in enumerator.get_file_store_matching("hd4")] == ["/"]
    assert enumerator.get_file_store_matching("proc") == []
    assert enumerator.get_file_store_matching("nope") == []


def test_unreachable_mount_is_dropped() -> None:
    client = FakeFileSystemClient()
    del client.capacities["/opt"]

    stores = FileStoreEnumerator(client=client).get_file_stores()

    assert "/opt" not in [s.mount for s in stores]
    assert len(stores) == 9


def test_policy_patterns() -> None:
    enumerator = FileStoreEnumerator(
        client=FakeFileSystemClient(),
        policy=FilterPolicy.from_config(
            path_excludes=["/var/**,/tmp"],
            path_includes=["/var/adm/ras/livedump"],
            volume_excludes=["tmpfs", "/dev/hd4"],
        ),
    )

    mounts = [s.mount for s in enumerator.get_file_stores()]

    assert "/var/adm/ras/livedump" in mounts
    assert "/tmp" not in mounts
    assert "/ramdisk" not in mounts
    # root is never excluded by patterns
    assert "/" in mounts


def test_enumeration_is_repeatable(fs_client: FakeFileSystemClient) -> None:
    enumerator = FileStoreEnumerator(client=fs_client)

    assert enumerator.get_file_stores() == enumerator.get_file_stores()


def test_update_attributes(fs_client: FakeFileSystemClient) -> None:
    enumerator = FileStoreEnumerator(client=fs_client)
    home = enumerator.get_file_store_matching("home")[0]
    fs_client.capacities["/home"] = Capacity(
        exists=True, total=10 * GIB, free=GIB, usable=GIB
    )

    updated = enumerator.update_attributes(home)

    assert updated == replace(home, free_space=GIB, usable_space=GIB)


def test_update_attributes_for_vanished_store(fs_client: FakeFileSystemClient) -> None:
    enumerator = FileStoreEnumerator(client=fs_client)
    home = enumerator.get_file_store_matching("home")[0]
    del fs_client.capacities["/home"]

    assert enumerator.update_attributes(home) is None


def test_empty_command_output() -> None:
    client = FakeFileSystemClient(outputs={})

    assert FileStoreEnumerator(client=client).get_file_stores() == []


def test_file_descriptors(fs_client: FakeFileSystemClient) -> None:
    enumerator = FileStoreEnumerator(client=fs_client)

    assert enumerator.get_open_file_descriptors() == 4
    assert enumerator.get_max_file_descriptors() == 2048
    assert enumerator.get_max_file_descriptors_per_process() == 2000


def test_file_descriptors_without_data() -> None:
    enumerator = FileStoreEnumerator(
        client=FakeFileSystemClient(outputs={}, first_lines={}, files={})
    )

    assert enumerator.get_open_file_descriptors() == 0
    assert enumerator.get_max_file_descriptors() == 0
    assert enumerator.get_max_file_descriptors_per_process() == sys.maxsize
