# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import re
import sys
from typing import Final, FrozenSet, List

# Virtual file systems with no storage behind them. Never reported unless mounted
# at the root.
PSEUDO_FS_TYPES: Final[FrozenSet[str]] = frozenset(
    [
        "anon_inodefs",
        "autofs",
        "bdev",
        "binfmt_misc",
        "bpf",
        "cgroup",
        "cgroup2",
        "configfs",
        "cpuset",
        "dax",
        "debugfs",
        "devpts",
        "devtmpfs",
        "drvfs",
        "efivarfs",
        "fd",
        "fusectl",
        "fuse.gvfsd-fuse",
        "hugetlbfs",
        "mqueue",
        "namefs",
        "nsfs",
        "overlay",
        "proc",
        "procfs",
        "pstore",
        "rpc_pipefs",
        "securityfs",
        "selinuxfs",
        "sunrpc",
        "sysfs",
        "systemd-1",
        "tracefs",
        "usbfs",
    ]
)

NETWORK_FS_TYPES: Final[FrozenSet[str]] = frozenset(
    [
        "afs",
        "cifs",
        "gfs",
        "gfs2",
        "glusterfs",
        "ncp",
        "ncpfs",
        "nfs",
        "nfs3",
        "nfs4",
        "smbfs",
        "sshfs",
        "stnfs",
    ]
)

ROOT_PATH: Final = "/"
DEVICE_PREFIX: Final = "/dev"
RAM_DISK_VOLUME: Final = "tmpfs"

LOCAL_DISK: Final = "Local Disk"
RAM_DISK: Final = "Ram Disk"
NETWORK_DISK: Final = "Network Disk"
MOUNT_POINT: Final = "Mount Point"

# `df` rows start with a device path, optionally prefixed by a `node:`
DEVICE_ROW_PATTERN: Final = re.compile(r"^(?:[\w.]+:)?/")

# The mount table has an optional leading node column. Prefixing every line with a
# non-blank character keeps field positions stable whether or not it is present.
MOUNT_LINE_SENTINEL: Final = "x"
MOUNT_MIN_FIELDS: Final = 8

MOUNT_COMMAND: Final[List[str]] = ["mount"]
LSOF_COMMAND: Final[List[str]] = ["lsof", "-nl"]
LSOF_HEADER: Final = "COMMAND"
ULIMIT_COMMAND: Final = "ulimit -n"
LIMITS_FILE: Final = "/etc/security/limits"
LIMITS_NOFILES_KEY: Final = "nofiles"
UNLIMITED: Final = sys.maxsize


def usage_command(local_only: bool) -> List[str]:
    """`df` reporting 512-blocks, used inodes and free inodes."""
    cmd = ["df", "-F", "%l", "%n"]
    if local_only:
        cmd.extend(["-T", "local"])
    return cmd
