# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""A single entrypoint into the fsmon collectors.

This file is intentionally lightweight and should not include any complex logic.
"""

import click

from fsmon._version import __version__
from fsmon.monitoring.cli import file_descriptors, file_stores
from fsmon.monitoring.cli.file_stores import CliObjectImpl
from fsmon.monitoring.click import DaemonGroup, detach_option, toml_config_option


@click.group(
    cls=DaemonGroup,
    epilog=f"fsmon Version: {__version__}",
    context_settings={"obj": CliObjectImpl()},
)
@toml_config_option("fsmon")
@detach_option
@click.version_option(__version__)
def main(detach: bool) -> None:
    """File store monitoring. Reports capacity and inode usage of mounted file systems."""


main.add_command(file_stores.main, name="file_stores")
main.add_command(file_descriptors.main, name="file_descriptors")

if __name__ == "__main__":
    main()
