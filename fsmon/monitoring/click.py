# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

import click

import daemon
import tomli

from fsmon.monitoring.coerce import ensure_dict
from typeguard import typechecked
from typing_extensions import ParamSpec

logger = logging.getLogger(__name__)

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])


class DaemonGroup(click.Group):
    def invoke(self, ctx: click.Context) -> None:
        detach = ctx.params.get("detach", False)
        if detach:
            with daemon.DaemonContext():
                return super().invoke(ctx)
        else:
            return super().invoke(ctx)


detach_option = click.option(
    "--detach",
    "-d",
    is_flag=True,
    default=False,
    help="Run in the background as a daemon.",
)


class IntWithSISymbol(click.ParamType):
    name = "integer_si"
    _symbol_map = {"k": 1000, "M": 1_000_000}

    def convert(
        self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]
    ) -> int:
        if isinstance(value, int):
            return value
        multiplier = 1
        extracted_value = value
        if value and not value[-1].isdigit():
            if value[-1] in self._symbol_map:
                multiplier = self._symbol_map[value[-1]]
                extracted_value = value[:-1]
            else:
                allowed = ", ".join(self._symbol_map.keys())
                self.fail(
                    f"Unrecognized SI symbol '{value[-1]}'. Allowed symbols are: {allowed}",
                    param,
                    ctx,
                )
        try:
            return int(extracted_value) * multiplier
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


sink_option = click.option(
    "--sink",
    default="stdout",
    help="The sink where data should be published.",
)

sink_opts_option = click.option(
    "-o",
    "--sink-opt",
    "sink_opts",
    multiple=True,
    help="Sink instantiation customization using OmegaConf dot-list syntax, e.g. -o file_path=/tmp/out.json",
)

log_level_option = click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default="INFO",
    show_default=True,
    help="Logging verbosity level.",
)

log_folder_option = click.option(
    "--log-folder",
    type=click.Path(file_okay=False),
    default="fsmon_logs",
    show_default=True,
    help="The directory where logs will be stored.",
)

stdout_option = click.option(
    "--stdout",
    is_flag=True,
    default=False,
    help="Whether to display logs to stdout.",
)

once_option = click.option(
    "--once",
    is_flag=True,
    default=False,
    help="Do only one round of data collection and publishing",
)

retries_option = click.option(
    "--retries",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="The maximum number of times to retry writing to sink before failing.",
)

dry_run_option = click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    help="Print data to STDOUT as JSON instead of the sink.",
)

chunk_size_option = click.option(
    "--chunk-size",
    type=IntWithSISymbol(),
    default="1M",
    show_default=True,
    help=(
        "The maximum size in bytes of each chunk when writing data to sink. "
        "Recognizes 1k for 1000 and 1M for 1,000,000. Pass 0 to disable chunking."
    ),
)


def interval_option(default: int) -> Callable[[FC], FC]:
    return click.option(
        "--interval",
        type=click.IntRange(min=0),
        default=default,
        show_default=True,
        help="The interval in seconds for collecting data.",
    )


def pattern_option(name: str, kind: str) -> Callable[[FC], FC]:
    """A repeatable option holding comma separated `glob:`/`regex:` patterns."""
    return click.option(
        name,
        multiple=True,
        default=(),
        help=(
            f"Patterns of {kind}. Repeatable; a value may hold several comma "
            "separated patterns, each a glob or prefixed with 'glob:' or 'regex:'."
        ),
    )


_ClickCallback = Callable[[click.Context, click.Parameter, Path], None]


def _set_default_map(name: str) -> _ClickCallback:
    @typechecked
    def cb(ctx: click.Context, param: click.Parameter, path: Path) -> None:
        if not path.exists() or path == Path("/dev/null"):
            return

        logger.info(f"Reading config from {path}...")
        with path.open("rb") as f:
            try:
                conf = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise click.BadParameter(
                    f"{path} does not contain valid TOML.",
                    ctx=ctx,
                    param=param,
                ) from e
        try:
            default_map = ensure_dict(conf[name])
        except KeyError as e:
            raise click.BadParameter(
                f"'{name}' is not a top-level table name in {path}. Valid names: {list(conf.keys())}",
                ctx=ctx,
                param=param,
            ) from e
        logger.info(f"Loaded table '{name}'.")

        ctx.default_map = {**(ctx.default_map or {}), **default_map}

    return cb


_P = ParamSpec("_P")
_R = TypeVar("_R")


def toml_config_option(
    name: str,
    *,
    default_config_path: Union[str, Path] = "/etc/fsmon/config.toml",
) -> Callable[[Callable[_P, _R]], Callable[_P, _R]]:
    """Load default option values from the table `name` of a TOML config file.

    Adds an eager `--config` option taking a path. A non-existent path or
    `/dev/null` is treated as an empty table.

    Precedence (lowest to highest):
    * `default` argument to `click.option`
    * the value in the config file
    * value passed at the command line

    On a command group, subtables configure the subcommands, e.g.

        [fsmon.file_stores]
        local_only = true
        path_excludes = ["/tmp/**", "regex:/var/adm/ras/.*"]
    """

    def decorator(f: Callable[_P, _R]) -> Callable[_P, _R]:
        return click.option(
            "--config",
            type=click.Path(dir_okay=False, path_type=Path),
            callback=_set_default_map(name),
            default=default_config_path,
            show_default=True,
            is_eager=True,
            expose_value=False,
            help=(
                f"Load option values from table '{name}' in the given TOML config file. "
                "A non-existent path or '/dev/null' are ignored and treated as empty tables."
            ),
        )(f)

    return decorator

