# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
import os
import subprocess

from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 60


def _popen(cmd: List[str]) -> "subprocess.Popen[str]":
    try:
        return subprocess.Popen(
            cmd, text=True, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL
        )
    except FileNotFoundError as e:
        path = os.environ.get("PATH", "")
        raise RuntimeError(
            f"Could not find executable '{cmd[0]}'. Current PATH: {path}"
        ) from e


def _read_lines(p: "subprocess.Popen[str]", timeout_secs: int) -> List[str]:
    with p:
        try:
            stdout, _ = p.communicate(timeout=timeout_secs)
        except subprocess.TimeoutExpired:
            logger.warning(f"Command {p.args} timed out after {timeout_secs}s")
            p.kill()
            raise
        if p.returncode != 0:
            # df and mount exit non-zero if a single mount could not be read, but
            # still report the others
            logger.warning(f"Command {p.args} exited with code {p.returncode}")
    return stdout.splitlines()


def get_command_lines(
    command: List[str], timeout_secs: int = DEFAULT_TIMEOUT_SECS
) -> List[str]:
    """Return the lines written to stdout by `command`, without trailing newlines.

    Raises:
        RuntimeError if the executable could not be found.
        subprocess.TimeoutExpired if the command did not exit in time.
    """
    return _read_lines(_popen(command), timeout_secs)


def get_first_answer(
    command: str, timeout_secs: Optional[int] = DEFAULT_TIMEOUT_SECS
) -> str:
    """Return the first line of output of `command` run in a shell, so that shell
    builtins such as `ulimit` can be used. Returns an empty string if the command
    printed nothing."""
    out = subprocess.run(
        command,
        shell=True,
        encoding="utf-8",
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        timeout=timeout_secs,
    )
    if out.returncode != 0:
        logger.warning(f"Command '{command}' exited with code {out.returncode}")
    lines = out.stdout.splitlines()
    return lines[0] if lines else ""
