# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import Dict

import nox

SRC_DIRS = [
    "fsmon",
]


@nox.session
def tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    env_fname = ".env"
    try:
        env = _env_from_file(env_fname)
    except FileNotFoundError:
        session.debug(
            f"File '{env_fname}' does not exist. Not running with modified environment."
        )
        env = None
    session.run("pytest", "-n", "auto", *session.posargs, env=env)


def _env_from_file(fname: str) -> Dict[str, str]:
    with open(fname) as f:
        env = {}
        for line in f:
            k, v = line.rstrip().split("=", maxsplit=1)
            env[k] = v
        return env


@nox.session
def lint(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("flake8", "--extend-ignore=E203,E501", *SRC_DIRS)


@nox.session
def format(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("ufmt", "check", *SRC_DIRS)


@nox.session
def typecheck(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("mypy", *SRC_DIRS)
