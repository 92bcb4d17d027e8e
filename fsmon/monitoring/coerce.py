# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from typing import Any, Dict, Optional

from typeguard import typechecked


def maybe_int(x: Any) -> Optional[int]:
    try:
        return int(x)
    except (TypeError, ValueError):
        return None


def int_or_default(x: Any, default: int) -> int:
    """Parse `x` as an integer, returning `default` if it is not one.

    >>> int_or_default("58071", 0)
    58071
    >>> int_or_default("-", 0)
    0
    """
    parsed = maybe_int(x)
    return default if parsed is None else parsed


def last_int_or_default(s: str, default: int) -> int:
    """Parse the last whitespace delimited token of `s` as an integer. Hex tokens
    (0x...) are accepted.

    >>> last_int_or_default("  nofiles = 2000", 0)
    2000
    >>> last_int_or_default("nofiles = unlimited", 7)
    7
    """
    tokens = s.split()
    if not tokens:
        return default
    token = tokens[-1]
    if token.lower().startswith("0x"):
        try:
            return int(token, 16)
        except ValueError:
            return default
    return int_or_default(token, default)


@typechecked
def ensure_dict(x: Any) -> Dict[str, Any]:
    return x
