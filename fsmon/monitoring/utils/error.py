# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Miscellaneous error-handling helpers."""

import logging
from functools import wraps
from typing import Callable, Optional, TypeVar, Union

from typing_extensions import ParamSpec

_T = TypeVar("_T")
_Tr_co = TypeVar("_Tr_co", covariant=True)
_P = ParamSpec("_P")


def log_error(
    logger_name: str,
    return_on_error: Optional[_T] = None,
) -> Callable[[Callable[_P, _Tr_co]], Callable[_P, Union[None, _T, _Tr_co]]]:
    """Decorator which writes any exception raised by the function to the given
    logger and returns `return_on_error` instead."""

    def decorator(f: Callable[_P, _Tr_co]) -> Callable[_P, Union[None, _T, _Tr_co]]:
        @wraps(f)
        def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> Union[None, _T, _Tr_co]:
            try:
                return f(*args, **kwargs)
            except Exception:
                logging.getLogger(logger_name).exception("An exception occurred")
                return return_on_error

        return wrapper

    return decorator
