# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Shared utilities for setting up sink plugins"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
import sys
import traceback
from functools import partial
from itertools import islice
from types import ModuleType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    Type,
    TYPE_CHECKING,
    TypeVar,
)

import click
from fsmon.monitoring.decorators import exponential_backoff, OutOfRetries, retry
from fsmon.monitoring.itertools import chunk_by_json_size, json_dumps_dataclass
from fsmon.monitoring.sink.protocol import SinkAdditionalParams, SinkImpl, SinkWrite

from fsmon.schemas.log import Log

if TYPE_CHECKING:
    from _typeshed import DataclassInstance


logger = logging.getLogger(__name__)


def discover(module: ModuleType) -> Dict[str, ModuleType]:
    """Import every submodule of a plugin package so that they register themselves."""
    try:
        path = module.__path__
    except AttributeError as e:
        raise RuntimeError(f"{module.__name__} is not a package") from e

    logger.debug(f"Discovering plugins in {path}")
    modules = {}
    for _, name, ispkg in pkgutil.iter_modules(path, module.__name__ + "."):
        logger.debug(f"Discovered {name} {ispkg}")
        modules[name] = importlib.import_module(name)
    return modules


T = TypeVar("T")
Factory = Callable[..., T]
ClassDecorator = Callable[[Type[T]], Type[T]]
Register = Callable[[str], ClassDecorator[T]]

T_co = TypeVar("T_co", covariant=True)


def make_register(registry: MutableMapping[str, Factory[T_co]]) -> Register[T_co]:
    """Make a `register(name)` class decorator storing classes in `registry`.

    >>> registry: Dict[str, Factory[SinkImpl]] = {}
    >>> register = make_register(registry)
    >>> @register("impl")
    ... class Impl:
    ...     def write(self, data, additional_params): ...
    >>> registry["impl"] is Impl
    True
    """

    def register(name: str) -> ClassDecorator[T_co]:
        def decorator(cls: Type[T_co]) -> Type[T_co]:
            if (factory := registry.get(name)) is not None:
                raise RuntimeError(f"'{name}' is already registered to {factory}")
            registry[name] = cls
            logger.debug(f"Registered '{name}' to {cls.__name__}")
            return cls

        return decorator

    return register


_TSink = TypeVar("_TSink", bound=SinkImpl, covariant=True)


class HasRegistry(Protocol[_TSink]):
    @property
    def registry(self) -> Mapping[str, Factory[_TSink]]: ...


def get_message_for_sink_init_error(
    exc: TypeError,
    sink_name: str,
    sink_factory: Factory,
    sink_kwargs: Mapping[str, Any],
) -> Optional[str]:
    """Explain a TypeError raised while constructing a sink from `-o` options, if
    it was caused by unknown or missing options. Returns None otherwise."""
    params = inspect.signature(sink_factory).parameters
    kw_only = sorted(n for n, p in params.items() if p.kind == p.KEYWORD_ONLY)
    str_exc = str(exc)

    if "got an unexpected keyword argument" in str_exc:
        unknown = sorted(set(sink_kwargs.keys()) - set(kw_only))
        return (
            f"Sink '{sink_name}' got unrecognized options {unknown}. "
            f"Valid options: {kw_only}"
        )
    if "missing" in str_exc and "required keyword-only argument" in str_exc:
        required = {
            n
            for n, p in params.items()
            if p.kind == p.KEYWORD_ONLY and p.default is p.empty
        }
        missing = sorted(required - set(sink_kwargs.keys()))
        return f"Sink '{sink_name}' is missing required options {missing}."
    return None


def print_tb(verbose: bool) -> None:
    if not verbose:
        return
    traceback.print_exception(*sys.exc_info())


def write_to_sink_with_retries(
    write: SinkWrite,
    sink: str,
    records: Iterable[DataclassInstance],
    chunk_size: int,
    retries: int,
    verbose: bool,
    log_time: int,
    additional_params: SinkAdditionalParams,
) -> None:
    write = partial(
        write,
        additional_params=additional_params,
    )
    retryable_write = retry(
        retry_schedule_factory=lambda: islice(exponential_backoff(), retries)
    )(write)

    try:
        if chunk_size > 0:
            for chunk in chunk_by_json_size(records, chunk_size, json_dumps_dataclass):
                retryable_write(Log(ts=log_time, message=chunk))
        else:
            retryable_write(Log(ts=log_time, message=list(records)))
    except OutOfRetries as e:
        print_tb(verbose)
        raise click.ClickException(
            f"Failed even after retrying {retries} times. Please try again later."
        ) from e
    except ValueError as e:
        print_tb(verbose)
        raise click.UsageError(str(e)) from e
    except Exception as e:
        print_tb(verbose)
        raise click.ClickException(
            f"An error occurred writing logs to '{sink=}': {e}. Please try again later"
        ) from e
