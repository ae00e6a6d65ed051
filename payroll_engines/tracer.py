"""
payroll_engines.tracer -- ``PAYROLL_ENGINE_TRACE`` records for engine calls.

``@traced_engine`` wraps a pure engine method and, after every call,
logs one record on ``payroll_kernel.engines.tracer``:

    engine_name, engine_version   which calculator ran
    input_fingerprint             16 hex chars of SHA-256 over the
                                  selected arguments
    outcome                       "ok", or the raised error's code
    duration_ms

The fingerprint lets an auditor match a logged run to a recomputation:
identical arguments always hash identically, whatever process or
machine produced them.

The wrapper never touches arguments or results; a call that raises is
traced and the exception propagates unchanged.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date
from datetime import time as time_of_day
from decimal import Decimal
from enum import Enum
from typing import Any

_logger = logging.getLogger("payroll_kernel.engines.tracer")


@functools.singledispatch
def canonical(value: Any) -> str:
    """Stable text form of an argument, independent of object identity."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = ",".join(
            f"{f.name}={canonical(getattr(value, f.name))}" for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({body})"
    return repr(value)


@canonical.register(type(None))
def _(value: None) -> str:
    return "null"


@canonical.register(bool)
def _(value: bool) -> str:
    return "true" if value else "false"


@canonical.register(Enum)
def _(value: Enum) -> str:
    return f"{type(value).__name__}.{value.name}"


@canonical.register(Decimal)
@canonical.register(int)
@canonical.register(str)
def _(value: Any) -> str:
    return str(value)


@canonical.register(date)
@canonical.register(time_of_day)
def _(value: Any) -> str:
    return value.isoformat()


@canonical.register(list)
@canonical.register(tuple)
def _(value: Any) -> str:
    return "[" + ",".join(canonical(v) for v in value) + "]"


@canonical.register(Mapping)
def _(value: Mapping) -> str:
    items = sorted((str(k), canonical(v)) for k, v in value.items())
    return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """16-hex-char SHA-256 prefix over ``name=value`` of the selected arguments.

    Absent arguments hash as ``null``.
    """
    canonical_args = "|".join(
        f"{name}={canonical(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical_args.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator emitting ``PAYROLL_ENGINE_TRACE`` after each call.

    Args:
        engine_name: Engine identifier (e.g. "income_tax").
        engine_version: Engine version (e.g. "1.0").
        fingerprint_fields: Parameter names, positional or keyword, that
            make up the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind(*args, **kwargs)
                bound.apply_defaults()
                # Iterators would be consumed by hashing; fingerprint a snapshot.
                arguments = {
                    name: tuple(value) if inspect.isgenerator(value) else value
                    for name, value in bound.arguments.items()
                }
                fingerprint = compute_input_fingerprint(fingerprint_fields, arguments)
                args, kwargs = _rebind(bound, arguments)

            outcome = "ok"
            started = time.perf_counter()
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = getattr(exc, "code", type(exc).__name__)
                raise
            finally:
                _logger.info(
                    "PAYROLL_ENGINE_TRACE",
                    extra={
                        "trace_type": "PAYROLL_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fingerprint,
                        "outcome": outcome,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                        "function": func.__qualname__,
                    },
                )

        wrapper.engine_name = engine_name
        wrapper.engine_version = engine_version
        return wrapper

    return decorator


def _rebind(
    bound: inspect.BoundArguments,
    arguments: dict[str, Any],
) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Positional/keyword arguments from ``bound`` with snapshot values swapped in."""
    for name, value in arguments.items():
        bound.arguments[name] = value
    return bound.args, bound.kwargs
