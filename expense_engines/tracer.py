"""
expense_engines.tracer -- Engine invocation tracer emitting EXPENSE_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging: engine_name,
    engine_version, input_fingerprint (deterministic SHA-256 prefix of the
    selected inputs) and duration_ms.

Invariants enforced:
    - Fingerprints are deterministic: dict keys are sorted, dataclasses and
      enums are canonicalized field by field.
    - The decorator only reads arguments and emits a log record; it never
      mutates inputs.

Failure modes:
    - Fingerprint fields that were not passed are recorded as "null".

Usage:
    from expense_engines.tracer import traced_engine

    @traced_engine("allocation", "1.0", fingerprint_fields=("total_cents",))
    def allocate(total_cents, method, participants):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from expense_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (bool, int, str)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return type(value).__name__ + _canonicalize(fields)
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Deterministic 16-hex-char SHA-256 prefix of the selected arguments."""
    parts = [
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    ]
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits EXPENSE_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "allocation").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names to include in the input
            fingerprint. Positional and keyword arguments both count.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            _logger.info(
                "EXPENSE_ENGINE_TRACE",
                extra={
                    "trace_type": "EXPENSE_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
