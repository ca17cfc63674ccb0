"""Opt-in DEBUG tracing for layout modules.

Modules call :func:`apply_debug_logging` on their ``globals()`` once at import
time.  The wrappers cost a single ``isEnabledFor`` check per call unless the
module logger is at DEBUG, in which case arguments and results are logged in
a compact form (matrices as shape and range, nodes as kind and id).
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Set, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxstring = 80
_repr.maxlist = 6
_repr.maxdict = 6

_MAX_ITEMS = 6


def summarize(value: Any) -> str:
    """Return a short, log-friendly description of ``value``."""

    if isinstance(value, np.ndarray):
        if value.size == 0:
            return f"ndarray(shape={value.shape})"
        if value.size <= _MAX_ITEMS:
            return f"ndarray({_repr.repr(value.tolist())})"
        finite = value[np.isfinite(value)] if value.dtype.kind == "f" else value
        if finite.size == 0:
            return f"ndarray(shape={value.shape}, all non-finite)"
        return (
            f"ndarray(shape={value.shape}, min={float(finite.min()):.6g}, "
            f"max={float(finite.max()):.6g})"
        )

    kind = getattr(value, "kind", None)
    node_id = getattr(value, "id", None)
    if isinstance(kind, str) and isinstance(node_id, str):
        return f"<{kind} {node_id}>"

    if isinstance(value, dict):
        parts = []
        for idx, (key, item) in enumerate(value.items()):
            if idx >= _MAX_ITEMS:
                parts.append(f"... ({len(value)} entries)")
                break
            parts.append(f"{summarize(key)}: {summarize(item)}")
        return "{" + ", ".join(parts) + "}"

    if isinstance(value, (list, tuple)):
        if len(value) > _MAX_ITEMS:
            head = ", ".join(summarize(item) for item in value[:_MAX_ITEMS])
            return f"[{head}, ... ({len(value)} items)]"
        return "[" + ", ".join(summarize(item) for item in value) + "]"

    return _repr.repr(value)


def debug_log_call(logger: logging.Logger, *, name: Optional[str] = None) -> Callable[[F], F]:
    """Decorate ``func`` so each call is traced at DEBUG level."""

    def decorator(func: F) -> F:
        if getattr(func, "_autocanvas_traced", False):
            return func
        label = name or func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            rendered = [summarize(arg) for arg in args]
            rendered.extend(f"{key}={summarize(val)}" for key, val in kwargs.items())
            logger.debug("-> %s(%s)", label, ", ".join(rendered))
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.debug("!! %s raised %s: %s", label, type(exc).__name__, exc)
                raise
            logger.debug("<- %s = %s", label, summarize(result))
            return result

        setattr(wrapper, "_autocanvas_traced", True)
        return cast(F, wrapper)

    return decorator


def _trace_class(cls: type, logger: logging.Logger, skip: Set[str]) -> None:
    for attr, value in list(vars(cls).items()):
        if attr.startswith("__") or attr in skip or f"{cls.__name__}.{attr}" in skip:
            continue
        label = f"{cls.__name__}.{attr}"
        if isinstance(value, staticmethod):
            setattr(cls, attr, staticmethod(debug_log_call(logger, name=label)(value.__func__)))
        elif isinstance(value, classmethod):
            setattr(cls, attr, classmethod(debug_log_call(logger, name=label)(value.__func__)))
        elif inspect.isfunction(value) and value.__module__ == cls.__module__:
            setattr(cls, attr, debug_log_call(logger, name=label)(value))


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public functions and class methods defined in ``namespace``."""

    module_name = namespace.get("__name__", __name__)
    logger = logger or logging.getLogger(module_name)
    skip_set: Set[str] = set(skip or ())

    for attr, value in list(namespace.items()):
        if attr.startswith("_") or attr in skip_set:
            continue
        if getattr(value, "__module__", None) != module_name:
            continue
        if inspect.isfunction(value):
            namespace[attr] = debug_log_call(logger, name=attr)(value)
        elif inspect.isclass(value) and not issubclass(value, BaseException):
            _trace_class(value, logger, skip_set)


__all__ = [
    "apply_debug_logging",
    "debug_log_call",
    "summarize",
]
