from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, List, Optional, TypeVar

from .types import CalcValue, EvaluationError, Frame, NotCallable

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_RECEIVER_ATTR = "__exprcalc_receiver__"


def receives_environment(fn: F) -> F:
    """Mark a callable that takes the read-only environment as its first argument.

    The environment plays the role of the call's receiver: ``f(1, 2)`` in
    source invokes ``fn(env, 1, 2)``.
    """
    setattr(fn, _RECEIVER_ATTR, True)
    return fn


def wants_receiver(fn: Any) -> bool:
    return bool(getattr(fn, _RECEIVER_ATTR, False))


def invocable_with(fn: Any, arg_count: int) -> Optional[str]:
    """Capability check: None when ``fn`` accepts ``arg_count`` positional arguments, else the reason."""
    if not callable(fn):
        return f"{type(fn).__name__} value is not callable"

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # no introspectable signature (some builtins); let the call decide
        return None

    placeholders = [None] * arg_count
    try:
        sig.bind(*placeholders)
    except TypeError as exc:
        return str(exc)

    return None


def call_value(name: str, args: List[CalcValue], frame: Frame) -> CalcValue:
    """Invoke the environment entry ``name`` with already-evaluated arguments."""
    if name not in frame:
        raise NotCallable(name, None, len(args), "name is not defined in the environment")

    fn = frame.get(name)
    positional: List[Any] = [frame.receiver, *args] if wants_receiver(fn) else list(args)

    reason = invocable_with(fn, len(positional))
    if reason is not None:
        raise NotCallable(name, fn, len(args), reason)

    logger.debug("calling %s with %d argument(s)", name, len(args))
    return fn(*positional)


__all__ = [
    "EvaluationError",
    "NotCallable",
    "call_value",
    "invocable_with",
    "receives_environment",
    "wants_receiver",
]
