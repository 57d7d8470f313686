from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union
from typing_extensions import TypeAlias

# ---------- Value Model ----------

# Runtime values form a closed set: number, text, callable, absent (None).
# Environment values outside that set are carried through opaquely.
CalcValue: TypeAlias = Union[float, str, Callable[..., Any], None]

Environment: TypeAlias = Mapping[str, Any]


class Frame:
    """Read-only view over the caller's environment for one evaluation."""

    __slots__ = ("_env",)

    def __init__(self, env: Optional[Environment] = None):
        self._env: Environment = _read_only({} if env is None else env)

    def get(self, name: str) -> Any:
        """Resolve a name; unknown names are absent, not an error."""
        return self._env.get(name)

    @property
    def receiver(self) -> Environment:
        """Environment handed to callables that ask for their receiver."""
        return self._env

    def __contains__(self, name: object) -> bool:
        return name in self._env


def _read_only(env: Environment) -> Environment:
    if isinstance(env, MappingProxyType):
        return env

    return MappingProxyType(env)

# ---------- Exceptions ----------

class EvaluationError(Exception):
    calc_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.calc_meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "calc_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class NotCallable(EvaluationError):
    def __init__(self, name: str, value: Any, arg_count: int, reason: Optional[str] = None):
        detail = reason or f"{type(value).__name__} value is not callable"
        super().__init__(f"'{name}' cannot be called with {arg_count} argument(s): {detail}")
        self.name = name
        self.value = value
        self.arg_count = arg_count
