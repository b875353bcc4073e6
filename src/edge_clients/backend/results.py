"""
The `{data, error}` envelope returned by data-access clients.
"""

from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BackendResult(Generic[T]):
    """A backend response: at most one of `data` and `error` is meaningful."""

    data: T | None = None
    error: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    @classmethod
    def coerce(cls, value: Any) -> "BackendResult":
        """Accept a BackendResult, a `(data, error)` tuple or a mapping."""
        if isinstance(value, BackendResult):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(data=value[0], error=value[1])
        if isinstance(value, Mapping):
            return cls(data=value.get("data"), error=value.get("error"))
        raise TypeError(
            f"Expected BackendResult, (data, error) tuple or mapping, got {type(value).__name__}"
        )
