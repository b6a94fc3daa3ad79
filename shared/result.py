"""Value-or-error container for lookups that report failure without raising."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")
E = TypeVar("E")


@dataclass(slots=True)
class Result(Generic[T, E]):
    """Either a found ``value`` or the ``error`` explaining why there is none."""

    value: Optional[T] = None
    error: Optional[E] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(value=value)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(error=error)

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` for an error or an empty result."""

        if self.error is not None or self.value is None:
            return default
        return self.value


__all__ = ["Result"]
