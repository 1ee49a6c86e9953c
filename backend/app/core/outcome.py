"""Outcome — tagged success/failure result returned across the service boundary.

Invariants:
    - Exactly one of value / error is meaningful, discriminated by `ok`
    - error is always a sanitized ErrorReport (never a raw exception)

Design Decisions:
    - Services return Outcome instead of raising: the API layer branches on
      error.kind without catching exceptions
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from app.core.errors import ErrorReport

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    ok: bool
    value: T | None = None
    error: ErrorReport | None = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorReport) -> "Outcome[T]":
        return cls(ok=False, error=error)
