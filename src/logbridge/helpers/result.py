"""
Success-or-failure result returned by the ``try_*`` helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from logbridge.exceptions import LogBridgeError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a best-effort operation.

    Truthy when the operation succeeded, so ``if try_set_log_level(ctx, True):``
    reads naturally.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> Result[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str | BaseException) -> Result[T]:
        if isinstance(error, LogBridgeError):
            return cls(ok=False, error=str(error), code=error.code)
        if isinstance(error, BaseException):
            return cls(ok=False, error=f"{type(error).__name__}: {error}")
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok
