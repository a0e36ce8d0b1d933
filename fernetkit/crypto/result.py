"""
Success/failure outcome returned by every public Fernet operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import ErrorKind, FernetError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged outcome of an operation.

    Exactly one of ``value`` / ``error`` is meaningful: a success carries the
    value, a failure carries the FernetError that stopped the operation.

    Example:
        >>> result = key_from_text(text).and_then(lambda key: encrypt(b"hi", key))
        >>> token = result.unwrap_or(None)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[FernetError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: FernetError) -> "Result[Any]":
        return cls(ok=False, error=error)

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Error kind of a failure, None for a success"""
        return None if self.ok else self.error.kind

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        """Transform the success value; failures pass through untouched"""
        if not self.ok:
            return self
        return Result.success(func(self.value))

    def and_then(self, func: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Chain another Result-returning step onto a success"""
        if not self.ok:
            return self
        return func(self.value)

    def unwrap(self) -> T:
        """
        Get the success value.

        Raises:
            FernetError: The stored error, if this is a failure
        """
        if not self.ok:
            raise self.error
        return self.value

    def unwrap_or(self, default: U) -> T | U:
        return self.value if self.ok else default

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"Result.success({type(self.value).__name__})"
        return f"Result.failure({self.error.kind.value})"
