"""
Query Results — Explicit success/failure values for every table access.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class QueryResult(Generic[T]):
    """Outcome of a table read.

    A missing or empty table is a *successful* result with empty data; only
    genuine read failures (driver errors, unreadable files) are failures.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "QueryResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: Optional[str] = None) -> "QueryResult[T]":
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_exception(cls, exc: Exception, error_code: Optional[str] = None) -> "QueryResult[T]":
        """Convert a caught exception, defaulting the code to its class name."""
        return cls(
            success=False,
            error=str(exc) or exc.__class__.__name__,
            error_code=error_code or exc.__class__.__name__,
        )
