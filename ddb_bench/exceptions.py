"""
Exception hierarchy for the DynamoDB adapter bench.

Every failure the harness surfaces derives from HarnessError, which keeps the
original exception and a context mapping so reports can say which adapter,
table, or key was involved. None of these errors are retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class HarnessError(Exception):
    """Base exception for all harness errors.

    Attributes:
        message: Human-readable error message
        original_error: The original exception that caused this error (if any)
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"original_error={self.original_error!r}, context={self.context!r})"
        )


class ItemNotFoundError(HarnessError):
    """Raised when a get-by-key finds no record."""

    def __init__(self, table_name: str, key: Dict[str, Any], original_error: Optional[Exception] = None):
        self.table_name = table_name
        self.key = key
        message = f"Item not found in table '{table_name}' with key: {key}"
        super().__init__(message, original_error, {"table_name": table_name, "key": key})


class BackendUnavailableError(HarnessError):
    """Raised when the backend endpoint cannot be reached or times out."""


class DecodeError(HarnessError):
    """Raised when a wire payload cannot be unmarshalled into a Record."""


@dataclass(frozen=True)
class FieldMismatch:
    """One diverging value between an expected and an actual result."""

    index: int
    record_id: Optional[str]
    field: str
    expected: Any
    actual: Any

    def describe(self) -> str:
        return (
            f"[{self.index}] id={self.record_id} field={self.field}: "
            f"expected={self.expected!r} actual={self.actual!r}"
        )


class EquivalenceMismatchError(HarnessError):
    """Raised when an adapter result differs from the expected result.

    Carries the adapter name, the operation description, and every diverging
    field so the harness can be used as a regression detector.
    """

    def __init__(self, adapter: str, operation: str, mismatches: List[FieldMismatch]):
        self.adapter = adapter
        self.operation = operation
        self.mismatches = list(mismatches)
        lines = "; ".join(m.describe() for m in self.mismatches[:10])
        if len(self.mismatches) > 10:
            lines += f"; ... {len(self.mismatches) - 10} more"
        message = f"Adapter '{adapter}' disagrees on {operation}: {lines}"
        super().__init__(
            message,
            context={"adapter": adapter, "operation": operation, "mismatches": len(self.mismatches)},
        )


__all__ = [
    "HarnessError",
    "ItemNotFoundError",
    "BackendUnavailableError",
    "DecodeError",
    "FieldMismatch",
    "EquivalenceMismatchError",
]
