"""Error taxonomy shared by the stores, the lifecycle manager and the UIs."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class ExpenseTrackerError(RuntimeError):
    """Base class for every failure surfaced to the presentation layer.

    ``state`` is filled by :class:`~expense_tracker.engine.lifecycle.LifecycleManager`
    with the snapshot the caller should display after the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.state: Any | None = None


class StoreUnavailable(ExpenseTrackerError):
    """Raised when the record store cannot be reached or rejects a write."""


class NotFound(ExpenseTrackerError):
    """Raised when a replace references an id the store does not know."""

    def __init__(self, record_id: object) -> None:
        super().__init__(f"Expense {record_id} not found")
        self.record_id = record_id


class ValidationFailure(ExpenseTrackerError):
    """Raised when form values cannot be normalised into a valid draft."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid expense")


class OperationInProgress(ExpenseTrackerError):
    """Raised when a mutation starts before the previous one has completed."""


__all__ = [
    "ExpenseTrackerError",
    "NotFound",
    "OperationInProgress",
    "StoreUnavailable",
    "ValidationFailure",
]
