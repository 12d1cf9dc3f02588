"""Client-side core: record lifecycle, filtering and aggregation."""

from __future__ import annotations

from .errors import (
    ExpenseTrackerError,
    NotFound,
    OperationInProgress,
    StoreUnavailable,
    ValidationFailure,
)
from .filters import CategoryTotal, FilterSpec, Statistics, aggregate, apply_filter
from .lifecycle import AppState, LifecycleManager
from .records import CATEGORY_LABELS, Category, ExpenseDraft, ExpenseRecord

__all__ = [
    "AppState",
    "CATEGORY_LABELS",
    "Category",
    "CategoryTotal",
    "ExpenseDraft",
    "ExpenseRecord",
    "ExpenseTrackerError",
    "FilterSpec",
    "LifecycleManager",
    "NotFound",
    "OperationInProgress",
    "Statistics",
    "StoreUnavailable",
    "ValidationFailure",
    "aggregate",
    "apply_filter",
]
