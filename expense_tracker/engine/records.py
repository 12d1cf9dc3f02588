"""Expense records, drafts and the fixed category table."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any

from .dates import parse_local_date
from .errors import ValidationFailure

LOG = logging.getLogger(__name__)

# Largest value the backend NUMERIC(12, 2) column can hold.
MAX_AMOUNT = 9_999_999_999.99


class Category(StrEnum):
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    UTILITIES = "utilities"
    OTHER = "other"


# Table order doubles as the tie-break order for per-category totals.
CATEGORY_LABELS: dict[Category, str] = {
    Category.FOOD: "Food",
    Category.TRANSPORT: "Transport",
    Category.ENTERTAINMENT: "Entertainment",
    Category.SHOPPING: "Shopping",
    Category.HEALTHCARE: "Healthcare",
    Category.UTILITIES: "Utilities",
    Category.OTHER: "Other",
}


def category_label(category: Category | str) -> str:
    """Return the display label for ``category`` (the raw code if unknown)."""

    try:
        return CATEGORY_LABELS[Category(category)]
    except ValueError:
        return str(category)


def coerce_amount(value: object) -> float:
    """Convert numbers and numeric strings to ``float``; anything else is ``0.0``."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True, slots=True)
class ExpenseDraft:
    """Validated form values, not yet persisted."""

    title: str
    amount: float
    category: Category
    date: date

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> "ExpenseDraft":
        """Validate raw form values and build a draft.

        Every field is checked so the caller gets all problems at once.

        Raises:
            ValidationFailure: If any field is missing or invalid.
        """

        errors: list[str] = []

        title = values.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append("title must be a non-empty string")

        raw_amount = values.get("amount")
        amount: float | None = None
        if isinstance(raw_amount, bool) or raw_amount is None or raw_amount == "":
            errors.append("amount must be a number")
        else:
            try:
                amount = float(raw_amount)
            except (TypeError, ValueError):
                errors.append("amount must be a number")
            else:
                if not math.isfinite(amount):
                    errors.append("amount must be finite")
                elif amount < 0:
                    errors.append("amount must be >= 0")
                elif amount > MAX_AMOUNT:
                    errors.append(f"amount must be <= {MAX_AMOUNT:.2f}")

        category: Category | None = None
        raw_category = values.get("category")
        try:
            category = Category(str(raw_category).strip().lower())
        except ValueError:
            choices = ", ".join(c.value for c in Category)
            errors.append(f"category must be one of: {choices}")

        day: date | None = None
        try:
            day = parse_local_date(values.get("date"))
        except ValidationFailure as exc:
            errors.extend(exc.errors)

        if errors:
            raise ValidationFailure(errors)
        return cls(
            title=title.strip(),  # type: ignore[union-attr]
            amount=float(amount),  # type: ignore[arg-type]
            category=category,  # type: ignore[arg-type]
            date=day,  # type: ignore[arg-type]
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body understood by the REST API and the local store."""

        return {
            "title": self.title,
            "amount": self.amount,
            "category": self.category.value,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class ExpenseRecord:
    """A persisted expense; ``id`` never changes once assigned."""

    id: int
    title: str
    amount: float
    category: Category
    date: date

    @classmethod
    def from_draft(cls, record_id: int, draft: ExpenseDraft) -> "ExpenseRecord":
        return cls(
            id=record_id,
            title=draft.title,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExpenseRecord":
        """Build a record from a stored or transmitted mapping.

        Amounts are coerced leniently and unknown categories fall back to
        ``other``; the date must still name a calendar day.
        """

        raw_category = str(payload.get("category") or "").strip().lower()
        try:
            category = Category(raw_category)
        except ValueError:
            LOG.warning("Unknown category %r for expense %s; using 'other'", raw_category, payload.get("id"))
            category = Category.OTHER
        return cls(
            id=int(payload["id"]),
            title=str(payload.get("title") or ""),
            amount=coerce_amount(payload.get("amount")),
            category=category,
            date=parse_local_date(payload.get("date")),
        )

    def to_draft(self) -> ExpenseDraft:
        return ExpenseDraft(title=self.title, amount=self.amount, category=self.category, date=self.date)

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, **self.to_draft().to_payload()}


__all__ = [
    "CATEGORY_LABELS",
    "MAX_AMOUNT",
    "Category",
    "ExpenseDraft",
    "ExpenseRecord",
    "category_label",
    "coerce_amount",
]
