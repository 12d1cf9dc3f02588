"""Pure filtering and aggregation over expense record snapshots.

Nothing here performs I/O or keeps state: the same records and filter always
produce the same view and statistics.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from .dates import end_of_day, parse_local_date, same_month, start_of_day, today
from .errors import ValidationFailure
from .records import CATEGORY_LABELS, Category, ExpenseRecord, coerce_amount


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Category and inclusive date-range predicate; ``None`` fields match everything."""

    category: Category | None = None
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> "FilterSpec":
        """Build a spec from raw form values, treating blanks as "no bound".

        Raises:
            ValidationFailure: On an unknown category or a malformed date.
        """

        errors: list[str] = []
        category: Category | None = None
        raw_category = values.get("category")
        if raw_category not in (None, ""):
            try:
                category = Category(str(raw_category).strip().lower())
            except ValueError:
                errors.append(f"unknown category {raw_category!r}")

        bounds: dict[str, date | None] = {}
        for key in ("start_date", "end_date"):
            raw = values.get(key)
            if raw in (None, ""):
                bounds[key] = None
                continue
            try:
                bounds[key] = parse_local_date(raw)
            except ValidationFailure as exc:
                errors.extend(f"{key}: {message}" for message in exc.errors)
        if errors:
            raise ValidationFailure(errors)
        return cls(category=category, **bounds)

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.start_date is None and self.end_date is None

    def matches(self, record: ExpenseRecord) -> bool:
        if self.category is not None and record.category != self.category:
            return False
        when = start_of_day(record.date)
        if self.start_date is not None and when < start_of_day(self.start_date):
            return False
        if self.end_date is not None and when > end_of_day(self.end_date):
            return False
        return True


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    category: Category
    label: str
    total: float


@dataclass(frozen=True, slots=True)
class Statistics:
    """Aggregate figures computed from the full record set."""

    total: float
    current_month_total: float
    per_category_totals: tuple[CategoryTotal, ...]
    count: int


def apply_filter(records: Iterable[ExpenseRecord], spec: FilterSpec | None) -> list[ExpenseRecord]:
    """Return the records matching ``spec`` in their original order."""

    if spec is None or spec.is_empty:
        return list(records)
    return [record for record in records if spec.matches(record)]


def aggregate(records: Sequence[ExpenseRecord], *, reference: date | None = None) -> Statistics:
    """Compute totals for ``records``.

    Args:
        records: Full record set; filters are not applied here.
        reference: Day whose month counts as "current"; defaults to the local
            calendar day.

    Returns:
        :class:`Statistics` with per-category totals for every category,
        sorted by descending total with ties kept in category-table order.
    """

    current = reference or today()
    total = 0.0
    month_total = 0.0
    by_category = dict.fromkeys(CATEGORY_LABELS, 0.0)
    for record in records:
        amount = coerce_amount(record.amount)
        total += amount
        if same_month(record.date, current):
            month_total += amount
        if record.category in by_category:
            by_category[record.category] += amount

    # sorted() is stable, so equal totals keep the table order.
    ordered = sorted(
        (CategoryTotal(category, CATEGORY_LABELS[category], value) for category, value in by_category.items()),
        key=lambda item: item.total,
        reverse=True,
    )
    return Statistics(
        total=total,
        current_month_total=month_total,
        per_category_totals=tuple(ordered),
        count=len(records),
    )


__all__ = ["CategoryTotal", "FilterSpec", "Statistics", "aggregate", "apply_filter"]
