from __future__ import annotations

from datetime import date

import pytest

from expense_tracker.engine.errors import ValidationFailure
from expense_tracker.engine.filters import FilterSpec, aggregate, apply_filter
from expense_tracker.engine.records import Category, ExpenseRecord


def _record(record_id: int, amount: float, category: Category, day: date) -> ExpenseRecord:
    return ExpenseRecord(id=record_id, title=f"r{record_id}", amount=amount, category=category, date=day)


@pytest.fixture()
def records() -> list[ExpenseRecord]:
    return [
        _record(4, 20.0, Category.TRANSPORT, date(2024, 3, 15)),
        _record(3, 5.0, Category.FOOD, date(2024, 3, 10)),
        _record(2, 10.0, Category.FOOD, date(2024, 3, 1)),
        _record(1, 7.5, Category.UTILITIES, date(2024, 2, 28)),
    ]


def test_empty_spec_returns_everything_in_order(records: list[ExpenseRecord]) -> None:
    assert apply_filter(records, FilterSpec()) == records
    assert apply_filter(records, None) == records


def test_category_filter_preserves_order(records: list[ExpenseRecord]) -> None:
    result = apply_filter(records, FilterSpec(category=Category.FOOD))
    assert [record.id for record in result] == [3, 2]


def test_date_range_is_inclusive_on_both_ends(records: list[ExpenseRecord]) -> None:
    spec = FilterSpec(start_date=date(2024, 3, 1), end_date=date(2024, 3, 10))
    assert [record.id for record in apply_filter(records, spec)] == [3, 2]


def test_record_on_end_date_is_included(records: list[ExpenseRecord]) -> None:
    spec = FilterSpec(end_date=date(2024, 3, 15))
    assert 4 in [record.id for record in apply_filter(records, spec)]


def test_combined_category_and_range(records: list[ExpenseRecord]) -> None:
    spec = FilterSpec(category=Category.FOOD, start_date=date(2024, 3, 5))
    assert [record.id for record in apply_filter(records, spec)] == [3]


def test_filter_spec_from_form_values() -> None:
    spec = FilterSpec.from_values({"category": "", "start_date": "2024-03-10", "end_date": ""})
    assert spec == FilterSpec(start_date=date(2024, 3, 10))
    assert FilterSpec.from_values({}).is_empty


def test_filter_spec_rejects_bad_values() -> None:
    with pytest.raises(ValidationFailure) as excinfo:
        FilterSpec.from_values({"category": "rent", "start_date": "2024-99-01"})
    assert len(excinfo.value.errors) == 2


def test_aggregate_totals(records: list[ExpenseRecord]) -> None:
    stats = aggregate(records, reference=date(2024, 3, 20))
    assert stats.total == pytest.approx(42.5)
    assert stats.current_month_total == pytest.approx(35.0)
    assert stats.count == 4
    assert sum(item.total for item in stats.per_category_totals) == pytest.approx(stats.total)


def test_per_category_totals_sorted_desc_with_stable_ties(records: list[ExpenseRecord]) -> None:
    stats = aggregate(records, reference=date(2024, 3, 20))
    ordered = [(item.category, item.total) for item in stats.per_category_totals]
    assert ordered[:3] == [
        (Category.TRANSPORT, 20.0),
        (Category.FOOD, 15.0),
        (Category.UTILITIES, 7.5),
    ]
    # Zero totals keep the category-table order.
    assert [category for category, _ in ordered[3:]] == [
        Category.ENTERTAINMENT,
        Category.SHOPPING,
        Category.HEALTHCARE,
        Category.OTHER,
    ]
    assert stats.per_category_totals[0].label == "Transport"


def test_current_month_requires_same_year() -> None:
    records = [_record(1, 9.0, Category.OTHER, date(2023, 3, 5))]
    assert aggregate(records, reference=date(2024, 3, 5)).current_month_total == 0.0


def test_aggregate_treats_non_numeric_amounts_as_zero() -> None:
    broken = ExpenseRecord(id=1, title="x", amount="oops", category=Category.OTHER, date=date(2024, 1, 1))  # type: ignore[arg-type]
    stats = aggregate([broken, _record(2, 3.0, Category.OTHER, date(2024, 1, 2))], reference=date(2024, 1, 3))
    assert stats.total == 3.0


def test_aggregate_empty() -> None:
    stats = aggregate([], reference=date(2024, 1, 1))
    assert stats.total == 0.0
    assert stats.count == 0
    assert len(stats.per_category_totals) == len(Category)
