from datetime import date

import pytest

pytest.importorskip("hypothesis")

from hypothesis import given, settings
from hypothesis import strategies as st

from expense_tracker.engine.filters import aggregate
from expense_tracker.engine.records import CATEGORY_LABELS, Category, ExpenseRecord

REFERENCE = date(2024, 3, 15)

records_strategy = st.lists(
    st.builds(
        ExpenseRecord,
        id=st.integers(min_value=1, max_value=10**9),
        title=st.just("x"),
        amount=st.floats(min_value=0, max_value=1_000, allow_nan=False),
        category=st.sampled_from(list(Category)),
        date=st.dates(min_value=date(2023, 1, 1), max_value=date(2024, 12, 31)),
    ),
    max_size=30,
)


@settings(max_examples=60, deadline=None)
@given(records_strategy)
def test_totals_add_up(records) -> None:
    stats = aggregate(records, reference=REFERENCE)
    assert stats.count == len(records)
    assert stats.total == pytest.approx(sum(record.amount for record in records))
    assert sum(item.total for item in stats.per_category_totals) == pytest.approx(stats.total)
    month = [r.amount for r in records if (r.date.year, r.date.month) == (2024, 3)]
    assert stats.current_month_total == pytest.approx(sum(month))


@settings(max_examples=60, deadline=None)
@given(records_strategy)
def test_category_totals_sorted_with_table_order_ties(records) -> None:
    stats = aggregate(records, reference=REFERENCE)
    assert {item.category for item in stats.per_category_totals} == set(CATEGORY_LABELS)
    order = list(CATEGORY_LABELS)
    for left, right in zip(stats.per_category_totals, stats.per_category_totals[1:]):
        assert left.total >= right.total
        if left.total == right.total:
            assert order.index(left.category) < order.index(right.category)
