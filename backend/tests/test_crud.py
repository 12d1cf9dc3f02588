from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from backend import crud, schemas
from expense_tracker.engine.records import Category


def _expense(title: str, amount: str, category: Category, day: date) -> schemas.ExpenseCreate:
    return schemas.ExpenseCreate(title=title, amount=Decimal(amount), category=category, date=day)


def test_create_expense_assigns_sequential_ids(db_session):
    first = crud.create_expense(db_session, _expense("Coffee", "4.50", Category.FOOD, date(2024, 3, 1)))
    second = crud.create_expense(db_session, _expense("Bus", "2.00", Category.TRANSPORT, date(2024, 3, 2)))
    assert first.id is not None
    assert second.id > first.id
    assert first.category == "food"


def test_list_expenses_orders_by_date_then_id_desc(db_session):
    old = crud.create_expense(db_session, _expense("Old", "1", Category.OTHER, date(2024, 1, 1)))
    same_day_a = crud.create_expense(db_session, _expense("A", "1", Category.OTHER, date(2024, 2, 1)))
    same_day_b = crud.create_expense(db_session, _expense("B", "1", Category.OTHER, date(2024, 2, 1)))

    ids = [expense.id for expense in crud.list_expenses(db_session)]
    assert ids == [same_day_b.id, same_day_a.id, old.id]


def test_replace_expense_overwrites_every_field(db_session):
    expense = crud.create_expense(db_session, _expense("Lunch", "12.00", Category.FOOD, date(2024, 3, 5)))
    replaced = crud.replace_expense(
        db_session,
        expense.id,
        schemas.ExpenseReplace(
            title="Cinema",
            amount=Decimal("9.00"),
            category=Category.ENTERTAINMENT,
            date=date(2024, 3, 6),
        ),
    )
    assert replaced.id == expense.id
    assert replaced.title == "Cinema"
    assert replaced.category == "entertainment"
    assert replaced.date == date(2024, 3, 6)
    assert replaced.amount == Decimal("9.00")


def test_replace_missing_expense_raises(db_session):
    with pytest.raises(crud.EntityNotFoundError):
        crud.replace_expense(
            db_session,
            999,
            schemas.ExpenseReplace(title="x", amount=Decimal("1"), category=Category.OTHER, date=date(2024, 1, 1)),
        )


def test_delete_expense_is_idempotent(db_session):
    expense = crud.create_expense(db_session, _expense("Streaming", "9.99", Category.ENTERTAINMENT, date(2024, 3, 1)))
    assert crud.delete_expense(db_session, expense.id) is True
    assert crud.delete_expense(db_session, expense.id) is False
    with pytest.raises(crud.EntityNotFoundError):
        crud.get_expense(db_session, expense.id)
