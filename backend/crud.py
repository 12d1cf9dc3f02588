"""CRUD helper functions for the expense tracking backend."""
from __future__ import annotations

from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from . import models, schemas


class EntityNotFoundError(RuntimeError):
    """Raised when an entity cannot be located in the database."""


def list_expenses(session: Session) -> List[models.Expense]:
    stmt = select(models.Expense).order_by(models.Expense.date.desc(), models.Expense.id.desc())
    return list(session.scalars(stmt))


def get_expense(session: Session, expense_id: int) -> models.Expense:
    expense = session.get(models.Expense, expense_id)
    if expense is None:
        raise EntityNotFoundError(f"Expense {expense_id} not found")
    return expense


def create_expense(session: Session, expense_in: schemas.ExpenseCreate) -> models.Expense:
    data = expense_in.model_dump()
    data["category"] = expense_in.category.value
    expense = models.Expense(**data)
    session.add(expense)
    session.flush()
    session.refresh(expense)
    return expense


def replace_expense(session: Session, expense_id: int, replace_in: schemas.ExpenseReplace) -> models.Expense:
    expense = get_expense(session, expense_id)
    for field, value in replace_in.model_dump().items():
        setattr(expense, field, value)
    expense.category = replace_in.category.value
    session.flush()
    session.refresh(expense)
    return expense


def delete_expense(session: Session, expense_id: int) -> bool:
    """Delete ``expense_id`` and report whether a row was removed."""
    result = session.execute(delete(models.Expense).where(models.Expense.id == expense_id))
    session.flush()
    return bool(result.rowcount)
