"""Pydantic schemas for serialising expense tracking data."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_tracker.engine.records import MAX_AMOUNT, Category


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ExpenseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0, le=Decimal(str(MAX_AMOUNT)))
    category: Category
    date: dt.date

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseReplace(ExpenseBase):
    """Full-record body for ``PUT``; partial updates are not supported."""


class ExpenseRead(ExpenseBase, ORMModel):
    id: int
