"""SQLAlchemy models for the expense tracking backend."""
from __future__ import annotations

from datetime import date

from sqlalchemy import Column, Date, Integer, Numeric, String, Text

from .database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id: int = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title: str = Column(Text, nullable=False)
    amount: float = Column(Numeric(12, 2), nullable=False)
    category: str = Column(String(32), nullable=False, index=True)
    date: date = Column(Date, nullable=False, index=True)
