"""Abstract Record Store contract consumed by the lifecycle manager."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from expense_tracker.engine.records import ExpenseDraft, ExpenseRecord


class RecordStore(ABC):
    """Authoritative holder of expense records.

    Every method raises :class:`~expense_tracker.engine.errors.StoreUnavailable`
    when the backing store cannot be reached or rejects the operation.
    """

    KIND: ClassVar[str]

    @abstractmethod
    def list_all(self) -> list[ExpenseRecord]:
        """Return every record, newest date first (ties: newest id first)."""

    @abstractmethod
    def create(self, draft: ExpenseDraft) -> ExpenseRecord:
        """Persist ``draft`` and return it with its assigned id."""

    @abstractmethod
    def replace(self, record_id: int, draft: ExpenseDraft) -> ExpenseRecord:
        """Overwrite every field of ``record_id``; raise ``NotFound`` if missing."""

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove ``record_id``; a missing id is not an error."""


__all__ = ["RecordStore"]
