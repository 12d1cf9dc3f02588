"""Expense record lifecycle over explicit application-state snapshots.

The presentation layer owns one :class:`AppState` and swaps it for the
snapshot each operation returns. Updates are server-confirmed: a record enters
or leaves the local set only after the store has acknowledged the write, so a
failed call can never leave a phantom record behind. When a write fails the
manager re-reads the store and attaches the resulting snapshot to the raised
error as ``error.state``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from .errors import ExpenseTrackerError, NotFound, OperationInProgress, StoreUnavailable
from .filters import FilterSpec, Statistics, aggregate, apply_filter
from .records import ExpenseDraft, ExpenseRecord
from .stores.base import RecordStore

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppState:
    """Immutable snapshot of what the UI displays.

    Attributes:
      records: Full record set in display order (newest date first).
      filters: Filter currently applied to the list.
      editing_id: Id of the record loaded in the form, if any.
    """

    records: tuple[ExpenseRecord, ...] = ()
    filters: FilterSpec = field(default_factory=FilterSpec)
    editing_id: int | None = None

    def find(self, record_id: int) -> ExpenseRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None


def _insert_ordered(records: Sequence[ExpenseRecord], record: ExpenseRecord) -> tuple[ExpenseRecord, ...]:
    """Insert ``record`` ahead of every record dated on or before it."""

    for index, existing in enumerate(records):
        if existing.date <= record.date:
            return (*records[:index], record, *records[index:])
    return (*records, record)


class LifecycleManager:
    """Stateless service applying Submit/Remove/Reconcile against a store."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._busy = False

    @property
    def store(self) -> RecordStore:
        return self._store

    @contextmanager
    def _mutation(self, name: str) -> Iterator[None]:
        if self._busy:
            raise OperationInProgress(f"Cannot {name} while another change is still pending")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _recover(self, state: AppState, exc: ExpenseTrackerError) -> ExpenseTrackerError:
        try:
            exc.state = self.reconcile(state)
        except StoreUnavailable as reconcile_exc:
            LOG.error("Reconcile after failed write also failed: %s", reconcile_exc)
            exc.state = state
        return exc

    # ------------------------------------------------------------------
    def reconcile(self, state: AppState) -> AppState:
        """Replace the local record set with the store's authoritative one."""

        records = tuple(self._store.list_all())
        editing_id = state.editing_id
        if editing_id is not None and not any(record.id == editing_id for record in records):
            editing_id = None
        LOG.debug("Reconciled %d expenses from %s store", len(records), self._store.KIND)
        return replace(state, records=records, editing_id=editing_id)

    def submit(
        self,
        state: AppState,
        values: ExpenseDraft | Mapping[str, Any],
        editing_id: int | None = None,
    ) -> AppState:
        """Create a record, or replace ``editing_id`` in place.

        Raises:
            ValidationFailure: If ``values`` are invalid; nothing is sent.
            NotFound: If ``editing_id`` no longer exists in the store.
            StoreUnavailable: If the store did not confirm the write.
            OperationInProgress: If another mutation is still running.
        """

        draft = values if isinstance(values, ExpenseDraft) else ExpenseDraft.from_values(values)
        with self._mutation("save"):
            try:
                if editing_id is None:
                    record = self._store.create(draft)
                    records = _insert_ordered(state.records, record)
                else:
                    record = self._store.replace(editing_id, draft)
                    if state.find(editing_id) is None:
                        records = _insert_ordered(state.records, record)
                    else:
                        records = tuple(record if item.id == editing_id else item for item in state.records)
            except (StoreUnavailable, NotFound) as exc:
                LOG.warning("Save failed, resynchronising: %s", exc)
                raise self._recover(state, exc)
        return replace(state, records=records, editing_id=None)

    def remove(self, state: AppState, record_id: int) -> AppState:
        """Delete ``record_id``; unknown ids leave the record set unchanged.

        Raises:
            StoreUnavailable: If the store did not confirm the delete.
            OperationInProgress: If another mutation is still running.
        """

        with self._mutation("delete"):
            try:
                self._store.delete(record_id)
            except StoreUnavailable as exc:
                LOG.warning("Delete failed, resynchronising: %s", exc)
                raise self._recover(state, exc)
        if state.find(record_id) is None:
            return state
        editing_id = None if state.editing_id == record_id else state.editing_id
        records = tuple(record for record in state.records if record.id != record_id)
        return replace(state, records=records, editing_id=editing_id)

    def set_filter(self, state: AppState, spec: FilterSpec) -> AppState:
        return replace(state, filters=spec)

    def begin_edit(self, state: AppState, record_id: int) -> AppState:
        if state.find(record_id) is None:
            raise NotFound(record_id)
        return replace(state, editing_id=record_id)

    def cancel_edit(self, state: AppState) -> AppState:
        return replace(state, editing_id=None)

    def visible(self, state: AppState) -> list[ExpenseRecord]:
        return apply_filter(state.records, state.filters)

    def statistics(self, state: AppState, *, reference: date | None = None) -> Statistics:
        return aggregate(state.records, reference=reference)


__all__ = ["AppState", "LifecycleManager"]
