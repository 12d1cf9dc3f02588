"""Record store persisting to a JSON file on the local machine.

The file plays the role browser local storage plays for a web client: no
server, ids generated on the client. Ids are millisecond timestamps bumped so
they stay strictly increasing even when two records are created within the
same millisecond or the clock moves backwards.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from expense_tracker.engine.errors import NotFound, StoreUnavailable, ValidationFailure
from expense_tracker.engine.infra.paths import DEFAULT_LOCAL_STORE
from expense_tracker.engine.records import ExpenseDraft, ExpenseRecord

from .base import RecordStore

LOG = logging.getLogger(__name__)

_FORMAT_VERSION = 1


class LocalRecordStore(RecordStore):
    """JSON-file implementation of :class:`RecordStore`."""

    KIND = "local"

    def __init__(
        self,
        path: Path | str = DEFAULT_LOCAL_STORE,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._path = Path(path)
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {"version": _FORMAT_VERSION, "last_id": 0, "expenses": []}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Could not read {self._path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("expenses"), list):
            raise StoreUnavailable(f"{self._path} is not an expense store")
        if "last_id" not in data:
            data["last_id"] = max((record.id for record in self._records(data)), default=0)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        # Write next to the target and rename so readers never see a partial file.
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailable(f"Could not write {self._path}: {exc}") from exc

    def _next_id(self, data: dict[str, Any]) -> int:
        candidate = max(int(self._clock() * 1000), int(data["last_id"]) + 1)
        data["last_id"] = candidate
        return candidate

    @staticmethod
    def _records(data: dict[str, Any]) -> list[ExpenseRecord]:
        try:
            return [ExpenseRecord.from_payload(item) for item in data["expenses"]]
        except (KeyError, TypeError, ValueError, ValidationFailure) as exc:
            raise StoreUnavailable(f"Corrupted expense entry: {exc}") from exc

    @staticmethod
    def _entry_id(item: Any) -> int:
        try:
            return int(item["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Corrupted expense entry: {item!r}") from exc

    # ------------------------------------------------------------------
    def list_all(self) -> list[ExpenseRecord]:
        records = self._records(self._load())
        # Entries are kept newest insertion first; the stable sort keeps that for equal dates.
        return sorted(records, key=lambda record: record.date, reverse=True)

    def create(self, draft: ExpenseDraft) -> ExpenseRecord:
        data = self._load()
        record = ExpenseRecord.from_draft(self._next_id(data), draft)
        data["expenses"].insert(0, record.to_payload())
        self._save(data)
        LOG.info("Created expense %s", record.id, extra={"operation": "create", "record_id": record.id})
        return record

    def replace(self, record_id: int, draft: ExpenseDraft) -> ExpenseRecord:
        data = self._load()
        for index, item in enumerate(data["expenses"]):
            if self._entry_id(item) == record_id:
                record = ExpenseRecord.from_draft(record_id, draft)
                data["expenses"][index] = record.to_payload()
                self._save(data)
                LOG.info("Replaced expense %s", record_id, extra={"operation": "replace", "record_id": record_id})
                return record
        raise NotFound(record_id)

    def delete(self, record_id: int) -> None:
        data = self._load()
        remaining = [item for item in data["expenses"] if self._entry_id(item) != record_id]
        if len(remaining) == len(data["expenses"]):
            LOG.debug("Expense %s already absent", record_id, extra={"operation": "delete", "record_id": record_id})
            return
        data["expenses"] = remaining
        self._save(data)
        LOG.info("Deleted expense %s", record_id, extra={"operation": "delete", "record_id": record_id})


__all__ = ["LocalRecordStore"]
