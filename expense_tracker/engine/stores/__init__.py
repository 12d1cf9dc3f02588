"""Record store implementations behind a single contract."""

from __future__ import annotations

from .base import RecordStore
from .local import LocalRecordStore
from .registry import available_stores, create_store
from .remote import RemoteRecordStore

__all__ = ["LocalRecordStore", "RecordStore", "RemoteRecordStore", "available_stores", "create_store"]
