"""Registry of the available record store implementations."""

from __future__ import annotations

from typing import Mapping

from .base import RecordStore
from .local import LocalRecordStore
from .remote import RemoteRecordStore


def _store_map() -> Mapping[str, type[RecordStore]]:
    return {
        LocalRecordStore.KIND: LocalRecordStore,
        RemoteRecordStore.KIND: RemoteRecordStore,
    }


def available_stores() -> tuple[str, ...]:
    """Return the sorted names accepted by :func:`create_store`."""
    return tuple(sorted(_store_map().keys()))


def create_store(kind: str, **kwargs: object) -> RecordStore:
    """Instantiate the store registered under ``kind``.

    Args:
        kind: store name (one of :func:`available_stores`).
        **kwargs: constructor options forwarded to the store class.

    Raises:
        ValueError: if ``kind`` is not registered.
    """
    try:
        store_cls = _store_map()[kind]
    except KeyError as exc:
        raise ValueError(f"Unsupported store '{kind}'. Known: {available_stores()}") from exc
    return store_cls(**kwargs)


__all__ = ["available_stores", "create_store"]
