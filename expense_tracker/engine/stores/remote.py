"""Record store backed by the REST API exposed by :mod:`backend.server`."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

import requests

from expense_tracker.engine.errors import NotFound, StoreUnavailable, ValidationFailure
from expense_tracker.engine.records import ExpenseDraft, ExpenseRecord

from .base import RecordStore

LOG = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:5000"
DEFAULT_TIMEOUT = 5.0


class RemoteRecordStore(RecordStore):
    """HTTP client for talking with the backend service."""

    KIND = "remote"

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Any | None = None,
    ) -> None:
        self._base_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def api_url(self) -> str:
        return self._base_url

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        started = time.perf_counter()
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            LOG.warning("%s %s failed: %s", method, url, exc, extra={"operation": method.lower()})
            raise StoreUnavailable(f"Could not reach the expense service at {self._base_url}: {exc}") from exc
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        LOG.debug(
            "%s %s -> %s",
            method,
            url,
            response.status_code,
            extra={"operation": method.lower(), "duration_ms": elapsed_ms},
        )
        return response

    @staticmethod
    def _json(response: Any) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise StoreUnavailable("Expense service returned a malformed response") from exc

    @classmethod
    def _record(cls, payload: Any) -> ExpenseRecord:
        if isinstance(payload, Mapping) and isinstance(payload.get("expense"), Mapping):
            payload = payload["expense"]
        if not isinstance(payload, Mapping) or "id" not in payload:
            raise StoreUnavailable("Expense service response is missing the expense id")
        try:
            return ExpenseRecord.from_payload(payload)
        except (ValidationFailure, TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Expense service returned an invalid expense: {exc}") from exc

    @classmethod
    def _raise_for_status(cls, response: Any, action: str) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 422:
            body = cls._json(response)
            detail = body.get("detail", []) if isinstance(body, Mapping) else body
            if isinstance(detail, list):
                messages = [str(item.get("msg", item)) if isinstance(item, Mapping) else str(item) for item in detail]
            else:
                messages = [str(detail)]
            raise ValidationFailure(messages)
        raise StoreUnavailable(f"Could not {action}: HTTP {status}")

    def list_all(self) -> list[ExpenseRecord]:
        response = self._request("GET", "/expenses")
        self._raise_for_status(response, "load expenses")
        payload = self._json(response)
        if not isinstance(payload, list):
            raise StoreUnavailable("Expense service returned a malformed expense list")
        return [self._record(item) for item in payload]

    def create(self, draft: ExpenseDraft) -> ExpenseRecord:
        response = self._request("POST", "/expenses", json=draft.to_payload())
        self._raise_for_status(response, "save expense")
        record = self._record(self._json(response))
        LOG.info("Created expense %s", record.id, extra={"operation": "create", "record_id": record.id})
        return record

    def replace(self, record_id: int, draft: ExpenseDraft) -> ExpenseRecord:
        response = self._request("PUT", f"/expenses/{record_id}", json=draft.to_payload())
        if response.status_code == 404:
            raise NotFound(record_id)
        self._raise_for_status(response, "update expense")
        record = self._record(self._json(response))
        LOG.info("Replaced expense %s", record_id, extra={"operation": "replace", "record_id": record_id})
        return record

    def delete(self, record_id: int) -> None:
        response = self._request("DELETE", f"/expenses/{record_id}")
        if response.status_code == 404:
            LOG.debug("Expense %s already absent", record_id, extra={"operation": "delete", "record_id": record_id})
            return
        self._raise_for_status(response, "delete expense")
        LOG.info("Deleted expense %s", record_id, extra={"operation": "delete", "record_id": record_id})


__all__ = ["DEFAULT_API_URL", "DEFAULT_TIMEOUT", "RemoteRecordStore"]
