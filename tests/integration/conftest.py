"""Fixtures wiring the remote record store to an in-process API."""

from __future__ import annotations

from typing import Any

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import backend.models  # noqa: F401  # Ensure models are registered with metadata
from backend import database
from backend.database import Base
from backend.server import app
from expense_tracker.engine.stores import RemoteRecordStore


class TestClientSession:
    """Route ``requests``-style calls to a FastAPI ``TestClient``."""

    __test__ = False

    def __init__(self, client: TestClient) -> None:
        self._client = client
        self.fail_methods: set[str] = set()

    def request(self, method: str, url: str, timeout: float | None = None, **kwargs: Any) -> Any:
        if method in self.fail_methods:
            raise requests.ConnectionError(f"simulated outage on {method}")
        return self._client.request(method, url, **kwargs)


@pytest.fixture()
def api_client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[database.get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session(api_client: TestClient) -> TestClientSession:
    return TestClientSession(api_client)


@pytest.fixture()
def remote_store(session: TestClientSession) -> RemoteRecordStore:
    return RemoteRecordStore("http://testserver", session=session)
