"""Shared pytest configuration for the expense tracker test-suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path

import pytest


def _insert_repo_root() -> None:
    """Make sure the repository root is importable."""

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_insert_repo_root()
os.environ.setdefault("EXPENSES_DATABASE_URL", "sqlite://")


def pytest_report_header(config: pytest.Config) -> Iterable[str]:  # pragma: no cover - pytest hook
    root = Path.cwd()
    log_level = os.environ.get("EXPENSES_LOG_LEVEL", "INFO")
    return [f"expense-tracker repo: {root}", f"EXPENSES_LOG_LEVEL={log_level}"]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the log level and drop user configuration leaking from the shell."""

    monkeypatch.setenv("EXPENSES_LOG_LEVEL", "INFO")
    monkeypatch.setenv("EXPENSES_JSON_LOGS", "0")
    for variable in (
        "EXPENSES_STORE",
        "EXPENSES_API_URL",
        "EXPENSES_LOCAL_PATH",
        "EXPENSES_TIMEOUT",
        "EXPENSES_CURRENCY",
    ):
        monkeypatch.delenv(variable, raising=False)
