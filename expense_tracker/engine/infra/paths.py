"""Filesystem locations used by the stores and the logging helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Final

DEFAULT_ARTIFACT_ROOT: Final[Path] = Path("artifacts")
DEFAULT_LOG_ROOT: Final[Path] = DEFAULT_ARTIFACT_ROOT / "logs"
DEFAULT_DATA_ROOT: Final[Path] = Path.home() / ".expense_tracker"
DEFAULT_LOCAL_STORE: Final[Path] = DEFAULT_DATA_ROOT / "expenses.json"
DEFAULT_CONFIG_PATH: Final[Path] = Path("expense_tracker.yaml")


__all__ = [
    "DEFAULT_ARTIFACT_ROOT",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DATA_ROOT",
    "DEFAULT_LOCAL_STORE",
    "DEFAULT_LOG_ROOT",
]
