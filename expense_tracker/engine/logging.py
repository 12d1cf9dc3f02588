"""Structured logging helpers for the expense tracker."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from expense_tracker.engine.infra.paths import DEFAULT_LOG_ROOT

CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL: Final[str] = "INFO"
ROOT_LOGGER: Final[str] = "expense_tracker"
LOG_DIR: Final[Path] = DEFAULT_LOG_ROOT
LOG_PATH: Final[Path] = LOG_DIR / "expenses.log"
JSON_ENV_FLAG: Final[str] = "EXPENSES_JSON_LOGS"
LEVEL_ENV_FLAG: Final[str] = "EXPENSES_LOG_LEVEL"

# Extra attributes copied into every JSON line; absent ones are written as null.
AUDIT_FIELDS: Final[tuple[str, ...]] = ("operation", "record_id", "duration_ms")


class JsonAuditFormatter(logging.Formatter):
    """Format log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        payload.update({field: getattr(record, field, None) for field in AUDIT_FIELDS})
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: str | None) -> int:
    """The environment wins over ``level``; unknown names fall back to INFO."""

    candidate = (os.environ.get(LEVEL_ENV_FLAG) or level or DEFAULT_LEVEL).strip().upper()
    resolved = logging.getLevelName(candidate)
    return resolved if isinstance(resolved, int) else logging.INFO


def _json_logging_enabled(explicit: bool) -> bool:
    if explicit:
        return True
    value = os.environ.get(JSON_ENV_FLAG, "")
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _json_handler() -> logging.Handler:
    # Created on demand so importing never touches the disk.
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    handler.setFormatter(JsonAuditFormatter())
    return handler


def _ensure_handler(
    logger: logging.Logger,
    marker: str,
    factory: Callable[[], logging.Handler],
    level: int,
) -> None:
    handler = next((h for h in logger.handlers if getattr(h, marker, False)), None)
    if handler is None:
        handler = factory()
        setattr(handler, marker, True)
        logger.addHandler(handler)
    handler.setLevel(level)


def setup_logger(
    name: str,
    json_format: bool = False,
    level: str | None = None,
) -> logging.Logger:
    """Configure and return a logger with the project console/JSON handlers."""

    resolved_level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved_level)
    # Keep propagating so capture handlers such as pytest's caplog still see records.
    logger.propagate = True
    _ensure_handler(logger, "_expenses_console", _console_handler, resolved_level)
    if _json_logging_enabled(json_format):
        _ensure_handler(logger, "_expenses_json", _json_handler, resolved_level)
    return logger


def configure_cli_logging(json_logs: bool, level: str | None = None) -> None:
    """Reconfigure the package loggers for a CLI or GUI run.

    Only the package root logger receives handlers; child module loggers
    (``expense_tracker.engine.*``) reach it through propagation.
    """

    if json_logs:
        os.environ[JSON_ENV_FLAG] = "1"
    else:
        os.environ.pop(JSON_ENV_FLAG, None)
    setup_logger(ROOT_LOGGER, json_format=json_logs, level=level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.startswith(f"{ROOT_LOGGER}."):
            logger.setLevel(logging.NOTSET)


__all__ = ["JsonAuditFormatter", "configure_cli_logging", "setup_logger"]
