"""Client settings resolved from YAML, environment variables and CLI flags.

Precedence, lowest first: built-in defaults, the YAML file, ``EXPENSES_*``
environment variables, explicit overrides (usually CLI flags). Every invalid
value is reported at once through :class:`ValidationFailure`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from expense_tracker.engine.errors import ValidationFailure
from expense_tracker.engine.formatting import DEFAULT_CURRENCY
from expense_tracker.engine.infra.paths import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_STORE
from expense_tracker.engine.stores import RecordStore, available_stores, create_store
from expense_tracker.engine.stores.remote import DEFAULT_API_URL, DEFAULT_TIMEOUT

_ENV_KEYS = {
    "store": "EXPENSES_STORE",
    "api_url": "EXPENSES_API_URL",
    "local_path": "EXPENSES_LOCAL_PATH",
    "timeout": "EXPENSES_TIMEOUT",
    "currency_symbol": "EXPENSES_CURRENCY",
}


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved client configuration.

    Attributes:
      store: Record store backend, ``remote`` or ``local``.
      api_url: Base URL of the REST API used by the remote store.
      local_path: JSON file used by the local store.
      timeout: Seconds to wait for each HTTP request.
      currency_symbol: Symbol prepended to formatted amounts.
    """

    store: str = "remote"
    api_url: str = DEFAULT_API_URL
    local_path: Path = DEFAULT_LOCAL_STORE
    timeout: float = DEFAULT_TIMEOUT
    currency_symbol: str = DEFAULT_CURRENCY

    def build_store(self) -> RecordStore:
        if self.store == "local":
            return create_store("local", path=self.local_path)
        return create_store("remote", api_url=self.api_url, timeout=self.timeout)


_DEFAULTS = Settings()


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValidationFailure([f"{path} is not valid YAML: {exc}"]) from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationFailure([f"{path} must contain a mapping"])
    return dict(payload)


def _validate(raw: Mapping[str, Any]) -> Settings:
    errors: list[str] = []
    known = {item.name for item in fields(Settings)}
    for key in raw:
        if key not in known:
            errors.append(f"unknown setting {key!r}")

    values: dict[str, Any] = {}
    store = str(raw.get("store", _DEFAULTS.store)).strip().lower()
    if store not in available_stores():
        errors.append(f"store must be one of {', '.join(available_stores())}")
    values["store"] = store

    api_url = str(raw.get("api_url", _DEFAULTS.api_url)).strip()
    if not api_url.startswith(("http://", "https://")):
        errors.append("api_url must start with http:// or https://")
    values["api_url"] = api_url

    local_path = raw.get("local_path", _DEFAULTS.local_path)
    if not isinstance(local_path, (str, os.PathLike)) or not str(local_path).strip():
        errors.append("local_path must be a path")
        local_path = _DEFAULTS.local_path
    values["local_path"] = Path(local_path).expanduser()

    try:
        timeout = float(raw.get("timeout", _DEFAULTS.timeout))
    except (TypeError, ValueError):
        errors.append("timeout must be a number")
        timeout = _DEFAULTS.timeout
    if timeout <= 0:
        errors.append("timeout must be > 0")
    values["timeout"] = timeout

    symbol = raw.get("currency_symbol", _DEFAULTS.currency_symbol)
    if not isinstance(symbol, str):
        errors.append("currency_symbol must be a string")
        symbol = _DEFAULTS.currency_symbol
    values["currency_symbol"] = symbol

    if errors:
        raise ValidationFailure(errors)
    return Settings(**values)


def load_settings(
    path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve :class:`Settings` from every configuration layer.

    Args:
        path: YAML file to read. When ``None`` the default file is used only if
            it exists; an explicit path must exist.
        overrides: Highest-priority values; ``None`` entries are ignored.
        environ: Environment mapping, ``os.environ`` by default.

    Raises:
        ValidationFailure: If the file is missing or any value is invalid.
    """

    raw: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ValidationFailure([f"config file {config_path} does not exist"])
        raw.update(_read_yaml(config_path))
    elif DEFAULT_CONFIG_PATH.exists():
        raw.update(_read_yaml(DEFAULT_CONFIG_PATH))

    env = os.environ if environ is None else environ
    for key, variable in _ENV_KEYS.items():
        if env.get(variable):
            raw[key] = env[variable]

    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value
    return _validate(raw)


__all__ = ["Settings", "load_settings"]
