from __future__ import annotations

from pathlib import Path

import pytest

from expense_tracker.engine.config import Settings, load_settings
from expense_tracker.engine.errors import ValidationFailure
from expense_tracker.engine.stores import LocalRecordStore, RemoteRecordStore


@pytest.fixture(autouse=True)
def _no_default_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)


def test_defaults_without_any_source() -> None:
    settings = load_settings(environ={})
    assert settings == Settings()
    assert isinstance(settings.build_store(), RemoteRecordStore)


def test_yaml_then_environment_then_overrides(tmp_path: Path) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text(
        "store: local\nlocal_path: data/expenses.json\ntimeout: 3\ncurrency_symbol: '₹'\n",
        encoding="utf-8",
    )
    settings = load_settings(
        config,
        environ={"EXPENSES_TIMEOUT": "7.5", "EXPENSES_API_URL": "https://expenses.example"},
        overrides={"api_url": None, "currency_symbol": "$"},
    )
    assert settings.store == "local"
    assert settings.local_path == Path("data/expenses.json")
    assert settings.timeout == 7.5
    assert settings.api_url == "https://expenses.example"
    assert settings.currency_symbol == "$"
    assert isinstance(settings.build_store(), LocalRecordStore)


def test_default_file_is_picked_up_when_present(tmp_path: Path) -> None:
    (tmp_path / "expense_tracker.yaml").write_text("store: local\n", encoding="utf-8")
    assert load_settings(environ={}).store == "local"


def test_invalid_values_are_reported_together(tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("store: postgres\napi_url: ftp://x\ntimeout: -1\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(ValidationFailure) as excinfo:
        load_settings(config, environ={})
    assert len(excinfo.value.errors) == 4


def test_missing_or_malformed_file(tmp_path: Path) -> None:
    with pytest.raises(ValidationFailure):
        load_settings(tmp_path / "absent.yaml", environ={})
    broken = tmp_path / "broken.yaml"
    broken.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValidationFailure):
        load_settings(broken, environ={})


def test_non_path_local_path_is_a_validation_failure(tmp_path: Path) -> None:
    config = tmp_path / "numeric.yaml"
    config.write_text("store: local\nlocal_path: 5\n", encoding="utf-8")
    with pytest.raises(ValidationFailure) as excinfo:
        load_settings(config, environ={})
    assert excinfo.value.errors == ["local_path must be a path"]
