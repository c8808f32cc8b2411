import logging

import pytest

from gastos.utils import config


@pytest.fixture(autouse=True)
def restore_config(monkeypatch):
    for name in ("GRID_SIZE", "DEFAULT_PORT", "APP_PASSWORD", "LEDGER_DATA_PATH", "LOG_LEVEL", "SWIPE_THRESHOLD"):
        monkeypatch.setattr(config, name, getattr(config, name))


def test_apply_overrides_reports_applied_settings() -> None:
    applied = config.apply_overrides({"grid_size": 5, "swipe_threshold": 30, "unknown": 1})

    assert applied == ["grid_size", "swipe_threshold"]
    assert config.GRID_SIZE == 5
    assert config.SWIPE_THRESHOLD == 30


def test_apply_overrides_rejects_tiny_board() -> None:
    with pytest.raises(ValueError):
        config.apply_overrides({"grid_size": 1})


def test_apply_overrides_with_nothing() -> None:
    assert config.apply_overrides(None) == []
    assert config.apply_overrides({}) == []


def test_load_environment(caplog) -> None:
    environ = {
        "PORT": "9000",
        "APP_PASSWORD": "hunter2",
        "GASTOS_DATA_PATH": "/tmp/ledger.json",
        "GASTOS_GRID_SIZE": "big",
        "GASTOS_LOG_LEVEL": "",
    }

    with caplog.at_level(logging.WARNING):
        applied = config.load_environment(environ)

    assert sorted(applied) == ["app_password", "ledger_data_path", "port"]
    assert config.DEFAULT_PORT == 9000
    assert config.APP_PASSWORD == "hunter2"
    assert config.LEDGER_DATA_PATH == "/tmp/ledger.json"
    assert config.GRID_SIZE == 4
    assert "GASTOS_GRID_SIZE" in caplog.text
