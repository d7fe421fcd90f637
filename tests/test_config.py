# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from simpletodo.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_NAME", "LOG_LEVEL", "LOG_TO_FILE", "HOST", "PORT", "DATA_DIR", "DB_PATH"):
        monkeypatch.delenv(f"SIMPLETODO_{name}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "simpletodo"
    assert s.port == 5876
    assert s.host == "0.0.0.0"
    assert s.log_to_file is True
    assert s.db_path == Path(".local/simpletodo") / "todo.sqlite3"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SIMPLETODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SIMPLETODO_PORT", "8080")
    monkeypatch.setenv("SIMPLETODO_LOG_TO_FILE", "no")

    s = Settings.from_env()
    assert s.port == 8080
    assert s.log_to_file is False
    # DB path follows the data dir unless set explicitly.
    assert s.db_path == tmp_path / "todo.sqlite3"

    monkeypatch.setenv("SIMPLETODO_DB_PATH", str(tmp_path / "other.db"))
    assert Settings.from_env().db_path == tmp_path / "other.db"


def test_invalid_port_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIMPLETODO_PORT", "eighty")
    assert Settings.from_env().port == 5876
