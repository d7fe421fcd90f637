# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from simpletodo.todos.todo_store import TodoStore
from simpletodo.web.app import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_app().

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any .env file.
    """
    return SimpleNamespace(
        app_name="simpletodo",
        log_level="DEBUG",
        log_to_file=False,
        host="127.0.0.1",
        port=5876,
        data_dir=tmp_path,
        db_path=tmp_path / "todo.sqlite3",
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> Iterator[TodoStore]:
    """A real SQLite store on a per-test file."""
    s = TodoStore.open(settings.db_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(settings: SimpleNamespace) -> TestClient:
    return TestClient(create_app(settings), follow_redirects=False)
