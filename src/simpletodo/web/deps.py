# src/simpletodo/web/deps.py

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request

from ..todos.todo_store import TodoStore


def get_app_settings(request: Request):
    return request.app.state.settings


def get_store(request: Request) -> Iterator[TodoStore]:
    """One store handle per request; opening it runs the schema check."""
    store = TodoStore.open(request.app.state.settings.db_path)
    try:
        yield store
    finally:
        store.close()
