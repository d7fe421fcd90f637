# tests/test_todo_schema.py

from __future__ import annotations

import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from simpletodo.todos.todo_models import StoreOpenError
from simpletodo.todos.todo_schema import ensure_schema, table_columns
from simpletodo.todos.todo_store import TodoStore


def _connect(path: Path) -> sqlite3.Connection:
    return sqlite3.connect(str(path), isolation_level=None)


def _schema_sql(conn: sqlite3.Connection) -> list[tuple[str, str]]:
    rows = conn.execute(
        "SELECT name, sql FROM sqlite_master WHERE name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return [(r[0], r[1]) for r in rows]


def test_ensure_schema_twice_is_idempotent(tmp_path: Path) -> None:
    conn = _connect(tmp_path / "todo.sqlite3")
    try:
        ensure_schema(conn)
        first = _schema_sql(conn)
        ensure_schema(conn)
        second = _schema_sql(conn)
    finally:
        conn.close()

    assert first == second
    names = {name for name, _ in first}
    assert {"todos", "subtasks", "idx_subtasks_todo"} <= names


def test_ensure_schema_creates_expected_columns(tmp_path: Path) -> None:
    conn = _connect(tmp_path / "todo.sqlite3")
    try:
        ensure_schema(conn)
        assert table_columns(conn, "todos") == {
            "id",
            "title",
            "created_at",
            "completed_at",
            "description",
            "deadline",
        }
        assert table_columns(conn, "subtasks") == {"id", "todo_id", "title", "is_done"}
        assert not conn.in_transaction
    finally:
        conn.close()


def test_old_database_gains_optional_columns_and_keeps_rows(tmp_path: Path) -> None:
    db = tmp_path / "todo.sqlite3"
    conn = _connect(db)
    try:
        # First schema version: no description/deadline, no subtasks table.
        conn.execute(
            """
            CREATE TABLE todos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                created_at TEXT NOT NULL,
                completed_at TEXT
            )
            """
        )
        conn.execute(
            "INSERT INTO todos(title, created_at) VALUES (?, ?)",
            ("old todo", "2024-05-01T08:00:00+00:00"),
        )
    finally:
        conn.close()

    with TodoStore.open(db) as store:
        todos = store.list()
        assert [t.title for t in todos] == ["old todo"]
        assert todos[0].description is None
        assert todos[0].created_at.year == 2024

        store.update(todos[0].id, description="now possible", deadline="2024-06-01")
        got = store.get(todos[0].id)
        assert got.description == "now possible"
        assert got.deadline == "2024-06-01"


def test_repeated_opens_converge(tmp_path: Path) -> None:
    db = tmp_path / "todo.sqlite3"
    for _ in range(3):
        TodoStore.open(db).close()

    conn = _connect(db)
    try:
        cols = conn.execute("PRAGMA table_info(todos)").fetchall()
    finally:
        conn.close()
    names = [c[1] for c in cols]
    assert len(names) == len(set(names))
    assert names[-2:] == ["description", "deadline"]


def test_foreign_key_declared_with_cascade(tmp_path: Path) -> None:
    conn = _connect(tmp_path / "todo.sqlite3")
    try:
        ensure_schema(conn)
        fks = conn.execute("PRAGMA foreign_key_list(subtasks)").fetchall()
    finally:
        conn.close()
    assert len(fks) == 1
    # (id, seq, table, from, to, on_update, on_delete, match)
    assert fks[0][2] == "todos"
    assert fks[0][3] == "todo_id"
    assert fks[0][6] == "CASCADE"


def test_concurrent_opens_on_fresh_file(tmp_path: Path) -> None:
    db = tmp_path / "todo.sqlite3"
    workers = 8
    start = threading.Barrier(workers)

    def open_once() -> None:
        start.wait()
        TodoStore.open(db).close()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(open_once) for _ in range(workers)]
        for f in futures:
            f.result()

    conn = _connect(db)
    try:
        names = [c[1] for c in conn.execute("PRAGMA table_info(todos)").fetchall()]
        objects = _schema_sql(conn)
    finally:
        conn.close()
    assert len(names) == len(set(names))
    assert {"description", "deadline"} <= set(names)
    assert sorted(name for name, _ in objects) == ["idx_subtasks_todo", "subtasks", "todos"]


def test_failed_migration_leaves_no_partial_schema(tmp_path: Path) -> None:
    db = tmp_path / "todo.sqlite3"
    conn = _connect(db)
    try:
        # A view named "todos" satisfies CREATE TABLE IF NOT EXISTS but
        # rejects ALTER TABLE ... ADD COLUMN.
        conn.execute("CREATE VIEW todos AS SELECT 1 AS id")
    finally:
        conn.close()

    with pytest.raises(StoreOpenError):
        TodoStore.open(db)

    conn = _connect(db)
    try:
        objects = _schema_sql(conn)
    finally:
        conn.close()
    assert [name for name, _ in objects] == ["todos"]
