# src/simpletodo/todos/todo_schema.py

"""
Schema management for the todo database.

There is no version table. Every open inspects the live schema and applies
"ensure-exists" steps:
- create tables/indexes if missing
- use PRAGMA table_info to detect missing columns
- add columns with ALTER TABLE only when needed (never drop or rename)

All steps run in one BEGIN IMMEDIATE transaction, so concurrent openers
serialize on SQLite's write lock and nobody observes a half-built schema.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# Optional todo columns added after the first schema version, in apply order.
TODO_OPTIONAL_COLUMNS: tuple[tuple[str, str], ...] = (
    ("description", "TEXT"),
    ("deadline", "TEXT"),
)


def table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    cur = conn.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cur.fetchall()}


def ensure_schema(conn: sqlite3.Connection) -> None:
    """
    Create or upgrade the schema on `conn`. Safe to call any number of times.

    The connection must be in autocommit mode (isolation_level=None); the
    transaction is managed here. Errors roll back and propagate.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS todos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                created_at TEXT NOT NULL,
                completed_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS subtasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                todo_id INTEGER NOT NULL REFERENCES todos(id) ON DELETE CASCADE,
                title TEXT NOT NULL,
                is_done INTEGER NOT NULL DEFAULT 0
            )
            """
        )

        # Migrations (safe): add missing columns.
        cols = table_columns(conn, "todos")
        for name, decl in TODO_OPTIONAL_COLUMNS:
            if name in cols:
                continue
            conn.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
            logger.info("Schema migration: added column todos.%s", name)

        conn.execute("CREATE INDEX IF NOT EXISTS idx_subtasks_todo ON subtasks(todo_id)")
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
