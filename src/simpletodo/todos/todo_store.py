# src/simpletodo/todos/todo_store.py

from __future__ import annotations

import contextlib
import logging
import re
import sqlite3
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

from .todo_models import StoreOpenError, Subtask, Todo, TodoNotFoundError
from .todo_schema import ensure_schema

logger = logging.getLogger(__name__)

_TODO_COLUMNS = """
    t.id, t.title, t.description, t.deadline, t.created_at, t.completed_at,
    (SELECT COUNT(*) FROM subtasks s WHERE s.todo_id = t.id) AS subtask_total,
    (SELECT COUNT(*) FROM subtasks s WHERE s.todo_id = t.id AND s.is_done = 1) AS subtask_done
"""


_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})$"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Fixed, sortable, timezone-aware text form (RFC 3339, UTC)."""
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: str | None) -> datetime:
    """
    Parse a stored timestamp.

    Only the RFC 3339 shape is accepted (full seconds, explicit offset).
    Anything else, including other ISO 8601 forms, is read as "now"
    instead of failing the read.
    """
    if value is None or not _RFC3339_RE.match(str(value)):
        logger.warning("Malformed timestamp %r in todo database; using now.", value)
        return _utc_now()
    try:
        dt = datetime.fromisoformat(str(value))
    except ValueError:
        # Right shape, impossible values (month 13, hour 25, ...).
        logger.warning("Malformed timestamp %r in todo database; using now.", value)
        return _utc_now()
    return dt.astimezone(timezone.utc)


class TodoStore:
    """
    SQLite todo store.

    One instance wraps one connection. Open a store per unit of work
    (per HTTP request) and close it afterwards; nothing is cached between
    opens, so every open sees the latest committed state.

    Opening always runs ensure_schema(), so any database file converges to
    the current schema regardless of which version created it.
    """

    def __init__(self, conn: sqlite3.Connection, db_path: Path) -> None:
        self._conn = conn
        self._db_path = db_path

    @classmethod
    def open(cls, db_path: str | Path) -> TodoStore:
        path = Path(db_path)
        conn: sqlite3.Connection | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # FastAPI may run dependency setup, the handler and teardown on different
            # worker threads; a handle still serves one request at a time.
            conn = sqlite3.connect(str(path), isolation_level=None, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            cls._configure_conn(conn)
            ensure_schema(conn)
        except (OSError, sqlite3.Error) as exc:
            if conn is not None:
                conn.close()
            logger.error("Failed to open todo database %s: %s", path, exc)
            raise StoreOpenError(f"cannot open todo database at {path}: {exc}") from exc
        logger.debug("TodoStore opened db=%s", path)
        return cls(conn, path)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> TodoStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        # Cascading deletes depend on this; it is per-connection in SQLite.
        conn.execute("PRAGMA foreign_keys = ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _transaction(self, mode: str = "DEFERRED") -> Iterator[sqlite3.Cursor]:
        cur = self._conn.cursor()
        cur.execute(f"BEGIN {mode}")
        try:
            yield cur
        except BaseException:
            if self._conn.in_transaction:
                cur.execute("ROLLBACK")
            raise
        else:
            cur.execute("COMMIT")
        finally:
            cur.close()

    @staticmethod
    def _row_to_todo(row: sqlite3.Row) -> Todo:
        completed_at = row["completed_at"]
        return Todo(
            id=int(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            deadline=row["deadline"],
            created_at=parse_timestamp(row["created_at"]),
            completed_at=parse_timestamp(completed_at) if completed_at is not None else None,
            subtask_total=int(row["subtask_total"] or 0),
            subtask_done=int(row["subtask_done"] or 0),
        )

    @staticmethod
    def _row_to_subtask(row: sqlite3.Row) -> Subtask:
        return Subtask(
            id=int(row["id"]),
            todo_id=int(row["todo_id"]),
            title=str(row["title"]),
            is_done=bool(row["is_done"]),
        )

    def _attach_subtasks(self, cur: sqlite3.Cursor, todos: list[Todo]) -> None:
        if not todos:
            return
        by_id = {t.id: t for t in todos}
        placeholders = ",".join("?" for _ in by_id)
        cur.execute(
            f"""
            SELECT id, todo_id, title, is_done
            FROM subtasks
            WHERE todo_id IN ({placeholders})
            ORDER BY todo_id, id
            """,
            tuple(by_id),
        )
        for row in cur.fetchall():
            sub = self._row_to_subtask(row)
            by_id[sub.todo_id].subtasks.append(sub)

    # ---- public API ----

    def count_todos(self) -> int:
        (n,) = self._conn.execute("SELECT COUNT(*) FROM todos").fetchone()
        return int(n)

    def create(
        self,
        title: str,
        description: str | None = None,
        deadline: str | None = None,
    ) -> Todo:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = _utc_now()
        with self._transaction("IMMEDIATE") as cur:
            cur.execute(
                """
                INSERT INTO todos(title, description, deadline, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (title, description, deadline, format_timestamp(now)),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for todos insert")

        todo_id = int(rowid)
        logger.debug("Todo created id=%s", todo_id)
        return Todo(
            id=todo_id,
            title=title,
            description=description,
            deadline=deadline,
            created_at=now,
        )

    def update(
        self,
        todo_id: int,
        description: str | None = None,
        deadline: str | None = None,
    ) -> None:
        """
        Overwrite description and deadline.

        None clears the column; callers that want to keep a value must pass it
        again.
        """
        with self._transaction("IMMEDIATE") as cur:
            cur.execute(
                "UPDATE todos SET description = ?, deadline = ? WHERE id = ?",
                (description, deadline, int(todo_id)),
            )
            updated = cur.rowcount
        if updated == 0:
            raise TodoNotFoundError(todo_id)
        logger.debug("Todo updated id=%s", todo_id)

    def list(self, include_completed: bool = True) -> list[Todo]:
        """All todos, newest first, each with its subtasks and fresh counts."""
        where = "" if include_completed else "WHERE t.completed_at IS NULL"
        with self._transaction() as cur:
            cur.execute(f"SELECT {_TODO_COLUMNS} FROM todos t {where} ORDER BY t.id DESC")
            todos = [self._row_to_todo(r) for r in cur.fetchall()]
            self._attach_subtasks(cur, todos)
        return todos

    def get(self, todo_id: int) -> Todo:
        with self._transaction() as cur:
            cur.execute(f"SELECT {_TODO_COLUMNS} FROM todos t WHERE t.id = ?", (int(todo_id),))
            row = cur.fetchone()
            if row is None:
                raise TodoNotFoundError(todo_id)
            todo = self._row_to_todo(row)
            self._attach_subtasks(cur, [todo])
        return todo

    def add_subtask(self, todo_id: int, title: str) -> Subtask:
        if not title or not title.strip():
            raise ValueError("subtask title is required")

        with self._transaction("IMMEDIATE") as cur:
            cur.execute("SELECT 1 FROM todos WHERE id = ?", (int(todo_id),))
            if cur.fetchone() is None:
                raise TodoNotFoundError(todo_id)
            cur.execute(
                "INSERT INTO subtasks(todo_id, title, is_done) VALUES (?, ?, 0)",
                (int(todo_id), title),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for subtasks insert")

        sub = Subtask(id=int(rowid), todo_id=int(todo_id), title=title, is_done=False)
        logger.debug("Subtask added id=%s todo_id=%s", sub.id, sub.todo_id)
        return sub

    def toggle_subtask(self, subtask_id: int) -> None:
        """Flip is_done. An unknown id is a no-op, not an error."""
        with self._transaction("IMMEDIATE") as cur:
            cur.execute(
                "UPDATE subtasks SET is_done = CASE is_done WHEN 0 THEN 1 ELSE 0 END WHERE id = ?",
                (int(subtask_id),),
            )
            updated = cur.rowcount
        if updated == 0:
            logger.debug("toggle_subtask: no subtask id=%s", subtask_id)
        else:
            logger.debug("Subtask toggled id=%s", subtask_id)

    def complete(self, todo_id: int) -> None:
        with self._transaction("IMMEDIATE") as cur:
            cur.execute(
                "UPDATE todos SET completed_at = ? WHERE id = ? AND completed_at IS NULL",
                (format_timestamp(_utc_now()), int(todo_id)),
            )
            updated = cur.rowcount
        if updated == 0:
            raise TodoNotFoundError(todo_id, f"todo {todo_id} not found or already completed")
        logger.debug("Todo completed id=%s", todo_id)

    def delete(self, todo_id: int) -> None:
        # Subtasks go with it via ON DELETE CASCADE, in the same statement.
        with self._transaction("IMMEDIATE") as cur:
            cur.execute("DELETE FROM todos WHERE id = ?", (int(todo_id),))
            deleted = cur.rowcount
        if deleted == 0:
            raise TodoNotFoundError(todo_id)
        logger.debug("Todo deleted id=%s", todo_id)


def open_store(db_path: str | Path) -> TodoStore:
    """Open a TodoStore handle (ensures the schema). Raises StoreOpenError."""
    return TodoStore.open(db_path)
