# src/simpletodo/todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


class TodoStoreError(Exception):
    """Base class for errors raised by the todo store."""


class StoreOpenError(TodoStoreError):
    """The database could not be opened or its schema could not be ensured."""


class TodoNotFoundError(TodoStoreError, LookupError):
    """
    A mutation or lookup matched zero todo rows.

    complete() raises this for already-completed todos too: the store
    does not distinguish "missing" from "already done".
    """

    def __init__(self, todo_id: int, message: str | None = None) -> None:
        self.todo_id = int(todo_id)
        super().__init__(message or f"todo {self.todo_id} not found")


@dataclass(slots=True)
class Subtask:
    id: int
    todo_id: int
    title: str
    is_done: bool = False


@dataclass(slots=True)
class Todo:
    id: int
    title: str
    created_at: datetime
    completed_at: datetime | None = None

    description: str | None = None
    deadline: str | None = None

    # Ordered by creation (subtask id ascending).
    subtasks: list[Subtask] = field(default_factory=list)

    # Derived on every read from the subtasks table, never stored.
    subtask_total: int = 0
    subtask_done: int = 0

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def progress_percent(self) -> int:
        if self.subtask_total <= 0:
            return 0
        return (self.subtask_done * 100) // self.subtask_total
