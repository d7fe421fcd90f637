"""
Todo persistence subsystem.

Components:
- todo_models.py: data structures (Todo, Subtask) and store errors
- todo_schema.py: ensure-exists schema setup run on every open
- todo_store.py: SQLite-backed store (CRUD + subtask aggregates)
"""

from .todo_models import StoreOpenError, Subtask, Todo, TodoNotFoundError, TodoStoreError
from .todo_store import TodoStore, open_store

__all__ = [
    "StoreOpenError",
    "Subtask",
    "Todo",
    "TodoNotFoundError",
    "TodoStore",
    "TodoStoreError",
    "open_store",
]
