# src/simpletodo/web/forms.py

"""
Form submissions parsed into typed commands.

Values are trimmed here, at the HTTP boundary; the store receives clean
input. Empty optional fields become None.
"""

from __future__ import annotations

from dataclasses import dataclass


class FormError(ValueError):
    """A submitted form is missing a required value."""


def clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def clean_required(value: str | None, field_name: str) -> str:
    cleaned = clean_optional(value)
    if cleaned is None:
        raise FormError(f"{field_name} must not be empty")
    return cleaned


@dataclass(frozen=True, slots=True)
class AddTodoForm:
    title: str
    description: str | None
    deadline: str | None

    @classmethod
    def parse(cls, title: str | None, description: str | None, deadline: str | None) -> AddTodoForm:
        return cls(
            title=clean_required(title, "title"),
            description=clean_optional(description),
            deadline=clean_optional(deadline),
        )


@dataclass(frozen=True, slots=True)
class UpdateTodoForm:
    id: int
    description: str | None
    deadline: str | None

    @classmethod
    def parse(cls, todo_id: int, description: str | None, deadline: str | None) -> UpdateTodoForm:
        return cls(
            id=int(todo_id),
            description=clean_optional(description),
            deadline=clean_optional(deadline),
        )


@dataclass(frozen=True, slots=True)
class SubtaskForm:
    todo_id: int
    title: str

    @classmethod
    def parse(cls, todo_id: int, title: str | None) -> SubtaskForm:
        return cls(todo_id=int(todo_id), title=clean_required(title, "title"))
