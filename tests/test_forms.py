# tests/test_forms.py

from __future__ import annotations

import pytest

from simpletodo.web.forms import AddTodoForm, FormError, SubtaskForm, UpdateTodoForm, clean_optional


def test_clean_optional() -> None:
    assert clean_optional(None) is None
    assert clean_optional("   ") is None
    assert clean_optional("  x ") == "x"


def test_add_form_trims_and_requires_title() -> None:
    form = AddTodoForm.parse("  Write report ", "", " 2026-05-01 ")
    assert form == AddTodoForm(title="Write report", description=None, deadline="2026-05-01")

    with pytest.raises(FormError):
        AddTodoForm.parse("  ", "desc", None)


def test_update_form_blank_values_clear() -> None:
    form = UpdateTodoForm.parse(3, " ", None)
    assert form.id == 3
    assert form.description is None
    assert form.deadline is None


def test_subtask_form_requires_title() -> None:
    assert SubtaskForm.parse(1, " Draft ").title == "Draft"
    with pytest.raises(FormError):
        SubtaskForm.parse(1, None)
