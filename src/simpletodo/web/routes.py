# src/simpletodo/web/routes.py

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ..todos.todo_store import TodoStore
from .deps import get_app_settings, get_store
from .forms import AddTodoForm, FormError, SubtaskForm, UpdateTodoForm
from .render import render_error, render_index, render_todo_detail

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=status.HTTP_303_SEE_OTHER)


def _bad_request(settings, exc: FormError) -> HTMLResponse:
    return HTMLResponse(
        render_error(status.HTTP_400_BAD_REQUEST, str(exc), app_name=settings.app_name),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.get("/", response_class=HTMLResponse)
def index(
    show: Literal["all", "open"] = "all",
    store: TodoStore = Depends(get_store),
    settings=Depends(get_app_settings),
) -> HTMLResponse:
    todos = store.list(include_completed=(show == "all"))
    return HTMLResponse(render_index(todos, show=show, app_name=settings.app_name))


@router.get("/todo/{todo_id}", response_class=HTMLResponse)
def todo_detail(
    todo_id: int,
    store: TodoStore = Depends(get_store),
    settings=Depends(get_app_settings),
) -> HTMLResponse:
    todo = store.get(todo_id)
    return HTMLResponse(render_todo_detail(todo, app_name=settings.app_name))


@router.post("/add")
def add_todo(
    title: str = Form(""),
    description: str | None = Form(None),
    deadline: str | None = Form(None),
    settings=Depends(get_app_settings),
):
    # Validate before opening the store: a rejected form must not take the
    # schema write lock.
    try:
        form = AddTodoForm.parse(title, description, deadline)
    except FormError as exc:
        return _bad_request(settings, exc)

    with TodoStore.open(settings.db_path) as store:
        todo = store.create(form.title, form.description, form.deadline)
    logger.info("Todo added id=%s", todo.id)
    return _redirect("/")


@router.post("/update")
def update_todo(
    todo_id: int = Form(..., alias="id"),
    description: str | None = Form(None),
    deadline: str | None = Form(None),
    store: TodoStore = Depends(get_store),
):
    form = UpdateTodoForm.parse(todo_id, description, deadline)
    store.update(form.id, form.description, form.deadline)
    return _redirect(f"/todo/{form.id}")


@router.post("/add-subtask")
def add_subtask(
    todo_id: int = Form(...),
    title: str = Form(""),
    settings=Depends(get_app_settings),
):
    try:
        form = SubtaskForm.parse(todo_id, title)
    except FormError as exc:
        return _bad_request(settings, exc)

    with TodoStore.open(settings.db_path) as store:
        store.add_subtask(form.todo_id, form.title)
    return _redirect(f"/todo/{form.todo_id}")


@router.post("/toggle-subtask")
def toggle_subtask(
    subtask_id: int = Form(..., alias="id"),
    todo_id: int = Form(...),
    store: TodoStore = Depends(get_store),
):
    store.toggle_subtask(subtask_id)
    return _redirect(f"/todo/{todo_id}")


@router.post("/complete")
def complete_todo(todo_id: int = Form(..., alias="id"), store: TodoStore = Depends(get_store)):
    store.complete(todo_id)
    logger.info("Todo completed id=%s", todo_id)
    return _redirect("/")


@router.post("/delete")
def delete_todo(todo_id: int = Form(..., alias="id"), store: TodoStore = Depends(get_store)):
    store.delete(todo_id)
    logger.info("Todo deleted id=%s", todo_id)
    return _redirect("/")
