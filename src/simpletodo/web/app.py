# src/simpletodo/web/app.py

"""
HTTP application factory.

Wires routes and maps store errors to HTML error pages:
- TodoNotFoundError -> 404
- StoreOpenError / sqlite3.Error -> 500
"""

from __future__ import annotations

import logging
import sqlite3

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse

from ..config import get_settings
from ..todos.todo_models import StoreOpenError, TodoNotFoundError
from .render import render_error
from .routes import router

logger = logging.getLogger(__name__)


def create_app(settings=None) -> FastAPI:
    """
    Build the FastAPI app.

    `settings` may be any object with the Settings attributes used here
    (app_name, db_path); falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(title=settings.app_name, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings

    @app.exception_handler(TodoNotFoundError)
    async def _not_found(request: Request, exc: TodoNotFoundError) -> HTMLResponse:
        logger.info("%s %s: %s", request.method, request.url.path, exc)
        return HTMLResponse(
            render_error(status.HTTP_404_NOT_FOUND, str(exc), app_name=settings.app_name),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.exception_handler(StoreOpenError)
    @app.exception_handler(sqlite3.Error)
    async def _storage_failure(request: Request, exc: Exception) -> HTMLResponse:
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return HTMLResponse(
            render_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "The todo database is unavailable.",
                app_name=settings.app_name,
            ),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(router)
    logger.debug("App created db=%s", settings.db_path)
    return app
