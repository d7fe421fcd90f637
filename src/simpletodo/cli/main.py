# src/simpletodo/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the database once to apply the schema, then
serves the HTTP app with uvicorn until interrupted.
"""

from __future__ import annotations

import logging

import uvicorn

from ..config import get_settings
from ..logging_setup import setup_logging
from ..todos.todo_store import TodoStore
from ..web.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    # Fail fast on an unusable database instead of on the first request.
    with TodoStore.open(settings.db_path) as store:
        logger.info("Todo database ready db=%s total=%s", settings.db_path, store.count_todos())

    app = create_app(settings)
    logger.info("Serving on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    logger.info("Bye.")


if __name__ == "__main__":
    main()
