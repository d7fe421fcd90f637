# src/simpletodo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a default; nothing is required to start locally.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SIMPLETODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- HTTP ----
    host: str
    port: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "simpletodo").strip() or "simpletodo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        host = _env(_k("HOST"), "0.0.0.0").strip() or "0.0.0.0"
        port = _env_int(_k("PORT"), 5876)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/simpletodo"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "todo.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            host=host,
            port=port,
            data_dir=data_dir,
            db_path=db_path,
        )


@lru_cache
def get_settings() -> Settings:
    """Load .env (without overriding real env vars) and build Settings once."""
    load_dotenv(override=False)
    return Settings.from_env()
