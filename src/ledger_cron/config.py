# src/ledger_cron/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "LEDGER_CRON"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


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
    log_file_level: str

    # ---- Local paths ----
    data_dir: Path
    tasks_path: Path

    # ---- Remote service ----
    server_url: str
    identity: Optional[str]
    request_timeout_seconds: float

    # ---- Scheduler ----
    tick_seconds: float
    max_concurrency: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "ledger-cron")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_file_level = _env(_k("LOG_FILE_LEVEL"), "DEBUG")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/ledger-cron"))
        tasks_path = _env_path(_k("TASKS_PATH"), Path("tasks.json"))

        server_url = _env(_k("SERVER_URL"), "http://127.0.0.1:8000").strip()
        # Accept the bare MANY_IDENTITY name too, for setups that already export it.
        identity = _first_env(_k("IDENTITY"), "MANY_IDENTITY", default=None)
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 30.0)

        tick_seconds = _env_float(_k("TICK_SECONDS"), 1.0)
        # 0 => unbounded
        max_concurrency = max(0, _env_int(_k("MAX_CONCURRENCY"), 0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_file_level=log_file_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            server_url=server_url,
            identity=identity.strip() if identity else None,
            request_timeout_seconds=request_timeout_seconds,
            tick_seconds=tick_seconds,
            max_concurrency=max_concurrency,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
