# src/ledger_cron/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings

_PACKAGE = __name__.split(".")[0]


class _OwnLogsFilter(logging.Filter):
    """Pass everything from this package; other loggers (httpx, asyncio, ...) only at min_level+."""

    def __init__(self, min_level: int) -> None:
        super().__init__()
        self.min_level = min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _PACKAGE or record.name.startswith(_PACKAGE + "."):
            return True
        return record.levelno >= self.min_level


def level_from_name(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(settings: Settings) -> Path:
    """
    Console (stderr) at settings.log_level, file `<data_dir>/<app_name>.log`
    at settings.log_file_level. Returns the log file path.

    Call this ONCE, before the scheduler starts.
    """
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.data_dir / f"{settings.app_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level_from_name(settings.log_level))
    console.setFormatter(fmt)
    console.addFilter(_OwnLogsFilter(logging.WARNING))
    root.addHandler(console)

    # The file keeps third-party INFO too (httpx request lines help when a transfer fails).
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level_from_name(settings.log_file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    file_handler.addFilter(_OwnLogsFilter(logging.INFO))
    root.addHandler(file_handler)

    return log_file
