# src/ledger_cron/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- reads the task document and builds the TaskCollection,
- wires the concrete RPC client.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings, get_settings
from ..core.identity import Identity
from ..errors import TaskLoadError
from ..rpc.client import HttpRpcClient
from ..tasks.task_models import TaskCollection

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def load_task_document(path: str | Path) -> TaskCollection:
    """
    Read a JSON task document from disk.

    Raises TaskLoadError (index=None) if the file can't be read; decode
    failures of individual entries propagate from TaskCollection.from_json.
    """
    path = Path(path)
    try:
        text = path.read_text("utf-8")
    except OSError as e:
        raise TaskLoadError(None, e) from e

    tasks = TaskCollection.from_json(text)
    logger.info("Loaded %d tasks from %s", len(tasks), path)
    return tasks


def create_client(settings: Settings | None = None) -> HttpRpcClient:
    """
    Build the RPC client shared by every task execution.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    identity = Identity.from_text(settings.identity) if settings.identity else Identity.anonymous()
    return HttpRpcClient(
        settings.server_url,
        identity=identity,
        timeout_seconds=settings.request_timeout_seconds,
    )
