# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from ledger_cron.cli.bootstrap import create_client, load_task_document
from ledger_cron.config import Settings
from ledger_cron.errors import TaskLoadError

from .fakes import RECIPIENT, task_document, transfer_entry


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LEDGER_CRON_SERVER_URL", "LEDGER_CRON_IDENTITY", "MANY_IDENTITY", "LEDGER_CRON_TICK_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.server_url == "http://127.0.0.1:8000"
    assert s.identity is None
    assert s.tick_seconds == 1.0
    assert s.tasks_path == Path("tasks.json")


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LEDGER_CRON_SERVER_URL", "https://ledger.example:8000/")
    monkeypatch.setenv("LEDGER_CRON_IDENTITY", RECIPIENT)
    monkeypatch.setenv("LEDGER_CRON_TASKS_PATH", str(tmp_path / "t.json"))
    monkeypatch.setenv("LEDGER_CRON_TICK_SECONDS", "0.5")
    monkeypatch.setenv("LEDGER_CRON_MAX_CONCURRENCY", "not-a-number")

    s = Settings.from_env()

    assert s.server_url == "https://ledger.example:8000/"
    assert s.identity == RECIPIENT
    assert s.tasks_path == tmp_path / "t.json"
    assert s.tick_seconds == 0.5
    assert s.max_concurrency == 0


def test_load_task_document_from_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(task_document(transfer_entry(), transfer_entry(endpoint="ledger.send")), "utf-8")

    tasks = load_task_document(path)

    assert len(tasks) == 2


def test_load_task_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TaskLoadError) as ei:
        load_task_document(tmp_path / "nope.json")
    assert ei.value.index is None
    assert isinstance(ei.value.cause, FileNotFoundError)


@pytest.mark.asyncio
async def test_create_client_uses_configured_identity(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, recipient) -> None:
    monkeypatch.setenv("LEDGER_CRON_IDENTITY", RECIPIENT)
    monkeypatch.setenv("LEDGER_CRON_DATA_DIR", str(tmp_path / "data"))

    client = create_client(Settings.from_env())
    try:
        assert client.identity == recipient
        assert (tmp_path / "data").is_dir()
    finally:
        await client.aclose()
