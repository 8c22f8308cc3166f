# src/ledger_cron/cli/main.py

"""
CLI entrypoint.

Initializes logging, loads the task document, builds the shared RPC client,
then runs the scheduler until SIGINT/SIGTERM.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from ..cli.bootstrap import create_client, load_task_document
from ..config import ENV_PREFIX, Settings, get_settings
from ..errors import InvalidIdentity, TaskLoadError
from ..logging_setup import setup_logging
from ..tasks.dispatcher import DispatchOutcome
from ..tasks.task_scheduler import run_task_scheduler

logger = logging.getLogger(__name__)


def _report(outcome: DispatchOutcome) -> None:
    if outcome.ok:
        data = outcome.response.data if outcome.response is not None else None
        logger.info("Outcome %s: ok data=%r", outcome.task.schedule, data)
    else:
        logger.error("Outcome %s: %r", outcome.task.schedule, outcome.error)


async def _run(settings: Settings) -> int:
    try:
        tasks = load_task_document(settings.tasks_path)
    except TaskLoadError as e:
        logger.error("Failed to load tasks: %s", e)
        return 1

    try:
        client = create_client(settings)
    except InvalidIdentity as e:
        logger.error("Bad %s_IDENTITY: %s", ENV_PREFIX, e)
        return 1

    async with client:
        runner = asyncio.create_task(
            run_task_scheduler(
                tasks,
                client,
                tick_seconds=settings.tick_seconds,
                max_concurrency=settings.max_concurrency or None,
                on_outcome=_report,
            )
        )

        loop = asyncio.get_running_loop()

        def _handle_signal(signum: int) -> None:
            logger.info("Signal %s received, shutting down...", signum)
            runner.cancel()

        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, _handle_signal, signum)
            except (NotImplementedError, RuntimeError):
                # Some platforms (Windows) don't support loop signal handlers.
                pass

        try:
            await runner
        except asyncio.CancelledError:
            pass

    return 0


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(settings)

    logger.info("Starting %s (server=%s, log=%s)...", settings.app_name, settings.server_url, log_file)

    try:
        code = asyncio.run(_run(settings))
    except KeyboardInterrupt:
        code = 0

    logger.info("Bye.")
    sys.exit(code)


if __name__ == "__main__":
    main()
