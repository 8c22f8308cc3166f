# src/ledger_cron/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

A small polling loop that:
- computes the next fire time of every task from its cron schedule,
- fires each due task as its own asyncio task (execute() against the shared client),
- moves the task's next fire time forward.

Missed fire times are coalesced into a single firing. Overlapping executions
of the same task are allowed. Nothing is retried or persisted.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from croniter import croniter

from ..core.ports import RpcClient
from .dispatcher import DispatchOutcome, execute
from .task_models import Task

logger = logging.getLogger(__name__)

OutcomeHandler = Callable[[DispatchOutcome], Awaitable[None] | None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_fire(schedule: str, after: datetime) -> datetime | None:
    """
    Next fire time strictly after `after` for a 6-field schedule (seconds first).

    Returns None (and logs) if croniter rejects the expression.
    """
    try:
        it = croniter(schedule, after, second_at_beginning=True)
        return it.get_next(datetime)
    except (ValueError, KeyError):
        logger.warning("Invalid schedule %r; task will not fire", schedule, exc_info=True)
        return None


async def _run_one(
        task: Task,
        client: RpcClient,
        semaphore: asyncio.Semaphore | None,
        on_outcome: OutcomeHandler | None,
) -> None:
    if semaphore is None:
        outcome = await execute(task, client)
    else:
        async with semaphore:
            outcome = await execute(task, client)

    if on_outcome is None:
        return
    try:
        res = on_outcome(outcome)
        if res is not None:
            await res
    except Exception:
        logger.exception("on_outcome handler failed for %s", task.schedule)


async def run_task_scheduler(
        tasks: Sequence[Task],
        client: RpcClient,
        *,
        tick_seconds: float = 1.0,
        max_concurrency: int | None = None,
        on_outcome: OutcomeHandler | None = None,
        clock: Callable[[], datetime] = utc_now,
) -> None:
    """
    Fire tasks on their schedules until cancelled.

    Every tick_seconds:
    - for each task whose next fire time is <= now, spawn execute(task, client)
    - recompute that task's next fire time from now

    max_concurrency (optional) bounds in-flight executions; extra firings wait
    for a slot. To stop the scheduler, cancel the coroutine; in-flight
    executions are cancelled with it.
    """
    sleep_s = max(0.01, float(tick_seconds))
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    start = clock()
    next_at: list[datetime | None] = [next_fire(t.schedule, start) for t in tasks]
    in_flight: set[asyncio.Task[None]] = set()

    logger.info(
        "Scheduler started: %d tasks (%d schedulable)",
        len(tasks),
        sum(1 for n in next_at if n is not None),
    )

    try:
        while True:
            now = clock()

            for i, task in enumerate(tasks):
                due = next_at[i]
                if due is None or due > now:
                    continue

                next_at[i] = next_fire(task.schedule, now)
                logger.debug("Firing task #%d %s (due %s)", i, task.endpoint.value, due.isoformat())

                job = asyncio.create_task(_run_one(task, client, semaphore, on_outcome))
                in_flight.add(job)
                job.add_done_callback(in_flight.discard)

            await asyncio.sleep(sleep_s)
    finally:
        for job in list(in_flight):
            job.cancel()
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        logger.info("Scheduler stopped")
