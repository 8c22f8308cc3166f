# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from ledger_cron.tasks.dispatcher import DispatchOutcome
from ledger_cron.tasks.task_models import Task
from ledger_cron.tasks.task_scheduler import next_fire, run_task_scheduler

from .fakes import FakeRpcClient, insufficient_funds

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def stepping_clock(step_seconds: float = 1.0):
    """Each call returns BASE + n * step, n = 0, 1, 2, ..."""
    counter = itertools.count()
    return lambda: BASE + timedelta(seconds=next(counter) * step_seconds)


def test_next_fire_uses_seconds_as_first_field() -> None:
    # "at second 30 of every minute"
    assert next_fire("30 * * * * *", BASE) == BASE + timedelta(seconds=30)


def test_next_fire_every_second() -> None:
    assert next_fire("* * * * * *", BASE) == BASE + timedelta(seconds=1)


def test_next_fire_invalid_schedule_returns_none() -> None:
    assert next_fire("not a schedule", BASE) is None


async def _run_for(coro, seconds: float) -> None:
    runner = asyncio.create_task(coro)
    await asyncio.sleep(seconds)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner


@pytest.mark.asyncio
async def test_scheduler_fires_due_task(client: FakeRpcClient, transfer) -> None:
    task = Task(schedule="* * * * * *", params=transfer)
    outcomes: list[DispatchOutcome] = []

    await _run_for(
        run_task_scheduler(
            [task],
            client,
            tick_seconds=0.01,
            on_outcome=outcomes.append,
            clock=stepping_clock(),
        ),
        0.1,
    )

    assert client.calls, "Scheduler should fire at least once"
    assert all(c == client.calls[0] for c in client.calls)
    assert outcomes and all(o.ok for o in outcomes)


@pytest.mark.asyncio
async def test_scheduler_skips_task_that_is_not_due(client: FakeRpcClient, transfer) -> None:
    # Fires at second 30; the clock never gets there.
    task = Task(schedule="30 * * * * *", params=transfer)

    await _run_for(
        run_task_scheduler([task], client, tick_seconds=0.01, clock=lambda: BASE),
        0.05,
    )

    assert client.calls == []


@pytest.mark.asyncio
async def test_failing_task_does_not_stop_others(transfer) -> None:
    client = FakeRpcClient(fail_with=insufficient_funds())
    tasks = [
        Task(schedule="* * * * * *", params=transfer),
        Task(schedule="not a schedule", params=transfer),
    ]
    outcomes: list[DispatchOutcome] = []

    await _run_for(
        run_task_scheduler(
            tasks,
            client,
            tick_seconds=0.01,
            on_outcome=outcomes.append,
            clock=stepping_clock(),
        ),
        0.1,
    )

    assert len(outcomes) >= 2
    assert all(not o.ok for o in outcomes)
    assert all(o.task is tasks[0] for o in outcomes)


@pytest.mark.asyncio
async def test_max_concurrency_bounds_in_flight_calls(transfer) -> None:
    client = FakeRpcClient(delay_seconds=10.0)
    task = Task(schedule="* * * * * *", params=transfer)

    await _run_for(
        run_task_scheduler(
            [task],
            client,
            tick_seconds=0.01,
            max_concurrency=1,
            clock=stepping_clock(),
        ),
        0.1,
    )

    # Later firings queue behind the first one, which never finishes.
    assert len(client.calls) == 1
