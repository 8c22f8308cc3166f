# src/ledger_cron/tasks/dispatcher.py

"""
Task dispatcher.

execute() turns one Task into exactly one outbound RPC call:
- prepare the request for the task's variant,
- await the client (the only suspension point),
- hand back the response or the client's error, unchanged.

No retries, no timeout, no deduplication: those belong to the client or the
scheduler that fires tasks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never

from ..core.ports import RemoteResponse, RpcClient
from . import codec
from .params import TransferParams
from .registry import VARIANTS, Endpoint
from .task_models import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Exactly one of `response` / `error` is set."""

    task: Task
    response: RemoteResponse | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def send(client: RpcClient, params: TransferParams) -> RemoteResponse:
    """Ledger transfer, attributed to the identity owned by `client`."""
    endpoint = VARIANTS[Endpoint.TRANSFER].remote_endpoint
    return await client.call(endpoint, codec.encode_transfer(params))


async def execute(task: Task, client: RpcClient) -> DispatchOutcome:
    """
    Run a task once against the shared client.

    Client exceptions are returned in the outcome, not raised, so a failing
    task never takes down the caller. Cancellation still propagates.
    """
    params = task.params
    match params:
        case TransferParams():
            call = send(client, params)
        case _:
            assert_never(params)

    try:
        response = await call
    except Exception as e:
        logger.warning("Task %s (%s) failed: %s", task.endpoint.value, task.schedule, e)
        return DispatchOutcome(task=task, error=e)

    logger.info("Task %s (%s) done", task.endpoint.value, task.schedule)
    return DispatchOutcome(task=task, response=response)
