# src/ledger_cron/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The dispatcher depends on a Protocol instead of a concrete RPC client.
This keeps the transport swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from .identity import Identity


@dataclass(frozen=True, slots=True)
class RemoteResponse:
    """Decoded response payload plus the raw bytes it was decoded from."""

    data: Any
    raw: bytes = b""


class RpcClient(Protocol):
    """
    Shared handle to the remote service.

    One instance is used by every in-flight execution at once; the
    implementation owns any synchronization it needs.
    Failures are raised as exceptions (transport, protocol or remote-side).
    """

    identity: Identity

    async def call(self, endpoint: str, argument: bytes) -> RemoteResponse: ...
