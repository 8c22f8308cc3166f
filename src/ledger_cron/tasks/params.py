# src/ledger_cron/tasks/params.py

from __future__ import annotations

from dataclasses import dataclass

from ..core.identity import Identity


@dataclass(frozen=True, slots=True)
class TransferParams:
    """Move `amount` of `symbol` to `to`. `amount` is in base units, never scaled."""

    to: Identity
    amount: int
    symbol: Identity
    # Optional sender override; None means "the identity owned by the client".
    from_: Identity | None = None


# Closed union of every variant's parameters. Extend together with the
# registry and the dispatcher match.
Params = TransferParams
