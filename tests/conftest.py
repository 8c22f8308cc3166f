# tests/conftest.py

from __future__ import annotations

import pytest

from ledger_cron.core.identity import Identity
from ledger_cron.tasks.params import TransferParams

from .fakes import RECIPIENT, SYMBOL, FakeRpcClient


@pytest.fixture()
def recipient() -> Identity:
    return Identity.from_text(RECIPIENT)


@pytest.fixture()
def symbol() -> Identity:
    return Identity.from_text(SYMBOL)


@pytest.fixture()
def transfer(recipient: Identity, symbol: Identity) -> TransferParams:
    return TransferParams(to=recipient, amount=10, symbol=symbol)


@pytest.fixture()
def client() -> FakeRpcClient:
    """Recording RPC client; every call succeeds with {"ok": True}."""
    return FakeRpcClient()
