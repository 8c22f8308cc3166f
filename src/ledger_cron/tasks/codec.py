# src/ledger_cron/tasks/codec.py

"""
Parameter codec.

Task documents carry each parameter block as CBOR diagnostic notation inside a
JSON string, e.g. `{1: "mag4...", 2: 10, 3: "mqbf..."}`. Decoding is two
steps: diagnostic text -> CBOR bytes (cbor-diag), then bytes -> values (cbor2).
The text is never parsed as JSON.
"""

from __future__ import annotations

from typing import Any

import cbor2
from cbor_diag import cbor2diag, diag2cbor

from ..core.identity import Identity
from ..errors import InvalidIdentity, MalformedParameters
from .params import TransferParams

TRANSFER = "transfer"

# Integer keys of the ledger send argument map.
FIELD_FROM = 0
FIELD_TO = 1
FIELD_AMOUNT = 2
FIELD_SYMBOL = 3


def diag_to_bytes(text: str, *, variant: str) -> bytes:
    if not isinstance(text, str):
        raise MalformedParameters(variant, None, "params must be a string")
    try:
        return diag2cbor(text)
    except ValueError as e:
        raise MalformedParameters(variant, None, f"invalid CBOR diagnostic notation ({e})") from e


def decode_map(text: str, *, variant: str) -> dict[Any, Any]:
    """Diagnostic text -> top-level CBOR map."""
    data = diag_to_bytes(text, variant=variant)
    try:
        value = cbor2.loads(data)
    except cbor2.CBORDecodeError as e:
        raise MalformedParameters(variant, None, f"invalid CBOR ({e})") from e
    if not isinstance(value, dict):
        raise MalformedParameters(variant, None, f"expected a map, got {type(value).__name__}")
    # bool and float keys compare equal to 1 and 1.0; only plain ints count.
    for key in value:
        if type(key) is not int:
            raise MalformedParameters(variant, None, f"map keys must be integers, got {key!r}")
    return value


def _identity_field(values: dict[Any, Any], key: int, *, variant: str) -> Identity:
    if key not in values:
        raise MalformedParameters(variant, key, "missing")
    try:
        return Identity.from_cbor(values[key])
    except InvalidIdentity as e:
        raise MalformedParameters(variant, key, e.reason) from e


def _amount_field(values: dict[Any, Any], key: int, *, variant: str) -> int:
    if key not in values:
        raise MalformedParameters(variant, key, "missing")
    amount = values[key]
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise MalformedParameters(variant, key, f"expected an unsigned integer, got {type(amount).__name__}")
    if amount < 0:
        raise MalformedParameters(variant, key, "amount must not be negative")
    return amount


def decode_transfer(text: str) -> TransferParams:
    values = decode_map(text, variant=TRANSFER)

    from_ = None
    if values.get(FIELD_FROM) is not None:
        from_ = _identity_field(values, FIELD_FROM, variant=TRANSFER)

    return TransferParams(
        to=_identity_field(values, FIELD_TO, variant=TRANSFER),
        amount=_amount_field(values, FIELD_AMOUNT, variant=TRANSFER),
        symbol=_identity_field(values, FIELD_SYMBOL, variant=TRANSFER),
        from_=from_,
    )


def encode_transfer(params: TransferParams) -> bytes:
    """Wire form of the send argument (identities as tag 10000 byte strings)."""
    out: dict[int, Any] = {}
    if params.from_ is not None:
        out[FIELD_FROM] = params.from_.to_cbor()
    out[FIELD_TO] = params.to.to_cbor()
    out[FIELD_AMOUNT] = params.amount
    out[FIELD_SYMBOL] = params.symbol.to_cbor()
    return cbor2.dumps(out, canonical=True)


def to_diag(params: TransferParams) -> str:
    """Diagnostic text suitable for a task document's `params` field."""
    return cbor2diag(encode_transfer(params))
