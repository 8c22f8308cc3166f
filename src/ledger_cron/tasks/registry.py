# src/ledger_cron/tasks/registry.py

"""
Task variant registry.

Maps an endpoint tag (as written in the task document) to:
- the params type and its decoder,
- the remote endpoint the dispatcher calls for it.

Adding a variant: new params dataclass, new Endpoint member + VARIANTS entry,
new `case` in dispatcher.execute.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..errors import UnknownEndpoint
from . import codec
from .params import Params, TransferParams


class Endpoint(StrEnum):
    TRANSFER = codec.TRANSFER


@dataclass(frozen=True, slots=True)
class VariantSpec:
    endpoint: Endpoint
    aliases: tuple[str, ...]
    params_type: type
    remote_endpoint: str
    decode: Callable[[str], Params]


VARIANTS: dict[Endpoint, VariantSpec] = {
    Endpoint.TRANSFER: VariantSpec(
        endpoint=Endpoint.TRANSFER,
        aliases=("ledger.send",),
        params_type=TransferParams,
        remote_endpoint="ledger.send",
        decode=codec.decode_transfer,
    ),
}


def _build_tag_index() -> dict[str, VariantSpec]:
    index: dict[str, VariantSpec] = {}
    for spec in VARIANTS.values():
        for tag in (spec.endpoint.value, *spec.aliases):
            if tag in index:
                raise RuntimeError(f"duplicate endpoint tag {tag!r}")
            index[tag] = spec
    return index


_BY_TAG = _build_tag_index()


def known_tags() -> list[str]:
    return sorted(_BY_TAG)


def resolve(tag: str) -> VariantSpec:
    # Exact match, no case folding.
    if not isinstance(tag, str):
        raise UnknownEndpoint(tag)
    spec = _BY_TAG.get(tag)
    if spec is None:
        raise UnknownEndpoint(tag)
    return spec


def decode_params(tag: str, payload: str) -> Params:
    return resolve(tag).decode(payload)


def spec_for(params: Params) -> VariantSpec:
    """Reverse lookup: which variant a decoded params value belongs to."""
    for spec in VARIANTS.values():
        if isinstance(params, spec.params_type):
            return spec
    raise UnknownEndpoint(type(params).__name__)
