# src/ledger_cron/core/identity.py

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

import cbor2

from ..errors import InvalidIdentity

# CBOR tag used by the ledger for identity byte strings.
IDENTITY_CBOR_TAG = 10000

ANONYMOUS_SHORT = "maa"

_B32_ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyz234567")


def _b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=").lower()


def _b32decode(text: str) -> bytes:
    padded = text.upper() + "=" * (-len(text) % 8)
    return base64.b32decode(padded)


def _crc16_arc(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0xA001 if crc & 1 else crc >> 1
    return crc


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Account / token reference.

    Textual form: "m" + base32(raw) + 2 checksum characters.
    Wire form: CBOR tag 10000 over the raw bytes.
    """

    raw: bytes

    @classmethod
    def anonymous(cls) -> Identity:
        return cls(b"\x00")

    @classmethod
    def from_text(cls, text: str) -> Identity:
        if not isinstance(text, str):
            raise InvalidIdentity(text, "identity must be a string")

        s = text.strip().lower()
        # Short form of the anonymous identity (no checksum).
        if s == ANONYMOUS_SHORT:
            return cls.anonymous()
        if not s.startswith("m") or len(s) < 4:
            raise InvalidIdentity(text, "identity must start with 'm'")
        if any(ch not in _B32_ALPHABET for ch in s[1:]):
            raise InvalidIdentity(text, "identity contains non-base32 characters")

        body = s[1:-2]
        try:
            raw = _b32decode(body)
        except (binascii.Error, ValueError) as e:
            raise InvalidIdentity(text, f"identity body does not decode ({e})") from e
        if not raw:
            raise InvalidIdentity(text, "identity is empty")

        ident = cls(raw)
        if str(ident) != s:
            raise InvalidIdentity(text, "invalid checksum")
        return ident

    @classmethod
    def from_cbor(cls, value: Any) -> Identity:
        """Accept the textual form, a bare byte string, or tag 10000 bytes."""
        if isinstance(value, cbor2.CBORTag):
            if value.tag != IDENTITY_CBOR_TAG:
                raise InvalidIdentity(value, f"unexpected CBOR tag {value.tag}")
            value = value.value
        if isinstance(value, str):
            return cls.from_text(value)
        if isinstance(value, (bytes, bytearray)):
            if not value:
                raise InvalidIdentity(value, "identity is empty")
            return cls(bytes(value))
        raise InvalidIdentity(value, "identity must be text or bytes")

    def to_cbor(self) -> cbor2.CBORTag:
        return cbor2.CBORTag(IDENTITY_CBOR_TAG, self.raw)

    def is_anonymous(self) -> bool:
        return self.raw == b"\x00"

    def __str__(self) -> str:
        checksum = _b32encode(_crc16_arc(self.raw).to_bytes(2, "big"))[:2]
        return f"m{_b32encode(self.raw)}{checksum}"

    def __repr__(self) -> str:
        return f"Identity({str(self)!r})"
