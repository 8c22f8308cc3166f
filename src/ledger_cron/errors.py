# src/ledger_cron/errors.py

"""
Error taxonomy.

Decode-time errors (raised while loading the task document) derive from
TaskDecodeError and abort the whole load. Execution-time errors come from the
RPC client and are handed back to the caller untouched.
"""

from __future__ import annotations

from typing import Any


class LedgerCronError(Exception):
    """Base class for errors raised by this package."""


class TaskDecodeError(LedgerCronError):
    """A task entry could not be turned into a Task."""


class InvalidIdentity(TaskDecodeError):
    def __init__(self, value: Any, reason: str = "not a valid identity") -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class MalformedParameters(TaskDecodeError):
    """
    Parameter payload does not match the shape expected for its endpoint.

    `field` is the integer key of the offending map entry, or None when the
    payload as a whole is unreadable (bad diagnostic notation, not a map, ...).
    """

    def __init__(self, variant: str, field: int | None, reason: str) -> None:
        self.variant = variant
        self.field = field
        self.reason = reason
        where = "payload" if field is None else f"field {field}"
        super().__init__(f"malformed {variant} parameters, {where}: {reason}")


class UnknownEndpoint(TaskDecodeError):
    def __init__(self, tag: Any) -> None:
        self.tag = tag
        super().__init__(f"unknown endpoint: {tag!r}")


class MalformedTaskEntry(TaskDecodeError):
    """The task entry itself is missing a key or has the wrong type."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"task entry field {field!r}: {reason}")


class TaskLoadError(LedgerCronError):
    """Wraps the first decode failure with the zero-based index of its entry."""

    def __init__(self, index: int | None, cause: Exception) -> None:
        self.index = index
        self.cause = cause
        where = "task document" if index is None else f"task #{index}"
        super().__init__(f"{where}: {cause}")


class RemoteError(LedgerCronError):
    """
    Failure reported by the bundled RPC client (transport, HTTP or server-side).

    Errors raised by other client implementations are passed through as-is.
    """

    def __init__(self, code: int | None, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        prefix = "remote error" if code is None else f"remote error {code}"
        super().__init__(f"{prefix}: {message}")
