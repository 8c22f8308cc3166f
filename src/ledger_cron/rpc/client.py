# src/ledger_cron/rpc/client.py

from __future__ import annotations

import logging
from typing import Any

import cbor2
import httpx

from ..core.identity import Identity
from ..core.ports import RemoteResponse
from ..errors import RemoteError

logger = logging.getLogger(__name__)

CBOR_CONTENT_TYPE = "application/cbor"


def _decode_body(body: bytes) -> Any:
    try:
        return cbor2.loads(body)
    except cbor2.CBORDecodeError as e:
        raise RemoteError(None, f"undecodable response body ({e})") from e


def _remote_error(payload: Any) -> RemoteError:
    """Map an `{"error": {...}}` body to RemoteError, keeping whatever fields it has."""
    if isinstance(payload, dict):
        code = payload.get("code")
        message = payload.get("message") or "remote call failed"
        return RemoteError(code if isinstance(code, int) else None, str(message), payload.get("fields"))
    return RemoteError(None, str(payload))


class HttpRpcClient:
    """
    Minimal CBOR-over-HTTP client.

    Request body:  {"from": <identity>, "endpoint": str, "argument": bytes}
    Response body: {"data": ...} on success, {"error": {"code", "message", "fields"}} on failure.

    Envelope signing is not done here. The underlying httpx.AsyncClient is
    safe to share between concurrent calls.
    """

    def __init__(
            self,
            server_url: str,
            *,
            identity: Identity | None = None,
            timeout_seconds: float = 30.0,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.server_url = server_url
        self.identity = identity or Identity.anonymous()
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Content-Type": CBOR_CONTENT_TYPE, "Accept": CBOR_CONTENT_TYPE},
            transport=transport,
        )

    async def call(self, endpoint: str, argument: bytes) -> RemoteResponse:
        envelope = {
            "from": self.identity.to_cbor(),
            "endpoint": endpoint,
            "argument": argument,
        }
        body = cbor2.dumps(envelope)

        try:
            resp = await self._http.post(self.server_url, content=body)
        except httpx.HTTPError as e:
            raise RemoteError(None, f"transport error calling {endpoint}: {e}") from e

        if resp.status_code >= 400:
            raise RemoteError(resp.status_code, f"HTTP {resp.status_code} calling {endpoint}")

        payload = _decode_body(resp.content)
        if isinstance(payload, dict) and payload.get("error") is not None:
            raise _remote_error(payload["error"])

        data = payload.get("data") if isinstance(payload, dict) else payload
        logger.debug("call %s ok (%d bytes)", endpoint, len(resp.content))
        return RemoteResponse(data=data, raw=resp.content)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> HttpRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
