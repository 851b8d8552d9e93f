"""Minimal aria2 JSON-RPC 2.0 client over HTTP POST."""

from __future__ import annotations

import uuid
from types import TracebackType
from typing import Any

import httpx
import structlog

from linkharvest.domain.entities import Aria2Config
from linkharvest.domain.exceptions import (
    Aria2HttpError,
    Aria2ResponseError,
    Aria2RpcError,
    Aria2TransportError,
)

JSONRPC_VERSION = "2.0"
DEFAULT_ARIA2_ENDPOINT = "http://127.0.0.1:6800/jsonrpc"
DEFAULT_RPC_TIMEOUT = 30.0

log = structlog.get_logger(__name__)


def build_request(method: str, params: list[Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "id": uuid.uuid4().hex,
        "method": method,
    }
    if params is not None:
        body["params"] = params
    return body


class Aria2RpcClient:
    """Sends one JSON-RPC request per ``call``.

    Raises:
        Aria2HttpError: non-2xx status.
        Aria2TransportError: no response (connect/read/timeout).
        Aria2RpcError: the envelope carries a top-level ``error``.
        Aria2ResponseError: the body is not JSON or has no ``result``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_seconds: float = DEFAULT_RPC_TIMEOUT,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout_seconds

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Aria2RpcClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def call(
        self,
        config: Aria2Config,
        method: str,
        params: list[Any] | None = None,
    ) -> Any:
        client = self._ensure_client()
        body = build_request(method, params)

        try:
            response = await client.post(config.endpoint, json=body)
        except httpx.TransportError as e:
            log.debug(
                "aria2_transport_error",
                endpoint=config.endpoint,
                method=method,
                error_type=type(e).__name__,
            )
            raise Aria2TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise Aria2HttpError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise Aria2ResponseError("invalid JSON in aria2 response") from e

        if not isinstance(payload, dict):
            raise Aria2ResponseError("aria2 response is not a JSON object")

        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                raise Aria2RpcError(
                    str(error.get("message") or "aria2 error"),
                    code=error.get("code"),
                )
            raise Aria2RpcError(str(error))

        if "result" not in payload:
            raise Aria2ResponseError("no result in aria2 response")

        return payload["result"]
