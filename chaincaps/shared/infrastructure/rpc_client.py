"""
Async JSON-RPC Client
=====================
Minimal EVM JSON-RPC 2.0 client over httpx with a hard per-request
deadline and a typed error taxonomy.

Usage:
    async with RpcClient("https://mainnet.base.org", timeout_ms=2000) as client:
        block = await client.request("eth_getBlockByNumber", ["latest", False])
"""

import asyncio
import json
from typing import Any, List, Optional

import httpx

from config.settings import Settings
from chaincaps.shared.system.logging import Logger


# Phrases that, next to the word "method", mean "this node does not implement it"
METHOD_MISSING_PATTERNS = (
    "not found",
    "does not exist",
    "not supported",
    "unsupported",
    "not enabled",
    "not available",
)


class RpcClientError(Exception):
    """Base class for every failure raised by RpcClient."""


class RpcTimeoutError(RpcClientError):
    """Request exceeded the per-request deadline."""


class RpcTransportError(RpcClientError):
    """Connection failure or HTTP error without a JSON-RPC error body."""


class RpcResponseError(RpcClientError):
    """Body is not a usable JSON-RPC response."""


class RpcMethodError(RpcClientError):
    """Node answered with a JSON-RPC error object."""

    def __init__(self, code: Optional[int], message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}" if code is not None else message)

    @property
    def is_method_missing(self) -> bool:
        """True when the error implies the RPC method is unavailable."""
        if self.code == -32601:
            return True
        text = self.message.lower()
        return "method" in text and any(p in text for p in METHOD_MISSING_PATTERNS)


def hex_to_int(value: Any) -> Optional[int]:
    """Parse a JSON-RPC quantity ("0x1a"). None/empty -> None."""
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower().startswith("0x"):
        try:
            return int(value, 16) if len(value) > 2 else 0
        except ValueError:
            pass
    raise RpcResponseError(f"Malformed quantity: {value!r}")


class RpcClient:
    """
    Single-endpoint JSON-RPC client.

    One attempt per request, no retries or failover. Use as an async
    context manager so the underlying connection pool is closed.
    """

    def __init__(
        self,
        url: str,
        timeout_ms: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout_ms = timeout_ms if timeout_ms is not None else Settings.RPC_TIMEOUT_MS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.request_count = 0

    async def __aenter__(self) -> "RpcClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout_ms / 1000,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Execute one RPC call and return its `result`.

        Raises:
            RpcTimeoutError: deadline exceeded
            RpcTransportError: connection/HTTP failure
            RpcResponseError: malformed body
            RpcMethodError: node returned an `error` object
        """
        if self._client is None:
            raise RuntimeError("RpcClient must be used as an async context manager")

        self.request_count += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self.request_count,
            "method": method,
            "params": params or [],
        }

        try:
            async with asyncio.timeout(self.timeout_ms / 1000):
                resp = await self._client.post(self.url, json=payload)
        except (TimeoutError, httpx.TimeoutException):
            raise RpcTimeoutError(f"Timeout after {self.timeout_ms}ms") from None
        except httpx.HTTPError as e:
            raise RpcTransportError(str(e) or type(e).__name__) from e

        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            if resp.status_code != 200:
                raise RpcTransportError(f"HTTP {resp.status_code}") from None
            raise RpcResponseError(f"Malformed response to {method}: not JSON") from None

        if isinstance(data, dict) and data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcMethodError(error.get("code"), str(error.get("message", "RPC error")), error.get("data"))
            raise RpcMethodError(None, str(error))

        if resp.status_code != 200:
            raise RpcTransportError(f"HTTP {resp.status_code}")

        if not isinstance(data, dict) or "result" not in data:
            raise RpcResponseError(f"Malformed response to {method}: missing result")

        Logger.debug(f"[RPC] {method} @ {self.url} ok")
        return data["result"]
