"""
JSON-RPC Client for EVM nodes.

Lightweight alternative to web3.py: httpx for HTTP, eth-abi (via ``abi``) for
ABI. Read-only: eth_call, eth_chainId, eth_blockNumber, eth_getBalance.

One RpcTransport is meant to be built once and shared; it is safe to use
from several threads at once.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
from typing import Any, Iterable, Optional, Union

import httpx

from ..errors import NetworkUnavailable, RequestTimeout, RpcError
from ..utils import block_parameter, parse_quantity

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

BlockParameter = Union[int, str]


class RpcTransport:
    """
    JSON-RPC 2.0 over HTTP POST.

    Args:
        rpc_url: Node endpoint
        timeout: Connect/read/write/pool timeout in seconds, per request
        log_payloads: Log request and response bodies at DEBUG level
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        log_payloads: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.log_payloads = log_payloads
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RpcTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RpcTransport(rpc_url={self.rpc_url!r}, timeout={self.timeout})"

    # ------------------------------------------------------------------
    # Core call
    # ------------------------------------------------------------------

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def call(self, method: str, params: Iterable[Any] = ()) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            NetworkUnavailable: If the endpoint could not be reached
            RpcError: If the node rejected the call or answered nonsense
        """
        request_id = self._next_id()
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
            "id": request_id,
        }

        if self.log_payloads:
            logger.debug("rpc request %s: %s", method, json.dumps(payload))

        try:
            response = self._client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as exc:
            raise RequestTimeout(f"{method} timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            # Transport failures, but also undecodable bodies and redirect loops
            raise NetworkUnavailable(f"{method} failed: {exc}") from exc

        if self.log_payloads:
            logger.debug("rpc response %s [%s]: %s", method, response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise RpcError(
                -1, f"invalid JSON response (HTTP {response.status_code})"
            ) from exc

        if not isinstance(data, dict):
            raise RpcError(-1, f"unexpected response shape (HTTP {response.status_code})")

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                code = error.get("code", -1)
                message = error.get("message", "Unknown error")
            else:
                code, message = -1, str(error)
            raise RpcError(code if isinstance(code, int) else -1, str(message))

        if data.get("id") != request_id:
            raise RpcError(-1, f"mismatched response id: sent {request_id}, got {data.get('id')!r}")

        if "result" not in data:
            raise RpcError(-1, "no result")

        return data["result"]

    # ------------------------------------------------------------------
    # Convenience methods
    # ------------------------------------------------------------------

    def _quantity(self, method: str, result: Any) -> int:
        try:
            return parse_quantity(result)
        except ValueError as exc:
            raise RpcError(-1, f"{method} returned a malformed quantity: {result!r}") from exc

    def eth_call(self, to: str, data: str, block: BlockParameter = "latest") -> str:
        """
        Read-only contract call.

        Returns:
            0x-prefixed hex return data
        """
        result = self.call("eth_call", [{"to": to, "data": data}, block_parameter(block)])
        if not isinstance(result, str):
            raise RpcError(-1, f"eth_call returned {type(result).__name__}, expected hex string")
        return result

    def chain_id(self) -> int:
        return self._quantity("eth_chainId", self.call("eth_chainId"))

    def block_number(self) -> int:
        return self._quantity("eth_blockNumber", self.call("eth_blockNumber"))

    def get_balance(self, address: str, block: BlockParameter = "latest") -> int:
        """
        Get native balance for an address.

        Returns:
            Balance in wei
        """
        result = self.call("eth_getBalance", [address, block_parameter(block)])
        return self._quantity("eth_getBalance", result)
