"""
Shared fixtures: an in-memory JSON-RPC node behind httpx.MockTransport.

Calldata keys are built by hand from known selectors so the fake node does
not depend on the codec under test.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import httpx
import pytest

from portcullis.pneuma.reader import ContractReader
from portcullis.pneuma.rpc import RpcTransport

RPC_URL = "http://node.test"

SELECTORS = {
    "name()": "0x06fdde03",
    "symbol()": "0x95d89b41",
    "decimals()": "0x313ce567",
    "totalSupply()": "0x18160ddd",
    "balanceOf(address)": "0x70a08231",
    "ownerOf(uint256)": "0x6352211e",
}

TOKEN = "0x" + "aa" * 20
NFT = "0x" + "bb" * 20
OTHER_TOKEN = "0x" + "cc" * 20
WALLET = "0x1234567890AbcdEF1234567890aBcdef12345678"
STRANGER = "0x" + "99" * 20


def word(value: int) -> str:
    return format(value, "064x")


def address_word(address: str) -> str:
    return address[2:].lower().rjust(64, "0")


def string_payload(text: str) -> str:
    raw = text.encode("utf-8")
    padded = raw.hex().ljust(((len(raw) + 31) // 32) * 64, "0")
    return "0x" + word(32) + word(len(raw)) + padded


@dataclass
class Scripted:
    result: Optional[str] = None
    error: Optional[dict[str, Any]] = None
    disconnect: bool = False
    garbled: bool = False
    hold: Optional[threading.Event] = None


class FakeNode:
    """Answers eth_call from a script; everything unscripted reverts."""

    def __init__(self, chain_id: int = 80002, block: int = 1234) -> None:
        self.chain_id = chain_id
        self.block = block
        self.native: dict[str, int] = {}
        self.requests: list[dict[str, Any]] = []
        self.released = threading.Event()
        self._script: dict[tuple[str, str], Scripted] = {}
        self._lock = threading.Lock()

    # ---- scripting ----

    def on_call(self, to: str, data: str, result: Optional[str] = None, **kwargs: Any) -> None:
        self._script[(to.lower(), data.lower())] = Scripted(result=result, **kwargs)

    def on(self, to: str, signature: str, *words: str, **kwargs: Any) -> None:
        self.on_call(to, SELECTORS[signature] + "".join(words), **kwargs)

    def set_balance(self, token: str, holder: str, amount: int, **kwargs: Any) -> None:
        self.on(token, "balanceOf(address)", address_word(holder), result="0x" + word(amount), **kwargs)

    def set_owner(self, nft: str, token_id: int, owner: str) -> None:
        self.on(nft, "ownerOf(uint256)", word(token_id), result="0x" + address_word(owner))

    def set_string(self, to: str, signature: str, text: str) -> None:
        self.on(to, signature, result=string_payload(text))

    def slow_balance(self, token: str, holder: str, amount: int) -> None:
        """Balance that only answers once ``released`` is set."""
        self.set_balance(token, holder, amount, hold=self.released)

    @property
    def call_count(self) -> int:
        return sum(1 for r in self.requests if r["method"] == "eth_call")

    # ---- transport ----

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        with self._lock:
            self.requests.append(body)

        method = body["method"]
        if method == "eth_chainId":
            return self._ok(body, hex(self.chain_id))
        if method == "eth_blockNumber":
            return self._ok(body, hex(self.block))
        if method == "eth_getBalance":
            return self._ok(body, hex(self.native.get(body["params"][0].lower(), 0)))
        if method != "eth_call":
            return self._error(body, -32601, "method not found")

        tx = body["params"][0]
        entry = self._script.get((tx["to"].lower(), tx["data"].lower()))
        if entry is None:
            return self._error(body, 3, "execution reverted")
        if entry.hold is not None:
            entry.hold.wait(timeout=5)
        if entry.disconnect:
            raise httpx.ConnectError("connection refused", request=request)
        if entry.garbled:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")
        if entry.error is not None:
            return self._error(body, entry.error["code"], entry.error["message"])
        return self._ok(body, entry.result)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @staticmethod
    def _ok(body: dict[str, Any], result: Any) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    @staticmethod
    def _error(body: dict[str, Any], code: int, message: str) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": code, "message": message}},
        )


@pytest.fixture()
def node() -> Iterator[FakeNode]:
    fake = FakeNode()
    yield fake
    fake.released.set()


@pytest.fixture()
def rpc(node: FakeNode) -> Iterator[RpcTransport]:
    transport = RpcTransport(RPC_URL, timeout=5.0, transport=node.transport())
    yield transport
    transport.close()


@pytest.fixture()
def reader(rpc: RpcTransport) -> ContractReader:
    return ContractReader(rpc)
