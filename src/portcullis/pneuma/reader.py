"""
Generic read-only contract calls.

ContractReader pairs the ABI codec with an RpcTransport: validate the
target, encode, eth_call, decode. It is the raw escape hatch for custom
signatures; the token views in ``tokens`` are built on it.
"""

from __future__ import annotations

import logging

from ..errors import ContractCallFailure, NetworkUnavailable, RpcError
from ..sigil.address import require_address
from . import abi
from .rpc import RpcTransport

logger = logging.getLogger(__name__)


class ContractReader:
    """Read-only access to arbitrary contracts through one transport."""

    def __init__(self, transport: RpcTransport) -> None:
        self.transport = transport

    def call(self, contract_address: str, signature: str, *words: str) -> str:
        """
        Execute a read-only call.

        Args:
            contract_address: 0x-prefixed contract address
            signature: Canonical signature, e.g. "balanceOf(address)"
            *words: Arguments pre-encoded as ABI words

        Returns:
            0x-prefixed hex return data

        Raises:
            InvalidAddress: Malformed contract address (nothing is sent)
            EncodingError: Malformed signature or argument word
            ContractCallFailure: The node call failed
        """
        require_address(contract_address)
        data = abi.encode_call(signature, *words)

        try:
            return self.transport.eth_call(contract_address, data)
        except (RpcError, NetworkUnavailable) as exc:
            logger.debug("call %s on %s failed: %s", signature, contract_address, exc)
            raise ContractCallFailure(signature, exc) from exc

    def read_uint256(self, contract_address: str, signature: str, *words: str) -> int:
        return abi.decode_uint256(self.call(contract_address, signature, *words))

    def read_string(self, contract_address: str, signature: str, *words: str) -> str:
        return abi.decode_string(self.call(contract_address, signature, *words))

    def read_address(self, contract_address: str, signature: str, *words: str) -> str:
        return abi.decode_address(self.call(contract_address, signature, *words))
