"""
Token views - named ERC-20 / ERC-721 reads on top of ContractReader.

Each method is a single eth_call with the canonical signature. Nothing is
cached: every call reflects chain state at the time it is made.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..sigil.address import require_address, same_address
from . import abi
from .reader import ContractReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenInfo:
    address: str
    name: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class CollectionInfo:
    address: str
    name: str
    symbol: str


class Erc20Token:
    """Read-only view of an ERC-20 token contract."""

    def __init__(self, address: str, reader: ContractReader) -> None:
        self.address = address
        self.reader = reader

    def name(self) -> str:
        return self.reader.read_string(self.address, "name()")

    def symbol(self) -> str:
        return self.reader.read_string(self.address, "symbol()")

    def decimals(self) -> int:
        return self.reader.read_uint256(self.address, "decimals()")

    def total_supply(self) -> int:
        return self.reader.read_uint256(self.address, "totalSupply()")

    def balance_of(self, holder: str) -> int:
        """Raw balance of ``holder`` in the token's smallest unit."""
        word = abi.encode_address(require_address(holder))
        return self.reader.read_uint256(self.address, "balanceOf(address)", word)

    def token_info(self) -> TokenInfo:
        return TokenInfo(
            address=self.address,
            name=self.name(),
            symbol=self.symbol(),
            decimals=self.decimals(),
        )

    def __repr__(self) -> str:
        return f"Erc20Token(address={self.address})"


class Erc721Token:
    """Read-only view of an ERC-721 collection contract."""

    def __init__(self, address: str, reader: ContractReader) -> None:
        self.address = address
        self.reader = reader

    def name(self) -> str:
        return self.reader.read_string(self.address, "name()")

    def symbol(self) -> str:
        return self.reader.read_string(self.address, "symbol()")

    def balance_of(self, holder: str) -> int:
        """Number of tokens of this collection held by ``holder``."""
        word = abi.encode_address(require_address(holder))
        return self.reader.read_uint256(self.address, "balanceOf(address)", word)

    def owner_of(self, token_id: int) -> str:
        """Owner of ``token_id`` as a lowercase 0x address."""
        word = abi.encode_uint256(token_id)
        return self.reader.read_address(self.address, "ownerOf(uint256)", word)

    def is_owner_of(self, address: str, token_id: int) -> bool:
        """
        True if ``address`` owns ``token_id``.

        Failing to resolve the owner (burned token, revert, node down)
        counts as "not the owner".
        """
        try:
            owner = self.owner_of(token_id)
        except Exception as exc:
            logger.debug("ownerOf(%s) on %s failed: %s", token_id, self.address, exc)
            return False
        return isinstance(address, str) and same_address(owner, address)

    def collection_info(self) -> CollectionInfo:
        return CollectionInfo(
            address=self.address,
            name=self.name(),
            symbol=self.symbol(),
        )

    def __repr__(self) -> str:
        return f"Erc721Token(address={self.address})"
