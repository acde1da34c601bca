"""
Pneuma - On-chain read layer for Portcullis.

Provides the JSON-RPC transport, the ABI codec, a generic contract reader
and ERC-20 / ERC-721 views for EVM chains.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""

from .reader import ContractReader
from .rpc import RpcTransport
from .tokens import CollectionInfo, Erc20Token, Erc721Token, TokenInfo

__all__ = [
    "CollectionInfo",
    "ContractReader",
    "Erc20Token",
    "Erc721Token",
    "RpcTransport",
    "TokenInfo",
]
