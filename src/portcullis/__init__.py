__all__ = [
    # SDK handle
    "Portcullis",
    "Online",
    "Offline",
    "ConnectionStatus",
    # Configuration
    "Chain",
    "GateConfig",
    "POLYGON",
    "POLYGON_AMOY",
    "chain_from_id",
    # Gating
    "GatingEngine",
    "TokenKind",
    "TokenRequirement",
    "AccessDecision",
    "Granted",
    "Denied",
    "Errored",
    # On-chain reads
    "RpcTransport",
    "ContractReader",
    "Erc20Token",
    "Erc721Token",
    "TokenInfo",
    "CollectionInfo",
    # Hashing / addresses
    "keccak256",
    "is_valid_address",
    "to_checksum_address",
    # Errors
    "PortcullisError",
    "ConfigError",
    "UnsupportedChain",
    "NotConnected",
    "ContractError",
    "InvalidAddress",
    "EncodingError",
    "AbiDecodingError",
    "ContractCallFailure",
    "NetworkError",
    "RpcError",
    "NetworkUnavailable",
    "RequestTimeout",
    "Cancelled",
]

__version__ = "1.0.0"

from .errors import (
    AbiDecodingError,
    Cancelled,
    ConfigError,
    ContractCallFailure,
    ContractError,
    EncodingError,
    InvalidAddress,
    NetworkError,
    NetworkUnavailable,
    NotConnected,
    PortcullisError,
    RequestTimeout,
    RpcError,
    UnsupportedChain,
)
from .sigil.address import is_valid_address, to_checksum_address
from .sigil.keccak import keccak256
from .pneuma.rpc import RpcTransport
from .pneuma.reader import ContractReader
from .pneuma.tokens import CollectionInfo, Erc20Token, Erc721Token, TokenInfo
from .gate.decision import AccessDecision, Denied, Errored, Granted, TokenKind, TokenRequirement
from .gate.engine import GatingEngine
from .config import POLYGON, POLYGON_AMOY, Chain, GateConfig, chain_from_id
from .client import ConnectionStatus, Offline, Online, Portcullis
