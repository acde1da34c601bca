"""
Error taxonomy for Portcullis.

Everything below the gating engine raises one of these. The gating engine
is the boundary where they stop being exceptions and become decision
values (see ``portcullis.gate``).
"""

from __future__ import annotations


class PortcullisError(RuntimeError):
    exit_code: int = 1


# ============ Configuration ============


class ConfigError(PortcullisError):
    exit_code = 2


class UnsupportedChain(ConfigError):
    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Chain not supported: {chain_id}")
        self.chain_id = chain_id


class NotConnected(PortcullisError):
    """No wallet address is available for a current-wallet call."""

    def __init__(self, message: str = "Wallet not connected. Call use_wallet() first.") -> None:
        super().__init__(message)


# ============ Contract layer ============


class ContractError(PortcullisError):
    exit_code = 3


class InvalidAddress(ContractError):
    def __init__(self, address: object) -> None:
        super().__init__(f"Invalid address: {address!r}")
        self.address = address


class EncodingError(ContractError):
    pass


class AbiDecodingError(ContractError):
    pass


class ContractCallFailure(ContractError):
    """A contract read failed; ``cause`` holds the lower-level error."""

    def __init__(self, signature: str, cause: BaseException) -> None:
        super().__init__(f"Failed to call {signature}: {cause}")
        self.signature = signature
        self.cause = cause


# ============ Network layer ============


class NetworkError(PortcullisError):
    exit_code = 4


class RpcError(NetworkError):
    """The node answered, and explicitly rejected the call."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"RPC error ({code}): {message}")
        self.code = code
        self.message = message


class NetworkUnavailable(NetworkError):
    def __init__(self, message: str = "No connection to the RPC endpoint") -> None:
        super().__init__(message)


class RequestTimeout(NetworkUnavailable):
    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message)


class Cancelled(PortcullisError):
    """A read was abandoned because the caller's deadline elapsed."""

    def __init__(self, message: str = "Read cancelled: deadline elapsed") -> None:
        super().__init__(message)


__all__ = [
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
