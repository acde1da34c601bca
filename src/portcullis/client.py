"""
Portcullis - the SDK handle.

Bundles configuration, transport, contract reader and gating engine into
one explicitly constructed object. There is no global instance: build one,
pass it to whoever needs it, close it when done.

    with Portcullis.from_env() as gate:
        gate.use_wallet("0x...")
        if gate.check_access("0xTokenContract", min_balance=1):
            ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx

from .config import Chain, GateConfig
from .errors import NotConnected, PortcullisError
from .gate.decision import AccessDecision, Errored, TokenKind, TokenRequirement
from .gate.engine import GatingEngine
from .pneuma.reader import ContractReader
from .pneuma.rpc import RpcTransport
from .pneuma.tokens import Erc20Token, Erc721Token
from .sigil.address import require_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Online:
    chain_id: int


@dataclass(frozen=True)
class Offline:
    cause: BaseException


ConnectionStatus = Union[Online, Offline]


class Portcullis:
    """
    Token gating SDK handle.

    Args:
        config: Settings (default: GateConfig())
        transport: httpx transport for the RPC client (tests use MockTransport)
        wallet_address: Address of the current wallet, if already known
    """

    def __init__(
        self,
        config: Optional[GateConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        wallet_address: Optional[str] = None,
    ) -> None:
        self.config = config or GateConfig()
        self.transport = RpcTransport(
            self.config.effective_rpc_url,
            timeout=self.config.request_timeout,
            log_payloads=self.config.log_rpc,
            transport=transport,
        )
        self.reader = ContractReader(self.transport)
        self.gating = GatingEngine(self.reader, max_workers=self.config.max_workers)
        self._wallet_address: Optional[str] = None
        if wallet_address is not None:
            self.use_wallet(wallet_address)

    @classmethod
    def from_env(
        cls,
        env_path: Optional[Path] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Portcullis":
        return cls(GateConfig.from_env(env_path), transport=transport)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "Portcullis":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        status = self._wallet_address or "no wallet"
        return f"Portcullis(chain={self.chain.name}, wallet={status})"

    @property
    def chain(self) -> Chain:
        return self.config.chain

    # ------------------------------------------------------------------
    # Wallet
    # ------------------------------------------------------------------

    @property
    def wallet_address(self) -> Optional[str]:
        return self._wallet_address

    @property
    def is_connected(self) -> bool:
        return self._wallet_address is not None

    def use_wallet(self, address: str) -> None:
        """Set the current wallet, as supplied by the wallet/session layer."""
        self._wallet_address = require_address(address)

    def disconnect(self) -> None:
        self._wallet_address = None

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def erc20(self, address: str) -> Erc20Token:
        return Erc20Token(address, self.reader)

    def erc721(self, address: str) -> Erc721Token:
        return Erc721Token(address, self.reader)

    def native_balance(self, address: str) -> int:
        """Native currency balance in wei."""
        return self.transport.get_balance(require_address(address))

    def check_connection(self) -> ConnectionStatus:
        """Probe the endpoint with eth_chainId. Never raises."""
        try:
            return Online(self.transport.chain_id())
        except PortcullisError as exc:
            logger.debug("connection check against %s failed: %s", self.transport.rpc_url, exc)
            return Offline(exc)

    # ------------------------------------------------------------------
    # Token gating - current wallet
    # ------------------------------------------------------------------

    def check_access(
        self,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> bool:
        """Simple yes/no for the current wallet. No wallet means no access."""
        if self._wallet_address is None:
            return False
        return self.gating.check_access(self._wallet_address, contract, min_balance, kind)

    def verify_access(
        self,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> AccessDecision:
        """Full decision for the current wallet; Errored(NotConnected) without one."""
        if self._wallet_address is None:
            return Errored(NotConnected())
        return self.gating.verify_access(self._wallet_address, contract, min_balance, kind)

    def check_access_any(
        self, requirements: Iterable[TokenRequirement], deadline: Optional[float] = None
    ) -> bool:
        if self._wallet_address is None:
            return False
        return self.gating.check_access_any(self._wallet_address, requirements, deadline)

    def check_access_all(
        self, requirements: Iterable[TokenRequirement], deadline: Optional[float] = None
    ) -> bool:
        if self._wallet_address is None:
            return False
        return self.gating.check_access_all(self._wallet_address, requirements, deadline)

    def verify_access_all(
        self, requirements: Iterable[TokenRequirement], deadline: Optional[float] = None
    ) -> dict[str, AccessDecision]:
        if self._wallet_address is None:
            return {req.contract_address: Errored(NotConnected()) for req in requirements}
        return self.gating.verify_access_all(self._wallet_address, requirements, deadline)

    # ------------------------------------------------------------------
    # Token gating - explicit wallet
    # ------------------------------------------------------------------

    def check_access_for(
        self,
        wallet: str,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> bool:
        """Same as check_access, for an address other than the current wallet."""
        return self.gating.check_access(wallet, contract, min_balance, kind)

    def verify_access_for(
        self,
        wallet: str,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> AccessDecision:
        return self.gating.verify_access(wallet, contract, min_balance, kind)
