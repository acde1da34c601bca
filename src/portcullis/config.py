"""
Configuration for Portcullis.

Settings come from explicit arguments, or from the environment via
``GateConfig.from_env()``, which first loads ~/.portcullis/.env when it
exists. Real environment variables win over the file.

Variables:
    PORTCULLIS_CHAIN_ID      chain id of a known chain (default 80002)
    PORTCULLIS_RPC_URL       RPC endpoint override
    PORTCULLIS_TIMEOUT       per-request timeout in seconds (default 30)
    PORTCULLIS_MAX_WORKERS   concurrent reads per gating batch (default 8)
    PORTCULLIS_LOG_RPC       log JSON-RPC payloads at DEBUG (1/true/yes)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError, UnsupportedChain
from .gate.engine import DEFAULT_MAX_WORKERS
from .pneuma.rpc import DEFAULT_TIMEOUT

# Default config directory
PORTCULLIS_DIR = Path.home() / ".portcullis"
PORTCULLIS_ENV = PORTCULLIS_DIR / ".env"


@dataclass(frozen=True)
class Chain:
    chain_id: int
    name: str
    rpc_url: str
    explorer_url: str
    currency_symbol: str


POLYGON = Chain(
    chain_id=137,
    name="Polygon",
    rpc_url="https://polygon-rpc.com",
    explorer_url="https://polygonscan.com",
    currency_symbol="POL",
)

# Replaced Mumbai in 2024.
POLYGON_AMOY = Chain(
    chain_id=80002,
    name="Polygon Amoy",
    rpc_url="https://rpc-amoy.polygon.technology",
    explorer_url="https://amoy.polygonscan.com",
    currency_symbol="POL",
)

CHAINS: dict[int, Chain] = {chain.chain_id: chain for chain in (POLYGON, POLYGON_AMOY)}


def chain_from_id(chain_id: int) -> Optional[Chain]:
    return CHAINS.get(chain_id)


def _check_rpc_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid RPC URL: {url!r} (expected http:// or https://)")
    return url


@dataclass(frozen=True)
class GateConfig:
    """
    Connection and evaluation settings.

    Args:
        chain: Target chain; supplies the default RPC URL
        rpc_url: Endpoint override (e.g. a private node)
        request_timeout: Per-request timeout in seconds
        max_workers: Upper bound on concurrent reads per gating batch
        log_rpc: Log JSON-RPC request/response bodies at DEBUG
    """

    chain: Chain = field(default=POLYGON_AMOY)
    rpc_url: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    log_rpc: bool = False

    def __post_init__(self) -> None:
        if self.rpc_url is not None:
            _check_rpc_url(self.rpc_url)
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def effective_rpc_url(self) -> str:
        return self.rpc_url or self.chain.rpc_url

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "GateConfig":
        """
        Build a config from the environment.

        Args:
            env_path: .env file to load first (default: ~/.portcullis/.env)

        Raises:
            UnsupportedChain: If PORTCULLIS_CHAIN_ID names an unknown chain
            ConfigError: If a variable cannot be parsed
        """
        env_path = env_path or PORTCULLIS_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        chain = POLYGON_AMOY
        raw_chain = os.environ.get("PORTCULLIS_CHAIN_ID")
        if raw_chain:
            chain_id = _parse(raw_chain, int, "PORTCULLIS_CHAIN_ID")
            found = chain_from_id(chain_id)
            if found is None:
                raise UnsupportedChain(chain_id)
            chain = found

        return cls(
            chain=chain,
            rpc_url=os.environ.get("PORTCULLIS_RPC_URL") or None,
            request_timeout=_parse(
                os.environ.get("PORTCULLIS_TIMEOUT", str(DEFAULT_TIMEOUT)),
                float,
                "PORTCULLIS_TIMEOUT",
            ),
            max_workers=_parse(
                os.environ.get("PORTCULLIS_MAX_WORKERS", str(DEFAULT_MAX_WORKERS)),
                int,
                "PORTCULLIS_MAX_WORKERS",
            ),
            log_rpc=os.environ.get("PORTCULLIS_LOG_RPC", "").lower() in ("1", "true", "yes"),
        )


def _parse(raw: str, kind: type, name: str) -> Any:
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be {kind.__name__}, got {raw!r}") from exc
