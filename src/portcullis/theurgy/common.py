"""Shared options and helpers for the Portcullis commands."""

from __future__ import annotations

import sys
from typing import Any, Callable, NoReturn, Optional

import click

from ..client import Portcullis
from ..config import GateConfig, chain_from_id
from ..errors import ConfigError, UnsupportedChain


def rpc_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --rpc-url / --chain-id / --timeout to a command."""
    func = click.option(
        "--timeout",
        envvar="PORTCULLIS_TIMEOUT",
        default=None,
        type=float,
        help="Per-request timeout in seconds",
    )(func)
    func = click.option(
        "--chain-id",
        envvar="PORTCULLIS_CHAIN_ID",
        default=None,
        type=int,
        help="Chain id (137 Polygon, 80002 Polygon Amoy)",
    )(func)
    func = click.option(
        "--rpc-url",
        envvar="PORTCULLIS_RPC_URL",
        default=None,
        help="RPC endpoint (default: the chain's public endpoint)",
    )(func)
    return func


def build_config(
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> GateConfig:
    base = GateConfig.from_env()
    chain = base.chain
    if chain_id is not None:
        found = chain_from_id(chain_id)
        if found is None:
            raise UnsupportedChain(chain_id)
        chain = found
    return GateConfig(
        chain=chain,
        rpc_url=rpc_url or base.rpc_url,
        request_timeout=timeout if timeout is not None else base.request_timeout,
        max_workers=base.max_workers,
        log_rpc=base.log_rpc,
    )


def open_gate(
    ctx: click.Context,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> Portcullis:
    """Build a Portcullis handle for a command; exits on bad configuration."""
    try:
        config = build_config(rpc_url, chain_id, timeout)
    except ConfigError as exc:
        fail(exc)
    obj = ctx.find_root().obj or {}
    return Portcullis(config, transport=obj.get("transport"))


def fail(exc: BaseException) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(getattr(exc, "exit_code", 1))


def label(text: str) -> str:
    return click.style(f"  {text:<10}", dim=True)
