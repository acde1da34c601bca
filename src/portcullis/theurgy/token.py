"""
Theurgy Token - ERC-20 reads.

Commands:
- info:    Show name, symbol, decimals and total supply
- balance: Show the raw balance of a holder
"""

from __future__ import annotations

from typing import Optional

import click

from ..errors import PortcullisError
from .common import fail, label, open_gate, rpc_options


@click.group()
def token() -> None:
    """ERC-20 token reads.

    \b
    Examples:
      portcullis token info --token 0xAbC...
      portcullis token balance --token 0xAbC... --holder 0xDeF...
    """


@token.command()
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@rpc_options
@click.pass_context
def info(
    ctx: click.Context,
    token_address: str,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show ERC-20 token metadata."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        erc20 = gate.erc20(token_address)
        try:
            meta = erc20.token_info()
            supply = erc20.total_supply()
        except PortcullisError as exc:
            fail(exc)

    click.echo(f"=== {meta.symbol} ({gate.chain.name}) ===")
    click.echo()
    click.echo(label("Token:") + meta.address)
    click.echo(label("Name:") + meta.name)
    click.echo(label("Symbol:") + meta.symbol)
    click.echo(label("Decimals:") + str(meta.decimals))
    click.echo(label("Supply:") + f"{supply} (raw)")
    click.echo()


@token.command()
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@click.option("--holder", required=True, help="Address whose balance to read")
@rpc_options
@click.pass_context
def balance(
    ctx: click.Context,
    token_address: str,
    holder: str,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show an ERC-20 balance in the token's smallest unit."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        try:
            raw = gate.erc20(token_address).balance_of(holder)
        except PortcullisError as exc:
            fail(exc)

    click.echo(label("Token:") + token_address)
    click.echo(label("Holder:") + holder)
    click.echo(label("Balance:") + click.style(str(raw), fg="bright_white", bold=True))
