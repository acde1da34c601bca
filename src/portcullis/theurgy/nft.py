"""
Theurgy NFT - ERC-721 reads.

Commands:
- info:    Show collection name and symbol
- owner:   Show the owner of a token id
- balance: Show how many tokens a holder has
"""

from __future__ import annotations

from typing import Optional

import click

from ..errors import PortcullisError
from .common import fail, label, open_gate, rpc_options


@click.group()
def nft() -> None:
    """ERC-721 collection reads.

    \b
    Examples:
      portcullis nft info --collection 0xAbC...
      portcullis nft owner --collection 0xAbC... --token-id 42
      portcullis nft owner --collection 0xAbC... --token-id 42 --holder 0xDeF...
    """


@nft.command()
@click.option("--collection", required=True, help="ERC-721 contract address")
@rpc_options
@click.pass_context
def info(
    ctx: click.Context,
    collection: str,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show ERC-721 collection metadata."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        try:
            meta = gate.erc721(collection).collection_info()
        except PortcullisError as exc:
            fail(exc)

    click.echo(label("Contract:") + meta.address)
    click.echo(label("Name:") + meta.name)
    click.echo(label("Symbol:") + meta.symbol)


@nft.command()
@click.option("--collection", required=True, help="ERC-721 contract address")
@click.option("--token-id", required=True, type=click.IntRange(min=0), help="Token id")
@click.option("--holder", default=None, help="Also report whether this address owns it")
@rpc_options
@click.pass_context
def owner(
    ctx: click.Context,
    collection: str,
    token_id: int,
    holder: Optional[str],
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show the owner of a token."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        erc721 = gate.erc721(collection)
        try:
            current = erc721.owner_of(token_id)
        except PortcullisError as exc:
            fail(exc)
        owns = erc721.is_owner_of(holder, token_id) if holder else None

    click.echo(label("Token:") + f"#{token_id}")
    click.echo(label("Owner:") + current)
    if owns is not None:
        verdict = click.style("yes", fg="green") if owns else click.style("no", fg="yellow")
        click.echo(label("Holder:") + f"{holder} owns it: " + verdict)


@nft.command()
@click.option("--collection", required=True, help="ERC-721 contract address")
@click.option("--holder", required=True, help="Address whose tokens to count")
@rpc_options
@click.pass_context
def balance(
    ctx: click.Context,
    collection: str,
    holder: str,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show how many tokens of a collection an address holds."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        try:
            count = gate.erc721(collection).balance_of(holder)
        except PortcullisError as exc:
            fail(exc)

    click.echo(label("Holder:") + holder)
    click.echo(label("Tokens:") + click.style(str(count), fg="bright_white", bold=True))
