"""
Theurgy Chain - Probe the RPC endpoint.

Shows the chain id and latest block reported by the node, and warns when
the node serves a different chain than the one configured.
"""

from __future__ import annotations

from typing import Optional

import click

from ..client import Offline
from ..config import chain_from_id
from ..errors import PortcullisError
from .common import fail, label, open_gate, rpc_options


@click.command()
@rpc_options
@click.pass_context
def chain(
    ctx: click.Context,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """Show chain id and latest block of the RPC endpoint."""
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        status = gate.check_connection()
        if isinstance(status, Offline):
            fail(status.cause)
        try:
            block = gate.transport.block_number()
        except PortcullisError as exc:
            fail(exc)

    remote = chain_from_id(status.chain_id)
    click.echo(label("Endpoint:") + gate.transport.rpc_url)
    click.echo(
        label("Chain:")
        + f"{status.chain_id}"
        + (f" ({remote.name})" if remote else click.style(" (unknown chain)", fg="yellow"))
    )
    click.echo(label("Block:") + str(block))

    if status.chain_id != gate.chain.chain_id:
        click.secho(
            f"  Warning: endpoint serves chain {status.chain_id}, "
            f"configured chain is {gate.chain.chain_id} ({gate.chain.name})",
            fg="yellow",
        )
