"""
Portcullis CLI

Command-line interface for on-chain token gating.

Read-only: nothing here signs or sends a transaction. Every command talks
to a JSON-RPC endpoint chosen by --rpc-url / --chain-id or the
PORTCULLIS_* environment (see ``portcullis.config``).

Commands:
  chain  - Probe the RPC endpoint
  token  - ERC-20 reads
  nft    - ERC-721 reads
  call   - Raw read-only contract call
  gate   - Evaluate token requirements for a wallet
  info   - Show configuration
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import CHAINS, PORTCULLIS_ENV, GateConfig
from .errors import ConfigError
from .theurgy.common import fail, label

# ============ Constants ============

VERSION = __version__


# ============ Banner ============


def _print_banner() -> None:
    click.echo()
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("P O R T C U L L I S", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.secho("    ─── On-chain token gating ───", fg="cyan")
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="portcullis")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output (including RPC traffic)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Portcullis - on-chain token gating."""
    ctx.ensure_object(dict)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.call import call
from .theurgy.chain import chain
from .theurgy.gate import gate
from .theurgy.nft import nft
from .theurgy.token import token

cli.add_command(chain)
cli.add_command(token)
cli.add_command(nft)
cli.add_command(call)
cli.add_command(gate)


# ============ Info ============


@cli.command()
def info() -> None:
    """Show the effective configuration."""
    try:
        config = GateConfig.from_env()
    except ConfigError as exc:
        fail(exc)

    _print_banner()
    click.secho("  Config ─────────────────────────────────", fg="cyan")
    click.echo()
    click.echo(label("Chain:") + f"{config.chain.name} ({config.chain.chain_id})")
    click.echo(label("RPC:") + config.effective_rpc_url)
    click.echo(label("Timeout:") + f"{config.request_timeout}s")
    click.echo(label("Workers:") + str(config.max_workers))
    click.echo(label("Env file:") + str(PORTCULLIS_ENV))
    click.echo()

    click.secho("  Chains ─────────────────────────────────", fg="cyan")
    click.echo()
    for known in CHAINS.values():
        click.echo(
            click.style("  ", dim=True)
            + click.style(f"{known.chain_id:<6}", fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="cyan")
            + click.style(f"{known.name}  {known.rpc_url}", dim=True)
        )
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Portcullis CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
