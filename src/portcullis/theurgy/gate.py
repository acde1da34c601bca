"""
Theurgy Gate - Evaluate token requirements for a wallet.

Each --require is CONTRACT[:MIN[:KIND]], MIN defaulting to 1 and KIND to
erc20. Modes:
- each: report every requirement (exit 0 only if all are granted)
- any:  exit 0 if at least one requirement is met
- all:  exit 0 if every requirement is met
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..gate.decision import AccessDecision, Denied, Granted, TokenKind, TokenRequirement
from .common import open_gate, rpc_options


class RequirementParam(click.ParamType):
    name = "requirement"

    def convert(self, value, param, ctx):  # type: ignore[override]
        if isinstance(value, TokenRequirement):
            return value
        parts = value.split(":")
        if not 1 <= len(parts) <= 3 or not parts[0]:
            self.fail(f"expected CONTRACT[:MIN[:KIND]], got {value!r}", param, ctx)
        try:
            min_balance = int(parts[1], 0) if len(parts) > 1 and parts[1] else 1
            kind = TokenKind(parts[2].lower()) if len(parts) > 2 else TokenKind.ERC20
            return TokenRequirement(parts[0], min_balance, kind)
        except ValueError as exc:
            self.fail(f"invalid requirement {value!r}: {exc}", param, ctx)


def _describe(decision: AccessDecision) -> str:
    if isinstance(decision, Granted):
        return (
            click.style("GRANTED", fg="green", bold=True)
            + f"  {decision.current} / {decision.required}"
        )
    if isinstance(decision, Denied):
        return (
            click.style("DENIED ", fg="yellow", bold=True)
            + f"  {decision.current} / {decision.required} (missing {decision.missing})"
        )
    return click.style("ERROR  ", fg="red", bold=True) + f"  {decision.cause}"


@click.command()
@click.option("--wallet", envvar="PORTCULLIS_WALLET", required=True, help="Wallet address to check")
@click.option(
    "--require",
    "requirements",
    type=RequirementParam(),
    multiple=True,
    required=True,
    help="CONTRACT[:MIN[:KIND]] (repeatable); KIND is erc20 or erc721",
)
@click.option(
    "--mode",
    type=click.Choice(["each", "any", "all"]),
    default="each",
    show_default=True,
    help="How to combine requirements",
)
@click.option("--deadline", type=float, default=None, help="Overall time limit in seconds")
@rpc_options
@click.pass_context
def gate(
    ctx: click.Context,
    wallet: str,
    requirements: tuple[TokenRequirement, ...],
    mode: str,
    deadline: Optional[float],
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """
    Check whether a wallet passes token requirements.

    \b
    Examples:
      portcullis gate --wallet 0x... --require 0xToken...:1000
      portcullis gate --wallet 0x... --mode any \\
          --require 0xToken...:1000 --require 0xNft...:1:erc721
    """
    with open_gate(ctx, rpc_url, chain_id, timeout) as handle:
        engine = handle.gating
        if mode == "any":
            passed = engine.check_access_any(wallet, requirements, deadline)
        elif mode == "all":
            passed = engine.check_access_all(wallet, requirements, deadline)
        else:
            report = engine.verify_access_all(wallet, requirements, deadline)
            for contract, decision in report.items():
                click.echo(f"  {contract}  " + _describe(decision))
            passed = all(decision.granted for decision in report.values())

    click.echo()
    if passed:
        click.secho(f"  Access granted ({mode})", fg="green", bold=True)
    else:
        click.secho(f"  Access denied ({mode})", fg="red", bold=True)
        sys.exit(1)
