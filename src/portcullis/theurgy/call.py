"""
Theurgy Call - Raw read-only contract calls.

Escape hatch for signatures the token views do not cover. Arguments are
given as TYPE:VALUE pairs (address or uint256) and encoded in order.
"""

from __future__ import annotations

from typing import Optional

import click

from ..errors import EncodingError, PortcullisError
from ..pneuma import abi
from .common import fail, label, open_gate, rpc_options

_DECODERS = {
    "raw": lambda data: data,
    "uint256": lambda data: str(abi.decode_uint256(data)),
    "string": abi.decode_string,
    "address": abi.decode_address,
}


def encode_argument(argument: str) -> str:
    """Encode one ``address:0x...`` or ``uint256:123`` argument as an ABI word."""
    kind, sep, value = argument.partition(":")
    if not sep:
        raise EncodingError(f"Argument must be TYPE:VALUE, got {argument!r}")
    if kind == "address":
        return abi.encode_address(value)
    if kind == "uint256":
        try:
            number = int(value, 0)
        except ValueError as exc:
            raise EncodingError(f"Not an integer: {value!r}") from exc
        return abi.encode_uint256(number)
    raise EncodingError(f"Unsupported argument type {kind!r} (use address or uint256)")


@click.command()
@click.option("--contract", required=True, help="Target contract address")
@click.option("--signature", required=True, help='Canonical signature, e.g. "balanceOf(address)"')
@click.option("--arg", "args", multiple=True, help="Argument as TYPE:VALUE (repeatable)")
@click.option(
    "--decode",
    type=click.Choice(sorted(_DECODERS)),
    default="raw",
    show_default=True,
    help="How to decode the return data",
)
@rpc_options
@click.pass_context
def call(
    ctx: click.Context,
    contract: str,
    signature: str,
    args: tuple[str, ...],
    decode: str,
    rpc_url: Optional[str],
    chain_id: Optional[int],
    timeout: Optional[float],
) -> None:
    """
    Execute a read-only contract call (eth_call).

    \b
    Examples:
      portcullis call --contract 0xAbC... --signature "totalSupply()" --decode uint256
      portcullis call --contract 0xAbC... --signature "balanceOf(address)" \\
          --arg address:0xDeF... --decode uint256
    """
    with open_gate(ctx, rpc_url, chain_id, timeout) as gate:
        try:
            words = [encode_argument(argument) for argument in args]
            selector = abi.encode_selector(signature)
            result = _DECODERS[decode](gate.reader.call(contract, signature, *words))
        except PortcullisError as exc:
            fail(exc)

    click.echo(label("Target:") + contract)
    click.echo(label("Function:") + f"{signature}  [{selector}]")
    click.echo(label("Result:") + click.style(result, fg="bright_white"))
