from __future__ import annotations

import re

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def is_hex(value: str) -> bool:
    return _HEX_RE.fullmatch(value) is not None


def to_quantity(value: int) -> str:
    """Render an int as a JSON-RPC hex quantity (``0x0``, ``0x1a``)."""
    if value < 0:
        raise ValueError(f"Quantity must be non-negative: {value}")
    return hex(value)


def parse_quantity(value: str) -> int:
    """Parse a 0x-prefixed JSON-RPC quantity. Raises ValueError if malformed."""
    if not isinstance(value, str) or value[:2] not in ("0x", "0X"):
        raise ValueError(f"Not a hex quantity: {value!r}")
    body = value[2:]
    if not body or not is_hex(body):
        raise ValueError(f"Not a hex quantity: {value!r}")
    return int(body, 16)


def block_parameter(block: "int | str") -> str:
    """Block tags pass through; block numbers become hex quantities."""
    if isinstance(block, bool):
        raise ValueError(f"Invalid block parameter: {block!r}")
    if isinstance(block, int):
        return to_quantity(block)
    return block
