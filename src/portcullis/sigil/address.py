"""
Ethereum address helpers.

Addresses cross the wire as 0x-prefixed hex. Validation is purely
syntactic; EIP-55 checksums are produced but not enforced, since wallets
and explorers hand out lowercase addresses all the time.
"""

from __future__ import annotations

import re

from ..errors import InvalidAddress
from .keccak import keccak256

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_valid_address(value: object) -> bool:
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


def require_address(value: object) -> str:
    """Return ``value`` unchanged, or raise InvalidAddress."""
    if not is_valid_address(value):
        raise InvalidAddress(value)
    return value  # type: ignore[return-value]


def normalize_address(address: str) -> str:
    return address.lower()


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def to_checksum_address(address: str) -> str:
    """
    Apply the EIP-55 mixed-case checksum.

    Each hex letter is uppercased when the matching nibble of
    keccak256(lowercase hex body) is >= 8. Invalid input is returned as is.
    """
    if not is_valid_address(address):
        return address

    body = address[2:].lower()
    digest = keccak256(body.encode("ascii")).hex()

    return "0x" + "".join(
        char.upper() if char.isalpha() and int(digest[i], 16) >= 8 else char
        for i, char in enumerate(body)
    )
