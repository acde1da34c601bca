"""
Sigil - Hashing and address identity for Portcullis.

Hand-written Keccak-256 (the pre-NIST variant Ethereum uses) plus the
address validation and EIP-55 checksum helpers built on it.
"""

from .address import (
    ADDRESS_PATTERN,
    is_valid_address,
    normalize_address,
    require_address,
    same_address,
    to_checksum_address,
)
from .keccak import keccak256, keccak256_hex

__all__ = [
    "ADDRESS_PATTERN",
    "is_valid_address",
    "keccak256",
    "keccak256_hex",
    "normalize_address",
    "require_address",
    "same_address",
    "to_checksum_address",
]
