"""
ABI Codec - Ethereum contract ABI for primitive getters.

Covers exactly what read-only token calls need: function selectors,
address/uint256 arguments, and uint256/address/string return values.
Tuples, arrays and dynamic arguments are out of scope.

Words are encoded and return data decoded with eth-abi; selectors come
from the in-house Keccak-256.

Conventions:
- An AbiWord is 64 lowercase hex characters without prefix (32 bytes).
- Calldata and return payloads are 0x-prefixed hex strings.
"""

from __future__ import annotations

import re

from eth_abi import decode, encode
from eth_abi import exceptions as abi_exceptions

from ..errors import AbiDecodingError, EncodingError
from ..sigil.keccak import keccak256
from ..utils import is_hex, strip_0x

WORD_HEX = 64
UINT256_MAX = (1 << 256) - 1

_SIGNATURE_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*\([A-Za-z0-9,\[\]()]*\)$")


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_selector(signature: str) -> str:
    """
    Function selector for a canonical signature.

    Args:
        signature: Canonical signature, e.g. "balanceOf(address)"

    Returns:
        0x-prefixed 4-byte selector, e.g. "0x70a08231"

    Raises:
        EncodingError: If the signature has whitespace or no argument list
    """
    if not isinstance(signature, str) or not _SIGNATURE_RE.fullmatch(signature):
        raise EncodingError(
            f"Not a canonical function signature: {signature!r} "
            f"(expected e.g. 'balanceOf(address)', no spaces)"
        )
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return "0x" + keccak256(signature.encode("utf-8"))[:4].hex()


def encode_address(address: str) -> str:
    """Left-pad a 20-byte address to one word."""
    body = strip_0x(address).lower() if isinstance(address, str) else ""
    if len(body) != 40 or not is_hex(body):
        raise EncodingError(f"Cannot encode address: {address!r}")
    # Lowercase so eth_abi does not enforce an EIP-55 checksum
    return _encode_word("address", "0x" + body)


def encode_uint256(value: int) -> str:
    """Encode an unsigned integer as one big-endian word."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"uint256 must be an int, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise EncodingError(f"uint256 out of range: {value}")
    return _encode_word("uint256", value)


def _encode_word(abi_type: str, value: object) -> str:
    try:
        return encode([abi_type], [value]).hex()
    except abi_exceptions.EncodingError as exc:
        raise EncodingError(f"Cannot encode {abi_type}: {exc}") from exc


def encode_call(signature: str, *words: str) -> str:
    """
    Build calldata: selector followed by pre-encoded static words.

    Args:
        signature: Canonical function signature
        *words: Arguments already encoded with encode_address/encode_uint256

    Returns:
        0x-prefixed calldata
    """
    selector = encode_selector(signature)
    body = []
    for position, word in enumerate(words):
        clean = strip_0x(word) if isinstance(word, str) else ""
        if len(clean) != WORD_HEX or not is_hex(clean):
            raise EncodingError(
                f"Argument {position} of {signature} is not a 32-byte word: {word!r}"
            )
        body.append(clean.lower())
    return selector + "".join(body)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _payload(data: str) -> str:
    if not isinstance(data, str):
        raise AbiDecodingError(f"Return data must be a hex string, got {type(data).__name__}")
    clean = strip_0x(data)
    if not is_hex(clean):
        raise AbiDecodingError(f"Return data is not hex: {data[:80]!r}")
    if len(clean) % 2:
        raise AbiDecodingError("Return data has an odd number of hex digits")
    return clean


def _first_word(clean: str, what: str) -> str:
    if len(clean) < WORD_HEX:
        raise AbiDecodingError(
            f"{what} needs {WORD_HEX} hex digits, got {len(clean)}"
        )
    return clean[:WORD_HEX]


def _decode_single(abi_type: str, clean: str):
    try:
        (value,) = decode([abi_type], bytes.fromhex(clean))
    except (abi_exceptions.DecodingError, UnicodeDecodeError, OverflowError) as exc:
        raise AbiDecodingError(f"Cannot decode {abi_type}: {exc}") from exc
    return value


def decode_uint256(data: str) -> int:
    """Decode a uint256 return value. Empty data ("0x") decodes to 0."""
    clean = _payload(data)
    if not clean:
        return 0
    return _decode_single("uint256", clean)


def decode_address(data: str) -> str:
    """Decode an address return value as a lowercase 0x address."""
    clean = _payload(data)
    return _decode_single("address", clean).lower()


def decode_string(data: str) -> str:
    """
    Decode a single dynamic ``string`` return value.

    Layout: head word holding the byte offset of the tail, then at that
    offset a length word ``n`` followed by ``n`` bytes of UTF-8, right-padded
    to a word boundary. The offset is honoured rather than assumed to be 32.
    """
    clean = _payload(data)
    if not clean:
        return ""

    # eth_abi seeks to any offset; misaligned or out-of-range heads are
    # rejected here first.
    offset = int(_first_word(clean, "string offset"), 16)
    if offset % 32:
        raise AbiDecodingError(f"String offset {offset} is not word-aligned")
    if len(clean) < offset * 2 + WORD_HEX:
        raise AbiDecodingError(
            f"String length word at byte {offset} lies past the end of the data"
        )

    return _decode_single("string", clean)
