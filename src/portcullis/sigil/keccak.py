"""
Keccak-256 for selector and checksum derivation.

This is the original Keccak submission as used by Ethereum, NOT the NIST
SHA3-256 that ships in ``hashlib``. The only difference is the padding byte
(0x01 here, 0x06 in SHA3), which is enough to make every digest differ.

Pure Python: 25 lanes of 64 bits held as ints, rate 136 bytes.
"""

from __future__ import annotations

_RATE = 136  # (1600 - 2 * 256) / 8
_DIGEST_SIZE = 32
_ROUNDS = 24
_MASK = (1 << 64) - 1

_ROUND_CONSTANTS = (
    0x0000000000000001, 0x0000000000008082, 0x800000000000808A,
    0x8000000080008000, 0x000000000000808B, 0x0000000080000001,
    0x8000000080008081, 0x8000000000008009, 0x000000000000008A,
    0x0000000000000088, 0x0000000080008009, 0x000000008000000A,
    0x000000008000808B, 0x800000000000008B, 0x8000000000008089,
    0x8000000000008003, 0x8000000000008002, 0x8000000000000080,
    0x000000000000800A, 0x800000008000000A, 0x8000000080008081,
    0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
)

# Rotation offset for lane (x, y), stored at index x + 5 * y.
_ROTATIONS = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)

# pi: lane (x, y) moves to (y, 2x + 3y mod 5).
_PI_TARGET = tuple(
    y + 5 * ((2 * x + 3 * y) % 5) for y in range(5) for x in range(5)
)


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & _MASK


def _keccak_f(state: list[int]) -> None:
    """Apply Keccak-f[1600] to ``state`` in place."""
    for round_constant in _ROUND_CONSTANTS:
        # theta
        columns = [
            state[x] ^ state[x + 5] ^ state[x + 10] ^ state[x + 15] ^ state[x + 20]
            for x in range(5)
        ]
        for x in range(5):
            d = columns[(x - 1) % 5] ^ _rotl(columns[(x + 1) % 5], 1)
            for y in range(0, 25, 5):
                state[x + y] ^= d

        # rho + pi
        moved = [0] * 25
        for index in range(25):
            moved[_PI_TARGET[index]] = _rotl(state[index], _ROTATIONS[index])

        # chi
        for y in range(0, 25, 5):
            row = moved[y:y + 5]
            for x in range(5):
                state[x + y] = row[x] ^ ((row[(x + 1) % 5] ^ _MASK) & row[(x + 2) % 5])

        # iota
        state[0] ^= round_constant


def _pad(data: bytes) -> bytearray:
    padded = bytearray(data)
    padded.append(0x01)
    padded.extend(b"\x00" * (-len(padded) % _RATE))
    padded[-1] |= 0x80
    return padded


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 digest of ``data``.

    Args:
        data: Input bytes (any length, including empty)

    Returns:
        32-byte digest

    Raises:
        TypeError: If ``data`` is a str (encode it first)
    """
    if isinstance(data, str):
        raise TypeError("keccak256() takes bytes; encode text first")

    state = [0] * 25
    padded = _pad(bytes(data))

    for offset in range(0, len(padded), _RATE):
        block = padded[offset:offset + _RATE]
        for lane in range(_RATE // 8):
            state[lane] ^= int.from_bytes(block[lane * 8:lane * 8 + 8], "little")
        _keccak_f(state)

    return b"".join(
        lane.to_bytes(8, "little") for lane in state[:_DIGEST_SIZE // 8]
    )


def keccak256_hex(data: bytes) -> str:
    """Keccak-256 digest as a 0x-prefixed hex string."""
    return "0x" + keccak256(data).hex()
