"""Fixed-width integer helpers shared by the key schedule and the Feistel engine.

All arithmetic in the cipher is done on plain Python ints masked to the
relevant width (8, 16 or 64 bits).
"""

from __future__ import annotations

import struct
from typing import List, Sequence

MASK8 = 0xFF
MASK16 = 0xFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def rotate_left(x: int, r: int, w: int) -> int:
    """Rotate-left x by r bits in a w-bit word. Negative r rotates right."""
    mask = (1 << w) - 1
    r %= w
    x &= mask
    if r == 0:
        return x
    return ((x << r) & mask) | (x >> (w - r))


def rotate_right(x: int, r: int, w: int) -> int:
    """Rotate-right x by r bits in a w-bit word."""
    return rotate_left(x, -r, w)


def words_to_u64(words: Sequence[int]) -> int:
    """Concatenate four 16-bit words into one 64-bit integer (word0 high)."""
    if len(words) != 4:
        raise ValueError("words_to_u64 expects exactly 4 words")
    value = 0
    for w in words:
        value = (value << 16) | (w & MASK16)
    return value


def u64_to_words(value: int) -> List[int]:
    """Split a 64-bit integer into four 16-bit words (word0 high)."""
    value &= MASK64
    return [(value >> shift) & MASK16 for shift in (48, 32, 16, 0)]


def bytes_to_words(data: bytes) -> List[int]:
    """Parse big-endian 16-bit words. len(data) must be even."""
    if len(data) % 2:
        raise ValueError("bytes_to_words requires an even number of bytes")
    return list(struct.unpack(">" + "H" * (len(data) // 2), data))


def words_to_bytes(words: Sequence[int]) -> bytes:
    """Serialize 16-bit words big-endian."""
    return struct.pack(">" + "H" * len(words), *(w & MASK16 for w in words))
