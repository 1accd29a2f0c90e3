from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Tuple

from ..errors import KeyLengthError
from .bits import bytes_to_words, words_to_u64

KEY_SIZE = 16


def generate_key(key_size: int = KEY_SIZE) -> bytes:
    """Generate a cryptographically secure random key."""
    return secrets.token_bytes(key_size)


def derive_key_words(raw_key: bytes) -> Tuple[int, int, int, int]:
    """Fold a 16-byte key into four 16-bit words.

    Every byte pair is read big-endian; pair i and pair i+4 are XORed into
    word i.
    """
    pairs = bytes_to_words(raw_key)
    return tuple(pairs[i] ^ pairs[i + 4] for i in range(4))  # type: ignore[return-value]


@dataclass(frozen=True)
class KeyMaterial:
    """The secret key and its word decomposition for one cipher run."""
    raw_key: bytes
    words: Tuple[int, int, int, int] = field(init=False)

    def __post_init__(self):
        if len(self.raw_key) != KEY_SIZE:
            raise KeyLengthError(len(self.raw_key), KEY_SIZE)
        object.__setattr__(self, "raw_key", bytes(self.raw_key))
        object.__setattr__(self, "words", derive_key_words(self.raw_key))

    @classmethod
    def generate(cls) -> "KeyMaterial":
        return cls(generate_key())

    @property
    def initial_state(self) -> int:
        """Seed value of the 64-bit rotating key state."""
        return words_to_u64(self.words)

    def __repr__(self) -> str:
        return f"KeyMaterial(words={self.words!r})"
