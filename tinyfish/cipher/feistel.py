"""Sixteen-round Feistel engine over four 16-bit registers.

Encryption::

    r0..r3 = block ^ k0..k3
    for i in 0..15:
        f0, f1 = F(i, r0, r1)
        r0, r1, r2, r3 = ror1(r2 ^ f0), rol1(r3) ^ f1, r0, r1
    out = (r2 ^ k0, r3 ^ k1, r0 ^ k2, r1 ^ k3)

Decryption undoes the output whitening with the same register/key-word
pairing, then runs the inverse of each round from 15 down to 0 with the
forward subkeys, then removes the input whitening.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple

from .bits import MASK16, rotate_left, rotate_right
from .key_schedule import KeySchedule, SubkeySet
from .mixing import apply_round

Registers = Tuple[int, int, int, int]


class CipherMode(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


def whiten(block: Sequence[int], key_words: Sequence[int]) -> Registers:
    return tuple((w ^ k) & MASK16 for w, k in zip(block, key_words))  # type: ignore[return-value]


def forward_round(regs: Registers, subkeys: SubkeySet, substitution: bool = False) -> Registers:
    r0, r1, r2, r3 = regs
    f0, f1 = apply_round(r0, r1, subkeys, substitution)
    return rotate_right(r2 ^ f0, 1, 16), rotate_left(r3, 1, 16) ^ f1, r0, r1


def inverse_round(regs: Registers, subkeys: SubkeySet, substitution: bool = False) -> Registers:
    n0, n1, n2, n3 = regs
    # n2, n3 are the previous r0, r1, so F can be recomputed.
    f0, f1 = apply_round(n2, n3, subkeys, substitution)
    r2 = rotate_left(n0, 1, 16) ^ f0
    r3 = rotate_right(n1 ^ f1, 1, 16)
    return n2, n3, r2, r3


def encrypt_words(
    block: Sequence[int],
    key_words: Sequence[int],
    schedule: KeySchedule,
    substitution: bool = False,
) -> Registers:
    """Encrypt one block, drawing each round's subkeys from the schedule."""
    regs = whiten(block, key_words)
    for i in range(schedule.rounds):
        regs = forward_round(regs, schedule.next_round(i), substitution)
    r0, r1, r2, r3 = regs
    k0, k1, k2, k3 = key_words
    return r2 ^ k0, r3 ^ k1, r0 ^ k2, r1 ^ k3


def decrypt_words(
    block: Sequence[int],
    key_words: Sequence[int],
    schedule: KeySchedule,
    substitution: bool = False,
) -> Registers:
    """Decrypt one block.

    The schedule state only runs forward, so the whole block's subkeys are
    derived first and then consumed in reverse round order.
    """
    round_keys = schedule.block_schedule()
    c0, c1, c2, c3 = block
    k0, k1, k2, k3 = key_words
    regs: Registers = (c2 ^ k2, c3 ^ k3, c0 ^ k0, c1 ^ k1)
    for subkeys in reversed(round_keys):
        regs = inverse_round(regs, subkeys, substitution)
    return whiten(regs, key_words)
