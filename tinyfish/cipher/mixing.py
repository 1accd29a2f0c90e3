"""Mixing function G and round function F."""

from __future__ import annotations

from typing import Sequence, Tuple

from .bits import MASK8, MASK16
from .key_schedule import KeySchedule
from .tables import FTABLE


def mix(word: int, subkeys: Sequence[int], substitution: bool = False) -> int:
    """G: diffuse the two bytes of a 16-bit word with four subkey bytes.

    a = l ^ k0 ^ h, b = a ^ k1 ^ l, c = b ^ k2 ^ a, d = c ^ k3 ^ b,
    result = c:d. With ``substitution`` both bytes go through FTABLE first.
    """
    h = (word >> 8) & MASK8
    l = word & MASK8
    if substitution:
        h = FTABLE[h]
        l = FTABLE[l]
    a = l ^ subkeys[0] ^ h
    b = a ^ subkeys[1] ^ l
    c = b ^ subkeys[2] ^ a
    d = c ^ subkeys[3] ^ b
    return ((c & MASK8) << 8) | (d & MASK8)


def apply_round(
    r0: int, r1: int, subkeys: Sequence[int], substitution: bool = False
) -> Tuple[int, int]:
    """F for one round given its twelve subkeys. Returns (f0, f1)."""
    if len(subkeys) != 12:
        raise ValueError(f"a round needs 12 subkeys, got {len(subkeys)}")
    t0 = mix(r0, subkeys[0:4], substitution)
    t1 = mix(r1, subkeys[4:8], substitution)
    t3 = (subkeys[8] << 8) | subkeys[9]
    t4 = (subkeys[10] << 8) | subkeys[11]
    f0 = (t0 + 2 * t1 + t3) & MASK16
    f1 = (2 * t0 + t1 + t4) & MASK16
    return f0, f1


def round_function(
    round_index: int,
    r0: int,
    r1: int,
    schedule: KeySchedule,
    substitution: bool = False,
) -> Tuple[int, int]:
    """F: draw this round's subkeys from the schedule and mix r0, r1."""
    return apply_round(r0, r1, schedule.next_round(round_index), substitution)
