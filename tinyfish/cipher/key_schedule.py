"""Rotating-state key schedule.

A single 64-bit state, seeded from the four key words, is left-rotated by one
bit before each subkey byte is read. Twelve bytes are drawn per round, three
groups of four, each group indexed by ``4 * round + i``. The byte offset for
index n is ``n % 8``, so the same four offsets are read three times per round
against a state that keeps moving.

Sixteen rounds perform 192 rotations, a multiple of 64, so the state is back
at its seed value at the end of every block.
"""

from __future__ import annotations

from typing import List, Tuple

from .bits import MASK8, rotate_left

ROUNDS = 16
SUBKEYS_PER_ROUND = 12

SubkeySet = Tuple[int, ...]


def extract_subkey(state: int, index: int) -> Tuple[int, int]:
    """Rotate the state by one bit and read the byte selected by index.

    Returns (subkey, new_state).
    """
    state = rotate_left(state, 1, 64)
    return (state >> (8 * (index % 8))) & MASK8, state


def derive_subkeys(round_index: int, state: int) -> Tuple[SubkeySet, int]:
    """Derive the twelve 8-bit subkeys for one round.

    Pure function of (round_index, state): returns the subkeys and the
    state after the twelve rotations.
    """
    subkeys: List[int] = []
    for slot in range(SUBKEYS_PER_ROUND):
        k, state = extract_subkey(state, 4 * round_index + slot % 4)
        subkeys.append(k)
    return tuple(subkeys), state


class KeySchedule:
    """Owns the rotating key state for one cipher run."""

    def __init__(self, seed_state: int, rounds: int = ROUNDS):
        self._seed = seed_state
        self.rounds = rounds
        self.state = seed_state

    def next_round(self, round_index: int) -> SubkeySet:
        subkeys, self.state = derive_subkeys(round_index, self.state)
        return subkeys

    def block_schedule(self) -> List[SubkeySet]:
        """Subkeys for every round of one block, in forward round order.

        Advances the state exactly as ``rounds`` calls to next_round would.
        """
        return [self.next_round(r) for r in range(self.rounds)]

    def reset(self) -> None:
        self.state = self._seed

    def __repr__(self) -> str:
        return f"KeySchedule(rounds={self.rounds}, state=0x{self.state:016x})"
