"""Avalanche measurements for tinyfish.

``compute_sac`` builds the full Strict Avalanche Criterion matrix: for every
input bit (plaintext or key) and every ciphertext bit, the fraction of
trials in which flipping the input bit flipped the output bit. Bits are
numbered big-endian, bit 0 being the top bit of byte 0.

``mix_avalanche`` checks the mixing function G on its own.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Optional

import numpy as np

from ..cipher.engine import BlockCipher, build_cipher
from ..cipher.mixing import mix
from ..cipher.spec import CipherSpec

INPUT_TYPES = ("plaintext", "key")


@dataclass
class SACResult:
    input_type: str
    trials: int
    substitution: bool
    # (input bits, ciphertext bits); 0.5 everywhere is ideal
    flip_probability: np.ndarray = field(repr=False)

    @property
    def num_input_bits(self) -> int:
        return int(self.flip_probability.shape[0])

    @property
    def per_input_bit(self) -> np.ndarray:
        """Mean fraction of ciphertext bits flipped by each input bit."""
        return self.flip_probability.mean(axis=1)

    @property
    def deviation(self) -> float:
        return float(np.abs(self.flip_probability - 0.5).mean())

    @property
    def worst_cell(self) -> float:
        return float(np.abs(self.flip_probability - 0.5).max())

    @property
    def passes_sac(self) -> bool:
        """Mean cell deviation under 0.05 and no input bit below 0.35."""
        return self.deviation < 0.05 and float(self.per_input_bit.min()) > 0.35

    def to_dict(self) -> Dict[str, Any]:
        per_bit = self.per_input_bit
        return {
            "input_type": self.input_type,
            "trials": self.trials,
            "substitution": self.substitution,
            "num_input_bits": self.num_input_bits,
            "mean": round(float(self.flip_probability.mean()), 6),
            "deviation": round(self.deviation, 6),
            "worst_cell": round(self.worst_cell, 6),
            "per_input_bit": [round(float(p), 6) for p in per_bit],
            "passes_sac": self.passes_sac,
        }

    def summary(self) -> str:
        status = "PASS" if self.passes_sac else "FAIL"
        per_bit = self.per_input_bit
        return (
            f"[{status}] SAC({self.input_type}, {self.trials} trials): "
            f"mean={self.flip_probability.mean():.4f}, deviation={self.deviation:.4f}, "
            f"worst cell={self.worst_cell:.4f}, "
            f"input bits {per_bit.min():.4f}..{per_bit.max():.4f}"
        )


def _bits(data: bytes) -> np.ndarray:
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8))


def compute_sac(
    spec: Optional[CipherSpec] = None,
    *,
    input_type: str = "plaintext",
    trials: int = 200,
    seed: int = 1337,
    cipher: Optional[BlockCipher] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> SACResult:
    """Measure the SAC matrix for plaintext or key bit flips.

    Each trial draws a random block and key, encrypts them, then re-encrypts
    once per input bit with that bit flipped and counts which ciphertext
    bits changed.

    Args:
        spec: Cipher parameters; defaults to CipherSpec().
        input_type: "plaintext" or "key".
        trials: Random (block, key) pairs to draw.
        seed: Seed for numpy's generator.
        cipher: Optional prebuilt cipher; built from spec if not provided.
        progress_callback: Optional callback(current_trial, trials).
    """
    if input_type not in INPUT_TYPES:
        raise ValueError(f"input_type must be 'plaintext' or 'key', got '{input_type}'")
    if trials < 1:
        raise ValueError("trials must be at least 1")
    spec = spec or CipherSpec()
    cipher = cipher or build_cipher(spec)

    in_bits = spec.block_size_bits if input_type == "plaintext" else spec.key_size_bits
    counts = np.zeros((in_bits, spec.block_size_bits), dtype=np.int64)
    rng = np.random.default_rng(seed)

    for t in range(trials):
        if progress_callback:
            progress_callback(t, trials)
        block = rng.integers(0, 256, size=spec.block_bytes, dtype=np.uint8)
        key = rng.integers(0, 256, size=spec.key_bytes, dtype=np.uint8)
        base = _bits(cipher.encrypt_block(block.tobytes(), key.tobytes()))
        target = block if input_type == "plaintext" else key
        for bit in range(in_bits):
            mask = 0x80 >> (bit % 8)
            target[bit // 8] ^= mask
            flipped = _bits(cipher.encrypt_block(block.tobytes(), key.tobytes()))
            target[bit // 8] ^= mask
            counts[bit] += flipped ^ base

    return SACResult(
        input_type=input_type,
        trials=trials,
        substitution=spec.substitution,
        flip_probability=counts / trials,
    )


@dataclass
class MixAvalancheResult:
    samples: int
    changed: int
    mean_flipped_bits: float

    @property
    def change_rate(self) -> float:
        return self.changed / self.samples if self.samples else 0.0

    @property
    def passes(self) -> bool:
        """More than half of single-bit input flips change the output."""
        return self.change_rate > 0.5

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["change_rate"] = self.change_rate
        d["passes"] = self.passes
        return d


def mix_avalanche(
    *,
    samples: int = 1000,
    seed: int = 1337,
    substitution: bool = False,
) -> MixAvalancheResult:
    """Flip one random bit of a random word, holding four random subkeys fixed."""
    rng = random.Random(seed)
    changed = 0
    flipped = 0
    for _ in range(samples):
        word = rng.randrange(0, 1 << 16)
        subkeys = [rng.randrange(0, 256) for _ in range(4)]
        before = mix(word, subkeys, substitution)
        after = mix(word ^ (1 << rng.randrange(16)), subkeys, substitution)
        diff = bin(before ^ after).count("1")
        flipped += diff
        if diff:
            changed += 1
    return MixAvalancheResult(
        samples=samples,
        changed=changed,
        mean_flipped_bits=flipped / samples if samples else 0.0,
    )
