"""Roundtrip verification: D(E(P, K), K) recovers P.

Two paths are exercised. Block vectors go through ``TinyfishCipher`` one
8-byte block at a time. Stream vectors are random-length messages pushed
through ``CipherRun`` in both directions; their decryption must equal the
message followed by the zero padding of its final block.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import io
import random
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..cipher.codec import BLOCK_SIZE, pad_block
from ..cipher.engine import BlockCipher, CipherRun, build_cipher
from ..cipher.feistel import CipherMode
from ..cipher.key_material import KeyMaterial
from ..cipher.spec import CipherSpec

MAX_STREAM_BYTES = 64


@dataclass
class RoundtripFailure:
    path: str                # "block" or "stream"
    vector_index: int
    plaintext_hex: str
    key_hex: str
    ciphertext_hex: str
    recovered_hex: str


@dataclass
class RoundtripResult:
    substitution: bool
    seed: int
    block_vectors: int
    stream_vectors: int
    failed: int = 0
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def total_vectors(self) -> int:
        return self.block_vectors + self.stream_vectors

    @property
    def passed(self) -> int:
        return self.total_vectors - self.failed

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["passed"] = self.passed
        d["success_rate"] = self.success_rate
        return d

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        sub = " +sbox" if self.substitution else ""
        return (
            f"[{status}] tinyfish{sub}: {self.passed}/{self.total_vectors} vectors "
            f"({self.block_vectors} block, {self.stream_vectors} stream) "
            f"in {self.elapsed_seconds:.2f}s"
        )


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def _run_stream(km: KeyMaterial, mode: CipherMode, spec: CipherSpec, data: bytes) -> bytes:
    sink = io.BytesIO()
    CipherRun(km, mode, spec).process_stream(io.BytesIO(data), sink)
    return sink.getvalue()


def _padded(message: bytes) -> bytes:
    tail = len(message) % BLOCK_SIZE
    return message if tail == 0 else message[:-tail] + pad_block(message[-tail:])


def run_roundtrip_tests(
    spec: Optional[CipherSpec] = None,
    *,
    num_vectors: int = 1000,
    stream_vectors: Optional[int] = None,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    cipher: Optional[BlockCipher] = None,
) -> RoundtripResult:
    """Check decryption against encryption on seeded random vectors.

    Args:
        spec: Cipher parameters; defaults to CipherSpec().
        num_vectors: Random (block, key) pairs for the single-block API.
        stream_vectors: Random messages for the stream path; a tenth of
            num_vectors when not given.
        seed: Seed for the vector generator.
        max_failures_recorded: Cap on the failure details kept.
        cipher: Optional prebuilt cipher; built from spec if not provided.
    """
    spec = spec or CipherSpec()
    cipher = cipher or build_cipher(spec)
    if stream_vectors is None:
        stream_vectors = num_vectors // 10

    rng = random.Random(seed)
    result = RoundtripResult(
        substitution=spec.substitution,
        seed=seed,
        block_vectors=num_vectors,
        stream_vectors=stream_vectors,
    )

    def record(path: str, i: int, pt: bytes, key: bytes, ct: bytes, out: bytes) -> None:
        result.failed += 1
        if len(result.failures) < max_failures_recorded:
            result.failures.append(
                RoundtripFailure(path, i, pt.hex(), key.hex(), ct.hex(), out.hex())
            )

    start = time.perf_counter()

    for i in range(num_vectors):
        pt = _rand_bytes(rng, spec.block_bytes)
        key = _rand_bytes(rng, spec.key_bytes)
        ct = cipher.encrypt_block(pt, key)
        out = cipher.decrypt_block(ct, key)
        if out != pt:
            record("block", i, pt, key, ct, out)

    for i in range(stream_vectors):
        message = _rand_bytes(rng, rng.randrange(MAX_STREAM_BYTES + 1))
        key = _rand_bytes(rng, spec.key_bytes)
        km = KeyMaterial(key)
        ct = _run_stream(km, CipherMode.ENCRYPT, spec, message)
        out = _run_stream(km, CipherMode.DECRYPT, spec, ct)
        if out != _padded(message):
            record("stream", i, message, key, ct, out)

    result.elapsed_seconds = round(time.perf_counter() - start, 4)
    return result
