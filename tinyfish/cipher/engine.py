from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .codec import Block, block_from_bytes, block_to_bytes, iter_blocks, write_block
from .feistel import CipherMode, decrypt_words, encrypt_words
from .key_material import KeyMaterial
from .key_schedule import KeySchedule
from .spec import CipherSpec

logger = logging.getLogger(__name__)


class BlockCipher:
    def encrypt_block(self, plaintext_block: bytes, key: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError

    def decrypt_block(self, ciphertext_block: bytes, key: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


@dataclass
class TinyfishCipher(BlockCipher):
    """Single-block API: every call starts from the key's seed state."""
    spec: CipherSpec = field(default_factory=CipherSpec)

    def _check(self, block: bytes, key: bytes, what: str) -> None:
        bs = self.spec.block_bytes
        if len(block) != bs:
            raise ValueError(f"{what} block must be {bs} bytes")
        if len(key) != self.spec.key_bytes:
            raise ValueError(f"Key must be {self.spec.key_bytes} bytes")

    def encrypt_block(self, plaintext_block: bytes, key: bytes) -> bytes:
        self._check(plaintext_block, key, "Plaintext")
        km = KeyMaterial(key)
        schedule = KeySchedule(km.initial_state, self.spec.rounds)
        words = encrypt_words(block_from_bytes(plaintext_block), km.words, schedule, self.spec.substitution)
        return block_to_bytes(words)

    def decrypt_block(self, ciphertext_block: bytes, key: bytes) -> bytes:
        self._check(ciphertext_block, key, "Ciphertext")
        km = KeyMaterial(key)
        schedule = KeySchedule(km.initial_state, self.spec.rounds)
        words = decrypt_words(block_from_bytes(ciphertext_block), km.words, schedule, self.spec.substitution)
        return block_to_bytes(words)


class CipherRun:
    """One encrypt or decrypt pass over a stream.

    Owns the key material and the rotating key state, which carries from
    block to block for the lifetime of the run. Not safe to share between
    threads; parallel workers each need their own CipherRun.
    """

    def __init__(
        self,
        key_material: KeyMaterial,
        mode: CipherMode,
        spec: Optional[CipherSpec] = None,
    ):
        self.key_material = key_material
        self.mode = CipherMode(mode)
        self.spec = spec or CipherSpec()
        self.schedule = KeySchedule(key_material.initial_state, self.spec.rounds)
        self.blocks_processed = 0

    def process_block(self, block: Block) -> Block:
        words = self.key_material.words
        if self.mode is CipherMode.ENCRYPT:
            out = encrypt_words(block, words, self.schedule, self.spec.substitution)
        else:
            out = decrypt_words(block, words, self.schedule, self.spec.substitution)
        self.blocks_processed += 1
        return out

    def process_stream(self, source: BinaryIO, sink: BinaryIO) -> int:
        """Transform every block of source into sink. Returns blocks written."""
        written = 0
        for block in iter_blocks(source):
            n = write_block(sink, self.process_block(block))
            written += 1
            logger.debug("Wrote %d bytes to output file", n)
        logger.info("%s: %d block(s) processed", self.mode.value, written)
        return written


def build_cipher(spec: Optional[CipherSpec] = None) -> BlockCipher:
    return TinyfishCipher(spec=spec or CipherSpec())
