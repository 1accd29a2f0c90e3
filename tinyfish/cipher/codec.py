"""Block codec: 8-byte chunks of a byte stream <-> four big-endian 16-bit words."""

from __future__ import annotations

from typing import BinaryIO, Iterator, Optional, Tuple

from .bits import bytes_to_words, words_to_bytes

BLOCK_SIZE = 8

Block = Tuple[int, int, int, int]


def pad_block(chunk: bytes) -> bytes:
    """Right-pad a short final chunk with zero bytes."""
    if len(chunk) > BLOCK_SIZE:
        raise ValueError(f"chunk longer than {BLOCK_SIZE} bytes")
    return chunk + b"\x00" * (BLOCK_SIZE - len(chunk))


def block_from_bytes(data: bytes) -> Block:
    if len(data) != BLOCK_SIZE:
        raise ValueError(f"Block must be exactly {BLOCK_SIZE} bytes")
    return tuple(bytes_to_words(data))  # type: ignore[return-value]


def block_to_bytes(block: Block) -> bytes:
    return words_to_bytes(block)


def read_block(source: BinaryIO) -> Optional[Block]:
    """Read the next block, or None at end of stream.

    Short reads are retried until 8 bytes arrive or the stream is exhausted;
    a final chunk of 1-7 bytes is zero-padded.
    """
    buf = b""
    while len(buf) < BLOCK_SIZE:
        chunk = source.read(BLOCK_SIZE - len(buf))
        if not chunk:
            break
        buf += chunk
    if not buf:
        return None
    return block_from_bytes(pad_block(buf))


def write_block(sink: BinaryIO, block: Block) -> int:
    """Append the block to the sink. Returns the number of bytes written."""
    data = block_to_bytes(block)
    sink.write(data)
    return len(data)


def iter_blocks(source: BinaryIO) -> Iterator[Block]:
    while True:
        block = read_block(source)
        if block is None:
            return
        yield block
