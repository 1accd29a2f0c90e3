import io

import pytest

from tinyfish.cipher.codec import (
    block_from_bytes,
    block_to_bytes,
    iter_blocks,
    pad_block,
    read_block,
    write_block,
)


class TrickleReader(io.RawIOBase):
    """Returns at most three bytes per read call."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, n=-1):
        return self._buf.read(min(n, 3) if n and n > 0 else 3)


def test_short_final_chunk_is_zero_padded():
    assert pad_block(b"ABCDE") == bytes.fromhex("4142434445000000")
    block = read_block(io.BytesIO(b"ABCDE"))
    assert block == (0x4142, 0x4344, 0x4500, 0x0000)


def test_empty_stream_is_end_of_stream():
    assert read_block(io.BytesIO(b"")) is None
    assert list(iter_blocks(io.BytesIO(b""))) == []


def test_reads_consecutive_blocks():
    src = io.BytesIO(bytes(range(16)) + b"\xff")
    assert read_block(src) == (0x0001, 0x0203, 0x0405, 0x0607)
    assert read_block(src) == (0x0809, 0x0A0B, 0x0C0D, 0x0E0F)
    assert read_block(src) == (0xFF00, 0, 0, 0)
    assert read_block(src) is None


def test_short_reads_are_accumulated():
    blocks = list(iter_blocks(TrickleReader(bytes(range(10)))))
    assert blocks == [(0x0001, 0x0203, 0x0405, 0x0607), (0x0809, 0, 0, 0)]


def test_write_block_big_endian():
    sink = io.BytesIO()
    assert write_block(sink, (0x0102, 0x0304, 0xA0B0, 0xFFFF)) == 8
    assert sink.getvalue() == bytes.fromhex("01020304a0b0ffff")


def test_block_bytes_conversion():
    assert block_to_bytes(block_from_bytes(b"tinyfish")) == b"tinyfish"
    with pytest.raises(ValueError):
        block_from_bytes(b"short")
    with pytest.raises(ValueError):
        pad_block(b"123456789")
