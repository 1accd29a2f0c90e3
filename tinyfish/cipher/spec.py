from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class CipherSpec(BaseModel):
    """Parameters of the cipher.

    Block size, key size and round count are fixed; the model exists so the
    one real choice (routing bytes through the substitution table) is
    validated and carried around in a single place.
    """

    name: str = Field(default="tinyfish", min_length=3, max_length=80)
    block_size_bits: int = Field(default=64)
    key_size_bits: int = Field(default=128)
    rounds: int = Field(default=16)
    substitution: bool = Field(
        default=False,
        description="Pass both bytes of each mixed word through FTABLE",
    )

    version: str = Field(default="1.0")
    notes: str = Field(default="")

    @field_validator("block_size_bits")
    @classmethod
    def _block_size(cls, v: int) -> int:
        if v != 64:
            raise ValueError("block_size_bits must be 64")
        return v

    @field_validator("key_size_bits")
    @classmethod
    def _key_size(cls, v: int) -> int:
        if v != 128:
            raise ValueError("key_size_bits must be 128")
        return v

    @field_validator("rounds")
    @classmethod
    def _rounds(cls, v: int) -> int:
        if v != 16:
            raise ValueError("rounds must be 16")
        return v

    @property
    def block_bytes(self) -> int:
        return self.block_size_bits // 8

    @property
    def key_bytes(self) -> int:
        return self.key_size_bits // 8
