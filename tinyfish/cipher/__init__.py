"""Cipher core: key schedule, mixing and round functions, Feistel engine, block codec."""

from .engine import BlockCipher, CipherRun, TinyfishCipher, build_cipher
from .feistel import CipherMode
from .key_material import KeyMaterial, generate_key
from .key_schedule import KeySchedule, derive_subkeys
from .mixing import mix, round_function
from .spec import CipherSpec

__all__ = [
    "BlockCipher",
    "CipherRun",
    "TinyfishCipher",
    "build_cipher",
    "CipherMode",
    "KeyMaterial",
    "generate_key",
    "KeySchedule",
    "derive_subkeys",
    "mix",
    "round_function",
    "CipherSpec",
]
