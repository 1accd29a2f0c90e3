"""Exception hierarchy for the I/O, key storage and configuration layers.

The cipher core itself never raises on well-formed input.
"""

from __future__ import annotations

from typing import Optional


class TinyfishError(Exception):
    """Base class for every error surfaced to the command line."""


class ConfigurationError(TinyfishError):
    """Invalid or missing run configuration."""


class KeyFileError(TinyfishError):
    """The key file exists but cannot be used."""


class KeyLengthError(KeyFileError):
    def __init__(self, actual: int, expected: int = 16, path: Optional[str] = None):
        self.actual = actual
        self.expected = expected
        self.path = path
        where = f" ({path} holds {actual})" if path else f" (got {actual})"
        super().__init__(f"key size must be {expected} bytes{where}")


class CipherIOError(TinyfishError):
    """Reading the input or writing the output failed."""


class OutputExistsError(CipherIOError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Output file already exists at {path}. Delete it to run the cipher again."
        )
