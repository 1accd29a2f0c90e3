"""Key file storage: exactly 16 raw bytes, created on first use."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .cipher.key_material import KEY_SIZE, KeyMaterial, generate_key
from .errors import CipherIOError, KeyFileError, KeyLengthError

logger = logging.getLogger(__name__)


def load_key(path: Union[str, Path]) -> KeyMaterial:
    path = Path(path)
    if path.is_dir():
        raise KeyFileError(f"{path} is a directory, not a key file")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise KeyFileError(f"cannot read key file {path}: {exc}") from exc
    if len(raw) != KEY_SIZE:
        raise KeyLengthError(len(raw), KEY_SIZE, str(path))
    return KeyMaterial(raw)


def store_new_key(path: Union[str, Path]) -> KeyMaterial:
    path = Path(path)
    raw = generate_key(KEY_SIZE)
    try:
        with open(path, "xb") as f:
            f.write(raw)
    except OSError as exc:
        raise CipherIOError(f"cannot create key file {path}: {exc}") from exc
    logger.debug("Generated key of size %d", len(raw))
    logger.debug("Stored at file: %s", path)
    return KeyMaterial(raw)


def load_or_create_key(path: Union[str, Path]) -> KeyMaterial:
    """Load the key at path, generating and persisting one if it is missing."""
    path = Path(path)
    if not path.exists():
        logger.debug("%s does not exist", path)
        return store_new_key(path)
    return load_key(path)
