"""File-level orchestration around the cipher core.

Owns the file handles (acquired and released with ``with`` blocks); the
cipher core only ever sees already-open binary streams.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

from .cipher.engine import CipherRun
from .cipher.spec import CipherSpec
from .config import RunConfig
from .errors import CipherIOError, OutputExistsError
from .keystore import load_or_create_key

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    mode: str
    input_path: str
    output_path: str
    blocks: int
    bytes_written: int
    key_words: tuple

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_paths(config: RunConfig) -> None:
    if not config.input_path.is_file():
        raise CipherIOError(f"cannot open input file {config.input_path}: no such file")
    if config.output_path.exists():
        raise OutputExistsError(str(config.output_path))


def run(config: RunConfig) -> RunSummary:
    """Encrypt or decrypt config.input_path into config.output_path.

    A partially written output is left in place if a write fails.
    """
    _check_paths(config)
    key = load_or_create_key(config.key_path)
    logger.debug("key words: %d %d %d %d", *key.words)

    cipher_run = CipherRun(key, config.mode, CipherSpec(substitution=config.substitution))
    try:
        with open(config.input_path, "rb") as src, open(config.output_path, "xb") as dst:
            blocks = cipher_run.process_stream(src, dst)
    except FileExistsError as exc:
        raise OutputExistsError(str(config.output_path)) from exc
    except OSError as exc:
        raise CipherIOError(f"{config.mode.value} failed: {exc}") from exc

    return RunSummary(
        mode=config.mode.value,
        input_path=str(config.input_path),
        output_path=str(config.output_path),
        blocks=blocks,
        bytes_written=blocks * cipher_run.spec.block_bytes,
        key_words=key.words,
    )
