from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .cipher.feistel import CipherMode


class Settings(BaseModel):
    # Cipher
    substitution: bool = Field(default=False, description="Route mixed bytes through FTABLE")

    # Logging
    verbose: bool = Field(default=False)
    log_format: str = Field(default="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Evaluation / reproducibility
    global_seed: int = Field(default=1337)
    sac_trials: int = Field(default=200, ge=1)
    roundtrip_vectors: int = Field(default=1000, ge=1)

    # Paths
    runs_dir: str = Field(default="runs")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        substitution=_bool("TINYFISH_SUBSTITUTION", False),
        verbose=_bool("TINYFISH_VERBOSE", False),
        log_format=os.getenv("TINYFISH_LOG_FORMAT", Settings.model_fields["log_format"].default),
        global_seed=int(os.getenv("GLOBAL_SEED", "1337")),
        sac_trials=int(os.getenv("SAC_TRIALS", "200")),
        roundtrip_vectors=int(os.getenv("ROUNDTRIP_VECTORS", "1000")),
        runs_dir=os.getenv("RUNS_DIR", "runs"),
    )


class RunConfig(BaseModel, frozen=True):
    """Everything one command-line invocation needs, validated up front."""

    mode: CipherMode
    verbose: bool = False
    input_path: Path
    key_path: Path
    output_path: Path
    substitution: bool = False

    @field_validator("input_path", "key_path", "output_path")
    @classmethod
    def _non_empty(cls, v: Path) -> Path:
        if not str(v).strip() or str(v) == ".":
            raise ValueError("path must not be empty")
        return v
