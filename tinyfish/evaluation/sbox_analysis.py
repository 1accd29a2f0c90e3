"""Differential and linear profile of the substitution table.

FTABLE is only used when substitution is enabled, so this is the measure of
what that option adds to the mixing function. Smaller 4-bit tables are
accepted as well, which keeps the numbers easy to check against published
S-boxes.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..cipher.tables import FTABLE

# (good, fair) upper bounds per table size; anything above fair is "poor".
# LAT bounds are Walsh magnitudes: 8 is optimal for 4 bits, 32 for AES.
_DDT_BOUNDS = {16: (4, 6), 256: (4, 8)}
_LAT_BOUNDS = {16: (8, 12), 256: (32, 64)}


def _as_table(table: Sequence[int]) -> np.ndarray:
    arr = np.asarray(table, dtype=np.int64)
    if arr.size not in _DDT_BOUNDS:
        raise ValueError("table must have 16 or 256 entries")
    if arr.min() < 0 or arr.max() >= arr.size:
        raise ValueError(f"table entries must lie in 0..{arr.size - 1}")
    return arr


def ddt_max(table: Sequence[int]) -> int:
    """Largest difference distribution count over non-zero input differences."""
    s = _as_table(table)
    x = np.arange(s.size)
    return max(
        int(np.bincount(s ^ s[x ^ dx], minlength=s.size).max())
        for dx in range(1, s.size)
    )


def _parity_signs(n: int) -> np.ndarray:
    """(n, n) matrix of (-1)^popcount(a & x)."""
    a = np.arange(n, dtype=np.int64)
    masked = a[:, None] & a[None, :]
    parity = np.zeros_like(masked)
    while masked.any():
        parity ^= masked & 1
        masked >>= 1
    return 1 - 2 * parity


def lat_max_abs(table: Sequence[int]) -> int:
    """Largest |Walsh coefficient| over non-zero input and output masks."""
    s = _as_table(table)
    signs = _parity_signs(s.size)
    # walsh[a, b] = sum_x (-1)^(a.x) * (-1)^(b.S(x))
    walsh = signs @ signs[:, s].T
    return int(np.abs(walsh[1:, 1:]).max())


def is_bijective(table: Sequence[int]) -> bool:
    s = _as_table(table)
    return np.unique(s).size == s.size


def _rate(value: int, bounds: tuple) -> str:
    good, fair = bounds
    if value <= good:
        return "good"
    if value <= fair:
        return "fair"
    return "poor"


@dataclass
class SBoxAnalysisResult:
    table_id: str
    size: int
    ddt_max: int
    lat_max_abs: int
    bijective: bool
    differential_uniformity: str
    linearity: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        bij = "bijective" if self.bijective else "NOT bijective"
        return (
            f"{self.table_id} ({self.size} entries): "
            f"DDT max {self.ddt_max} ({self.differential_uniformity}), "
            f"LAT max {self.lat_max_abs} ({self.linearity}), {bij}"
        )


def analyze_sbox(
    table: Optional[Sequence[int]] = None,
    table_id: str = "ftable",
) -> SBoxAnalysisResult:
    """Profile a 16- or 256-entry table; FTABLE when none is given."""
    table = FTABLE if table is None else table
    size = len(table)
    ddt = ddt_max(table)
    lat = lat_max_abs(table)
    return SBoxAnalysisResult(
        table_id=table_id,
        size=size,
        ddt_max=ddt,
        lat_max_abs=lat,
        bijective=is_bijective(table),
        differential_uniformity=_rate(ddt, _DDT_BOUNDS[size]),
        linearity=_rate(lat, _LAT_BOUNDS[size]),
    )
