"""Deterministic cipher evaluation: roundtrips over both cipher paths, SAC
matrices, the mixing function on its own, and the substitution table profile.

Research / education only. Do NOT use in production.
"""

from .roundtrip import RoundtripResult, RoundtripFailure, run_roundtrip_tests
from .avalanche import SACResult, MixAvalancheResult, compute_sac, mix_avalanche
from .sbox_analysis import SBoxAnalysisResult, analyze_sbox, ddt_max, lat_max_abs
from .report import EvaluationReport

__all__ = [
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "SACResult",
    "MixAvalancheResult",
    "compute_sac",
    "mix_avalanche",
    "SBoxAnalysisResult",
    "analyze_sbox",
    "ddt_max",
    "lat_max_abs",
    "EvaluationReport",
]
