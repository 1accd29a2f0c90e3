"""CLI entry point for cipher evaluation.

Usage:
    python scripts/run_evaluation.py                          # default config
    python scripts/run_evaluation.py --substitution           # with FTABLE
    python scripts/run_evaluation.py --sac-trials 20 --quick  # smoke run

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from tinyfish.cipher.engine import build_cipher
from tinyfish.cipher.spec import CipherSpec
from tinyfish.config import load_settings
from tinyfish.evaluation import (
    EvaluationReport,
    analyze_sbox,
    compute_sac,
    mix_avalanche,
    run_roundtrip_tests,
)

logger = logging.getLogger("run_evaluation")


def _cli_progress(current: int, total: int) -> None:
    """Print progress to stderr every tenth of the trials."""
    if current % max(1, total // 10) == 0:
        pct = (current / total * 100) if total > 0 else 0
        print(f"  [{current + 1}/{total}] ({pct:.0f}%)", file=sys.stderr)


def main() -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="tinyfish evaluation - roundtrip, avalanche and substitution table analysis",
    )
    parser.add_argument(
        "--substitution", action="store_true", default=settings.substitution,
        help="Evaluate the configuration that routes bytes through FTABLE",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Random seed (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--sac-trials", type=int, default=settings.sac_trials,
        help=f"SAC trials (random block and key pairs) (default: {settings.sac_trials})",
    )
    parser.add_argument(
        "--roundtrip-vectors", type=int, default=settings.roundtrip_vectors,
        help=f"Roundtrip test vectors (default: {settings.roundtrip_vectors})",
    )
    parser.add_argument(
        "--quick", action="store_true",
        help="Skip the key SAC matrix and the substitution table analysis",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Output directory (default: {settings.runs_dir})",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=settings.log_format,
    )
    spec = CipherSpec(substitution=args.substitution)
    cipher = build_cipher(spec)
    report = EvaluationReport(substitution=spec.substitution)

    logger.info("Roundtrip: %d block vectors", args.roundtrip_vectors)
    report.roundtrip = run_roundtrip_tests(
        spec, num_vectors=args.roundtrip_vectors, seed=args.seed, cipher=cipher
    )

    input_types = ["plaintext"] if args.quick else ["plaintext", "key"]
    for input_type in input_types:
        logger.info("SAC (%s): %d trials", input_type, args.sac_trials)
        report.sac.append(compute_sac(
            spec,
            input_type=input_type,
            trials=args.sac_trials,
            seed=args.seed,
            cipher=cipher,
            progress_callback=_cli_progress,
        ))

    report.mix = mix_avalanche(seed=args.seed, substitution=spec.substitution)

    if not args.quick:
        logger.info("Analyzing substitution table")
        report.sbox = analyze_sbox()

    run_dir = report.save(args.output_dir)
    print(report.to_summary())
    print(f"\nAll results saved to: {run_dir}")
    return 1 if report.problems() else 0


if __name__ == "__main__":
    sys.exit(main())
