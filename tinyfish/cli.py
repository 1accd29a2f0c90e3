"""Command line entry point.

Usage:
    tinyfish -e [-v] <text filepath> <key filepath> <output filepath>
    tinyfish -d [-v] <ciphertext filepath> <key filepath> <output filepath>

A missing key file is created with a fresh random 16-byte key. An existing
output file is never overwritten.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .cipher.feistel import CipherMode
from .config import RunConfig, load_settings
from .errors import ConfigurationError, TinyfishError
from .runner import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyfish",
        description="Encrypt or decrypt a file with the tinyfish block cipher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  tinyfish -e plain.txt secret.key cipher.bin\n"
            "  tinyfish -d -v cipher.bin secret.key plain.out\n"
        ),
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-e", dest="mode", action="store_const", const=CipherMode.ENCRYPT,
        help="Encryption mode",
    )
    mode.add_argument(
        "-d", dest="mode", action="store_const", const=CipherMode.DECRYPT,
        help="Decryption mode",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=None,
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--substitution", action="store_true", default=None,
        help="Route mixed bytes through the substitution table (not compatible with default ciphertext)",
    )
    parser.add_argument("input", help="Input file (plaintext or ciphertext)")
    parser.add_argument("key", help="Key file: 16 raw bytes, generated if missing")
    parser.add_argument("output", help="Output file, must not exist yet")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_config(argv: Optional[List[str]] = None) -> RunConfig:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    try:
        return RunConfig(
            mode=args.mode,
            verbose=settings.verbose if args.verbose is None else args.verbose,
            input_path=args.input,
            key_path=args.key,
            output_path=args.output,
            substitution=settings.substitution if args.substitution is None else args.substitution,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Incorrect command-line arguments: {exc}") from exc


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = parse_config(argv)
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format=load_settings().log_format,
    )

    try:
        summary = run(config)
    except TinyfishError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    logging.getLogger(__name__).debug(
        "%s wrote %d bytes to %s", summary.mode, summary.bytes_written, summary.output_path
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
