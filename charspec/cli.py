"""
charspec/cli.py -- Command-line entry point for the declaration generator.

Usage::

    charspec-gen
    charspec-gen --out dist --verbose
    python -m charspec.cli --package charspec.types --probe-predicates
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from charspec.codegen import CodegenError, GeneratorConfig, generate
from charspec.codegen.generator import DEFAULT_OUT_DIR, DEFAULT_PACKAGE


def _setup_logging(verbose: bool) -> None:
    """Configure logging for command-line runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="charspec-gen",
        description="Generate TypeScript declarations from the character schemas",
    )
    parser.add_argument(
        "--package",
        default=DEFAULT_PACKAGE,
        help=f"Dotted name of the schema package to scan (default: {DEFAULT_PACKAGE})",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=DEFAULT_OUT_DIR,
        help=f"Output directory for the declarations (default: {DEFAULT_OUT_DIR})",
    )
    parser.add_argument(
        "--probe-predicates",
        action="store_true",
        help="Guess the type of custom predicates by calling them on sample values",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution details")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the generator; returns the process exit code."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    logger = logging.getLogger("charspec")

    config = GeneratorConfig(
        package=args.package,
        out_dir=args.out,
        probe_predicates=args.probe_predicates,
    )
    try:
        written = generate(config)
    except CodegenError as exc:
        logger.error("Type generation failed: %s", exc)
        return 1

    logger.info("Wrote %d file(s) to %s", len(written), config.out_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
