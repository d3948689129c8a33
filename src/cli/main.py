"""delta-ingest CLI entry point.

This module maps the three positional arguments onto one ingest run.
stdout carries only the ``count,millis`` report line.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import IngestConfig
from core.errors import DeltaIngestError
from core.logging_config import configure_logging, get_logger
from core.types import IngestOptions
from ingest.pipeline import ingest_version
from ingest.report import emit_report

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="delta-ingest",
        description="Append a directory of RDF change files to a versioned store",
    )
    parser.add_argument("store_path", help="Filesystem location of the versioned store")
    parser.add_argument("version", type=parse_version, help="Non-negative version number")
    parser.add_argument("base_dir", help="Directory holding the version's change files")
    parser.add_argument(
        "--materialize",
        action="store_true",
        help="Read the whole delta into memory before appending",
    )
    parser.add_argument(
        "--deletion-marker",
        help="Override DELTA_INGEST_DELETION_MARKER for this command",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the delta-ingest CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        options = IngestOptions(
            store_path=Path(args.store_path),
            version=args.version,
            base_dir=Path(args.base_dir),
        )
        report = ingest_version(options, config)
    except DeltaIngestError as error:
        _LOGGER.error("ingest_failed", error_kind=type(error).__name__, error=str(error))
        print(f"{type(error).__name__}: {error}", file=sys.stderr)
        return 1
    emit_report(report, output=sys.stdout, diagnostics=sys.stderr)
    return 0


def parse_version(raw_value: str) -> int:
    """Parse a decimal, non-negative version argument.

    Raises:
        argparse.ArgumentTypeError: If the value is not a non-negative integer.
    """
    if not raw_value.strip().isdecimal():
        raise argparse.ArgumentTypeError(
            f"invalid version '{raw_value}': expected a non-negative decimal integer"
        )
    return int(raw_value)


def _build_config(args: argparse.Namespace) -> IngestConfig:
    config = IngestConfig.from_env()
    if args.materialize:
        config = replace(config, streaming=False)
    if args.deletion_marker:
        config = replace(config, deletion_marker=args.deletion_marker)
    return config
