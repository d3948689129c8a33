"""delta-versions CLI entry point.

Lists the committed versions of a store without taking the writer lock.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from core.errors import StoreOpenError
from store.delta_store import DeltaStore


def build_parser() -> argparse.ArgumentParser:
    """Build the versions CLI parser."""
    parser = argparse.ArgumentParser(
        prog="delta-versions",
        description="List the versions committed to a delta store",
    )
    parser.add_argument("store_path", help="Filesystem location of the versioned store")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Print one tab-separated line per committed version.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    try:
        store = DeltaStore.open(Path(args.store_path), read_only=True)
    except StoreOpenError as error:
        print(f"{type(error).__name__}: {error}", file=sys.stderr)
        return 1
    with store:
        for manifest in store.list_versions():
            print(
                f"{manifest.version}\t"
                f"{manifest.entry_count}\t"
                f"{manifest.addition_count}\t"
                f"{manifest.deletion_count}\t"
                f"{manifest.created_at.isoformat()}"
            )
    return 0
