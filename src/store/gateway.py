"""Store gateway contract consumed by the ingest driver.

The driver depends only on this open/append/close surface, so any
versioned store honoring it can replace :class:`DeltaStore`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from core.constants import DEFAULT_WRITE_BATCH_SIZE
from core.types import VersionDelta
from store.delta_store import DeltaStore


class VersionStore(Protocol):
    """Exclusive handle on a versioned store."""

    def append(self, version: int, delta: VersionDelta) -> int:
        """Atomically commit a version delta and return the inserted count."""
        ...

    def close(self) -> None:
        """Release the handle; idempotent and never raises."""
        ...


def open_store(
    store_path: Path,
    read_only: bool = False,
    write_batch_size: int = DEFAULT_WRITE_BATCH_SIZE,
) -> VersionStore:
    """Open the versioned store at a path.

    Args:
        store_path: Store directory.
        read_only: Open without write access.
        write_batch_size: Entries per columnar write batch.

    Returns:
        Open store handle.

    Raises:
        StoreOpenError: If the store cannot be opened.
    """
    return DeltaStore.open(store_path, read_only=read_only, write_batch_size=write_batch_size)
