"""Columnar delta payload persistence.

This module writes version delta entries to Parquet in bounded
batches, so memory use does not grow with the size of a version.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterator

import pyarrow as pa
import pyarrow.parquet as pq

from core.constants import DELTA_FILE_NAME
from core.types import DeltaEntry, Polarity, Triple, VersionDelta

DELTA_SCHEMA = pa.schema(
    [
        ("subject", pa.string()),
        ("predicate", pa.string()),
        ("object", pa.string()),
        ("graph", pa.string()),
        ("polarity", pa.string()),
    ]
)


@dataclass(frozen=True)
class DeltaWriteSummary:
    """Entry counts of a written delta payload."""

    addition_count: int
    deletion_count: int

    @property
    def entry_count(self) -> int:
        return self.addition_count + self.deletion_count


def write_delta_payload(
    version_dir: Path, entries: VersionDelta, batch_size: int
) -> DeltaWriteSummary:
    """Consume delta entries and persist them as one Parquet file.

    Errors raised while producing ``entries`` propagate unchanged; the
    caller is responsible for discarding the partial file.

    Args:
        version_dir: Directory receiving the payload file.
        entries: Delta entries, consumed exactly once.
        batch_size: Entries buffered per written row group.

    Returns:
        Counts of written additions and deletions.
    """
    addition_count = 0
    deletion_count = 0
    writer = pq.ParquetWriter(str(version_dir / DELTA_FILE_NAME), DELTA_SCHEMA)
    try:
        for batch in _iter_batches(entries, batch_size):
            writer.write_table(_table_from_entries(batch))
            batch_additions = sum(1 for entry in batch if entry.polarity is Polarity.ADDITION)
            addition_count += batch_additions
            deletion_count += len(batch) - batch_additions
        if addition_count + deletion_count == 0:
            writer.write_table(DELTA_SCHEMA.empty_table())
    finally:
        writer.close()
    return DeltaWriteSummary(addition_count=addition_count, deletion_count=deletion_count)


def read_delta_payload(version_dir: Path) -> list[DeltaEntry]:
    """Load delta entries of a committed version in written order.

    Args:
        version_dir: Committed version directory.

    Returns:
        Persisted delta entries.
    """
    table = pq.read_table(str(version_dir / DELTA_FILE_NAME))
    return [
        DeltaEntry(
            triple=Triple(
                subject=row["subject"],
                predicate=row["predicate"],
                object=row["object"],
                graph=row["graph"],
            ),
            polarity=Polarity(row["polarity"]),
        )
        for row in table.to_pylist()
    ]


def _iter_batches(entries: VersionDelta, batch_size: int) -> Iterator[list[DeltaEntry]]:
    iterator = iter(entries)
    while True:
        batch = list(islice(iterator, batch_size))
        if not batch:
            return
        yield batch


def _table_from_entries(entries: list[DeltaEntry]) -> pa.Table:
    return pa.Table.from_pydict(
        {
            "subject": [entry.triple.subject for entry in entries],
            "predicate": [entry.triple.predicate for entry in entries],
            "object": [entry.triple.object for entry in entries],
            "graph": [entry.triple.graph for entry in entries],
            "polarity": [entry.polarity.value for entry in entries],
        },
        schema=DELTA_SCHEMA,
    )
