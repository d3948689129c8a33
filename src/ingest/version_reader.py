"""Version delta construction from classified change files.

This module tags parsed triples with the polarity of their source
file. Deletion files are processed before addition files, one file at
a time, so entry order follows classifier order then parse order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from core.logging_config import get_logger
from core.types import DeltaEntry, FileClassification, Polarity
from ingest.file_classifier import classify_version_files
from ingest.triple_parser import parse_triples

_LOGGER = get_logger(__name__)


def iter_version_delta(classification: FileClassification) -> Iterator[DeltaEntry]:
    """Lazily yield the delta entries of one version.

    The sequence can only be restarted by calling this function again.

    Args:
        classification: Classified change files of the version.

    Yields:
        Delta entries, deletions first.

    Raises:
        IngestParseError: If any change file is malformed.
        DirectoryAccessError: If a change file cannot be read.
    """
    for file_path in classification.deletions:
        yield from _iter_file_entries(file_path, Polarity.DELETION)
    for file_path in classification.additions:
        yield from _iter_file_entries(file_path, Polarity.ADDITION)


def read_version_delta(base_dir: Path, deletion_marker: str) -> tuple[DeltaEntry, ...]:
    """Classify a version directory and materialize its full delta.

    Args:
        base_dir: Directory holding the version's change files.
        deletion_marker: Marker preceding the data suffix of deletion files.

    Returns:
        Complete ordered delta. Nothing is returned on failure.

    Raises:
        DirectoryAccessError: If the directory or a file cannot be read.
        IngestParseError: If any change file is malformed.
    """
    classification = classify_version_files(base_dir, deletion_marker)
    return tuple(iter_version_delta(classification))


def _iter_file_entries(file_path: Path, polarity: Polarity) -> Iterator[DeltaEntry]:
    entry_count = 0
    for triple in parse_triples(file_path):
        entry_count += 1
        yield DeltaEntry(triple=triple, polarity=polarity)
    _LOGGER.debug(
        "delta_file_parsed",
        file_path=str(file_path),
        polarity=polarity.value,
        entry_count=entry_count,
    )
