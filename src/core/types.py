"""Shared typed models.

This module defines immutable data models used by the classifier,
reader, store, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable


@dataclass(frozen=True)
class Triple:
    """One RDF statement with opaque term strings.

    Attributes:
        subject: Subject term in N-Triples notation.
        predicate: Predicate term in N-Triples notation.
        object: Object term in N-Triples notation.
        graph: Optional named graph term; ``None`` for the default graph.
    """

    subject: str
    predicate: str
    object: str
    graph: str | None = None


class Polarity(str, Enum):
    """Whether a delta entry adds or removes its triple."""

    ADDITION = "addition"
    DELETION = "deletion"


@dataclass(frozen=True)
class DeltaEntry:
    """A triple tagged with the polarity of its source file."""

    triple: Triple
    polarity: Polarity


VersionDelta = Iterable[DeltaEntry]


@dataclass(frozen=True)
class FileClassification:
    """Change files of one version directory split by polarity.

    Attributes:
        additions: Files whose triples are added, in listing order.
        deletions: Files whose triples are removed, in listing order.
    """

    additions: tuple[Path, ...]
    deletions: tuple[Path, ...]


@dataclass(frozen=True)
class IngestOptions:
    """Ingest command options.

    Attributes:
        store_path: Filesystem location of the versioned store.
        version: Version number the delta is appended as.
        base_dir: Directory containing the version's change files.
    """

    store_path: Path
    version: int
    base_dir: Path


@dataclass(frozen=True)
class IngestReport:
    """Result of one successful ingest invocation.

    Attributes:
        inserted_count: Number of delta entries the store accepted.
        elapsed_millis: Wall time from delta read start to append completion.
    """

    inserted_count: int
    elapsed_millis: float

    def to_output_line(self) -> str:
        """Render the machine-readable ``count,millis`` report line."""
        return f"{self.inserted_count},{self.elapsed_millis:.0f}"


@dataclass(frozen=True)
class VersionManifest:
    """Metadata recorded for each committed store version.

    Attributes:
        version: Version number.
        created_at: UTC commit timestamp.
        entry_count: Total delta entries written.
        addition_count: Entries tagged as additions.
        deletion_count: Entries tagged as deletions.
    """

    version: int
    created_at: datetime
    entry_count: int
    addition_count: int
    deletion_count: int
