"""Delta ingest exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations

from pathlib import Path


class DeltaIngestError(Exception):
    """Base exception for all delta ingest failures."""


class IngestConfigError(DeltaIngestError):
    """Raised for invalid runtime configuration."""


class DirectoryAccessError(DeltaIngestError):
    """Raised when a version directory or one of its files cannot be read."""

    def __init__(self, path: Path | str, detail: str) -> None:
        self.path = Path(path)
        self.detail = detail
        super().__init__(
            f"Failed to read {self.path}: {detail}. "
            "Check that the path exists and is readable, then rerun ingest."
        )


class IngestParseError(DeltaIngestError):
    """Raised for malformed triple serialization in a change file."""

    def __init__(self, file_path: Path | str, detail: str) -> None:
        self.file_path = Path(file_path)
        self.detail = detail
        super().__init__(
            f"Failed to parse triples in {self.file_path}: {detail}. "
            "Fix the serialization and rerun ingest for this version."
        )


class StoreError(DeltaIngestError):
    """Raised for versioned store failures."""


class StoreOpenError(StoreError):
    """Raised when the store cannot be opened."""

    def __init__(self, store_path: Path | str, detail: str) -> None:
        self.store_path = Path(store_path)
        self.detail = detail
        super().__init__(f"Failed to open store at {self.store_path}: {detail}.")


class StoreAppendError(StoreError):
    """Raised when the store rejects a version delta."""

    def __init__(self, store_path: Path | str, version: int, detail: str) -> None:
        self.store_path = Path(store_path)
        self.version = version
        self.detail = detail
        super().__init__(
            f"Failed to append version {version} to store at {self.store_path}: {detail}."
        )
