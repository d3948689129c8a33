"""Public SDK surface for delta ingest.

This module provides a stable import path for library users.
It re-exports the ingest entry points, store handle, and typed models.
"""

from __future__ import annotations

from core.config import IngestConfig
from core.errors import (
    DeltaIngestError,
    DirectoryAccessError,
    IngestParseError,
    StoreAppendError,
    StoreOpenError,
)
from core.types import (
    DeltaEntry,
    FileClassification,
    IngestOptions,
    IngestReport,
    Polarity,
    Triple,
    VersionManifest,
)
from ingest.file_classifier import classify_version_files
from ingest.pipeline import ingest_version
from ingest.report import parse_report_line
from ingest.version_reader import iter_version_delta, read_version_delta
from store.delta_store import DeltaStore
from store.gateway import VersionStore, open_store

__all__ = [
    "DeltaEntry",
    "DeltaIngestError",
    "DeltaStore",
    "DirectoryAccessError",
    "FileClassification",
    "IngestConfig",
    "IngestOptions",
    "IngestParseError",
    "IngestReport",
    "Polarity",
    "StoreAppendError",
    "StoreOpenError",
    "Triple",
    "VersionManifest",
    "VersionStore",
    "classify_version_files",
    "ingest_version",
    "iter_version_delta",
    "open_store",
    "parse_report_line",
    "read_version_delta",
]
