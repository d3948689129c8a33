"""Ingest orchestration for one store version.

This module opens the store, builds the version delta from the change
files, appends it, and times the read-and-append span. The store
handle is released on every exit path.
"""

from __future__ import annotations

import time

from core.config import IngestConfig
from core.logging_config import get_logger
from core.types import IngestOptions, IngestReport, VersionDelta
from ingest.file_classifier import classify_version_files
from ingest.version_reader import iter_version_delta, read_version_delta
from store.gateway import open_store

_LOGGER = get_logger(__name__)


def ingest_version(options: IngestOptions, config: IngestConfig) -> IngestReport:
    """Append the change files of a directory to the store as one version.

    Args:
        options: Store path, version number, and change directory.
        config: Runtime configuration.

    Returns:
        Inserted entry count and elapsed milliseconds.

    Raises:
        StoreOpenError: If the store cannot be opened.
        DirectoryAccessError: If the change directory or a file is unreadable.
        IngestParseError: If a change file is malformed.
        StoreAppendError: If the store rejects the version.
    """
    _LOGGER.info(
        "ingest_started",
        store_path=str(options.store_path),
        version=options.version,
        base_dir=str(options.base_dir),
        streaming=config.streaming,
    )
    store = open_store(
        options.store_path, read_only=False, write_batch_size=config.write_batch_size
    )
    try:
        started_at = time.perf_counter()
        delta = _build_delta(options, config)
        inserted_count = store.append(options.version, delta)
        elapsed_millis = (time.perf_counter() - started_at) * 1000.0
    finally:
        store.close()
    report = IngestReport(inserted_count=inserted_count, elapsed_millis=elapsed_millis)
    _LOGGER.info(
        "ingest_completed",
        store_path=str(options.store_path),
        version=options.version,
        inserted_count=report.inserted_count,
        elapsed_millis=round(report.elapsed_millis, 3),
    )
    return report


def _build_delta(options: IngestOptions, config: IngestConfig) -> VersionDelta:
    """Classify the change files and build the delta in the configured mode.

    Classification is eager in both modes, so directory errors surface
    before the store sees the delta.
    """
    if not config.streaming:
        return read_version_delta(options.base_dir, config.deletion_marker)
    classification = classify_version_files(options.base_dir, config.deletion_marker)
    return iter_version_delta(classification)
