"""Core constants used across delta ingest modules.

This module centralizes file naming conventions and store layout names.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

N_TRIPLES_SUFFIX = ".nt"
N_QUADS_SUFFIX = ".nq"
SUPPORTED_DATA_SUFFIXES = (N_TRIPLES_SUFFIX, N_QUADS_SUFFIX)
DEFAULT_DELETION_MARKER = "deleted"
DEFAULT_WRITE_BATCH_SIZE = 10_000
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TRUTHY_VALUES = ("1", "true", "yes", "on")
FALSY_VALUES = ("0", "false", "no", "off")
CATALOG_FILE_NAME = "catalog.json"
MANIFEST_FILE_NAME = "manifest.json"
VERSIONS_DIR_NAME = "versions"
STAGING_DIR_NAME = "staging"
DELTA_FILE_NAME = "delta.parquet"
LOCK_FILE_NAME = "store.lock"
