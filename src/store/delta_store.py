"""Versioned delta store.

This module persists one immutable delta per version number, together
with a catalog of version manifests. Appends are staged and committed
by rename, so a failed append leaves no trace of the version.
"""

from __future__ import annotations

import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

import pyarrow as pa

from core.constants import DEFAULT_WRITE_BATCH_SIZE, STAGING_DIR_NAME, VERSIONS_DIR_NAME
from core.errors import DeltaIngestError, StoreAppendError, StoreError, StoreOpenError
from core.logging_config import get_logger
from core.types import DeltaEntry, VersionDelta, VersionManifest
from store.catalog_io import read_catalog, write_catalog, write_manifest_file
from store.delta_payload import read_delta_payload, write_delta_payload
from store.store_lock import acquire_store_lock, release_store_lock

_LOGGER = get_logger(__name__)


class DeltaStore:
    """Handle on a versioned delta store directory.

    Read-write handles hold an exclusive lock until :meth:`close`.
    Use :meth:`open` rather than the constructor.
    """

    def __init__(
        self,
        store_root: Path,
        read_only: bool,
        manifests: list[VersionManifest],
        lock_path: Path | None,
        write_batch_size: int,
    ) -> None:
        self._store_root = store_root
        self._read_only = read_only
        self._manifests = manifests
        self._lock_path = lock_path
        self._write_batch_size = write_batch_size
        self._closed = False

    @classmethod
    def open(
        cls,
        store_path: Path,
        read_only: bool = False,
        write_batch_size: int = DEFAULT_WRITE_BATCH_SIZE,
    ) -> "DeltaStore":
        """Open a store, creating it when opened read-write.

        Args:
            store_path: Store directory.
            read_only: Open without the writer lock; appends are rejected.
            write_batch_size: Entries per columnar write batch.

        Returns:
            Open store handle.

        Raises:
            StoreOpenError: If the path is invalid, locked, or corrupt.
        """
        store_root = Path(store_path).expanduser().resolve()
        if read_only:
            if not store_root.is_dir():
                raise StoreOpenError(store_root, "store does not exist")
            return cls(store_root, True, read_catalog(store_root), None, write_batch_size)
        try:
            store_root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise StoreOpenError(store_root, f"cannot create store directory: {error}") from error
        lock_path = acquire_store_lock(store_root)
        try:
            manifests = read_catalog(store_root)
        except StoreOpenError:
            release_store_lock(lock_path)
            raise
        shutil.rmtree(store_root / STAGING_DIR_NAME, ignore_errors=True)
        _discard_uncatalogued_versions(store_root, manifests)
        _LOGGER.info(
            "store_opened",
            store_path=str(store_root),
            version_count=len(manifests),
            latest_version=manifests[-1].version if manifests else None,
        )
        return cls(store_root, False, manifests, lock_path, write_batch_size)

    @property
    def store_path(self) -> Path:
        return self._store_root

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def latest_version(self) -> int | None:
        return self._manifests[-1].version if self._manifests else None

    def append(self, version: int, delta: VersionDelta) -> int:
        """Commit the delta of one version.

        The delta is consumed lazily. Errors raised while producing it
        propagate unchanged and nothing is committed.

        Args:
            version: Version number, greater than any committed version.
            delta: Delta entries for the version.

        Returns:
            Number of entries written.

        Raises:
            StoreAppendError: If the store rejects the version or cannot
                persist it.
        """
        self._check_appendable(version)
        staging_dir = self._store_root / STAGING_DIR_NAME / str(version)
        shutil.rmtree(staging_dir, ignore_errors=True)
        try:
            staging_dir.mkdir(parents=True)
            summary = write_delta_payload(staging_dir, delta, self._write_batch_size)
        except DeltaIngestError:
            shutil.rmtree(staging_dir, ignore_errors=True)
            raise
        except (OSError, pa.ArrowException) as error:
            shutil.rmtree(staging_dir, ignore_errors=True)
            raise StoreAppendError(self._store_root, version, f"write failed: {error}") from error
        manifest = VersionManifest(
            version=version,
            created_at=datetime.now(timezone.utc),
            entry_count=summary.entry_count,
            addition_count=summary.addition_count,
            deletion_count=summary.deletion_count,
        )
        self._commit(staging_dir, manifest)
        _LOGGER.info(
            "version_appended",
            store_path=str(self._store_root),
            version=version,
            entry_count=manifest.entry_count,
            addition_count=manifest.addition_count,
            deletion_count=manifest.deletion_count,
        )
        return manifest.entry_count

    def list_versions(self) -> list[VersionManifest]:
        """Return committed version manifests in version order."""
        return list(self._manifests)

    def read_delta(self, version: int) -> list[DeltaEntry]:
        """Load the committed delta of a version.

        Raises:
            StoreError: If the version was never committed.
        """
        if all(manifest.version != version for manifest in self._manifests):
            raise StoreError(
                f"Version {version} not found in store at {self._store_root}. "
                "Use list_versions to discover committed versions."
            )
        return read_delta_payload(self._version_dir(version))

    def close(self) -> None:
        """Release the handle. Safe to call repeatedly; never raises."""
        if self._closed:
            return
        self._closed = True
        if self._lock_path is not None:
            try:
                release_store_lock(self._lock_path)
            except OSError as error:
                _LOGGER.warning(
                    "store_lock_release_failed",
                    store_path=str(self._store_root),
                    error=str(error),
                )
        _LOGGER.info("store_closed", store_path=str(self._store_root))

    def __enter__(self) -> "DeltaStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _check_appendable(self, version: int) -> None:
        if self._closed:
            raise StoreAppendError(self._store_root, version, "store handle is closed")
        if self._read_only:
            raise StoreAppendError(self._store_root, version, "store was opened read-only")
        if version < 0:
            raise StoreAppendError(self._store_root, version, "version must be non-negative")
        latest = self.latest_version
        if latest is None:
            return
        if any(manifest.version == version for manifest in self._manifests):
            raise StoreAppendError(self._store_root, version, "version already exists")
        if version < latest:
            raise StoreAppendError(
                self._store_root,
                version,
                f"version is out of sequence; latest committed version is {latest}",
            )

    def _commit(self, staging_dir: Path, manifest: VersionManifest) -> None:
        """Publish a staged version and record it in the catalog."""
        version_dir = self._version_dir(manifest.version)
        manifests = self._manifests + [manifest]
        try:
            write_manifest_file(staging_dir, manifest)
            version_dir.parent.mkdir(parents=True, exist_ok=True)
            if version_dir.exists():
                shutil.rmtree(version_dir)
            os.replace(staging_dir, version_dir)
        except OSError as error:
            shutil.rmtree(staging_dir, ignore_errors=True)
            raise StoreAppendError(
                self._store_root, manifest.version, f"commit failed: {error}"
            ) from error
        try:
            write_catalog(self._store_root, manifests)
        except OSError as error:
            shutil.rmtree(version_dir, ignore_errors=True)
            raise StoreAppendError(
                self._store_root, manifest.version, f"catalog update failed: {error}"
            ) from error
        self._manifests = manifests

    def _version_dir(self, version: int) -> Path:
        return self._store_root / VERSIONS_DIR_NAME / str(version)


def _discard_uncatalogued_versions(
    store_root: Path, manifests: list[VersionManifest]
) -> None:
    """Remove version directories left by a commit interrupted before its catalog write."""
    versions_root = store_root / VERSIONS_DIR_NAME
    if not versions_root.is_dir():
        return
    catalogued = {str(manifest.version) for manifest in manifests}
    for version_dir in versions_root.iterdir():
        if version_dir.name in catalogued or not version_dir.is_dir():
            continue
        shutil.rmtree(version_dir, ignore_errors=True)
        _LOGGER.warning(
            "uncatalogued_version_discarded",
            store_path=str(store_root),
            version_dir=str(version_dir),
        )
