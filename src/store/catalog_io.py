"""Catalog and manifest persistence helpers.

This module isolates JSON catalog IO for the delta store.
It keeps store orchestration focused on the append flow.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from core.constants import CATALOG_FILE_NAME, MANIFEST_FILE_NAME
from core.errors import StoreOpenError
from core.types import VersionManifest


def read_catalog(store_root: Path) -> list[VersionManifest]:
    """Read committed version manifests in version order.

    Args:
        store_root: Store directory.

    Returns:
        Manifests sorted by version; empty for a new store.

    Raises:
        StoreOpenError: If the catalog is unreadable or invalid.
    """
    catalog_path = store_root / CATALOG_FILE_NAME
    if not catalog_path.exists():
        return []
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise StoreOpenError(store_root, f"cannot read {CATALOG_FILE_NAME}: {error}") from error
    except json.JSONDecodeError as error:
        raise StoreOpenError(
            store_root, f"corrupt {CATALOG_FILE_NAME}: {error.msg} at line {error.lineno}"
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise StoreOpenError(
            store_root, f"corrupt {CATALOG_FILE_NAME}: expected an object with a versions list"
        )
    try:
        manifests = [manifest_from_dict(item) for item in payload["versions"]]
    except (KeyError, TypeError, ValueError) as error:
        raise StoreOpenError(
            store_root, f"corrupt {CATALOG_FILE_NAME}: invalid version entry ({error})"
        ) from error
    return sorted(manifests, key=lambda manifest: manifest.version)


def write_catalog(store_root: Path, manifests: list[VersionManifest]) -> None:
    """Atomically replace the catalog with the given manifests.

    Args:
        store_root: Store directory.
        manifests: All committed manifests.
    """
    latest = max((manifest.version for manifest in manifests), default=None)
    payload = {
        "latest_version": latest,
        "versions": [manifest_to_dict(manifest) for manifest in manifests],
    }
    catalog_path = store_root / CATALOG_FILE_NAME
    temp_path = catalog_path.with_suffix(".json.tmp")
    temp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    os.replace(temp_path, catalog_path)


def write_manifest_file(version_dir: Path, manifest: VersionManifest) -> None:
    """Write per-version manifest file."""
    manifest_path = version_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(
        json.dumps(manifest_to_dict(manifest), indent=2) + "\n", encoding="utf-8"
    )


def manifest_to_dict(manifest: VersionManifest) -> dict[str, Any]:
    return {
        "version": manifest.version,
        "created_at": manifest.created_at.isoformat(),
        "entry_count": manifest.entry_count,
        "addition_count": manifest.addition_count,
        "deletion_count": manifest.deletion_count,
    }


def manifest_from_dict(payload: dict[str, Any]) -> VersionManifest:
    """Deserialize manifest payload from dictionary.

    Args:
        payload: Manifest dictionary.

    Returns:
        Typed version manifest.
    """
    return VersionManifest(
        version=int(payload["version"]),
        created_at=datetime.fromisoformat(str(payload["created_at"])),
        entry_count=int(payload["entry_count"]),
        addition_count=int(payload["addition_count"]),
        deletion_count=int(payload["deletion_count"]),
    )
