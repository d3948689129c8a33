"""Change file discovery for one version directory.

This module partitions directory entries into addition and deletion
files by filename suffix. Entries keep directory listing order, which
is not guaranteed to be sorted; the store append is insensitive to it.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import SUPPORTED_DATA_SUFFIXES
from core.errors import DirectoryAccessError
from core.logging_config import get_logger
from core.types import FileClassification, Polarity

_LOGGER = get_logger(__name__)


def classify_version_files(base_dir: Path, deletion_marker: str) -> FileClassification:
    """Split the files of a version directory by polarity.

    Args:
        base_dir: Directory holding the version's change files.
        deletion_marker: Marker preceding the data suffix of deletion files.

    Returns:
        Disjoint addition and deletion file sequences.

    Raises:
        DirectoryAccessError: If the directory is missing or unreadable.
    """
    additions: list[Path] = []
    deletions: list[Path] = []
    for entry in _list_entries(base_dir):
        polarity = classify_file_name(entry.name, deletion_marker)
        if polarity is None or not entry.is_file():
            continue
        if polarity is Polarity.DELETION:
            deletions.append(entry)
        else:
            additions.append(entry)
    _LOGGER.info(
        "version_files_classified",
        base_dir=str(base_dir),
        addition_files=len(additions),
        deletion_files=len(deletions),
    )
    return FileClassification(additions=tuple(additions), deletions=tuple(deletions))


def classify_file_name(file_name: str, deletion_marker: str) -> Polarity | None:
    """Return the polarity implied by a file name, or ``None`` to ignore it.

    Args:
        file_name: Bare file name.
        deletion_marker: Marker preceding the data suffix of deletion files.

    Returns:
        Deletion for ``*<marker><suffix>``, addition for other
        ``*<suffix>`` names, ``None`` otherwise.
    """
    for suffix in SUPPORTED_DATA_SUFFIXES:
        if file_name.endswith(deletion_marker + suffix):
            return Polarity.DELETION
        if file_name.endswith(suffix):
            return Polarity.ADDITION
    return None


def _list_entries(base_dir: Path) -> list[Path]:
    """List directory entries in listing order.

    Args:
        base_dir: Directory to list.

    Returns:
        Entry paths.

    Raises:
        DirectoryAccessError: If listing fails.
    """
    try:
        return list(base_dir.iterdir())
    except FileNotFoundError as error:
        raise DirectoryAccessError(base_dir, "directory does not exist") from error
    except NotADirectoryError as error:
        raise DirectoryAccessError(base_dir, "path is not a directory") from error
    except OSError as error:
        raise DirectoryAccessError(base_dir, error.strerror or str(error)) from error
