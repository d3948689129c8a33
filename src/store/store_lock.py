"""Exclusive writer lock for a store directory.

A lock file holds the pid of the read-write handle owner. Locks left
behind by a dead process are reclaimed on the next open. Reclaiming is
check-then-unlink: two openers that saw the same stale pid can each
create the file in turn. The owner pid is re-read after creation,
which narrows but does not close that window; one writer per store
is assumed.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.constants import LOCK_FILE_NAME
from core.errors import StoreOpenError


def acquire_store_lock(store_root: Path) -> Path:
    """Create the writer lock file for a store.

    Args:
        store_root: Store directory.

    Returns:
        Path of the created lock file.

    Raises:
        StoreOpenError: If another live process holds the lock.
    """
    lock_path = store_root / LOCK_FILE_NAME
    if lock_path.exists():
        holder_pid = _read_holder_pid(lock_path)
        if holder_pid and _pid_alive(holder_pid):
            raise StoreOpenError(
                store_root,
                f"store is locked by process {holder_pid}; "
                "wait for it to finish or remove a stale store.lock",
            )
        lock_path.unlink(missing_ok=True)
    try:
        fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError as error:
        raise StoreOpenError(store_root, "store was locked by a concurrent open") from error
    except OSError as error:
        raise StoreOpenError(store_root, f"cannot create lock file: {error}") from error
    try:
        os.write(fd, str(os.getpid()).encode("utf-8"))
    finally:
        os.close(fd)
    if _read_holder_pid(lock_path) != os.getpid():
        raise StoreOpenError(store_root, "store was locked by a concurrent open")
    return lock_path


def release_store_lock(lock_path: Path) -> None:
    """Remove a lock file created by :func:`acquire_store_lock`."""
    lock_path.unlink(missing_ok=True)


def _read_holder_pid(lock_path: Path) -> int:
    try:
        return int(lock_path.read_text(encoding="utf-8").strip() or "0")
    except (OSError, ValueError):
        return 0


def _pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    if pid == os.getpid():
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True
