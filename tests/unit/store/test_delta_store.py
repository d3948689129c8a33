"""Unit tests for the versioned delta store."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

from core.errors import IngestParseError, StoreAppendError, StoreError, StoreOpenError
from core.types import DeltaEntry, Polarity, Triple
from store.delta_store import DeltaStore


def _entry(name: str, polarity: Polarity = Polarity.ADDITION) -> DeltaEntry:
    triple = Triple(
        subject=f"<http://example.org/{name}>",
        predicate="<http://example.org/p>",
        object='"value"',
    )
    return DeltaEntry(triple=triple, polarity=polarity)


def _failing_delta() -> Iterator[DeltaEntry]:
    yield _entry("s1")
    yield _entry("s2", Polarity.DELETION)
    raise IngestParseError("/data/v1/a.nt", "line 3: unexpected end")


def test_append_commits_version(tmp_path: Path) -> None:
    """Append should persist the delta and record its manifest."""
    with DeltaStore.open(tmp_path / "store") as store:
        inserted = store.append(0, [_entry("s1"), _entry("s2", Polarity.DELETION)])
        manifest = store.list_versions()[0]

    assert inserted == 2
    assert (manifest.version, manifest.addition_count, manifest.deletion_count) == (0, 1, 1)


def test_append_persists_entries_across_handles(tmp_path: Path) -> None:
    """A reopened store should return the committed entries in order."""
    entries = [_entry("s1"), _entry("s2", Polarity.DELETION)]
    with DeltaStore.open(tmp_path / "store") as store:
        store.append(3, entries)

    with DeltaStore.open(tmp_path / "store", read_only=True) as store:
        assert store.read_delta(3) == entries


def test_append_accepts_empty_delta(tmp_path: Path) -> None:
    """An empty delta still creates the version."""
    with DeltaStore.open(tmp_path / "store") as store:
        inserted = store.append(0, [])

        assert inserted == 0 and store.latest_version == 0


def test_append_streams_generator_in_batches(tmp_path: Path) -> None:
    """Lazy deltas larger than one batch are written completely."""
    entries = (_entry(f"s{index}") for index in range(25))
    with DeltaStore.open(tmp_path / "store", write_batch_size=4) as store:
        inserted = store.append(1, entries)

        assert inserted == 25 and len(store.read_delta(1)) == 25


def test_append_rejects_existing_version(tmp_path: Path) -> None:
    """The same version cannot be appended twice."""
    with DeltaStore.open(tmp_path / "store") as store:
        store.append(1, [_entry("s1")])

        with pytest.raises(StoreAppendError) as error_info:
            store.append(1, [_entry("s2")])

    assert "already exists" in str(error_info.value)


def test_append_rejects_out_of_sequence_version(tmp_path: Path) -> None:
    """Versions lower than the latest are rejected; gaps are allowed."""
    with DeltaStore.open(tmp_path / "store") as store:
        store.append(5, [_entry("s1")])

        with pytest.raises(StoreAppendError):
            store.append(2, [_entry("s2")])
        store.append(9, [_entry("s3")])

        assert [manifest.version for manifest in store.list_versions()] == [5, 9]


def test_append_discards_version_when_delta_fails(tmp_path: Path) -> None:
    """A failing delta propagates unchanged and leaves no version behind."""
    store_path = tmp_path / "store"
    with DeltaStore.open(store_path, write_batch_size=1) as store:
        with pytest.raises(IngestParseError):
            store.append(1, _failing_delta())
        retried = store.append(1, [_entry("s1")])

        assert retried == 1 and store.read_delta(1) == [_entry("s1")]
    assert not any((store_path / "staging").glob("*"))


def test_open_rejects_second_writer(tmp_path: Path) -> None:
    """Only one read-write handle may be open at a time."""
    with DeltaStore.open(tmp_path / "store"):
        with pytest.raises(StoreOpenError) as error_info:
            DeltaStore.open(tmp_path / "store")

    assert "locked" in str(error_info.value)


def test_open_reclaims_stale_lock(tmp_path: Path) -> None:
    """A lock without a live holder is replaced."""
    store_path = tmp_path / "store"
    store_path.mkdir()
    (store_path / "store.lock").write_text("not-a-pid", encoding="utf-8")

    with DeltaStore.open(store_path) as store:
        lock_text = (store_path / "store.lock").read_text(encoding="utf-8")

        assert lock_text == str(os.getpid()) and not store.closed


def test_open_discards_uncatalogued_version_dir(tmp_path: Path) -> None:
    """A version left on disk without a catalog entry can be appended again."""
    orphan_dir = tmp_path / "store" / "versions" / "5"
    orphan_dir.mkdir(parents=True)
    (orphan_dir / "delta.parquet").write_bytes(b"partial")

    with DeltaStore.open(tmp_path / "store") as store:
        assert not orphan_dir.exists()
        inserted = store.append(5, [_entry("s1")])

    with DeltaStore.open(tmp_path / "store", read_only=True) as store:
        assert inserted == 1 and store.read_delta(5) == [_entry("s1")]


def test_append_replaces_uncatalogued_version_dir(tmp_path: Path) -> None:
    """A stray version directory appearing after open does not block the commit."""
    with DeltaStore.open(tmp_path / "store") as store:
        stray_dir = tmp_path / "store" / "versions" / "2"
        stray_dir.mkdir(parents=True)
        (stray_dir / "delta.parquet").write_bytes(b"partial")

        assert store.append(2, [_entry("s1"), _entry("s2")]) == 2
        assert store.read_delta(2) == [_entry("s1"), _entry("s2")]


def test_open_read_only_requires_existing_store(tmp_path: Path) -> None:
    """Read-only handles never create a store."""
    with pytest.raises(StoreOpenError):
        DeltaStore.open(tmp_path / "missing", read_only=True)

    assert not (tmp_path / "missing").exists()


def test_open_rejects_corrupt_catalog_and_releases_lock(tmp_path: Path) -> None:
    """A corrupt catalog fails the open without leaving a lock behind."""
    store_path = tmp_path / "store"
    store_path.mkdir()
    (store_path / "catalog.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreOpenError) as error_info:
        DeltaStore.open(store_path)

    assert "catalog.json" in str(error_info.value)
    assert not (store_path / "store.lock").exists()


def test_read_only_handle_rejects_append(tmp_path: Path) -> None:
    """Appends need a read-write handle."""
    DeltaStore.open(tmp_path / "store").close()

    with DeltaStore.open(tmp_path / "store", read_only=True) as store:
        with pytest.raises(StoreAppendError):
            store.append(0, [_entry("s1")])

        assert store.list_versions() == []


def test_close_is_idempotent_and_releases_lock(tmp_path: Path) -> None:
    """Closing twice is harmless and the lock file disappears."""
    store = DeltaStore.open(tmp_path / "store")

    store.close()
    store.close()

    assert store.closed and not (tmp_path / "store" / "store.lock").exists()
    with pytest.raises(StoreAppendError):
        store.append(0, [_entry("s1")])


def test_read_delta_raises_for_unknown_version(tmp_path: Path) -> None:
    """Reading an uncommitted version fails with a store error."""
    with DeltaStore.open(tmp_path / "store") as store:
        with pytest.raises(StoreError):
            store.read_delta(4)

        assert store.latest_version is None
