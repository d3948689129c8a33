"""Integration tests for ingesting consecutive versions end to end."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from core.types import Polarity
from store.delta_store import DeltaStore
from tests.fixture_paths import fixture_path


def test_consecutive_versions_are_committed_in_order(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Versions ingested through the CLI are readable with their polarities."""
    store_path = tmp_path / "store"

    assert main([str(store_path), "0", str(fixture_path("v0"))]) == 0
    assert main([str(store_path), "1", str(fixture_path("v1"))]) == 0
    counts = [line.split(",")[0] for line in capsys.readouterr().out.splitlines()]

    assert counts == ["6", "7"]
    with DeltaStore.open(store_path, read_only=True) as store:
        assert [manifest.version for manifest in store.list_versions()] == [0, 1]
        version_one = store.read_delta(1)
    deletions = [entry for entry in version_one if entry.polarity is Polarity.DELETION]
    assert len(deletions) == 3
    assert all(entry.triple.subject == "<http://example.org/b>" for entry in deletions)
    assert '"alpha"@en' in {entry.triple.object for entry in version_one}


def test_failed_version_leaves_store_unchanged(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A parse failure commits nothing and the next version still lands."""
    store_path = tmp_path / "store"
    main([str(store_path), "0", str(fixture_path("v0"))])

    assert main([str(store_path), "2", str(fixture_path("malformed"))]) == 1
    assert main([str(store_path), "3", str(fixture_path("quads"))]) == 0
    capsys.readouterr()

    with DeltaStore.open(store_path, read_only=True) as store:
        assert [manifest.version for manifest in store.list_versions()] == [0, 3]
        graphs = {entry.triple.graph for entry in store.read_delta(3)}
    assert graphs == {None, "<http://example.org/graph>"}
    assert not (store_path / "staging" / "2").exists()
