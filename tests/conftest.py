"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_ingest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of DELTA_INGEST_* variables in the shell."""
    for name in (
        "DELTA_INGEST_DELETION_MARKER",
        "DELTA_INGEST_STREAMING",
        "DELTA_INGEST_WRITE_BATCH_SIZE",
        "DELTA_INGEST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
