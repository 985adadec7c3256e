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
def _clear_strata_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host STRATA_* variables out of config-driven tests."""
    for name in (
        "STRATA_STORAGE_URL",
        "STRATA_LEDGERS_PER_FILE",
        "STRATA_FILES_PER_PARTITION",
        "STRATA_FILE_SUFFIX",
        "STRATA_BATCH_CACHE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
