"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_YOLODB_ENV_VARS = (
    "YOLODB_DATA_ROOT",
    "YOLODB_PRIMARY_KEY",
    "YOLODB_JSON_INDENT",
    "YOLODB_LOG_LEVEL",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolated_yolodb_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host YOLODB_* variables from leaking into tests."""
    for name in _YOLODB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
