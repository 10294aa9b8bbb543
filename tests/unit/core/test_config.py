"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import YoloDbConfig
from core.errors import YoloDbConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("YOLODB_DATA_ROOT", "./.tmp-yolodb")

    config = YoloDbConfig.from_env()

    assert config.data_root.name == ".tmp-yolodb" and config.data_root.is_absolute()


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to defaults when variables are unset."""
    for name in ("YOLODB_PRIMARY_KEY", "YOLODB_JSON_INDENT", "YOLODB_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = YoloDbConfig.from_env()

    assert (config.default_primary_key, config.json_indent, config.log_level) == ("id", 2, "INFO")


def test_from_env_normalizes_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Log level names should be case-insensitive."""
    monkeypatch.setenv("YOLODB_LOG_LEVEL", "debug")

    config = YoloDbConfig.from_env()

    assert config.log_level == "DEBUG"


def test_from_env_raises_for_invalid_indent(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric JSON indent."""
    monkeypatch.setenv("YOLODB_JSON_INDENT", "wide")

    with pytest.raises(YoloDbConfigError):
        YoloDbConfig.from_env()

    assert os.getenv("YOLODB_JSON_INDENT") == "wide"


def test_from_env_raises_for_negative_indent(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for negative JSON indent."""
    monkeypatch.setenv("YOLODB_JSON_INDENT", "-1")

    with pytest.raises(YoloDbConfigError):
        YoloDbConfig.from_env()

    assert True


def test_from_env_raises_for_blank_primary_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a blank default primary key."""
    monkeypatch.setenv("YOLODB_PRIMARY_KEY", "   ")

    with pytest.raises(YoloDbConfigError):
        YoloDbConfig.from_env()

    assert True


def test_from_env_raises_for_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unknown log level names."""
    monkeypatch.setenv("YOLODB_LOG_LEVEL", "chatty")

    with pytest.raises(YoloDbConfigError):
        YoloDbConfig.from_env()

    assert True
