"""Unit tests for the public SDK surface."""

from __future__ import annotations

from datetime import datetime, timezone

import yolodb


def test_public_surface_exports_all_names() -> None:
    """Every name in __all__ should resolve on the module."""
    missing = [name for name in yolodb.__all__ if not hasattr(yolodb, name)]

    assert missing == []


def test_open_table_roundtrips_through_fresh_registry(tmp_path) -> None:
    """A table written through one registry should read back through another."""
    record = {"id": "1", "seen": {datetime(2024, 1, 1, tzinfo=timezone.utc)}}
    yolodb.open_table(yolodb.TableRegistry(), tmp_path / "users.json", "id").insert(record)

    reopened = yolodb.open_table(yolodb.TableRegistry(), tmp_path / "users.json", "id")

    assert reopened.all() == [record]
