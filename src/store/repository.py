"""Base class for domain repositories backed by one table."""

from __future__ import annotations

from pathlib import Path

from store.registry import TableRegistry
from store.table import YoloDbTable


class YoloDbRepository:
    """Repository base that owns a pre-wired table handle.

    Subclasses build domain queries on ``self._table``, for example::

        class UserRepository(YoloDbRepository):
            def find_by_username(self, username: str) -> Record | None:
                return self._table.find_first_by("username", username)
    """

    def __init__(self, registry: TableRegistry, data_path: str | Path, primary_key: str) -> None:
        self._table: YoloDbTable = registry.get(data_path, primary_key, [])

    @property
    def table(self) -> YoloDbTable:
        return self._table
