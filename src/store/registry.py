"""Process-level table handle registry.

This module guarantees one live table handle per file path. The registry
is an explicit object owned by a composition root, so tests and
applications can keep isolated registries side by side.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Sequence

from core.logging_config import get_logger
from core.types import Record, TableOptions
from store.table import YoloDbTable

_LOGGER = get_logger(__name__)


class TableRegistry:
    """Cache of table handles keyed by absolute file path."""

    def __init__(self) -> None:
        self._tables: dict[str, YoloDbTable] = {}
        self._lock = threading.Lock()

    def get(
        self,
        file_path: str | Path,
        primary_key: str,
        seed: Sequence[Record] | None = None,
        options: TableOptions | None = None,
    ) -> YoloDbTable:
        """Return the handle for ``file_path``, creating it on first use.

        Only the first call for a path uses ``primary_key``, ``seed`` and
        ``options``; later calls return the cached handle unchanged.

        Args:
            file_path: Table file path, relative or absolute.
            primary_key: Primary-key field for a newly created handle.
            seed: Initial records for a newly created table file.
            options: Handle options for a newly created handle.

        Returns:
            Shared table handle.
        """
        registry_key = _registry_key(file_path)
        with self._lock:
            table = self._tables.get(registry_key)
            if table is None:
                table = YoloDbTable(registry_key, primary_key, seed, options)
                self._tables[registry_key] = table
                _LOGGER.info(
                    "table_opened",
                    table=table.table_name,
                    path=registry_key,
                    primary_key=primary_key,
                )
            return table

    def paths(self) -> tuple[str, ...]:
        """Return cached table paths in creation order."""
        with self._lock:
            return tuple(self._tables)

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, Path)):
            return False
        with self._lock:
            return _registry_key(file_path) in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)


def open_table(
    registry: TableRegistry,
    file_path: str | Path,
    primary_key: str,
    seed: Sequence[Record] | None = None,
    options: TableOptions | None = None,
) -> YoloDbTable:
    """Open a table through ``registry``; idempotent per path."""
    return registry.get(file_path, primary_key, seed, options)


def _registry_key(file_path: str | Path) -> str:
    return str(Path(file_path).expanduser().resolve())
