"""Python SDK entry point for table access.

This module exposes the composition root that owns the table registry
and resolves table names under the configured data root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TypeVar

from core.config import YoloDbConfig
from core.constants import TABLE_FILE_SUFFIX
from core.logging_config import configure_logging, get_logger
from core.types import Record, TableLogger, TableOptions
from store.registry import TableRegistry
from store.repository import YoloDbRepository
from store.table import YoloDbTable

_LOGGER = get_logger(__name__)

RepositoryT = TypeVar("RepositoryT", bound=YoloDbRepository)


class YoloDbClient:
    """Primary SDK entry point for table workflows."""

    def __init__(self, config: YoloDbConfig | None = None) -> None:
        """Create SDK client and apply its log level to structlog.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or YoloDbConfig.from_env()
        self._registry = TableRegistry()
        configure_logging(self._config.log_level)
        _LOGGER.debug("client_created", data_root=str(self._config.data_root))

    @property
    def config(self) -> YoloDbConfig:
        return self._config

    @property
    def registry(self) -> TableRegistry:
        return self._registry

    def table_path(self, name: str | Path) -> Path:
        """Resolve a table name or path to its file path.

        Absolute paths and names ending in ``.json`` are used as given,
        relative ones under the data root. Bare names map to
        ``<data_root>/<name>.json``.

        Args:
            name: Table name or file path.

        Returns:
            Absolute table file path.
        """
        candidate = Path(name).expanduser()
        if candidate.suffix != TABLE_FILE_SUFFIX and not candidate.is_absolute():
            candidate = candidate.with_name(candidate.name + TABLE_FILE_SUFFIX)
        if not candidate.is_absolute():
            candidate = self._config.data_root / candidate
        return candidate.resolve()

    def table(
        self,
        name: str | Path,
        primary_key: str | None = None,
        seed: Sequence[Record] | None = None,
        logger: TableLogger | None = None,
    ) -> YoloDbTable:
        """Open a table by name through the client registry.

        Args:
            name: Table name or file path.
            primary_key: Primary-key field; config default when omitted.
            seed: Initial records when the table file does not exist.
            logger: Optional table logger override.

        Returns:
            Shared table handle.
        """
        options = TableOptions(logger=logger, indent=self._config.json_indent)
        return self._registry.get(
            self.table_path(name),
            primary_key or self._config.default_primary_key,
            seed,
            options,
        )

    def repository(
        self,
        repository_class: type[RepositoryT],
        name: str | Path,
        primary_key: str | None = None,
    ) -> RepositoryT:
        """Build a repository subclass wired to the client registry."""
        return repository_class(
            self._registry,
            self.table_path(name),
            primary_key or self._config.default_primary_key,
        )

    def list_tables(self) -> list[str]:
        """Return sorted names of table files under the data root."""
        data_root = self._config.data_root
        if not data_root.is_dir():
            return []
        return sorted(
            path.stem for path in data_root.glob(f"*{TABLE_FILE_SUFFIX}") if path.is_file()
        )
