"""Shared typed models.

This module defines the record alias, logger contract, and table options
shared by the codec, table handles, registry, and SDK client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from core.constants import DEFAULT_JSON_INDENT

Record = dict[str, Any]
RecordPredicate = Callable[[Record], bool]


class TableLogger(Protocol):
    """Callable invoked by table handles around reads and writes.

    Implementations must not raise and must return promptly.
    """

    def __call__(self, event: str, **fields: object) -> None: ...


@dataclass(frozen=True)
class TableOptions:
    """Per-handle table options.

    Attributes:
        logger: Optional logger override; a structlog debug logger when omitted.
        indent: JSON indent width for the persisted file.
    """

    logger: TableLogger | None = None
    indent: int = DEFAULT_JSON_INDENT
