"""Public SDK surface for yolodb.

This module provides a stable import path for library users.
It re-exports the client, table primitives, codec, and error types.
"""

from __future__ import annotations

from core.config import YoloDbConfig
from core.errors import (
    DecodeError,
    EncodeError,
    InvalidTableDataError,
    MissingPrimaryKeyError,
    YoloDbConfigError,
    YoloDbError,
)
from core.logging_config import configure_logging
from core.types import Record, TableLogger, TableOptions
from store.client import YoloDbClient
from store.codec import decode, decode_text, encode, encode_text
from store.registry import TableRegistry, open_table
from store.repository import YoloDbRepository
from store.table import YoloDbTable

__all__ = [
    "DecodeError",
    "EncodeError",
    "InvalidTableDataError",
    "MissingPrimaryKeyError",
    "Record",
    "TableLogger",
    "TableOptions",
    "TableRegistry",
    "YoloDbClient",
    "YoloDbConfig",
    "YoloDbConfigError",
    "YoloDbError",
    "YoloDbRepository",
    "YoloDbTable",
    "configure_logging",
    "decode",
    "decode_text",
    "encode",
    "encode_text",
    "open_table",
]
