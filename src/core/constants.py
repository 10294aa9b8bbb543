"""Core constants used across yolodb modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".yolodb")
DEFAULT_PRIMARY_KEY = "id"
DEFAULT_JSON_INDENT = 2
TABLE_FILE_SUFFIX = ".json"
TEMP_FILE_SUFFIX = ".tmp"
FILE_ENCODING = "utf-8"
CODEC_DATA_KEY = "json"
CODEC_META_KEY = "meta"
CODEC_VALUES_KEY = "values"
CODEC_ROOT_KEY = "root"
CODEC_PATH_SEPARATOR = "."
CODEC_PATH_ESCAPE = "\\"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
