"""Runtime configuration model for yolodb.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PRIMARY_KEY,
    LOG_LEVEL_NAMES,
)
from core.errors import YoloDbConfigError


@dataclass(frozen=True)
class YoloDbConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Directory that holds table files addressed by name.
        default_primary_key: Primary-key field used when callers omit one.
        json_indent: Indent width for persisted table files.
        log_level: Minimum structured log level.
    """

    data_root: Path
    default_primary_key: str
    json_indent: int
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "YoloDbConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            YoloDbConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("YOLODB_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        primary_key_value = os.getenv("YOLODB_PRIMARY_KEY", DEFAULT_PRIMARY_KEY)
        indent_value = os.getenv("YOLODB_JSON_INDENT", str(DEFAULT_JSON_INDENT))
        log_level_value = os.getenv("YOLODB_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            default_primary_key=_parse_primary_key(primary_key_value),
            json_indent=_parse_json_indent(indent_value),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_primary_key(raw_value: str) -> str:
    """Validate the default primary-key field name.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Stripped field name.

    Raises:
        YoloDbConfigError: If value is blank.
    """
    field_name = raw_value.strip()
    if not field_name:
        raise YoloDbConfigError(
            "Invalid YOLODB_PRIMARY_KEY value: expected a field name, got a blank string. "
            "Unset YOLODB_PRIMARY_KEY or set it to a record field such as 'id'."
        )
    return field_name


def _parse_json_indent(raw_value: str) -> int:
    """Parse the JSON indent environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative indent.

    Raises:
        YoloDbConfigError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise YoloDbConfigError(
            "Invalid YOLODB_JSON_INDENT value: "
            f"expected integer, got '{raw_value}'. "
            "Set YOLODB_JSON_INDENT to a numeric value."
        ) from error
    if indent < 0:
        raise YoloDbConfigError(
            f"Invalid YOLODB_JSON_INDENT value: expected >= 0, got {indent}. "
            "Use 0 for single-line files or a positive width for indented files."
        )
    return indent


def _parse_log_level(raw_value: str) -> str:
    """Normalize and validate the log level name."""
    level = raw_value.strip().upper()
    if level not in LOG_LEVEL_NAMES:
        raise YoloDbConfigError(
            f"Invalid YOLODB_LOG_LEVEL value: got '{raw_value}'. "
            f"Use one of {', '.join(LOG_LEVEL_NAMES)}."
        )
    return level
