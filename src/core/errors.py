"""yolodb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure mode of the table store raises a specific error type.
Filesystem errors are not wrapped and propagate as OSError.
"""

from __future__ import annotations


class YoloDbError(Exception):
    """Base exception for all yolodb failures."""


class YoloDbConfigError(YoloDbError):
    """Raised for invalid runtime configuration."""


class MissingPrimaryKeyError(YoloDbError):
    """Raised when a record lacks a non-empty primary-key value."""


class InvalidTableDataError(YoloDbError):
    """Raised when decoded table content is not a list of records."""


class DecodeError(YoloDbError):
    """Raised when persisted bytes cannot be parsed by the codec."""


class EncodeError(YoloDbError):
    """Raised when a value has no codec representation."""
