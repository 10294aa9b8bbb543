"""Type-preserving JSON codec for table files.

This module converts record lists to a self-describing JSON document and
back. Plain data lives under ``json``; values that plain JSON would lose
(datetimes, sets, tuples, non-string-keyed maps, ...) are recorded under
``meta.values`` as a mapping from a dotted path into the plain data to a
type tag naming how the value is rebuilt on decode. A tag for the
top-level value itself is stored separately as ``meta.root``.
"""

from __future__ import annotations

import base64
import json
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

from core.constants import (
    CODEC_DATA_KEY,
    CODEC_META_KEY,
    CODEC_PATH_ESCAPE,
    CODEC_PATH_SEPARATOR,
    CODEC_ROOT_KEY,
    CODEC_VALUES_KEY,
    DEFAULT_JSON_INDENT,
    FILE_ENCODING,
)
from core.errors import DecodeError, EncodeError

_NON_FINITE_NAMES = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}

PathSegments = tuple[str, ...]


def encode(value: Any, indent: int = DEFAULT_JSON_INDENT) -> bytes:
    """Encode a value (normally a record list) into UTF-8 bytes.

    Args:
        value: Value to encode.
        indent: JSON indent width; 0 writes a single line.

    Returns:
        Encoded document bytes.

    Raises:
        EncodeError: If any nested value has an unsupported type.
    """
    return encode_text(value, indent).encode(FILE_ENCODING)


def encode_text(value: Any, indent: int = DEFAULT_JSON_INDENT) -> str:
    """Encode a value into a self-describing JSON document string."""
    annotations: dict[PathSegments, str] = {}
    plain = _to_plain(value, (), annotations)
    payload: dict[str, Any] = {CODEC_DATA_KEY: plain}
    root_tag = annotations.pop((), None)
    meta: dict[str, Any] = {}
    if annotations:
        meta[CODEC_VALUES_KEY] = {_join_path(path): tag for path, tag in annotations.items()}
    if root_tag is not None:
        meta[CODEC_ROOT_KEY] = root_tag
    if meta:
        payload[CODEC_META_KEY] = meta
    text = json.dumps(
        payload,
        indent=indent if indent > 0 else None,
        ensure_ascii=False,
        allow_nan=False,
    )
    return text + "\n"


def decode(raw: bytes) -> Any:
    """Decode document bytes produced by :func:`encode`.

    Args:
        raw: Encoded document bytes.

    Returns:
        Decoded value with extended types rebuilt.

    Raises:
        DecodeError: If bytes are malformed or metadata is inconsistent.
    """
    try:
        text = raw.decode(FILE_ENCODING)
    except UnicodeDecodeError as error:
        raise DecodeError(f"Document is not valid UTF-8: {error.reason}.") from error
    return decode_text(text)


def decode_text(text: str) -> Any:
    """Decode a JSON document string produced by :func:`encode_text`."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise DecodeError(
            f"Document is not valid JSON: {error.msg} at line {error.lineno}."
        ) from error
    if not isinstance(payload, dict) or CODEC_DATA_KEY not in payload:
        raise DecodeError(
            f"Document must be a JSON object with a '{CODEC_DATA_KEY}' key."
        )
    annotations, root_tag = _read_annotations(payload.get(CODEC_META_KEY))
    ordered = sorted(
        ((_split_path(path), tag) for path, tag in annotations.items()),
        key=lambda item: len(item[0]),
        reverse=True,
    )
    data = payload[CODEC_DATA_KEY]
    for segments, tag in ordered:
        data = _apply_annotation(data, segments, tag)
    if root_tag is not None:
        data = _apply_annotation(data, (), root_tag)
    return data


def _to_plain(value: Any, path: PathSegments, annotations: dict[PathSegments, str]) -> Any:
    """Convert a value to plain JSON data, recording type annotations.

    Args:
        value: Value to convert.
        path: Path of ``value`` inside the plain data.
        annotations: Output mapping from path segments to type tag.

    Returns:
        JSON-safe data.

    Raises:
        EncodeError: If the value type is unsupported.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        annotations[path] = "number"
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        if all(isinstance(key, str) for key in value):
            return {key: _to_plain(item, path + (key,), annotations) for key, item in value.items()}
        annotations[path] = "map"
        return [
            [
                _to_plain(key, path + (str(index), "0"), annotations),
                _to_plain(item, path + (str(index), "1"), annotations),
            ]
            for index, (key, item) in enumerate(value.items())
        ]
    if isinstance(value, list):
        return _plain_items(value, path, annotations)
    scalar = _scalar_to_plain(value)
    if scalar is not None:
        tag, plain = scalar
        annotations[path] = tag
        return plain
    if isinstance(value, (tuple, set, frozenset)):
        annotations[path] = _collection_tag(value)
        return _plain_items(value, path, annotations)
    raise EncodeError(
        f"Cannot encode value of type {type(value).__name__} at path "
        f"'{_join_path(path) or '<root>'}'. Convert it to a supported type before storing."
    )


def _plain_items(items: Any, path: PathSegments, annotations: dict[PathSegments, str]) -> list[Any]:
    return [_to_plain(item, path + (str(index),), annotations) for index, item in enumerate(items)]


def _scalar_to_plain(value: Any) -> tuple[str, str] | None:
    """Return ``(tag, plain)`` for extended scalar values, else None."""
    # datetime subclasses date, so it must be checked first
    if isinstance(value, datetime):
        return "datetime", value.isoformat()
    if isinstance(value, date):
        return "date", value.isoformat()
    if isinstance(value, Decimal):
        return "decimal", str(value)
    if isinstance(value, UUID):
        return "uuid", str(value)
    if isinstance(value, bytes):
        return "bytes", base64.b64encode(value).decode("ascii")
    return None


def _collection_tag(value: tuple | set | frozenset) -> str:
    if isinstance(value, tuple):
        return "tuple"
    return "frozenset" if isinstance(value, frozenset) else "set"


def _join_path(path: PathSegments) -> str:
    escaped = (
        segment.replace(CODEC_PATH_ESCAPE, CODEC_PATH_ESCAPE * 2).replace(
            CODEC_PATH_SEPARATOR, CODEC_PATH_ESCAPE + CODEC_PATH_SEPARATOR
        )
        for segment in path
    )
    return CODEC_PATH_SEPARATOR.join(escaped)


def _split_path(joined: str) -> PathSegments:
    """Split a joined annotation path into segments.

    The root is never addressed here; an empty string is the single
    empty-key segment.

    Raises:
        DecodeError: If the path ends with a dangling escape.
    """
    segments: list[str] = []
    current: list[str] = []
    characters = iter(joined)
    for character in characters:
        if character == CODEC_PATH_ESCAPE:
            escaped = next(characters, None)
            if escaped is None:
                raise DecodeError(f"Annotation path '{joined}' ends with a dangling escape.")
            current.append(escaped)
        elif character == CODEC_PATH_SEPARATOR:
            segments.append("".join(current))
            current = []
        else:
            current.append(character)
    segments.append("".join(current))
    return tuple(segments)


def _read_annotations(meta: Any) -> tuple[dict[str, str], str | None]:
    """Validate the ``meta`` section.

    Returns:
        Path annotations and the optional root type tag.
    """
    if meta is None:
        return {}, None
    if not isinstance(meta, dict):
        raise DecodeError(f"Document '{CODEC_META_KEY}' section must be a JSON object.")
    values = meta.get(CODEC_VALUES_KEY, {})
    if not isinstance(values, dict):
        raise DecodeError(f"Document '{CODEC_META_KEY}.{CODEC_VALUES_KEY}' must be a JSON object.")
    for path, tag in values.items():
        if not isinstance(tag, str):
            raise DecodeError(f"Type annotation for path '{path}' must be a string.")
    root_tag = meta.get(CODEC_ROOT_KEY)
    if root_tag is not None and not isinstance(root_tag, str):
        raise DecodeError(f"Document '{CODEC_META_KEY}.{CODEC_ROOT_KEY}' must be a string.")
    return values, root_tag


def _apply_annotation(data: Any, segments: PathSegments, tag: str) -> Any:
    """Rebuild the value at ``segments`` inside ``data`` and return the root."""
    if not segments:
        return _revive(data, tag, segments)
    parent = data
    for segment in segments[:-1]:
        parent = parent[_container_key(parent, segment, segments)]
    key = _container_key(parent, segments[-1], segments)
    parent[key] = _revive(parent[key], tag, segments)
    return data


def _container_key(container: Any, segment: str, segments: PathSegments) -> Any:
    """Resolve one path segment against a list or dict container.

    Raises:
        DecodeError: If the segment does not address an existing item.
    """
    if isinstance(container, list) and segment.isdigit() and int(segment) < len(container):
        return int(segment)
    if isinstance(container, dict) and segment in container:
        return segment
    raise DecodeError(
        f"Annotation path '{_join_path(segments)}' does not resolve in document data."
    )


def _revive(value: Any, tag: str, segments: PathSegments) -> Any:
    """Rebuild one annotated value from its plain representation.

    Raises:
        DecodeError: If the tag is unknown or the value cannot be rebuilt.
    """
    reviver = _REVIVERS.get(tag)
    if reviver is None:
        raise DecodeError(
            f"Unknown type annotation '{tag}' at path '{_join_path(segments) or '<root>'}'."
        )
    try:
        return reviver(value)
    except (ValueError, TypeError, ArithmeticError) as error:
        raise DecodeError(
            f"Cannot rebuild '{tag}' value at path '{_join_path(segments) or '<root>'}': {error}."
        ) from error


def _require(value: Any, expected: type) -> Any:
    if not isinstance(value, expected):
        raise TypeError(f"expected {expected.__name__}, got {type(value).__name__}")
    return value


def _revive_map(value: Any) -> dict[Any, Any]:
    pairs = _require(value, list)
    rebuilt: dict[Any, Any] = {}
    for pair in pairs:
        if not isinstance(pair, list) or len(pair) != 2:
            raise ValueError("map entries must be [key, value] pairs")
        rebuilt[pair[0]] = pair[1]
    return rebuilt


def _revive_number(value: Any) -> float:
    name = _require(value, str)
    if name not in _NON_FINITE_NAMES:
        raise ValueError(f"unsupported non-finite number '{name}'")
    return _NON_FINITE_NAMES[name]


def _revive_decimal(value: Any) -> Decimal:
    # Decimal signals bad input with InvalidOperation, an ArithmeticError
    return Decimal(_require(value, str))


_REVIVERS: dict[str, Callable[[Any], Any]] = {
    "datetime": lambda value: datetime.fromisoformat(_require(value, str)),
    "date": lambda value: date.fromisoformat(_require(value, str)),
    "tuple": lambda value: tuple(_require(value, list)),
    "set": lambda value: set(_require(value, list)),
    "frozenset": lambda value: frozenset(_require(value, list)),
    "map": _revive_map,
    "number": _revive_number,
    "decimal": _revive_decimal,
    "uuid": lambda value: UUID(_require(value, str)),
    "bytes": lambda value: base64.b64decode(_require(value, str), validate=True),
}
