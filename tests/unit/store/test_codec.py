"""Unit tests for the type-preserving table codec."""

from __future__ import annotations

import json
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from core.errors import DecodeError, EncodeError
from store.codec import decode, decode_text, encode, encode_text


def _extended_records() -> list[dict[str, object]]:
    return [
        {
            "id": "1",
            "created_at": datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc),
            "birthday": date(1990, 1, 2),
            "tags": {"admin", "staff"},
            "scores": {1: "gold", 2: "silver"},
            "point": (3, 4),
            "balance": Decimal("10.25"),
            "token": UUID("12345678-1234-5678-1234-567812345678"),
            "avatar": b"\x00\x01binary",
            "ratio": math.inf,
        },
        {"id": "2", "profile": {"nested": {"seen": [datetime(2023, 1, 1, 12, 0)]}}},
    ]


def test_roundtrip_preserves_extended_types() -> None:
    """Decode should rebuild every extended value type losslessly."""
    records = _extended_records()

    decoded = decode(encode(records))

    assert decoded == records


def test_roundtrip_preserves_nested_extended_types() -> None:
    """Extended values nested inside extended containers should roundtrip."""
    records = [
        {
            "id": "1",
            "visits": {date(2024, 1, 1), date(2024, 1, 2)},
            "by_day": {date(2024, 1, 1): {"count": 2, "at": (datetime(2024, 1, 1, 8, 0),)}},
            "frozen": frozenset({(1, 2), (3, 4)}),
        }
    ]

    decoded = decode(encode(records))

    assert decoded == records and isinstance(decoded[0]["frozen"], frozenset)


def test_roundtrip_restores_python_types_not_strings() -> None:
    """Decoded datetimes should be datetime objects rather than ISO strings."""
    records = [{"id": "1", "at": datetime(2024, 2, 3, 4, 5, 6)}]

    decoded = decode(encode(records))

    assert type(decoded[0]["at"]) is datetime


def test_roundtrip_restores_nan() -> None:
    """NaN floats should decode as NaN."""
    decoded = decode(encode([{"id": "1", "value": math.nan}]))

    assert math.isnan(decoded[0]["value"])


def test_encode_writes_plain_data_and_side_channel() -> None:
    """Encoded document should carry plain data plus type annotations."""
    records = [{"id": "1", "at": datetime(2024, 1, 1), "tags": {"a"}}]

    payload = json.loads(encode_text(records))

    assert payload == {
        "json": [{"id": "1", "at": "2024-01-01T00:00:00", "tags": ["a"]}],
        "meta": {"values": {"0.at": "datetime", "0.tags": "set"}},
    }


def test_encode_omits_meta_for_plain_records() -> None:
    """Plain JSON records should not produce a meta section."""
    payload = json.loads(encode_text([{"id": "1", "name": "Ada"}]))

    assert payload == {"json": [{"id": "1", "name": "Ada"}]}


def test_encode_escapes_dots_in_field_names() -> None:
    """Field names containing dots should roundtrip through annotation paths."""
    records = [{"id": "1", "a.b": {"c\\d": date(2024, 1, 1)}}]

    decoded = decode(encode(records))

    assert decoded == records


def test_encode_with_zero_indent_writes_single_line() -> None:
    """Indent zero should produce a single-line document."""
    text = encode_text([{"id": "1"}], indent=0)

    assert text.count("\n") == 1


def test_encode_raises_for_unsupported_type() -> None:
    """Encoding arbitrary objects should fail with EncodeError."""
    with pytest.raises(EncodeError):
        encode([{"id": "1", "handle": object()}])

    assert True


def test_decode_raises_for_invalid_json() -> None:
    """Malformed JSON text should raise DecodeError."""
    with pytest.raises(DecodeError):
        decode(b"{not json")

    assert True


def test_decode_raises_for_invalid_utf8() -> None:
    """Bytes that are not UTF-8 should raise DecodeError."""
    with pytest.raises(DecodeError):
        decode(b"\xff\xfe\x00")

    assert True


def test_decode_raises_without_data_key() -> None:
    """Documents without a json key should raise DecodeError."""
    with pytest.raises(DecodeError):
        decode_text('[{"id": "1"}]')

    assert True


def test_decode_raises_for_unresolvable_path() -> None:
    """Annotations pointing outside the data should raise DecodeError."""
    text = json.dumps({"json": [{"id": "1"}], "meta": {"values": {"3.at": "datetime"}}})

    with pytest.raises(DecodeError):
        decode_text(text)

    assert True


def test_decode_raises_for_unknown_type_tag() -> None:
    """Unknown type annotations should raise DecodeError."""
    text = json.dumps({"json": [{"id": "1"}], "meta": {"values": {"0.id": "regexp"}}})

    with pytest.raises(DecodeError):
        decode_text(text)

    assert True


def test_decode_raises_for_inconsistent_value() -> None:
    """Annotated values that cannot be rebuilt should raise DecodeError."""
    text = json.dumps({"json": [{"at": "yesterday"}], "meta": {"values": {"0.at": "datetime"}}})

    with pytest.raises(DecodeError):
        decode_text(text)

    assert True


def test_decode_raises_for_malformed_meta() -> None:
    """A non-object meta section should raise DecodeError."""
    text = json.dumps({"json": [], "meta": ["values"]})

    with pytest.raises(DecodeError):
        decode_text(text)

    assert True


def test_roundtrip_preserves_empty_string_key_beside_root() -> None:
    """An empty-string key should not collide with the top-level value."""
    value = {"": {1, 2}}

    decoded = decode(encode(value))

    assert decoded == {"": {1, 2}}


def test_roundtrip_preserves_root_tuple_with_nested_set() -> None:
    """A top-level tuple should be rebuilt after its nested values."""
    value = ({"a"}, 2)

    decoded = decode(encode(value))

    assert decoded == ({"a"}, 2)
    assert isinstance(decoded, tuple)


def test_encode_stores_root_tag_outside_path_annotations() -> None:
    """The top-level type tag should live under meta.root."""
    payload = json.loads(encode_text((1, 2)))

    assert payload == {"json": [1, 2], "meta": {"root": "tuple"}}


def test_decode_raises_for_non_string_root_tag() -> None:
    """A non-string meta.root should raise DecodeError."""
    text = json.dumps({"json": [], "meta": {"root": 1}})

    with pytest.raises(DecodeError):
        decode_text(text)

    assert True
