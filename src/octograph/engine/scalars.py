"""
Built-in and custom scalar types.

Every scalar pairs ``serialize`` (internal -> wire) with ``parse``
(wire -> internal) such that ``parse(serialize(x)) == x`` for each value
``parse`` accepts.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from .types import ScalarType

MAX_INT = 2**31 - 1
MIN_INT = -(2**31)


def _serialize_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)) and math.isfinite(value):
        return str(value)
    raise TypeError(f"String cannot represent value: {value!r}")


def _parse_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"String cannot represent a non string value: {value!r}")
    return value


def _serialize_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError as e:
            raise TypeError(f"Int cannot represent non-integer value: {value!r}") from e
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeError(f"Int cannot represent non-integer value: {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise TypeError(f"Int cannot represent non-integer value: {value!r}")
    if not MIN_INT <= value <= MAX_INT:
        raise ValueError(f"Int cannot represent non 32-bit signed integer value: {value!r}")
    return value


def _parse_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Int cannot represent non-integer value: {value!r}")
    if not MIN_INT <= value <= MAX_INT:
        raise ValueError(f"Int cannot represent non 32-bit signed integer value: {value!r}")
    return value


def _serialize_float(value: Any) -> float:
    if isinstance(value, str):
        value = float(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise TypeError(f"Float cannot represent non numeric value: {value!r}")
    return float(value)


def _parse_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise TypeError(f"Float cannot represent non numeric value: {value!r}")
    return float(value)


def _serialize_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value != 0
    raise TypeError(f"Boolean cannot represent a non boolean value: {value!r}")


def _parse_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Boolean cannot represent a non boolean value: {value!r}")
    return value


def _serialize_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"ID cannot represent value: {value!r}")


def _parse_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"ID cannot represent value: {value!r}")


def _check_uri(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"URI cannot represent a non string value: {value!r}")
    if not value or any(ch.isspace() or ord(ch) < 0x20 for ch in value):
        raise ValueError(f"Invalid URI: {value!r}")
    parts = urlsplit(value)
    if parts.scheme and not parts.netloc and parts.scheme in ("http", "https"):
        raise ValueError(f"Invalid URI, missing host: {value!r}")
    return value


def _serialize_datetime(value: Any) -> str:
    if isinstance(value, str):
        value = _parse_datetime(value)
    if not isinstance(value, datetime):
        raise TypeError(f"DateTime cannot represent value: {value!r}")
    if value.tzinfo is None:
        raise ValueError(f"DateTime requires a timezone-aware value: {value!r}")
    return value.isoformat()


def _parse_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"DateTime cannot represent a non string value: {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"DateTime cannot represent value: {value!r}") from e
    if parsed.tzinfo is None:
        raise ValueError(f"DateTime requires a UTC offset: {value!r}")
    return parsed


String = ScalarType(
    "String",
    serialize=_serialize_string,
    parse=_parse_string,
    description="UTF-8 character sequence.",
)

Int = ScalarType(
    "Int",
    serialize=_serialize_int,
    parse=_parse_int,
    description="Signed 32-bit integer.",
)

Float = ScalarType(
    "Float",
    serialize=_serialize_float,
    parse=_parse_float,
    description="Signed double-precision floating-point value.",
)

Boolean = ScalarType(
    "Boolean",
    serialize=_serialize_boolean,
    parse=_parse_boolean,
    description="`true` or `false`.",
)

ID = ScalarType(
    "ID",
    serialize=_serialize_id,
    parse=_parse_id,
    description="Unique identifier, serialized as a string.",
)

URI = ScalarType(
    "URI",
    serialize=_check_uri,
    parse=_check_uri,
    description="An RFC 3986, RFC 3987, and RFC 6570 (level 4) compliant URI string.",
    specified_by_url="https://datatracker.ietf.org/doc/html/rfc3986",
)

DateTime = ScalarType(
    "DateTime",
    serialize=_serialize_datetime,
    parse=_parse_datetime,
    description="An ISO-8601 encoded UTC date string.",
)

SPECIFIED_SCALARS: tuple[ScalarType, ...] = (String, Int, Float, Boolean, ID)
