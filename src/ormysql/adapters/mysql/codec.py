"""
MySQL value codec.

Renders typed property values as SQL literal text and converts raw
driver values back into Python values.
"""

from __future__ import annotations

import json
import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from pymysql.converters import escape_string

from ormysql.core.errors import EncodingError
from ormysql.core.types import ModelSchema, PropertyDescriptor, PropertyType

NULL = "NULL"

_TZ_SUFFIX = re.compile(r"(\d{2}:\d{2}:\d{2}(?:\.\d+)?)\s*(?:GMT|UTC|Z|[+-]\d{2}:?\d{2}).*$")


class _Missing:
    """Marker for a value that is absent rather than null."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def escape_name(name: str) -> str:
    """
    Quote an identifier, keeping dotted paths qualified.

        escape_name("a.b") -> "`a`.`b`"
    """
    return ".".join("`" + part.replace("`", "``") + "`" for part in name.split("."))


def quote(text: str) -> str:
    """Escape and single-quote a string literal."""
    return "'" + escape_string(text) + "'"


def format_datetime(value: datetime) -> str:
    """Render a datetime as UTC `YYYY-MM-DD HH:MM:SS`."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    raise TypeError(type(value).__name__)


def _encode_number(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return str(int(text))
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise EncodingError(value, PropertyType.NUMBER.value) from None
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise EncodingError(value, PropertyType.NUMBER.value)
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise EncodingError(value, PropertyType.NUMBER.value)
        return str(int(value)) if value.is_integer() else repr(value)
    raise EncodingError(value, PropertyType.NUMBER.value)


def _encode_date(value: Any) -> str:
    if not value:
        return NULL
    try:
        dt = _to_datetime(value)
    except (TypeError, ValueError, OverflowError, OSError):
        raise EncodingError(value, PropertyType.DATE.value) from None
    return quote(format_datetime(dt))


def _encode_point(value: Any) -> str:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        x, y = (_encode_number(v) for v in value)
        return f"POINT({x}, {y})"
    return quote(str(value))


def encode_literal(value: Any) -> str:
    """Render a value whose property type is unknown, guided by its Python type."""
    if value is None:
        return NULL
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise EncodingError(value, "number")
        return repr(value)
    if isinstance(value, datetime):
        return quote(format_datetime(value))
    if isinstance(value, date):
        return quote(value.isoformat())
    if isinstance(value, (dict, list)):
        return quote(json.dumps(value))
    return quote(str(value))


def encode(prop: PropertyDescriptor | None, value: Any) -> str | None:
    """
    Encode a value as SQL literal text.

    Returns None when the value is MISSING, meaning the caller must leave
    the field out of the statement. Python None encodes to NULL.
    """
    if value is MISSING:
        return None
    if value is None:
        return NULL
    if prop is None:
        return encode_literal(value)

    match prop.type:
        case PropertyType.NUMBER:
            try:
                return _encode_number(value)
            except EncodingError as e:
                raise EncodingError(value, prop.type.value, field=prop.name) from e
        case PropertyType.DATE:
            try:
                return _encode_date(value)
            except EncodingError as e:
                raise EncodingError(value, prop.type.value, field=prop.name) from e
        case PropertyType.BOOLEAN:
            return "1" if value else "0"
        case PropertyType.JSON:
            if isinstance(value, (dict, list)):
                return quote(json.dumps(value))
            return quote(str(value))
        case PropertyType.POINT:
            return _encode_point(value)
        case PropertyType.STRING | PropertyType.TEXT:
            return quote(str(value))


def decode(prop: PropertyDescriptor | None, raw: Any) -> Any:
    """
    Convert a raw driver value into its Python value.

    Dates become timezone-aware UTC datetimes (None when the stored value
    is not a real date) and booleans become strict bools. None is never
    transformed.
    """
    if raw is None or raw is MISSING or prop is None:
        return raw

    match prop.type:
        case PropertyType.DATE:
            if isinstance(raw, datetime):
                return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
            if isinstance(raw, date):
                return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
            if isinstance(raw, bytes):
                raw = raw.decode()
            # Drop any trailing zone marker so the value is not offset twice.
            text = _TZ_SUFFIX.sub(r"\1", str(raw).strip())
            try:
                return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)
            except ValueError:
                # Zero or otherwise invalid dates (0000-00-00 00:00:00).
                return None
        case PropertyType.BOOLEAN:
            if isinstance(raw, bytes):
                return raw not in (b"", b"\x00", b"0")
            if isinstance(raw, str):
                return raw.strip() not in ("", "0")
            return bool(raw)
        case _:
            return raw


def decode_row(model: ModelSchema, row: dict[str, Any] | None) -> dict[str, Any] | None:
    """Decode every registered column of a result row."""
    if row is None:
        return None
    return {key: decode(model.get_property(key), value) for key, value in row.items()}
