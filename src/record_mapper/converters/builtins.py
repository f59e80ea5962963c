"""Built-in converters between nullable column wrappers and plain values."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from record_mapper.mapping.typeinfo import zero_value
from record_mapper.nulls import (
    NullBool,
    NullFloat64,
    NullInt32,
    NullInt64,
    NullString,
    NullTime,
)
from record_mapper.types import ConverterEntry


def null_time_to_time(value: NullTime, dest_type: Any) -> Any:
    """Unwrap a valid ``NullTime``; an invalid one becomes the zero time."""
    if not value.valid:
        return zero_value(dest_type)
    return value.time


def time_to_null_time(value: datetime, dest_type: Any) -> NullTime:
    """Wrap a timestamp; the zero time is stored as ``NULL``."""
    del dest_type
    return NullTime(time=value, valid=value != datetime.min)


def null_string_to_string(value: NullString, dest_type: Any) -> Any:
    """Unwrap a valid ``NullString``; an invalid one becomes ``""``."""
    if not value.valid:
        return zero_value(dest_type)
    return value.string


def string_to_null_string(value: str, dest_type: Any) -> NullString:
    """Wrap text as a valid ``NullString``."""
    del dest_type
    return NullString(string=value, valid=True)


def null_int64_to_int(value: NullInt64, dest_type: Any) -> Any:
    """Unwrap a valid ``NullInt64``; an invalid one becomes ``0``."""
    if not value.valid:
        return zero_value(dest_type)
    return value.int64


def null_int32_to_int(value: NullInt32, dest_type: Any) -> Any:
    """Unwrap a valid ``NullInt32``; an invalid one becomes ``0``."""
    if not value.valid:
        return zero_value(dest_type)
    return value.int32


def null_float64_to_float(value: NullFloat64, dest_type: Any) -> Any:
    """Unwrap a valid ``NullFloat64``; an invalid one becomes ``0.0``."""
    if not value.valid:
        return zero_value(dest_type)
    return value.float64


def null_bool_to_bool(value: NullBool, dest_type: Any) -> Any:
    """Unwrap a valid ``NullBool``; an invalid one becomes ``False``."""
    if not value.valid:
        return zero_value(dest_type)
    return value.boolean


BUILTIN_CONVERTERS: tuple[ConverterEntry, ...] = (
    (NullTime, datetime, null_time_to_time),
    (datetime, NullTime, time_to_null_time),
    (NullString, str, null_string_to_string),
    (str, NullString, string_to_null_string),
    (NullInt64, int, null_int64_to_int),
    (NullInt32, int, null_int32_to_int),
    (NullFloat64, float, null_float64_to_float),
    (NullBool, bool, null_bool_to_bool),
)
