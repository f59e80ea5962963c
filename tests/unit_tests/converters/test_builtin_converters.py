"""Unit tests for nullable wrapper converters."""

from __future__ import annotations

from datetime import datetime

import pytest

from record_mapper.converters.builtins import (
    null_bool_to_bool,
    null_float64_to_float,
    null_int32_to_int,
    null_int64_to_int,
    null_string_to_string,
    null_time_to_time,
    string_to_null_string,
    time_to_null_time,
)
from record_mapper.nulls import (
    NullBool,
    NullFloat64,
    NullInt32,
    NullInt64,
    NullString,
    NullTime,
    null_string,
    null_time,
)

MOMENT = datetime(2024, 2, 29, 12, 0, 0)


@pytest.mark.parametrize(
    ("converter", "wrapper", "dest_type", "expected"),
    [
        (null_time_to_time, NullTime(time=MOMENT, valid=True), datetime, MOMENT),
        (null_string_to_string, NullString(string="x", valid=True), str, "x"),
        (null_int64_to_int, NullInt64(int64=9, valid=True), int, 9),
        (null_int32_to_int, NullInt32(int32=-3, valid=True), int, -3),
        (null_float64_to_float, NullFloat64(float64=1.5, valid=True), float, 1.5),
        (null_bool_to_bool, NullBool(boolean=True, valid=True), bool, True),
    ],
)
def test_valid_wrappers_unwrap(
    converter: object, wrapper: object, dest_type: type, expected: object
) -> None:
    assert converter(wrapper, dest_type) == expected  # type: ignore[operator]


@pytest.mark.parametrize(
    ("converter", "wrapper", "dest_type", "expected"),
    [
        (null_time_to_time, NullTime(time=MOMENT), datetime, datetime.min),
        (null_string_to_string, NullString(string="x"), str, ""),
        (null_int64_to_int, NullInt64(int64=9), int, 0),
        (null_int32_to_int, NullInt32(int32=9), int, 0),
        (null_float64_to_float, NullFloat64(float64=1.5), float, 0.0),
        (null_bool_to_bool, NullBool(boolean=True), bool, False),
    ],
)
def test_invalid_wrappers_become_zero(
    converter: object, wrapper: object, dest_type: type, expected: object
) -> None:
    """A NULL column maps to the zero value, whatever the payload."""
    assert converter(wrapper, dest_type) == expected  # type: ignore[operator]


def test_time_wraps_and_zero_time_is_null() -> None:
    assert time_to_null_time(MOMENT, NullTime) == NullTime(time=MOMENT, valid=True)
    assert time_to_null_time(datetime.min, NullTime).valid is False


def test_string_wraps_as_valid() -> None:
    assert string_to_null_string("", NullString) == NullString(string="", valid=True)


def test_wrapper_helpers() -> None:
    assert null_time(MOMENT) == NullTime(time=MOMENT, valid=True)
    assert null_time(None) == NullTime()
    assert null_string("a") == NullString(string="a", valid=True)
    assert null_string(None) == NullString()
