"""Nullable column wrappers produced by the data-access layer.

Row decoders hand the mapper records whose nullable columns are wrapped in
these types. A wrapper carries the decoded value plus a ``valid`` flag; when
``valid`` is false the value is meaningless and the column was SQL ``NULL``.
The built-in converters unwrap them into plain Python values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NullTime:
    """Nullable timestamp column."""

    time: datetime = datetime.min
    valid: bool = False


@dataclass(frozen=True)
class NullString:
    """Nullable text column."""

    string: str = ""
    valid: bool = False


@dataclass(frozen=True)
class NullInt64:
    """Nullable 64-bit integer column."""

    int64: int = 0
    valid: bool = False


@dataclass(frozen=True)
class NullInt32:
    """Nullable 32-bit integer column."""

    int32: int = 0
    valid: bool = False


@dataclass(frozen=True)
class NullFloat64:
    """Nullable double precision column."""

    float64: float = 0.0
    valid: bool = False


@dataclass(frozen=True)
class NullBool:
    """Nullable boolean column."""

    boolean: bool = False
    valid: bool = False


def null_time(value: datetime | None) -> NullTime:
    """Wrap an optional driver value as :class:`NullTime`."""
    if value is None:
        return NullTime()
    return NullTime(time=value, valid=True)


def null_string(value: str | None) -> NullString:
    """Wrap an optional driver value as :class:`NullString`."""
    if value is None:
        return NullString()
    return NullString(string=value, valid=True)


__all__ = [
    "NullBool",
    "NullFloat64",
    "NullInt32",
    "NullInt64",
    "NullString",
    "NullTime",
    "null_string",
    "null_time",
]
