"""Unit tests for type descriptors."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple, NewType, Optional, Union
from uuid import UUID

import pytest
from pydantic import BaseModel

from record_mapper.mapping.typeinfo import (
    MappingShape,
    RecordKind,
    SequenceShape,
    is_source_sequence,
    mapping_shape,
    normalize,
    optional_inner,
    record_kind,
    sequence_shape,
    set_shape,
    type_key,
    type_label,
    zero_value,
)

UserId = NewType("UserId", int)


class Color(Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Point:
    x: int
    y: int = 7
    tags: list[str] = field(default_factory=list)


class Model(BaseModel):
    name: str
    score: float = 1.5


class Pair(NamedTuple):
    left: int
    right: str


class Label(str):
    pass


def test_normalize_strips_annotated_and_newtype() -> None:
    assert normalize(Annotated[int, "meta"]) is int
    assert normalize(UserId) is int
    assert normalize(Annotated[UserId, "meta"]) is int


def test_type_key_and_label() -> None:
    """Classes key by module and qualname; builtins label bare."""
    assert type_key(int) == "builtins.int"
    assert type_key(Point) == f"{__name__}.Point"
    assert type_key(UserId) == "builtins.int"
    assert type_label(str) == "str"
    assert type_label(Point) == "test_typeinfo.Point"
    assert type_key(list[int]) == repr(list[int])


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (int | None, int),
        (Optional[str], str),  # noqa: UP045
        (int, None),
        (int | str, None),
    ],
)
def test_optional_inner(tp: Any, expected: Any) -> None:
    assert optional_inner(tp) == expected


def test_optional_inner_keeps_remaining_union() -> None:
    assert optional_inner(int | str | None) == Union[int, str]  # noqa: UP007


@pytest.mark.parametrize(
    ("tp", "kind"),
    [
        (Point, RecordKind.DATACLASS),
        (Model, RecordKind.PYDANTIC),
        (Pair, RecordKind.NAMEDTUPLE),
        (tuple, None),
        (dict, None),
        (int, None),
        (list[Point], None),
    ],
)
def test_record_kind(tp: Any, kind: RecordKind | None) -> None:
    assert record_kind(tp) is kind


def test_is_source_sequence() -> None:
    """Text, bytes and records are not sequences."""
    assert is_source_sequence([1, 2])
    assert is_source_sequence((1, 2))
    assert not is_source_sequence("ab")
    assert not is_source_sequence(b"ab")
    assert not is_source_sequence(Pair(1, "a"))
    assert not is_source_sequence({1, 2})
    assert not is_source_sequence(123)


def test_sequence_shape_variants() -> None:
    assert sequence_shape(list[int]) == SequenceShape(container=list, item_type=int)
    assert sequence_shape(Sequence[str]) == SequenceShape(container=list, item_type=str)
    assert sequence_shape(tuple[int, ...]) == SequenceShape(container=tuple, item_type=int)
    fixed = sequence_shape(tuple[int, str])
    assert fixed is not None
    assert fixed.capacity == 2
    assert fixed.element_type(1) is str
    assert sequence_shape(dict[str, int]) is None
    assert sequence_shape(str) is None


def test_mapping_shape_variants() -> None:
    assert mapping_shape(dict[str, int]) == MappingShape(dict, str, int)
    assert mapping_shape(Mapping[str, int]) == MappingShape(dict, str, int)
    assert mapping_shape(dict) == MappingShape(dict)
    assert mapping_shape(list[int]) is None


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (int, 0),
        (float, 0.0),
        (bool, False),
        (str, ""),
        (bytes, b""),
        (Decimal, Decimal(0)),
        (datetime, datetime.min),
        (UUID, UUID(int=0)),
        (int | None, None),
        (Any, None),
        (list[int], []),
        (dict[str, int], {}),
        (set[str], set()),
        (frozenset[int], frozenset()),
        (tuple[int, str], (0, "")),
        (tuple[int, ...], ()),
        (Literal["a", "b"], "a"),
        (Color, Color.RED),
        (UserId, 0),
    ],
)
def test_zero_value_scalars_and_containers(tp: Any, expected: Any) -> None:
    assert zero_value(tp) == expected


def test_zero_value_of_scalar_subclass_keeps_type() -> None:
    zero = zero_value(Label)
    assert zero == ""
    assert type(zero) is Label


def test_zero_value_of_records_honors_defaults() -> None:
    """Records zero-fill required fields and keep declared defaults."""
    assert zero_value(Point) == Point(x=0, y=7, tags=[])
    assert zero_value(Pair) == Pair(0, "")
    model = zero_value(Model)
    assert model.name == ""
    assert model.score == 1.5


def test_set_shape_variants() -> None:
    assert set_shape(set[str]) == SequenceShape(container=set, item_type=str)
    assert set_shape(frozenset[int]) == SequenceShape(container=frozenset, item_type=int)
    assert set_shape(AbstractSet[int]) == SequenceShape(container=set, item_type=int)
    assert set_shape(list[int]) is None
