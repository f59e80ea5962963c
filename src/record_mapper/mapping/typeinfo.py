"""Type descriptors queried at mapping boundaries.

Destination shapes are discovered from annotations, source shapes from the
runtime value. Everything the assigner needs to know about a type (is it a
record, an optional slot, a sequence, a mapping, what is its zero value) is
answered here so that the strategies themselves never touch ``typing``
internals.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import (
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum, StrEnum
from fractions import Fraction
from typing import Annotated, Any, Literal, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel

from record_mapper.types import TypeKey

NONE_TYPE = type(None)

_SEQUENCE_ORIGINS = (list, Sequence, MutableSequence)
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)
_SET_ORIGINS = (set, MutableSet, AbstractSet)

# Ordered: subclasses before their bases.
_SCALAR_ZEROS: tuple[tuple[type, Any], ...] = (
    (bool, False),
    (int, 0),
    (float, 0.0),
    (complex, 0j),
    (Decimal, Decimal(0)),
    (Fraction, Fraction(0)),
    (str, ""),
    (bytes, b""),
    (datetime, datetime.min),
    (date, date.min),
    (time, time()),
    (timedelta, timedelta(0)),
)
_TEMPORAL = (datetime, date, time, timedelta)


class RecordKind(StrEnum):
    """Supported record flavours."""

    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"
    NAMEDTUPLE = "namedtuple"


@dataclass(frozen=True)
class SequenceShape:
    """Destination sequence layout.

    Parameters
    ----------
    container : type
        ``list`` or ``tuple``.
    item_type : Any
        Element type of a growable sequence.
    slot_types : tuple[Any, ...] | None, default=None
        Per-slot element types of a fixed-size tuple; ``None`` when growable.
    """

    container: type
    item_type: Any = Any
    slot_types: tuple[Any, ...] | None = None

    @property
    def capacity(self) -> int | None:
        """Number of slots of a fixed-size destination, ``None`` if growable."""
        if self.slot_types is None:
            return None
        return len(self.slot_types)

    def element_type(self, index: int) -> Any:
        """Return the declared type of element ``index``."""
        if self.slot_types is None:
            return self.item_type
        return self.slot_types[index]


@dataclass(frozen=True)
class MappingShape:
    """Destination key/value mapping layout."""

    container: type
    key_type: Any = Any
    value_type: Any = Any


def normalize(tp: Any) -> Any:
    """Strip ``Annotated`` metadata, resolve ``NewType`` and ``TypeVar``."""
    while True:
        if get_origin(tp) is Annotated:
            tp = get_args(tp)[0]
        elif isinstance(tp, typing.NewType):
            tp = tp.__supertype__
        elif isinstance(tp, typing.TypeVar):
            tp = tp.__bound__ if tp.__bound__ is not None else Any
        elif isinstance(tp, typing.TypeAliasType):
            tp = tp.__value__
        else:
            return tp


def type_key(tp: Any) -> TypeKey:
    """Return the registry identity of a type.

    Parameters
    ----------
    tp : Any
        Class or typing construct.

    Returns
    -------
    str
        ``"<module>.<qualname>"`` for classes, ``repr(tp)`` otherwise.
    """
    tp = normalize(tp)
    if isinstance(tp, type) and get_origin(tp) is None:
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


def type_label(tp: Any) -> str:
    """Short, human-readable type name for error messages."""
    tp = normalize(tp)
    if isinstance(tp, type) and get_origin(tp) is None:
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__.rsplit('.', 1)[-1]}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")


def union_members(tp: Any) -> tuple[Any, ...] | None:
    """Return the members of a union type, or ``None`` if ``tp`` is not a union."""
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        return get_args(tp)
    return None


def optional_inner(tp: Any) -> Any | None:
    """Return ``X`` for ``X | None``; ``None`` for anything else."""
    members = union_members(tp)
    if members is None or NONE_TYPE not in members:
        return None
    rest = tuple(member for member in members if member is not NONE_TYPE)
    if len(rest) == 1:
        return rest[0]
    return Union[rest]  # noqa: UP007


def record_kind(tp: Any) -> RecordKind | None:
    """Classify ``tp`` as a record type.

    Parameters
    ----------
    tp : Any
        Candidate destination type; parametrized generic records resolve to
        their origin class.

    Returns
    -------
    RecordKind | None
        Record flavour, or ``None`` when ``tp`` is not a record type.
    """
    tp = normalize(tp)
    origin = get_origin(tp)
    if origin is not None:
        tp = origin
    if not isinstance(tp, type):
        return None
    if issubclass(tp, BaseModel):
        return RecordKind.PYDANTIC
    if dataclasses.is_dataclass(tp):
        return RecordKind.DATACLASS
    if issubclass(tp, tuple) and hasattr(tp, "_fields"):
        return RecordKind.NAMEDTUPLE
    return None


def record_class(tp: Any) -> type:
    """Return the concrete class behind a (possibly parametrized) record type."""
    tp = normalize(tp)
    return get_origin(tp) or tp


def is_record_instance(value: object) -> bool:
    """Check whether ``value`` is an instance of a record type."""
    return record_kind(type(value)) is not None


def is_source_sequence(value: object) -> bool:
    """Check whether ``value`` is an ordered sequence the mapper can iterate.

    Text, byte strings and records are never treated as sequences.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if is_record_instance(value):
        return False
    return isinstance(value, Sequence)


def sequence_shape(tp: Any) -> SequenceShape | None:
    """Describe ``tp`` as a destination sequence, or return ``None``."""
    tp = normalize(tp)
    origin = get_origin(tp) or tp
    args = get_args(tp)
    if origin is tuple:
        if not args:
            return SequenceShape(container=tuple)
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceShape(container=tuple, item_type=args[0])
        if args == ((),):
            return SequenceShape(container=tuple, slot_types=())
        return SequenceShape(container=tuple, slot_types=tuple(args))
    if origin in _SEQUENCE_ORIGINS:
        return SequenceShape(container=list, item_type=args[0] if args else Any)
    return None


def set_shape(tp: Any) -> SequenceShape | None:
    """Describe ``tp`` as a destination set, or return ``None``.

    ``frozenset`` destinations keep their container; abstract set types
    build a ``set``.
    """
    tp = normalize(tp)
    origin = get_origin(tp) or tp
    args = get_args(tp)
    item_type = args[0] if args else Any
    if origin is frozenset:
        return SequenceShape(container=frozenset, item_type=item_type)
    if origin in _SET_ORIGINS:
        return SequenceShape(container=set, item_type=item_type)
    return None


def mapping_shape(tp: Any) -> MappingShape | None:
    """Describe ``tp`` as a destination mapping, or return ``None``."""
    tp = normalize(tp)
    origin = get_origin(tp) or tp
    if not isinstance(origin, type):
        return None
    if origin in _MAPPING_ORIGINS:
        container: type = dict
    elif issubclass(origin, dict):
        container = origin
    else:
        return None
    args = get_args(tp)
    if len(args) == 2:
        return MappingShape(container=container, key_type=args[0], value_type=args[1])
    return MappingShape(container=container)


def zero_value(tp: Any) -> Any:
    """Return the zero value of a destination type.

    Parameters
    ----------
    tp : Any
        Destination type.

    Returns
    -------
    Any
        ``None`` for optional slots and opaque types, falsy scalars, empty
        containers, zero-filled fixed-size tuples and zero-filled records.
    """
    tp = normalize(tp)
    if tp is Any or tp is object or tp is NONE_TYPE:
        return None
    if optional_inner(tp) is not None:
        return None
    members = union_members(tp)
    if members is not None:
        return zero_value(members[0])
    if get_origin(tp) is Literal:
        return get_args(tp)[0]
    if record_kind(tp) is not None:
        from record_mapper.mapping.fields import construct_record

        return construct_record(tp, {})
    shape = sequence_shape(tp)
    if shape is not None:
        if shape.slot_types is not None:
            return tuple(zero_value(slot) for slot in shape.slot_types)
        return shape.container()
    kv = mapping_shape(tp)
    if kv is not None:
        return kv.container()
    unordered = set_shape(tp)
    if unordered is not None:
        return unordered.container()
    if not isinstance(tp, type):
        return None
    if issubclass(tp, Enum):
        return next(iter(tp), None)
    if tp is UUID:
        return UUID(int=0)
    if tp is bytearray:
        return bytearray()
    for base, zero in _SCALAR_ZEROS:
        if issubclass(tp, base):
            if tp is base or base in _TEMPORAL:
                return zero
            return tp(zero)
    return None
