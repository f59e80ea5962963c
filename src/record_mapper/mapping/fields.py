"""Field descriptors and case-insensitive field correspondence."""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from record_mapper.errors import InvalidInputError
from record_mapper.mapping.typeinfo import (
    RecordKind,
    record_class,
    record_kind,
    type_label,
    zero_value,
)

logger = logging.getLogger(__name__)

_MISSING = object()

# Per-type descriptor and per-pair match cache sizes.
FIELD_CACHE_SIZE = 1024
MATCH_CACHE_SIZE = 4096


@dataclass(frozen=True)
class FieldDescriptor:
    """Shape of one declared record field.

    Parameters
    ----------
    name : str
        Declared attribute name.
    annotation : Any
        Resolved field type.
    public : bool
        ``False`` for names starting with an underscore.
    init : bool
        Whether the record constructor accepts this field.
    has_default : bool, default=False
        Whether the record declares a default for this field.
    alias : str | None, default=None
        Pydantic alias used when constructing the model.
    db_name : str, default=""
        Column / parameter name; falls back to ``name``.
    """

    name: str
    annotation: Any
    public: bool
    init: bool
    has_default: bool = False
    alias: str | None = None
    db_name: str = ""

    @property
    def folded(self) -> str:
        """Case-folded name used for matching."""
        return self.name.casefold()

    @property
    def settable(self) -> bool:
        """Whether the mapper may populate this field on a destination."""
        return self.public and self.init


@dataclass(frozen=True)
class FieldMatch:
    """Correspondence between a source and a destination record type."""

    pairs: tuple[tuple[FieldDescriptor, FieldDescriptor], ...]
    unmatched: tuple[str, ...]
    unsettable: tuple[str, ...]


def _resolve_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise InvalidInputError(
            f"cannot resolve annotations of {type_label(cls)}: {exc}"
        ) from exc


def _dataclass_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    hints = _resolve_hints(cls)
    descriptors = []
    for item in dataclasses.fields(cls):
        has_default = (
            item.default is not dataclasses.MISSING
            or item.default_factory is not dataclasses.MISSING
        )
        descriptors.append(
            FieldDescriptor(
                name=item.name,
                annotation=hints.get(item.name, Any),
                public=not item.name.startswith("_"),
                init=item.init,
                has_default=has_default,
                db_name=item.metadata.get("db", item.name),
            )
        )
    return tuple(descriptors)


def _pydantic_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    descriptors = []
    for name, info in cls.model_fields.items():
        descriptors.append(
            FieldDescriptor(
                name=name,
                annotation=info.annotation,
                public=not name.startswith("_"),
                init=True,
                has_default=not info.is_required(),
                alias=info.alias,
                db_name=info.alias or name,
            )
        )
    return tuple(descriptors)


def _namedtuple_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    hints = _resolve_hints(cls)
    defaults = getattr(cls, "_field_defaults", {})
    return tuple(
        FieldDescriptor(
            name=name,
            annotation=hints.get(name, Any),
            public=not name.startswith("_"),
            init=True,
            has_default=name in defaults,
            db_name=name,
        )
        for name in cls._fields
    )


@lru_cache(maxsize=FIELD_CACHE_SIZE)
def describe_fields(record_type: Any) -> tuple[FieldDescriptor, ...]:
    """Return the field descriptors of a record type.

    Parameters
    ----------
    record_type : Any
        Dataclass, pydantic model or NamedTuple class.

    Returns
    -------
    tuple[FieldDescriptor, ...]
        Descriptors in declaration order. Cached per type.

    Raises
    ------
    InvalidInputError
        If ``record_type`` is not a record type or its annotations cannot be
        resolved.
    """
    kind = record_kind(record_type)
    cls = record_class(record_type)
    if kind is RecordKind.PYDANTIC:
        return _pydantic_fields(cls)
    if kind is RecordKind.DATACLASS:
        return _dataclass_fields(cls)
    if kind is RecordKind.NAMEDTUPLE:
        return _namedtuple_fields(cls)
    raise InvalidInputError(f"{type_label(record_type)} is not a record type")


def destination_index(record_type: Any) -> dict[str, FieldDescriptor]:
    """Index the public fields of ``record_type`` by case-folded name."""
    return {
        descriptor.folded: descriptor
        for descriptor in describe_fields(record_type)
        if descriptor.public
    }


@lru_cache(maxsize=MATCH_CACHE_SIZE)
def match_fields(source_type: Any, dest_type: Any) -> FieldMatch:
    """Build field correspondence between two record types.

    Parameters
    ----------
    source_type : Any
        Source record type.
    dest_type : Any
        Destination record type.

    Returns
    -------
    FieldMatch
        Matched pairs in source declaration order, plus the names of source
        fields without a same-named destination field and of destination
        fields that exist but cannot be set.
    """
    index = destination_index(dest_type)
    pairs = []
    unmatched = []
    unsettable = []
    for source_field in describe_fields(source_type):
        if not source_field.public:
            continue
        dest_field = index.get(source_field.folded)
        if dest_field is None:
            unmatched.append(source_field.name)
            continue
        if not dest_field.settable:
            unsettable.append(dest_field.name)
            continue
        pairs.append((source_field, dest_field))
    if unmatched or unsettable:
        logger.debug(
            "%s -> %s: skipping unmatched %s, unsettable %s",
            type_label(source_type),
            type_label(dest_type),
            unmatched,
            unsettable,
        )
    return FieldMatch(
        pairs=tuple(pairs),
        unmatched=tuple(unmatched),
        unsettable=tuple(unsettable),
    )


def iter_field_values(
    record: object,
) -> Iterator[tuple[FieldDescriptor, Any]]:
    """Yield ``(descriptor, value)`` for every populated public field."""
    for descriptor in describe_fields(type(record)):
        if not descriptor.public:
            continue
        value = getattr(record, descriptor.name, _MISSING)
        if value is _MISSING:
            continue
        yield descriptor, value


def construct_record(record_type: Any, values: dict[str, Any]) -> Any:
    """Instantiate a record from already-mapped field values.

    Constructor fields missing from ``values`` keep their declared default,
    or receive the zero value of their type when no default exists.

    Parameters
    ----------
    record_type : Any
        Destination record type.
    values : dict[str, Any]
        Field name to value.

    Returns
    -------
    Any
        New record instance.

    Raises
    ------
    InvalidInputError
        If the record constructor rejects the values.
    """
    kind = record_kind(record_type)
    cls = record_class(record_type)
    payload = dict(values)
    for descriptor in describe_fields(record_type):
        if not descriptor.init or descriptor.has_default:
            continue
        if descriptor.name not in payload:
            payload[descriptor.name] = zero_value(descriptor.annotation)

    if kind is RecordKind.PYDANTIC:
        by_alias = {
            (descriptor.alias or descriptor.name): payload[descriptor.name]
            for descriptor in describe_fields(record_type)
            if descriptor.name in payload
        }
        return cls.model_construct(**by_alias)

    try:
        return cls(**payload)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"cannot construct {type_label(record_type)}: {exc}"
        ) from exc


def named_args(record: object) -> dict[str, Any]:
    """Return a column-name to value mapping for a record instance.

    Parameters
    ----------
    record : object
        Record instance; dataclass fields may override the column name with
        ``field(metadata={"db": "column"})``.

    Returns
    -------
    dict[str, Any]
        One entry per populated public field.

    Raises
    ------
    InvalidInputError
        If ``record`` is not a record instance.
    """
    if record is None or record_kind(type(record)) is None:
        raise InvalidInputError(
            f"input must be a record instance, got {type_label(type(record))}"
        )
    return {
        (descriptor.db_name or descriptor.name): value
        for descriptor, value in iter_field_values(record)
    }
