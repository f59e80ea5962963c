"""Recursive value assignment between source values and destination types.

:func:`assign_value` tries, in order: ``None`` to zero value, optional slots,
unions, direct assignability, native conversion, registered converters,
record mapping, sequence, key/value and set mapping, then an instance check
against the origin of other parametrized classes. The first strategy that
applies wins; if none applies the value is rejected with
``IncompatibleTypesError``.
"""

from __future__ import annotations

import copy
import logging
import numbers
from collections.abc import Mapping
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Literal, get_args, get_origin

from record_mapper.errors import (
    ConverterError,
    DepthLimitError,
    IncompatibleConverterOutputError,
    IncompatibleTypesError,
    MappingError,
    UnmatchedFieldError,
)
from record_mapper.mapping.fields import construct_record, match_fields
from record_mapper.mapping.typeinfo import (
    NONE_TYPE,
    MappingShape,
    SequenceShape,
    is_record_instance,
    is_source_sequence,
    mapping_shape,
    normalize,
    optional_inner,
    record_kind,
    sequence_shape,
    set_shape,
    type_label,
    union_members,
    zero_value,
)
from record_mapper.options import MappingOptions

if TYPE_CHECKING:
    from record_mapper.converters.registry import ConverterRegistry

logger = logging.getLogger(__name__)

NOT_CONVERTIBLE = object()

_NUMERIC_TYPES = (int, float, complex, Decimal, Fraction)
_NUMERIC_ERRORS = (TypeError, ValueError, OverflowError, ArithmeticError)


@dataclass(frozen=True)
class AssignContext:
    """Per-call state threaded through the recursion."""

    registry: ConverterRegistry
    options: MappingOptions = MappingOptions()
    depth: int = 0

    def descend(self) -> AssignContext:
        """Return the context one nesting level deeper.

        Raises
        ------
        DepthLimitError
            If the configured ``max_depth`` would be exceeded.
        """
        depth = self.depth + 1
        if depth > self.options.max_depth:
            raise DepthLimitError(
                f"nesting deeper than max_depth={self.options.max_depth}"
            )
        return replace(self, depth=depth)


def is_directly_assignable(value: object, dest_type: Any) -> bool:
    """Check whether ``value`` can be stored in ``dest_type`` as-is.

    Only non-generic classes qualify; parametrized containers are always
    rebuilt element by element. ``bool`` never counts as a number.
    """
    if dest_type is Any or dest_type is object:
        return True
    if get_origin(dest_type) is Literal:
        return value in get_args(dest_type)
    if not isinstance(dest_type, type) or get_origin(dest_type) is not None:
        return False
    if isinstance(value, bool) and dest_type in _NUMERIC_TYPES:
        return False
    return isinstance(value, dest_type)


def _matches_shallow(value: object, dest_type: Any) -> bool:
    """Loose instance check used to accept converter output."""
    if dest_type is Any or dest_type is object:
        return True
    members = union_members(dest_type)
    if members is not None:
        return any(_matches_shallow(value, member) for member in members)
    if dest_type is NONE_TYPE:
        return value is None
    origin = get_origin(dest_type)
    if origin is Literal:
        return value in get_args(dest_type)
    if isinstance(origin, type):
        return isinstance(value, origin)
    return is_directly_assignable(value, dest_type)


def native_convert(value: object, dest_type: Any) -> Any:
    """Apply built-in conversion rules.

    Parameters
    ----------
    value : object
        Non-``None`` source value.
    dest_type : Any
        Normalized destination type.

    Returns
    -------
    Any
        Converted value, or ``NOT_CONVERTIBLE`` when no rule applies.

    Notes
    -----
    Rules: numbers convert among ``int``, ``float``, ``complex``, ``Decimal``
    and ``Fraction`` (float to int truncates); text converts to and from
    UTF-8 bytes; enum members convert through their value, and values convert
    into enum destinations; a builtin scalar converts into a subclass of it.
    """
    if not isinstance(dest_type, type) or get_origin(dest_type) is not None:
        return NOT_CONVERTIBLE

    if isinstance(value, Enum):
        if isinstance(dest_type, type) and issubclass(dest_type, Enum):
            return _to_enum(value.value, dest_type)
        if is_directly_assignable(value.value, dest_type):
            return value.value
        return native_convert(value.value, dest_type)

    if issubclass(dest_type, Enum):
        return _to_enum(value, dest_type)

    if issubclass(dest_type, _NUMERIC_TYPES) and not issubclass(dest_type, bool):
        if isinstance(value, bool) or not isinstance(value, numbers.Number):
            return NOT_CONVERTIBLE
        if issubclass(dest_type, Decimal) and isinstance(value, float):
            value = str(value)
        try:
            return dest_type(value)
        except _NUMERIC_ERRORS:
            return NOT_CONVERTIBLE

    if issubclass(dest_type, str):
        if isinstance(value, (bytes, bytearray)):
            try:
                return dest_type(bytes(value).decode("utf-8"))
            except UnicodeDecodeError:
                return NOT_CONVERTIBLE
        if isinstance(value, str):
            return dest_type(value)
        return NOT_CONVERTIBLE

    if issubclass(dest_type, (bytes, bytearray)):
        if isinstance(value, str):
            return dest_type(value.encode("utf-8"))
        if isinstance(value, (bytes, bytearray)):
            return dest_type(value)
    return NOT_CONVERTIBLE


def _to_enum(value: object, dest_type: type[Enum]) -> Any:
    try:
        return dest_type(value)
    except (ValueError, TypeError):
        return NOT_CONVERTIBLE


def _apply_converter(
    converter: Any, value: object, dest_type: Any, context: AssignContext
) -> Any:
    try:
        output = converter(value, dest_type)
    except MappingError:
        raise
    except Exception as exc:
        raise ConverterError(
            f"converter {type_label(type(value))} -> {type_label(dest_type)} "
            f"failed: {exc}"
        ) from exc

    if _matches_shallow(output, dest_type):
        if get_origin(dest_type) in (None, Literal):
            return copy.deepcopy(output)
        # Parametrized containers are checked element by element.
        try:
            return assign_value(output, dest_type, context.descend())
        except IncompatibleTypesError as exc:
            raise IncompatibleConverterOutputError(
                type_label(type(output)), type_label(dest_type), path=exc.path
            ) from exc
    converted = native_convert(output, dest_type)
    if converted is not NOT_CONVERTIBLE:
        return converted
    raise IncompatibleConverterOutputError(
        type_label(type(output)), type_label(dest_type)
    )


def assign_value(value: object, dest_type: Any, context: AssignContext) -> Any:
    """Produce a destination-typed copy of ``value``.

    Parameters
    ----------
    value : object
        Source value, possibly ``None``.
    dest_type : Any
        Declared destination type.
    context : AssignContext
        Registry, options and current depth.

    Returns
    -------
    Any
        Freshly built value; never aliases ``value``.

    Raises
    ------
    MappingError
        If no strategy can produce the destination value. Nested failures
        carry the path from this value down to the failing slot.
    """
    dest_type = normalize(dest_type)

    if value is None:
        return zero_value(dest_type)

    inner = optional_inner(dest_type)
    if inner is not None:
        return assign_value(value, inner, context)
    members = union_members(dest_type)
    if members is not None:
        return _assign_union(value, dest_type, members, context)

    if is_directly_assignable(value, dest_type):
        return copy.deepcopy(value)

    converted = native_convert(value, dest_type)
    if converted is not NOT_CONVERTIBLE:
        return converted

    converter = context.registry.lookup(type(value), dest_type)
    if converter is not None:
        return _apply_converter(converter, value, dest_type, context)

    if is_record_instance(value) and record_kind(dest_type) is not None:
        return map_record(value, dest_type, context.descend())

    seq_shape = sequence_shape(dest_type)
    if seq_shape is not None and is_source_sequence(value):
        return _assign_sequence(value, seq_shape, context.descend())

    kv_shape = mapping_shape(dest_type)
    if kv_shape is not None and isinstance(value, Mapping):
        return _assign_mapping(value, kv_shape, context.descend())

    unordered = set_shape(dest_type)
    if unordered is not None and (
        isinstance(value, AbstractSet) or is_source_sequence(value)
    ):
        return _assign_set(value, unordered, context.descend())

    origin = get_origin(dest_type)
    if isinstance(origin, type) and isinstance(value, origin):
        return copy.deepcopy(value)

    raise IncompatibleTypesError(type_label(type(value)), type_label(dest_type))


def _assign_union(
    value: object,
    dest_type: Any,
    members: tuple[Any, ...],
    context: AssignContext,
) -> Any:
    for member in members:
        if is_directly_assignable(value, normalize(member)):
            return copy.deepcopy(value)
    for member in members:
        try:
            return assign_value(value, member, context)
        except IncompatibleTypesError:
            continue
    raise IncompatibleTypesError(type_label(type(value)), type_label(dest_type))


def _assign_sequence(value: Any, shape: SequenceShape, context: AssignContext) -> Any:
    capacity = shape.capacity
    length = len(value)
    count = length if capacity is None else min(length, capacity)
    if capacity is not None and length > capacity and context.options.warn_on_truncation:
        logger.warning(
            "dropping %d trailing source elements: destination holds %d of %d",
            length - capacity,
            capacity,
            length,
        )

    items = []
    for index in range(count):
        try:
            items.append(assign_value(value[index], shape.element_type(index), context))
        except MappingError as exc:
            exc.prefixed(index)
            raise
    if capacity is not None:
        items.extend(zero_value(shape.element_type(i)) for i in range(count, capacity))
    return shape.container(items)


def _assign_set(value: Any, shape: SequenceShape, context: AssignContext) -> Any:
    items = []
    for item in value:
        try:
            items.append(assign_value(item, shape.item_type, context))
        except MappingError as exc:
            exc.prefixed(f"[{item!r}]")
            raise
    return shape.container(items)


def _assign_mapping(
    value: Mapping[Any, Any], shape: MappingShape, context: AssignContext
) -> Any:
    result = shape.container()
    for key, item in value.items():
        segment = f"[{key!r}]"
        try:
            dest_key = assign_value(key, shape.key_type, context)
            result[dest_key] = assign_value(item, shape.value_type, context)
        except MappingError as exc:
            exc.prefixed(segment)
            raise
    return result


def map_record(source: object, dest_type: Any, context: AssignContext) -> Any:
    """Map one record instance onto a destination record type.

    Parameters
    ----------
    source : object
        Source record instance.
    dest_type : Any
        Destination record type.
    context : AssignContext
        Registry, options and current depth.

    Returns
    -------
    Any
        New destination record. Fields without a source counterpart keep
        their default or zero value.

    Raises
    ------
    MappingError
        On the first field that cannot be mapped, prefixed with its name.
    """
    match = match_fields(type(source), dest_type)
    if context.options.strict and match.unmatched:
        name = match.unmatched[0]
        raise UnmatchedFieldError(
            f"no counterpart on {type_label(dest_type)}", path=(name,)
        )

    values: dict[str, Any] = {}
    for source_field, dest_field in match.pairs:
        try:
            raw = getattr(source, source_field.name)
        except AttributeError:
            logger.debug(
                "%s.%s is unset; keeping destination default",
                type_label(type(source)),
                source_field.name,
            )
            continue
        try:
            values[dest_field.name] = assign_value(raw, dest_field.annotation, context)
        except MappingError as exc:
            exc.prefixed(source_field.name)
            raise
    return construct_record(dest_type, values)
