"""Public mapping API (delegates to the mapping package)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from record_mapper.errors import ConfigError
from record_mapper.mapping.fields import named_args
from record_mapper.mapping.mapper import Mapper
from record_mapper.options import MappingOptions, build_mapping_options

if TYPE_CHECKING:
    from record_mapper.converters.registry import ConverterRegistry

T = TypeVar("T")


def _resolve_options(
    options: MappingOptions | None,
    option_values: dict[str, Any],
) -> MappingOptions | None:
    if not option_values:
        return options
    if options is not None:
        raise ConfigError("Pass either options or individual option values, not both.")
    return build_mapping_options(**option_values)


def map_struct(
    source: Any,
    dest_type: type[T],
    *,
    registry: ConverterRegistry | None = None,
    options: MappingOptions | None = None,
    **option_values: Any,
) -> T:
    """Map a record instance into a new ``dest_type`` instance.

    Individual option values (``strict=True``, ``max_depth=8``...) are
    validated and combined into :class:`MappingOptions`.
    """
    resolved = _resolve_options(options, option_values)
    return Mapper(registry=registry, options=resolved).map_struct(source, dest_type)


def map_slice(
    source: Any,
    dest_type: type[T],
    *,
    registry: ConverterRegistry | None = None,
    options: MappingOptions | None = None,
    **option_values: Any,
) -> list[T]:
    """Map a sequence of record instances into a list of ``dest_type``."""
    resolved = _resolve_options(options, option_values)
    return Mapper(registry=registry, options=resolved).map_slice(source, dest_type)


def register_converter(source_type: type, dest_type: Any, converter: Any) -> None:
    """Register a converter on the process-wide registry."""
    from record_mapper.converters.registry import register_converter as _impl

    _impl(source_type, dest_type, converter)


def to_named_args(record: object) -> dict[str, Any]:
    """Return a column-name to value mapping for a record instance."""
    return named_args(record)
