"""Struct and slice mapping entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from record_mapper.errors import InvalidInputError, MappingError
from record_mapper.mapping.assign import AssignContext, map_record
from record_mapper.mapping.typeinfo import (
    is_record_instance,
    is_source_sequence,
    record_kind,
    type_label,
    zero_value,
)
from record_mapper.options import MappingOptions

if TYPE_CHECKING:
    from record_mapper.converters.registry import ConverterRegistry

T = TypeVar("T")


class Mapper:
    """Map records into destination record types.

    Parameters
    ----------
    registry : ConverterRegistry | None, default=None
        Converter registry consulted when no direct or native conversion
        applies. Defaults to the process-wide registry.
    options : MappingOptions | None, default=None
        Behavior switches. Defaults to permissive mapping.

    Notes
    -----
    A ``Mapper`` holds no per-call state and may be shared across threads
    once its registry is no longer being written to.
    """

    def __init__(
        self,
        registry: ConverterRegistry | None = None,
        options: MappingOptions | None = None,
    ) -> None:
        if registry is None:
            from record_mapper.converters.registry import get_default_registry

            registry = get_default_registry()
        self._registry = registry
        self._options = options or MappingOptions()

    @property
    def registry(self) -> ConverterRegistry:
        """Converter registry used by this mapper."""
        return self._registry

    @property
    def options(self) -> MappingOptions:
        """Options used by this mapper."""
        return self._options

    def map_struct(self, source: Any, dest_type: type[T]) -> T:
        """Map a record instance into a new ``dest_type`` instance.

        Parameters
        ----------
        source : Any
            Record instance (dataclass, pydantic model or NamedTuple), or
            ``None``.
        dest_type : type[T]
            Destination record type.

        Returns
        -------
        T
            New destination record; the zero value of ``dest_type`` when
            ``source`` is ``None``.

        Raises
        ------
        InvalidInputError
            If ``dest_type`` is not a record type or ``source`` is not a
            record instance.
        MappingError
            On the first field that cannot be mapped; ``error.path`` locates
            the failing field.
        """
        if record_kind(dest_type) is None:
            raise InvalidInputError(
                f"destination must be a record type, got {type_label(dest_type)}"
            )
        if source is None:
            return zero_value(dest_type)
        if not is_record_instance(source):
            raise InvalidInputError(
                f"source must be a record instance, got {type_label(type(source))}"
            )
        context = AssignContext(registry=self._registry, options=self._options)
        return map_record(source, dest_type, context)

    def map_slice(self, source: Any, dest_type: type[T]) -> list[T]:
        """Map every element of a sequence of records.

        Parameters
        ----------
        source : Any
            Sequence of record instances, where ``None`` elements are allowed,
            or ``None``.
        dest_type : type[T]
            Destination record type.

        Returns
        -------
        list[T]
            One destination record per element, in order; ``None`` elements
            become zero values. Always a list, empty for ``None`` or empty
            input.

        Raises
        ------
        InvalidInputError
            If ``source`` is not a sequence.
        MappingError
            On the first failing element; ``error.path`` starts with its
            index. No partial result is returned.
        """
        if source is None:
            return []
        if not is_source_sequence(source):
            raise InvalidInputError(
                f"source must be a sequence, got {type_label(type(source))}"
            )
        results: list[T] = []
        for index, element in enumerate(source):
            try:
                results.append(self.map_struct(element, dest_type))
            except MappingError as exc:
                exc.prefixed(index)
                raise
        return results

