"""Converter protocol for custom value conversion."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Converter(Protocol):
    """Protocol implemented by registered converters."""

    def __call__(self, value: Any, dest_type: Any) -> Any:
        """Convert one source value into the destination type.

        Parameters
        ----------
        value : Any
            Source value; never ``None``.
        dest_type : Any
            Normalized destination type the value is converted for.

        Returns
        -------
        Any
            Converted value. It should be an instance of ``dest_type``, or at
            least natively convertible to it.

        Raises
        ------
        MappingError
            Propagated unchanged to the caller.
        Exception
            Any other exception is reported as ``ConverterError``.
        """
