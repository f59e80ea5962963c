"""Error taxonomy for record mapping."""

from __future__ import annotations

from enum import StrEnum

type PathSegment = str | int


class ErrorKind(StrEnum):
    """Machine-readable category of a mapping failure."""

    INVALID_INPUT = "invalid_input"
    INCOMPATIBLE_TYPES = "incompatible_types"
    INCOMPATIBLE_CONVERTER_OUTPUT = "incompatible_converter_output"
    CONVERTER_FAILED = "converter_failed"
    UNMATCHED_FIELD = "unmatched_field"
    DEPTH_EXCEEDED = "depth_exceeded"


class RecordMapperError(Exception):
    """Base class for all package errors."""

    exit_code = 1


class RegistryError(RecordMapperError):
    """Raised on converter registry misuse."""

    exit_code = 3


class ConfigError(RecordMapperError):
    """Raised when mapping options fail validation."""

    exit_code = 2


class MappingError(RecordMapperError):
    """Base class for failures raised while mapping a value.

    Parameters
    ----------
    reason : str
        Human-readable failure description, without positional context.
    path : tuple[str | int, ...], default=()
        Position of the failing value, outermost segment first. String
        segments are field names, integers are sequence indexes.

    Notes
    -----
    Entry points and recursive strategies call :meth:`prefixed` while the
    error bubbles outwards, so the final path reads from the top-level record
    down to the failing slot.
    """

    kind: ErrorKind
    exit_code = 4

    def __init__(self, reason: str, path: tuple[PathSegment, ...] = ()) -> None:
        self.reason = reason
        self.path = path
        super().__init__(self._render())

    def prefixed(self, segment: PathSegment) -> MappingError:
        """Return this error with ``segment`` prepended to its path."""
        self.path = (segment, *self.path)
        self.args = (self._render(),)
        return self

    @property
    def location(self) -> str:
        """Render the path as ``field.nested[2].leaf``."""
        return format_path(self.path)

    def _render(self) -> str:
        if not self.path:
            return self.reason
        return f"{self.location}: {self.reason}"


class InvalidInputError(MappingError):
    """Top-level source or destination has the wrong shape."""

    kind = ErrorKind.INVALID_INPUT


class IncompatibleTypesError(MappingError):
    """No mapping strategy can turn the source value into the destination type."""

    kind = ErrorKind.INCOMPATIBLE_TYPES

    def __init__(
        self,
        source_type: str,
        dest_type: str,
        path: tuple[PathSegment, ...] = (),
    ) -> None:
        self.source_type = source_type
        self.dest_type = dest_type
        super().__init__(f"cannot assign {source_type} to {dest_type}", path)


class IncompatibleConverterOutputError(MappingError):
    """A registered converter returned a value the destination cannot hold."""

    kind = ErrorKind.INCOMPATIBLE_CONVERTER_OUTPUT

    def __init__(
        self,
        output_type: str,
        dest_type: str,
        path: tuple[PathSegment, ...] = (),
    ) -> None:
        self.output_type = output_type
        self.dest_type = dest_type
        super().__init__(
            f"converter returned incompatible type {output_type} for dest {dest_type}",
            path,
        )


class ConverterError(MappingError):
    """A registered converter raised while converting a value."""

    kind = ErrorKind.CONVERTER_FAILED


class UnmatchedFieldError(MappingError):
    """Strict mode found a source field without a destination counterpart."""

    kind = ErrorKind.UNMATCHED_FIELD


class DepthLimitError(MappingError):
    """Nesting exceeded the configured maximum depth."""

    kind = ErrorKind.DEPTH_EXCEEDED


def format_path(path: tuple[PathSegment, ...]) -> str:
    """Join path segments into dotted / bracketed notation.

    Parameters
    ----------
    path : tuple[str | int, ...]
        Field names and sequence indexes, outermost first. Mapping keys are
        stored pre-rendered as ``"[key]"`` strings.

    Returns
    -------
    str
        Rendered path, e.g. ``"[3].inner.tags[1]"``.
    """
    rendered = ""
    for segment in path:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif segment.startswith("["):
            rendered += segment
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = segment
    return rendered
