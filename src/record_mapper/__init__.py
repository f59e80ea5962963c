"""Top-level API for structural record mapping."""

from __future__ import annotations

from record_mapper.api import map_slice, map_struct, register_converter, to_named_args
from record_mapper.converters.registry import (
    ConverterRegistry,
    create_default_registry,
    get_default_registry,
)
from record_mapper.errors import (
    ConfigError,
    ConverterError,
    DepthLimitError,
    ErrorKind,
    IncompatibleConverterOutputError,
    IncompatibleTypesError,
    InvalidInputError,
    MappingError,
    RecordMapperError,
    RegistryError,
    UnmatchedFieldError,
)
from record_mapper.mapping.mapper import Mapper
from record_mapper.mapping.typeinfo import zero_value
from record_mapper.options import MappingOptions, build_mapping_options, options_from_env

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConverterError",
    "ConverterRegistry",
    "DepthLimitError",
    "ErrorKind",
    "IncompatibleConverterOutputError",
    "IncompatibleTypesError",
    "InvalidInputError",
    "Mapper",
    "MappingError",
    "MappingOptions",
    "RecordMapperError",
    "RegistryError",
    "UnmatchedFieldError",
    "build_mapping_options",
    "create_default_registry",
    "get_default_registry",
    "map_slice",
    "map_struct",
    "options_from_env",
    "register_converter",
    "to_named_args",
    "zero_value",
]
