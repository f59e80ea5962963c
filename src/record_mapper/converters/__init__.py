"""Converter interfaces and registry for custom value conversion."""

from .base import Converter
from .registry import (
    ConverterRegistry,
    create_default_registry,
    get_default_registry,
    register_converter,
)

__all__ = [
    "Converter",
    "ConverterRegistry",
    "create_default_registry",
    "get_default_registry",
    "register_converter",
]
