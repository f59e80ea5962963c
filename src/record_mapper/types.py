"""Shared type aliases for mapper modules."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

type TypeKey = str
type ConverterKey = tuple[TypeKey, TypeKey]
type ConverterFn = Callable[[Any, Any], Any]
type ConverterEntry = tuple[type, Any, ConverterFn]
