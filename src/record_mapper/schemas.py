"""Pydantic schemas for runtime validation of mapper inputs."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Upper bound for max_depth. One nesting level uses a few interpreter frames,
# so this stays below the default recursion limit.
MAX_DEPTH_LIMIT = 200


class MappingConfig(BaseModel):
    """Validated mapping options."""

    model_config = ConfigDict(extra="forbid")

    strict: bool = False
    max_depth: int = Field(default=64, ge=1, le=MAX_DEPTH_LIMIT)
    warn_on_truncation: bool = True


class ConverterRegistration(BaseModel):
    """Validated input for converter registration."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    source_type: Any
    dest_type: Any
    converter: Callable[..., Any]

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: Any) -> Any:
        if not isinstance(value, type):
            raise ValueError("source_type must be a class.")
        return value

    @field_validator("dest_type")
    @classmethod
    def _validate_dest_type(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("dest_type cannot be None.")
        return value


class ConverterModuleConfig(BaseModel):
    """Validated input for converter module loading."""

    model_config = ConfigDict(extra="forbid")

    module_or_path: str = Field(min_length=1)

    @field_validator("module_or_path")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("module_or_path cannot be blank.")
        return value
