"""Typed option objects shared across mapping entry points."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from record_mapper.errors import ConfigError
from record_mapper.schemas import MappingConfig

ENV_PREFIX = "RECORD_MAPPER_"


@dataclass(frozen=True)
class MappingOptions:
    """Mapping behavior switches.

    Parameters
    ----------
    strict : bool, default=False
        Raise ``UnmatchedFieldError`` when a public source field has no
        destination counterpart instead of skipping it.
    max_depth : int, default=64
        Maximum nesting of records, sequences and mappings.
    warn_on_truncation : bool, default=True
        Log a warning when a fixed-size destination drops source elements.
    """

    strict: bool = False
    max_depth: int = 64
    warn_on_truncation: bool = True


def build_mapping_options(**raw: Any) -> MappingOptions:
    """Build typed options from API / CLI parameters.

    Unknown names are rejected like invalid values.

    Raises
    ------
    ConfigError
        If a value fails validation.
    """
    try:
        config = MappingConfig(**raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid mapping options: {exc}") from exc
    return MappingOptions(
        strict=config.strict,
        max_depth=config.max_depth,
        warn_on_truncation=config.warn_on_truncation,
    )


def options_from_env(environ: Mapping[str, str] | None = None) -> MappingOptions:
    """Read ``RECORD_MAPPER_*`` variables into mapping options.

    Parameters
    ----------
    environ : Mapping[str, str] | None, default=None
        Environment to read; ``os.environ`` when omitted.

    Returns
    -------
    MappingOptions
        Options with unset variables left at their defaults.

    Raises
    ------
    ConfigError
        If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    raw: dict[str, str] = {}
    for name in MappingConfig.model_fields:
        value = env.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            raw[name] = value
    try:
        config = MappingConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid mapping options in environment: {exc}") from exc
    return MappingOptions(
        strict=config.strict,
        max_depth=config.max_depth,
        warn_on_truncation=config.warn_on_truncation,
    )
