"""Unit tests for mapping option validation."""

from __future__ import annotations

import pytest

from record_mapper.errors import ConfigError
from record_mapper.options import MappingOptions, build_mapping_options, options_from_env
from record_mapper.schemas import MAX_DEPTH_LIMIT


def test_defaults() -> None:
    """Default options are permissive and warn on truncation."""
    options = build_mapping_options()
    assert options == MappingOptions(strict=False, max_depth=64, warn_on_truncation=True)


def test_values_are_validated_and_coerced() -> None:
    options = build_mapping_options(strict="yes", max_depth="8")
    assert options.strict is True
    assert options.max_depth == 8


@pytest.mark.parametrize("raw", [{"max_depth": 0}, {"strict": "perhaps"}, {"unknown": 1}])
def test_invalid_values_raise_config_error(raw: dict[str, object]) -> None:
    """Reject bad values and unknown names alike."""
    with pytest.raises(ConfigError, match="Invalid mapping options"):
        build_mapping_options(**raw)


def test_options_from_env_reads_prefixed_variables() -> None:
    env = {
        "RECORD_MAPPER_STRICT": "true",
        "RECORD_MAPPER_MAX_DEPTH": "5",
        "UNRELATED": "1",
    }
    options = options_from_env(env)
    assert options == MappingOptions(strict=True, max_depth=5, warn_on_truncation=True)


def test_options_from_env_defaults_when_unset() -> None:
    assert options_from_env({}) == MappingOptions()


def test_options_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECORD_MAPPER_WARN_ON_TRUNCATION", "false")
    assert options_from_env().warn_on_truncation is False


def test_options_from_env_rejects_invalid_values() -> None:
    with pytest.raises(ConfigError, match="environment"):
        options_from_env({"RECORD_MAPPER_MAX_DEPTH": "-1"})


def test_max_depth_has_upper_bound() -> None:
    with pytest.raises(ConfigError, match="max_depth"):
        build_mapping_options(max_depth=MAX_DEPTH_LIMIT + 1)
    assert build_mapping_options(max_depth=MAX_DEPTH_LIMIT).max_depth == MAX_DEPTH_LIMIT
