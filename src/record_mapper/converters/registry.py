"""Converter registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
import threading
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType
from typing import Any

from pydantic import ValidationError

from record_mapper.converters.base import Converter
from record_mapper.converters.builtins import BUILTIN_CONVERTERS
from record_mapper.errors import RegistryError
from record_mapper.mapping.typeinfo import type_key
from record_mapper.schemas import ConverterModuleConfig, ConverterRegistration
from record_mapper.types import ConverterKey

logger = logging.getLogger(__name__)


class ConverterRegistry:
    """Registry of converters keyed by ordered ``(source, destination)`` type pair.

    Registration is meant to happen during a single-threaded warm-up phase.
    Writes are serialized by a lock; :meth:`freeze` ends the warm-up phase,
    after which the registry is read-only and safe to share between threads.
    """

    def __init__(self) -> None:
        self._converters: dict[ConverterKey, Converter] = {}
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """Whether registrations are still accepted."""
        return self._frozen

    def freeze(self) -> None:
        """Reject all further registrations."""
        with self._lock:
            self._frozen = True

    def register(self, source_type: type, dest_type: Any, converter: Converter) -> None:
        """Register converter for an ordered type pair, replacing any previous one.

        Parameters
        ----------
        source_type : type
            Runtime class of source values the converter accepts.
        dest_type : Any
            Destination type, as written in destination annotations.
        converter : Converter
            Callable ``(value, dest_type) -> converted``.

        Raises
        ------
        RegistryError
            If the arguments are invalid or the registry is frozen.
        """
        try:
            payload = ConverterRegistration(
                source_type=source_type,
                dest_type=dest_type,
                converter=converter,
            )
        except ValidationError as exc:
            raise RegistryError(f"Invalid converter registration: {exc}") from exc

        key = (type_key(payload.source_type), type_key(payload.dest_type))
        with self._lock:
            if self._frozen:
                raise RegistryError(
                    f"Registry is frozen; cannot register {key[0]} -> {key[1]}."
                )
            if key in self._converters:
                logger.debug("replacing converter %s -> %s", *key)
            self._converters[key] = payload.converter

    def lookup(self, source_type: type, dest_type: Any) -> Converter | None:
        """Return the converter for a type pair, or ``None`` if none is registered."""
        return self._converters.get((type_key(source_type), type_key(dest_type)))

    def keys(self) -> list[ConverterKey]:
        """Return registered type pairs.

        Returns
        -------
        list[tuple[str, str]]
            Sorted ``(source, destination)`` type keys.
        """
        return sorted(self._converters.keys())

    def __len__(self) -> int:
        return len(self._converters)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return (type_key(pair[0]), type_key(pair[1])) in self._converters

    def load_module(self, module_or_path: str) -> None:
        """Load converters from module name or file path.

        .. warning::
            This method executes code from the specified module. Only load
            converter modules from trusted sources.

        Parameters
        ----------
        module_or_path : str
            Python import path or filesystem path to a converter module.
        """
        try:
            config = ConverterModuleConfig(module_or_path=module_or_path)
        except ValidationError as exc:
            raise RegistryError(f"Invalid converter module: {exc}") from exc
        module = _import_module_or_path(config.module_or_path)
        _register_from_module(module, self)
        logger.debug("loaded converter module %s", config.module_or_path)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    .. warning::
        This function executes arbitrary Python code from the specified module
        or file. Only load converter modules from trusted sources.

    Parameters
    ----------
    module_or_path : str
        Python module path or local file path.

    Returns
    -------
    ModuleType
        Imported module object.

    Raises
    ------
    RegistryError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise RegistryError(f"Unable to load module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        # Registered first so annotations of records defined there resolve.
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            del sys.modules[spec.name]
            raise RegistryError(
                f"Unable to execute module {candidate}: {exc}"
            ) from exc
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise RegistryError(
            f"Unable to import module '{module_or_path}': {exc}"
        ) from exc


def _register_entry(registry: ConverterRegistry, entry: object) -> None:
    if not isinstance(entry, tuple) or len(entry) != 3:
        raise RegistryError(
            "Converter entries must be (source_type, dest_type, converter) triples."
        )
    registry.register(*entry)


def _register_from_module(module: ModuleType, registry: ConverterRegistry) -> None:
    """Register converter definitions found in module.

    Parameters
    ----------
    module : ModuleType
        Imported converter module.
    registry : ConverterRegistry
        Registry that receives the converters.
    """
    if hasattr(module, "register_converters"):
        module.register_converters(registry)
        return

    entries = getattr(module, "CONVERTERS", None)
    if entries is not None:
        for entry in entries:
            _register_entry(registry, entry)
        return

    entry = getattr(module, "CONVERTER", None)
    if entry is not None:
        _register_entry(registry, entry)
        return

    raise RegistryError(
        "Converter module must expose register_converters(registry), CONVERTERS, "
        "or CONVERTER."
    )


def register_builtins(registry: ConverterRegistry) -> None:
    """Install the nullable-wrapper converters into ``registry``."""
    for entry in BUILTIN_CONVERTERS:
        registry.register(*entry)


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> ConverterRegistry:
    """Create default converter registry.

    Parameters
    ----------
    extra_modules : Iterable[str] | None, optional
        Additional converter modules to load.

    Returns
    -------
    ConverterRegistry
        Registry with built-in and external converters.
    """
    registry = ConverterRegistry()
    register_builtins(registry)
    for module in extra_modules or []:
        registry.load_module(module)
    return registry


_default_registry: ConverterRegistry | None = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> ConverterRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = create_default_registry()
    return _default_registry


def register_converter(source_type: type, dest_type: Any, converter: Converter) -> None:
    """Register converter on the process-wide registry.

    Call during start-up, before concurrent mapping begins.
    """
    get_default_registry().register(source_type, dest_type, converter)
