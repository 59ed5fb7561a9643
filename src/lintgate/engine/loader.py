# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Register analysis engines from an isolated engine classpath.

An engine is named either by a logical name (a built-in such as
``checkstyle`` or an entry point in the ``lintgate.engines`` group) or by an
explicit ``module:attribute`` path. The target is imported with the engine
classpath temporarily placed at the front of :data:`sys.path`. Modules loaded
from the classpath are evicted from :data:`sys.modules` afterwards, so a later
load must find the engine library on its own classpath again.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from importlib import metadata
from pathlib import Path
from types import ModuleType
from typing import Final, cast

from ..constants import DEFAULT_ENGINE, ENGINE_ENTRY_POINT_GROUP
from ..errors import EngineUnavailable
from ..logging import LOGGER
from .interfaces import Engine, EngineFactory

BUILTIN_ENGINES: Final[dict[str, str]] = {
    DEFAULT_ENGINE: "lintgate.engine.checkstyle:CheckstyleEngine",
}
_IMPORTABLE_ARCHIVES: Final[frozenset[str]] = frozenset({".zip", ".whl", ".egg", ".pyz"})
_TARGET_SEPARATOR: Final[str] = ":"


def _importable_entries(classpath: Sequence[Path]) -> list[str]:
    """Return the classpath entries Python can import from."""

    return [str(entry) for entry in classpath if entry.is_dir() or entry.suffix.lower() in _IMPORTABLE_ARCHIVES]


def _loaded_from(module: ModuleType, entries: Sequence[str]) -> bool:
    """Return ``True`` when ``module`` was loaded from one of ``entries``."""

    location = getattr(module, "__file__", None)
    if not location:
        return False
    path = Path(location).resolve()
    return any(path.is_relative_to(Path(entry).resolve()) for entry in entries)


@contextmanager
def isolated_import_path(classpath: Sequence[Path]) -> Iterator[None]:
    """Expose ``classpath`` on :data:`sys.path` for the duration of the block.

    On exit :data:`sys.path` is restored and every module imported from
    ``classpath`` inside the block is dropped from :data:`sys.modules`.
    """

    entries = _importable_entries(classpath)
    original = list(sys.path)
    preloaded = set(sys.modules)
    sys.path[:0] = entries
    importlib.invalidate_caches()
    try:
        yield
    finally:
        sys.path[:] = original
        for name in set(sys.modules) - preloaded:
            module = sys.modules.get(name)
            if module is not None and _loaded_from(module, entries):
                del sys.modules[name]
        importlib.invalidate_caches()


class EngineLoader:
    """Resolve engine names to factories and instantiate engines."""

    def __init__(self, builtins: dict[str, str] | None = None) -> None:
        self._builtins = dict(BUILTIN_ENGINES if builtins is None else builtins)
        self._factories: dict[tuple[str, tuple[Path, ...]], EngineFactory] = {}

    def resolve_target(self, name: str) -> str:
        """Return the ``module:attribute`` target registered for ``name``.

        Args:
            name: Logical engine name or explicit ``module:attribute`` path.

        Returns:
            str: Import target for the engine factory.

        Raises:
            EngineUnavailable: If ``name`` is neither a path nor a known name.
        """

        if _TARGET_SEPARATOR in name:
            return name
        for entry_point in metadata.entry_points(group=ENGINE_ENTRY_POINT_GROUP):
            if entry_point.name == name:
                return entry_point.value
        if name in self._builtins:
            return self._builtins[name]
        known = ", ".join(sorted(self._builtins)) or "none"
        raise EngineUnavailable(name, f"no engine is registered under that name (built-in engines: {known})")

    def load(self, name: str, classpath: Sequence[Path] = ()) -> Engine:
        """Register the engine ``name`` and return a ready instance.

        Args:
            name: Logical engine name or explicit ``module:attribute`` path.
            classpath: Locations holding the engine library.

        Returns:
            Engine: Engine produced by the registered factory.

        Raises:
            EngineUnavailable: If the factory cannot be imported, is not
                callable, rejects the classpath, or returns something that is
                not an engine.
        """

        key = (name, tuple(classpath))
        factory = self._factories.get(key)
        if factory is None:
            factory = self._import_factory(name, classpath)
            self._factories[key] = factory
        try:
            with isolated_import_path(classpath):
                engine = factory(tuple(classpath))
        except ImportError as exc:
            raise EngineUnavailable(name, str(exc)) from exc
        if not isinstance(engine, Engine):
            raise EngineUnavailable(name, f"{type(engine).__name__} does not provide an execute() method")
        LOGGER.debug("registered engine %s as %s", name, type(engine).__name__)
        return engine

    def _import_factory(self, name: str, classpath: Sequence[Path]) -> EngineFactory:
        target = self.resolve_target(name)
        module_name, _, attribute_path = target.partition(_TARGET_SEPARATOR)
        if not module_name or not attribute_path:
            raise EngineUnavailable(name, f"'{target}' is not a module:attribute path")
        with isolated_import_path(classpath):
            try:
                candidate: object = importlib.import_module(module_name)
            except ImportError as exc:
                reason = f"cannot import '{module_name}' from the engine classpath: {exc}"
                raise EngineUnavailable(name, reason) from exc
        for attribute in attribute_path.split("."):
            try:
                candidate = getattr(candidate, attribute)
            except AttributeError as exc:
                raise EngineUnavailable(name, f"'{target}' does not exist") from exc
        if not callable(candidate):
            raise EngineUnavailable(name, f"'{target}' is not callable")
        return cast(EngineFactory, candidate)


__all__ = ["BUILTIN_ENGINES", "EngineLoader", "isolated_import_path"]
