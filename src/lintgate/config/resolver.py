# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve the rule configuration and classpaths consumed by the engine invoker."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..resources import TextResource

if TYPE_CHECKING:
    from ..task import CheckTask


@dataclass(frozen=True, slots=True)
class RuleConfiguration:
    """Rule-configuration document plus the properties substituted into it."""

    document: TextResource
    properties: Mapping[str, Any] = field(default_factory=dict)

    def as_file(self) -> Path:
        """Return the document as a file.

        Raises:
            ConfigError: If the document cannot be materialised.
        """

        return self.document.as_file()

    def engine_properties(self) -> dict[str, str]:
        """Return every property stringified, preserving declaration order."""

        return {str(key): str(value) for key, value in self.properties.items()}


@dataclass(frozen=True, slots=True)
class Classpath:
    """Library locations for the engine and for the code under analysis."""

    engine: tuple[Path, ...] = ()
    analysis: tuple[Path, ...] = ()


@runtime_checkable
class ConfigResolver(Protocol):
    """Supply the rule configuration and classpaths for a single run."""

    def resolve_config(self) -> RuleConfiguration:
        """Return the rule configuration, materialised to a file.

        Raises:
            ConfigError: If the backing document cannot be materialised.
        """

        raise NotImplementedError

    def resolve_classpath(self) -> Classpath:
        """Return the engine and analysis classpaths."""

        raise NotImplementedError


class TaskConfigResolver:
    """Resolve configuration straight from a :class:`~lintgate.task.CheckTask`.

    Results are memoised so repeated calls within one run neither re-download
    nor re-materialise the document.
    """

    def __init__(self, task: CheckTask) -> None:
        self._task = task
        self._config: RuleConfiguration | None = None
        self._classpath: Classpath | None = None

    def resolve_config(self) -> RuleConfiguration:
        if self._config is None:
            config = RuleConfiguration(
                document=self._task.config,
                properties=dict(self._task.config_properties),
            )
            config.as_file()
            self._config = config
        return self._config

    def resolve_classpath(self) -> Classpath:
        if self._classpath is None:
            self._classpath = Classpath(
                engine=_as_paths(self._task.engine_classpath),
                analysis=_as_paths(self._task.classpath),
            )
        return self._classpath


def _as_paths(entries: Sequence[Path | str]) -> tuple[Path, ...]:
    return tuple(Path(entry) for entry in entries)


__all__ = ["Classpath", "ConfigResolver", "RuleConfiguration", "TaskConfigResolver"]
