# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Contracts shared between the engine invoker and engine implementations."""

# pylint: disable=too-few-public-methods

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TypeAlias, runtime_checkable

from ..reports import ReportFormat


@dataclass(slots=True)
class EngineProject:
    """Mutable property store shared with the engine for a single execution.

    Engines signal results by setting named properties; the invoker reads them
    back once the engine returns.
    """

    properties: dict[str, str] = field(default_factory=dict)

    def set_property(self, name: str, value: str = "true") -> None:
        self.properties[name] = value

    def flag(self, name: str) -> bool:
        """Return ``True`` when ``name`` was set to a non-empty value."""

        return bool(self.properties.get(name))


@dataclass(frozen=True, slots=True)
class FormatterSpec:
    """Output formatter attached to an engine execution.

    ``destination`` is ``None`` for console formatters.
    """

    format: ReportFormat
    destination: Path | None = None

    @property
    def to_console(self) -> bool:
        return self.destination is None


@dataclass(frozen=True, slots=True)
class EngineRequest:
    """Everything an engine receives for one execution."""

    config_file: Path
    files: tuple[Path, ...]
    failure_property: str
    fail_on_violation: bool = False
    classpath: tuple[Path, ...] = ()
    formatters: tuple[FormatterSpec, ...] = ()
    properties: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class Engine(Protocol):
    """External analysis engine executed once per task run."""

    def execute(self, project: EngineProject, request: EngineRequest) -> None:
        """Analyse ``request.files`` and emit output through ``request.formatters``.

        Args:
            project: Property store; set ``request.failure_property`` when a
                violation is recorded.
            request: Execution parameters.

        Raises:
            EngineInternalError: For failures unrelated to rule violations.
        """

        raise NotImplementedError


EngineFactory: TypeAlias = Callable[[Sequence[Path]], Engine]
"""Callable receiving the engine classpath and returning a ready engine."""


__all__ = ["Engine", "EngineFactory", "EngineProject", "EngineRequest", "FormatterSpec"]
