# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the analysis engine once and capture its violation signal."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..config.resolver import RuleConfiguration
from ..constants import DEFAULT_ENGINE, VIOLATIONS_PROPERTY
from ..logging import LOGGER
from ..reports import ReportFormat, ReportSet
from .interfaces import EngineProject, EngineRequest, FormatterSpec
from .loader import EngineLoader


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Outcome of a single engine execution."""

    violations_found: bool


class EngineInvoker:
    """Register the engine, wire formatters and properties, and execute it once."""

    def __init__(
        self,
        loader: EngineLoader | None = None,
        *,
        entry_point: str = DEFAULT_ENGINE,
        violations_property: str = VIOLATIONS_PROPERTY,
    ) -> None:
        """Create an invoker.

        Args:
            loader: Loader used to register the engine entry point.
            entry_point: Logical engine name or ``module:attribute`` override,
                for engines whose entry point was renamed between versions.
            violations_property: Property the engine sets when it records a
                violation.
        """

        self._loader = loader or EngineLoader()
        self.entry_point = entry_point
        self.violations_property = violations_property

    def invoke(
        self,
        files: Iterable[Path],
        classpath: Iterable[Path],
        analysis_classpath: Iterable[Path],
        config: RuleConfiguration,
        reports: ReportSet,
        *,
        show_violations: bool = True,
    ) -> InvocationResult:
        """Execute the engine over ``files``.

        Args:
            files: Source files to analyse.
            classpath: Locations holding the engine library.
            analysis_classpath: Locations holding the compiled code under analysis.
            config: Resolved rule configuration.
            reports: Report set; every enabled report gets its own formatter.
            show_violations: Attach a console formatter when true.

        Returns:
            InvocationResult: Whether the engine recorded any violation.

        Raises:
            EngineUnavailable: If the engine cannot be registered.
            ConfigError: If the configuration document cannot be materialised.
        """

        engine = self._loader.load(self.entry_point, tuple(Path(entry) for entry in classpath))
        reports.validate()
        request = EngineRequest(
            config_file=config.as_file(),
            files=tuple(Path(item) for item in files),
            failure_property=self.violations_property,
            fail_on_violation=False,
            classpath=tuple(Path(entry) for entry in analysis_classpath),
            formatters=self._formatters(reports, show_violations=show_violations),
            properties=config.engine_properties(),
        )
        project = EngineProject()
        LOGGER.debug(
            "invoking engine=%s files=%d formatters=%s",
            self.entry_point,
            len(request.files),
            ",".join(spec.format.value for spec in request.formatters) or "none",
        )
        reports.lock()
        try:
            engine.execute(project, request)
        finally:
            reports.unlock()
        return InvocationResult(violations_found=project.flag(self.violations_property))

    @staticmethod
    def _formatters(reports: ReportSet, *, show_violations: bool) -> tuple[FormatterSpec, ...]:
        formatters: list[FormatterSpec] = []
        if show_violations:
            formatters.append(FormatterSpec(ReportFormat.PLAIN))
        formatters.extend(FormatterSpec(report.format, report.destination) for report in reports.enabled())
        return tuple(formatters)


__all__ = ["EngineInvoker", "InvocationResult"]
