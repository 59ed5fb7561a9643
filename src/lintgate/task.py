# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The check task and the runner that executes it."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from .config.models import CheckTaskSettings, ReportSettings, ReportsSettings
from .config.resolver import ConfigResolver, TaskConfigResolver
from .constants import DEFAULT_CONFIG_PATH, DEFAULT_ENGINE
from .engine.invoker import EngineInvoker
from .engine.loader import EngineLoader
from .errors import TaskFailure
from .logging import TaskLogger
from .policy import ExecutionOutcome, FailurePolicy, OutcomeStatus
from .reports import ReportSet
from .resources import FileTextResource, TextResource


class CheckTask:
    """Runs the analysis engine against some source files.

    The task holds its configuration across runs; every run starts from a
    fresh violation state.
    """

    def __init__(
        self,
        *,
        source: Iterable[Path | str] = (),
        config: TextResource | None = None,
        config_properties: Mapping[str, Any] | None = None,
        engine_classpath: Iterable[Path | str] = (),
        classpath: Iterable[Path | str] = (),
        ignore_failures: bool = False,
        show_violations: bool = True,
        engine: str = DEFAULT_ENGINE,
        reports: ReportSet | None = None,
    ) -> None:
        self.source: list[Path] = [Path(item) for item in source]
        self.config: TextResource = config if config is not None else FileTextResource(DEFAULT_CONFIG_PATH)
        self.config_properties: dict[str, Any] = dict(config_properties or {})
        self.engine_classpath: list[Path] = [Path(item) for item in engine_classpath]
        self.classpath: list[Path] = [Path(item) for item in classpath]
        self.ignore_failures = ignore_failures
        self.show_violations = show_violations
        self.engine = engine
        self._reports = reports if reports is not None else ReportSet()

    @classmethod
    def from_settings(cls, settings: CheckTaskSettings) -> CheckTask:
        """Build a task from validated settings."""

        task = cls(
            source=settings.source,
            config=settings.config_resource(),
            config_properties=settings.config_properties,
            engine_classpath=settings.engine_classpath,
            classpath=settings.classpath,
            ignore_failures=settings.ignore_failures,
            show_violations=settings.show_violations,
            engine=settings.engine,
        )
        task.configure_reports(settings.reports)
        return task

    @property
    def config_file(self) -> Path:
        """The rule-configuration file; materialised for non-file resources."""

        if isinstance(self.config, FileTextResource):
            return self.config.path
        return self.config.as_file()

    @config_file.setter
    def config_file(self, path: Path | str) -> None:
        self.config = FileTextResource(path)

    @property
    def reports(self) -> ReportSet:
        """The reports produced by this task."""

        return self._reports

    def configure_reports(
        self,
        settings: ReportsSettings | Mapping[str, ReportSettings | Mapping[str, object]] | None = None,
        **reports: ReportSettings | Mapping[str, object],
    ) -> ReportSet:
        """Configure reports by format name, e.g. ``configure_reports(xml={"enabled": True, ...})``."""

        return self._reports.configure(settings, **reports)

    def run(self, runner: TaskRunner | None = None) -> ExecutionOutcome:
        """Execute the task with ``runner`` or a default runner."""

        return (runner or TaskRunner()).run(self)


class TaskRunner:
    """Sequence configuration resolution, engine invocation and the failure policy."""

    def __init__(
        self,
        *,
        loader: EngineLoader | None = None,
        policy: FailurePolicy | None = None,
        logger: TaskLogger | None = None,
        resolver_factory: Callable[[CheckTask], ConfigResolver] = TaskConfigResolver,
        invoker_factory: Callable[[str], EngineInvoker] | None = None,
    ) -> None:
        """Create a runner.

        Args:
            loader: Engine loader shared by every invocation of this runner.
            policy: Failure policy deciding the outcome.
            logger: Logger receiving the warning for ignored violations.
            resolver_factory: Builds the configuration resolver for a task.
            invoker_factory: Builds the engine invoker for an entry-point name.
        """

        self._loader = loader or EngineLoader()
        self._policy = policy or FailurePolicy()
        self._logger = logger or TaskLogger()
        self._resolver_factory = resolver_factory
        self._invoker_factory = invoker_factory or self._default_invoker

    def _default_invoker(self, entry_point: str) -> EngineInvoker:
        return EngineInvoker(self._loader, entry_point=entry_point)

    def run(self, task: CheckTask) -> ExecutionOutcome:
        """Run ``task`` once.

        Args:
            task: Task to execute.

        Returns:
            ExecutionOutcome: ``success`` or ``warning`` outcome.

        Raises:
            TaskFailure: If violations were found and are not ignored.
            ConfigError: If the configuration cannot be resolved.
            EngineUnavailable: If the engine cannot be registered.
        """

        task.reports.validate()
        resolver = self._resolver_factory(task)
        try:
            config = resolver.resolve_config()
            classpath = resolver.resolve_classpath()
            invoker = self._invoker_factory(task.engine)
            result = invoker.invoke(
                task.source,
                classpath.engine,
                classpath.analysis,
                config,
                task.reports,
                show_violations=task.show_violations,
            )
        finally:
            task.config.close()
        outcome = self._policy.decide(result, task.ignore_failures, task.reports)
        return self.surface(outcome)

    def surface(self, outcome: ExecutionOutcome) -> ExecutionOutcome:
        """Report ``outcome`` to the user and the build.

        Raises:
            TaskFailure: For failure outcomes, carrying the policy message.
        """

        if outcome.status is OutcomeStatus.FAILURE:
            raise TaskFailure(outcome.message or "")
        if outcome.status is OutcomeStatus.WARNING and outcome.message:
            self._logger.warn(outcome.message)
        else:
            self._logger.debug("status=success")
        return outcome


__all__ = ["CheckTask", "TaskRunner"]
