# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map an engine's violation signal to the outcome of the task run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .console import as_clickable_file_url
from .constants import DEFAULT_TOOL_NAME
from .engine.invoker import InvocationResult
from .reports import ReportSet


class OutcomeStatus(str, Enum):
    """Terminal states of a task run."""

    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Terminal value of a task run; ``message`` is set unless the run succeeded."""

    status: OutcomeStatus
    message: str | None = None

    @classmethod
    def success(cls) -> ExecutionOutcome:
        return cls(OutcomeStatus.SUCCESS)

    @classmethod
    def warning(cls, message: str) -> ExecutionOutcome:
        return cls(OutcomeStatus.WARNING, message)

    @classmethod
    def failure(cls, message: str) -> ExecutionOutcome:
        return cls(OutcomeStatus.FAILURE, message)

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILURE


class FailurePolicy:
    """Decide between success, a warning, and a build-stopping failure."""

    def __init__(
        self,
        *,
        url_renderer: Callable[[Path], str] = as_clickable_file_url,
        tool_name: str = DEFAULT_TOOL_NAME,
    ) -> None:
        """Create a policy.

        Args:
            url_renderer: Renders a report destination as a terminal link.
            tool_name: Engine name used as the message prefix.
        """

        self._url_renderer = url_renderer
        self._tool_name = tool_name

    def message(self, reports: ReportSet) -> str:
        """Return the violation message, referencing the first enabled report."""

        message = f"{self._tool_name} rule violations were found."
        report = reports.first_enabled()
        if report is not None and report.destination is not None:
            message += f" See the report at: {self._url_renderer(report.destination)}"
        return message

    def decide(self, result: InvocationResult, ignore_failures: bool, reports: ReportSet) -> ExecutionOutcome:
        """Return the outcome for ``result``.

        Args:
            result: Violation signal captured from the engine.
            ignore_failures: Downgrade violations to a warning when true.
            reports: Report set used to reference a report in the message.

        Returns:
            ExecutionOutcome: ``success`` without violations, otherwise a
            warning or a failure carrying the violation message.
        """

        if not result.violations_found:
            return ExecutionOutcome.success()
        message = self.message(reports)
        if ignore_failures:
            return ExecutionOutcome.warning(message)
        return ExecutionOutcome.failure(message)


__all__ = ["ExecutionOutcome", "FailurePolicy", "OutcomeStatus"]
