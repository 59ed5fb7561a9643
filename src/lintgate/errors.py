# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception taxonomy shared by the task, the engine layer and the CLI."""

from __future__ import annotations


class LintGateError(RuntimeError):
    """Base class for every error raised by lintgate."""


class ConfigError(LintGateError):
    """Raised when configuration input is invalid or cannot be materialised."""


class EngineUnavailable(LintGateError):
    """Raised when the analysis engine entry point cannot be registered."""

    def __init__(self, entry_point: str, reason: str) -> None:
        """Initialise the error with the entry point that failed to load.

        Args:
            entry_point: Logical name or ``module:attribute`` path of the engine.
            reason: Human-readable explanation of the registration failure.
        """

        super().__init__(f"Unable to register analysis engine '{entry_point}': {reason}")
        self.entry_point = entry_point
        self.reason = reason


class EngineInternalError(LintGateError):
    """Raised by engines for failures unrelated to rule violations."""


class TaskFailure(LintGateError):
    """Build-stopping failure raised when violations are not ignored."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the failure with the user-facing message and exit status.

        Args:
            message: Message shown to the user, produced by the failure policy.
            exit_code: Exit status the surrounding build should terminate with.
        """

        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


__all__ = [
    "ConfigError",
    "EngineInternalError",
    "EngineUnavailable",
    "LintGateError",
    "TaskFailure",
]
