# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report descriptors and the report set owned by a check task."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Final

from .config.models import ReportSettings, ReportsSettings
from .errors import ConfigError


class ReportFormat(str, Enum):
    """Enumerate the output formats understood by engines."""

    PLAIN = "plain"
    XML = "xml"
    SARIF = "sarif"

    @property
    def file_backed(self) -> bool:
        """Return ``True`` for formats written to a destination file."""

        return self is not ReportFormat.PLAIN


FILE_REPORT_FORMATS: Final[tuple[ReportFormat, ...]] = (ReportFormat.XML, ReportFormat.SARIF)
"""File-backed formats in declared priority order."""


@dataclass(frozen=True, slots=True)
class ReportDescriptor:
    """Output report: its format, whether it is produced, and where it goes.

    Descriptors are immutable snapshots; change them through :class:`ReportSet`.
    """

    format: ReportFormat
    enabled: bool = False
    destination: Path | None = None

    @property
    def name(self) -> str:
        return self.format.value


class ReportSet:
    """Ordered, independently togglable file reports.

    Formats are held in declared priority order; that order, not the order in
    which reports are configured, decides :meth:`first_enabled`.
    """

    def __init__(self, formats: tuple[ReportFormat, ...] = FILE_REPORT_FORMATS) -> None:
        """Create a report set with one disabled descriptor per format.

        Args:
            formats: File-backed formats in priority order.

        Raises:
            ValueError: If a format is repeated or is not file-backed.
        """

        if len(set(formats)) != len(formats):
            raise ValueError("report formats must be unique")
        console_only = [fmt.value for fmt in formats if not fmt.file_backed]
        if console_only:
            raise ValueError(f"console-only formats cannot be file reports: {', '.join(console_only)}")
        self._descriptors: dict[ReportFormat, ReportDescriptor] = {fmt: ReportDescriptor(fmt) for fmt in formats}
        self._locked = False

    def reports(self) -> tuple[ReportDescriptor, ...]:
        """Return every descriptor in declared order."""

        return tuple(self._descriptors.values())

    def __iter__(self) -> Iterator[ReportDescriptor]:
        return iter(self.reports())

    def get(self, name: str | ReportFormat) -> ReportDescriptor:
        """Return the descriptor for ``name``.

        Args:
            name: Format name (case-insensitive) or :class:`ReportFormat`.

        Raises:
            KeyError: If the format is not part of this set.
        """

        try:
            fmt = name if isinstance(name, ReportFormat) else ReportFormat(name.lower())
            return self._descriptors[fmt]
        except (ValueError, KeyError):
            known = ", ".join(fmt.value for fmt in self._descriptors)
            raise KeyError(f"Unknown report '{name}'; known reports: {known}") from None

    __getitem__ = get

    def enable(self, name: str | ReportFormat, destination: Path | str | None = None) -> ReportDescriptor:
        """Enable a report, optionally setting its destination.

        Raises:
            ConfigError: If the report would be enabled without a destination.
        """

        self._check_mutable()
        descriptor = self.get(name)
        target = Path(destination) if destination is not None else descriptor.destination
        if target is None:
            raise ConfigError(f"The {descriptor.name} report requires a destination")
        return self._store(replace(descriptor, enabled=True, destination=target))

    def disable(self, name: str | ReportFormat) -> ReportDescriptor:
        self._check_mutable()
        return self._store(replace(self.get(name), enabled=False))

    def set_destination(self, name: str | ReportFormat, destination: Path | str) -> ReportDescriptor:
        self._check_mutable()
        return self._store(replace(self.get(name), destination=Path(destination)))

    def configure(
        self,
        settings: ReportsSettings | Mapping[str, ReportSettings | Mapping[str, object]] | None = None,
        **reports: ReportSettings | Mapping[str, object],
    ) -> ReportSet:
        """Apply typed report settings by format name.

        Settings are validated before any descriptor is touched, so a bad entry
        leaves the set unchanged.

        Args:
            settings: Settings for several reports at once.
            **reports: Per-format settings keyed by format name.

        Returns:
            ReportSet: ``self`` for chaining.

        Raises:
            ConfigError: If a format is unknown or its settings are invalid.
        """

        self._check_mutable()
        combined: dict[str, ReportSettings | Mapping[str, object]] = {}
        if isinstance(settings, ReportsSettings):
            combined.update({name: getattr(settings, name) for name in ReportsSettings.model_fields})
        elif settings is not None:
            combined.update(settings)
        combined.update(reports)

        validated: list[tuple[ReportDescriptor, ReportSettings]] = []
        for name, raw in combined.items():
            try:
                descriptor = self.get(name)
            except KeyError as exc:
                raise ConfigError(str(exc.args[0])) from exc
            try:
                entry = raw if isinstance(raw, ReportSettings) else ReportSettings.model_validate(raw)
            except ValueError as exc:
                raise ConfigError(f"Invalid settings for the {descriptor.name} report: {exc}") from exc
            validated.append((descriptor, entry))

        for descriptor, entry in validated:
            destination = entry.destination if entry.destination is not None else descriptor.destination
            self._store(replace(descriptor, enabled=entry.enabled, destination=destination))
        return self

    def enabled(self) -> tuple[ReportDescriptor, ...]:
        """Return the enabled descriptors in declared order."""

        return tuple(descriptor for descriptor in self._descriptors.values() if descriptor.enabled)

    def first_enabled(self) -> ReportDescriptor | None:
        """Return the highest-priority enabled report, if any."""

        return next(iter(self.enabled()), None)

    def validate(self) -> None:
        """Ensure every enabled report has a destination.

        Raises:
            ConfigError: If an enabled report has no destination.
        """

        for descriptor in self.enabled():
            if descriptor.destination is None:
                raise ConfigError(f"The {descriptor.name} report is enabled but has no destination")

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """Reject further mutation until :meth:`unlock` is called."""

        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _store(self, descriptor: ReportDescriptor) -> ReportDescriptor:
        self._descriptors[descriptor.format] = descriptor
        return descriptor

    def _check_mutable(self) -> None:
        if self._locked:
            raise RuntimeError("reports cannot be reconfigured while the engine is running")

    def __repr__(self) -> str:
        enabled = ", ".join(descriptor.name for descriptor in self.enabled()) or "none"
        return f"ReportSet(enabled={enabled})"


__all__ = ["FILE_REPORT_FORMATS", "ReportDescriptor", "ReportFormat", "ReportSet"]
