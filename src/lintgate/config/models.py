# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the check task."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..constants import DEFAULT_CONFIG_PATH, DEFAULT_ENGINE
from ..resources import FileTextResource, StringTextResource, TextResource, UrlTextResource


class ReportSettings(BaseModel):
    """Settings for a single file-backed report."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    enabled: bool = False
    destination: Path | None = None

    @model_validator(mode="after")
    def _require_destination(self) -> ReportSettings:
        """Reject enabled reports that have nowhere to write to."""

        if self.enabled and self.destination is None:
            raise ValueError("an enabled report requires a destination")
        return self


class ReportsSettings(BaseModel):
    """Typed report settings with one field per supported file format.

    Field order is the report priority used when referencing a report in
    failure messages.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    xml: ReportSettings = Field(default_factory=ReportSettings)
    sarif: ReportSettings = Field(default_factory=ReportSettings)


class CheckTaskSettings(BaseModel):
    """Everything a check task needs, validated eagerly."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path = Field(default_factory=Path)
    source: list[Path] = Field(default_factory=list)
    config_file: Path | None = None
    config_text: str | None = None
    config_url: str | None = None
    config_properties: dict[str, Any] = Field(default_factory=dict)
    ignore_failures: bool = False
    show_violations: bool = True
    engine: str = DEFAULT_ENGINE
    engine_classpath: list[Path] = Field(default_factory=list)
    classpath: list[Path] = Field(default_factory=list)
    reports: ReportsSettings = Field(default_factory=ReportsSettings)

    @model_validator(mode="after")
    def _single_config_source(self) -> CheckTaskSettings:
        """Ensure at most one configuration document source is declared."""

        declared = [
            name
            for name, value in (
                ("config_file", self.config_file),
                ("config_text", self.config_text),
                ("config_url", self.config_url),
            )
            if value is not None
        ]
        if len(declared) > 1:
            raise ValueError(f"only one of {', '.join(declared)} may be set")
        return self

    def config_resource(self) -> TextResource:
        """Return the text resource holding the rule configuration.

        Returns:
            TextResource: Resource built from whichever source is declared,
            defaulting to ``config/checkstyle/checkstyle.xml`` under ``root``.
        """

        if self.config_text is not None:
            return StringTextResource(self.config_text)
        if self.config_url is not None:
            return UrlTextResource(self.config_url)
        path = self.config_file if self.config_file is not None else DEFAULT_CONFIG_PATH
        return FileTextResource(path if path.is_absolute() else self.root / path)


__all__ = ["CheckTaskSettings", "ReportSettings", "ReportsSettings"]
