# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task settings, settings loading and configuration resolution."""

from __future__ import annotations

from ..errors import ConfigError
from .loader import discover_settings_file, load_settings
from .models import CheckTaskSettings, ReportSettings, ReportsSettings
from .resolver import Classpath, ConfigResolver, RuleConfiguration, TaskConfigResolver

__all__ = [
    "CheckTaskSettings",
    "Classpath",
    "ConfigError",
    "ConfigResolver",
    "ReportSettings",
    "ReportsSettings",
    "RuleConfiguration",
    "TaskConfigResolver",
    "discover_settings_file",
    "load_settings",
]
