# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project-wide constants."""

from __future__ import annotations

from pathlib import Path
from typing import Final

DEFAULT_ENGINE: Final[str] = "checkstyle"
"""Logical name of the engine registered when no override is configured."""

ENGINE_ENTRY_POINT_GROUP: Final[str] = "lintgate.engines"

VIOLATIONS_PROPERTY: Final[str] = "lintgate.checkstyle.violations"
"""Engine property set when at least one violation was recorded."""

DEFAULT_CONFIG_PATH: Final[Path] = Path("config") / "checkstyle" / "checkstyle.xml"
DEFAULT_TOOL_NAME: Final[str] = "Checkstyle"

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
STANDALONE_CONFIG_FILENAME: Final[str] = "lintgate.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintgate"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENGINE",
    "DEFAULT_TOOL_NAME",
    "ENGINE_ENTRY_POINT_GROUP",
    "PYPROJECT_FILENAME",
    "PYPROJECT_SECTION_KEY",
    "PYPROJECT_TOOL_KEY",
    "STANDALONE_CONFIG_FILENAME",
    "VIOLATIONS_PROPERTY",
]
