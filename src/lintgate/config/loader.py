# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load check task settings from ``pyproject.toml`` or ``lintgate.toml``."""

from __future__ import annotations

import copy
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..constants import (
    PYPROJECT_FILENAME,
    PYPROJECT_SECTION_KEY,
    PYPROJECT_TOOL_KEY,
    STANDALONE_CONFIG_FILENAME,
)
from ..errors import ConfigError
from ..logging import LOGGER
from .models import CheckTaskSettings

_PATH_FIELDS: Final[tuple[str, ...]] = ("config_file",)
_PATH_LIST_FIELDS: Final[tuple[str, ...]] = ("source", "engine_classpath", "classpath")
_REPORTS_KEY: Final[str] = "reports"
_DESTINATION_KEY: Final[str] = "destination"


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in, recursing into nested tables."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_toml(path: Path) -> dict[str, Any]:
    """Parse ``path`` as TOML.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read settings file '{path}': {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Settings file '{path}' is not valid TOML: {exc}") from exc


def _section_from(path: Path) -> dict[str, Any]:
    """Return the lintgate table declared by ``path``.

    ``pyproject.toml`` files contribute their ``[tool.lintgate]`` table; any
    other TOML file is treated as the table itself.
    """

    data = _read_toml(path)
    if path.name != PYPROJECT_FILENAME:
        return data
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in '{path}' must be a table")
    return dict(section)


def discover_settings_file(root: Path) -> Path | None:
    """Return the settings file that applies to ``root``, if any.

    ``lintgate.toml`` wins over ``pyproject.toml`` when both exist.
    """

    for name in (STANDALONE_CONFIG_FILENAME, PYPROJECT_FILENAME):
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def _resolve(value: Any, root: Path) -> Any:
    if value is None:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _resolve_paths(payload: dict[str, Any], root: Path) -> dict[str, Any]:
    """Resolve every path-valued setting in ``payload`` against ``root``."""

    for key in _PATH_FIELDS:
        if key in payload:
            payload[key] = _resolve(payload[key], root)
    for key in _PATH_LIST_FIELDS:
        if key in payload:
            raw = payload[key]
            items = [raw] if isinstance(raw, (str, Path)) else list(raw)
            payload[key] = [_resolve(item, root) for item in items]
    reports = payload.get(_REPORTS_KEY)
    if isinstance(reports, Mapping):
        resolved_reports: dict[str, Any] = {}
        for name, report in reports.items():
            if isinstance(report, Mapping) and _DESTINATION_KEY in report:
                report = {**report, _DESTINATION_KEY: _resolve(report[_DESTINATION_KEY], root)}
            resolved_reports[name] = report
        payload[_REPORTS_KEY] = resolved_reports
    return payload


def load_settings(
    root: Path,
    *,
    settings_file: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CheckTaskSettings:
    """Build validated task settings for ``root``.

    Args:
        root: Project directory; relative paths resolve against it.
        settings_file: Explicit settings file. When omitted ``lintgate.toml``
            or ``pyproject.toml`` under ``root`` is used if present.
        overrides: Values layered on top of the file contents, typically
            gathered from command-line flags.

    Returns:
        CheckTaskSettings: Validated settings.

    Raises:
        ConfigError: If a settings file cannot be parsed or validation fails.
    """

    source = settings_file if settings_file is not None else discover_settings_file(root)
    document: dict[str, Any] = {}
    if source is not None:
        if not source.is_file():
            raise ConfigError(f"Settings file '{source}' does not exist")
        LOGGER.debug("loading settings from %s", source)
        document = _section_from(source)
    merged = _deep_merge(document, overrides or {})
    payload = _resolve_paths(merged, root)
    payload["root"] = root
    try:
        return CheckTaskSettings.model_validate(payload)
    except ValidationError as exc:
        origin = f" in '{source}'" if source is not None else ""
        raise ConfigError(f"Invalid lintgate settings{origin}: {exc}") from exc


__all__ = ["discover_settings_file", "load_settings"]
