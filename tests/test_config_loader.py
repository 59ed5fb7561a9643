# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from lintgate.config import CheckTaskSettings, ReportSettings, discover_settings_file, load_settings
from lintgate.constants import DEFAULT_ENGINE
from lintgate.errors import ConfigError
from lintgate.resources import FileTextResource, StringTextResource, UrlTextResource


def test_defaults_without_settings_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)

    assert settings.root == tmp_path
    assert settings.ignore_failures is False
    assert settings.show_violations is True
    assert settings.config_properties == {}
    assert settings.engine == DEFAULT_ENGINE
    assert settings.reports.xml.enabled is False
    resource = settings.config_resource()
    assert isinstance(resource, FileTextResource)
    assert resource.path == tmp_path / "config" / "checkstyle" / "checkstyle.xml"


def test_reads_pyproject_section_and_resolves_paths(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        dedent(
            """
            [project]
            name = "demo"

            [tool.lintgate]
            source = ["src/main/java"]
            config_file = "quality/checkstyle.xml"
            ignore_failures = true
            engine_classpath = ["libs/checkstyle-10.12.4-all.jar"]

            [tool.lintgate.config_properties]
            severity = "error"
            maxLine = 120

            [tool.lintgate.reports.xml]
            enabled = true
            destination = "build/reports/checkstyle/main.xml"
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(tmp_path)

    assert settings.source == [tmp_path / "src" / "main" / "java"]
    assert settings.config_file == tmp_path / "quality" / "checkstyle.xml"
    assert settings.ignore_failures is True
    assert settings.config_properties == {"severity": "error", "maxLine": 120}
    assert settings.engine_classpath == [tmp_path / "libs" / "checkstyle-10.12.4-all.jar"]
    assert settings.reports.xml == ReportSettings(
        enabled=True, destination=tmp_path / "build" / "reports" / "checkstyle" / "main.xml"
    )


def test_standalone_file_wins_over_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintgate]\nshow_violations = true\n", encoding="utf-8")
    (tmp_path / "lintgate.toml").write_text("show_violations = false\n", encoding="utf-8")

    assert discover_settings_file(tmp_path) == tmp_path / "lintgate.toml"
    assert load_settings(tmp_path).show_violations is False


def test_overrides_merge_on_top_of_file(tmp_path: Path) -> None:
    (tmp_path / "lintgate.toml").write_text(
        dedent(
            """
            [config_properties]
            severity = "warning"
            header = "LICENSE"

            [reports.sarif]
            enabled = true
            destination = "out/main.sarif"
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        tmp_path,
        overrides={
            "config_properties": {"severity": "error"},
            "reports": {"xml": {"enabled": True, "destination": "out/main.xml"}},
        },
    )

    assert settings.config_properties == {"severity": "error", "header": "LICENSE"}
    assert settings.reports.sarif.destination == tmp_path / "out" / "main.sarif"
    assert settings.reports.xml.destination == tmp_path / "out" / "main.xml"


def test_enabled_report_without_destination_rejected_eagerly(tmp_path: Path) -> None:
    (tmp_path / "lintgate.toml").write_text("[reports.xml]\nenabled = true\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="requires a destination"):
        load_settings(tmp_path)


def test_unknown_report_format_rejected(tmp_path: Path) -> None:
    (tmp_path / "lintgate.toml").write_text("[reports.html]\nenabled = false\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="html"):
        load_settings(tmp_path)


def test_invalid_toml_is_config_error(tmp_path: Path) -> None:
    (tmp_path / "lintgate.toml").write_text("ignore_failures = \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="not valid TOML"):
        load_settings(tmp_path)


def test_explicit_missing_settings_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_settings(tmp_path, settings_file=tmp_path / "custom.toml")


def test_only_one_config_source_allowed(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="only one of config_file, config_text"):
        CheckTaskSettings(config_file=tmp_path / "a.xml", config_text="<module/>")


def test_config_resource_variants(tmp_path: Path) -> None:
    assert isinstance(CheckTaskSettings(config_text="<module/>").config_resource(), StringTextResource)
    url_resource = CheckTaskSettings(config_url="https://example.com/c.xml").config_resource()
    assert isinstance(url_resource, UrlTextResource)
    assert url_resource.url == "https://example.com/c.xml"
    relative = CheckTaskSettings(root=tmp_path, config_file=Path("rules.xml")).config_resource()
    assert isinstance(relative, FileTextResource)
    assert relative.path == tmp_path / "rules.xml"
