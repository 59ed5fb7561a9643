# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the lintgate command-line interface."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from lintgate import __version__
from lintgate.cli.app import app, build_overrides, parse_properties

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Return a project root holding the default rule configuration."""

    config = tmp_path / "config" / "checkstyle" / "checkstyle.xml"
    config.parent.mkdir(parents=True)
    config.write_text('<module name="Checker"/>\n', encoding="utf-8")
    return tmp_path


def _engine_args(fake_engine_lib: Callable[[], tuple[Path, str]]) -> list[str]:
    lib_dir, module_name = fake_engine_lib()
    return ["--engine", f"{module_name}:FakeEngine", "--engine-classpath", str(lib_dir)]


def test_clean_run_exits_zero(project: Path, fake_engine_lib: Callable[[], tuple[Path, str]]) -> None:
    result = runner.invoke(
        app,
        ["check", "src/Good.java", "--root", str(project), "--no-emoji", *_engine_args(fake_engine_lib)],
    )

    assert result.exit_code == 0, result.output
    assert "plain: " in result.output
    assert "No rule violations were found." in result.output


def test_violations_exit_one(project: Path, fake_engine_lib: Callable[[], tuple[Path, str]]) -> None:
    result = runner.invoke(
        app,
        ["check", "src/Bad.java", "--root", str(project), "--no-emoji", *_engine_args(fake_engine_lib)],
    )

    assert result.exit_code == 1
    assert "Checkstyle rule violations were found." in result.output
    assert "See the report at" not in result.output


def test_ignored_violations_warn_and_write_report(
    project: Path, fake_engine_lib: Callable[[], tuple[Path, str]]
) -> None:
    result = runner.invoke(
        app,
        [
            "check",
            "src/Bad.java",
            "--root",
            str(project),
            "--no-emoji",
            "--ignore-failures",
            "--hide-violations",
            "--xml",
            "build/reports/main.xml",
            *_engine_args(fake_engine_lib),
        ],
    )

    report = project / "build" / "reports" / "main.xml"
    assert result.exit_code == 0, result.output
    assert report.read_text(encoding="utf-8") == "xml"
    assert f"See the report at: {report.as_uri()}" in result.output
    assert "plain: " not in result.output


def test_unavailable_engine_exits_two(project: Path) -> None:
    result = runner.invoke(
        app,
        ["check", "src/Foo.java", "--root", str(project), "--no-emoji", "--engine", "no_such_engine_module:Engine"],
    )

    assert result.exit_code == 2
    assert "Unable to register analysis engine 'no_such_engine_module:Engine'" in result.output


def test_missing_rule_configuration_exits_two(tmp_path: Path, fake_engine_lib: Callable[[], tuple[Path, str]]) -> None:
    result = runner.invoke(
        app,
        ["check", "src/Foo.java", "--root", str(tmp_path), "--no-emoji", *_engine_args(fake_engine_lib)],
    )

    assert result.exit_code == 2
    assert "checkstyle.xml" in result.output


def test_settings_file_is_honoured(project: Path, fake_engine_lib: Callable[[], tuple[Path, str]]) -> None:
    lib_dir, module_name = fake_engine_lib()
    (project / "lintgate.toml").write_text(
        "\n".join(
            [
                f'engine = "{module_name}:FakeEngine"',
                f"engine_classpath = [{str(lib_dir)!r}]",
                'source = ["src/Bad.java"]',
                "ignore_failures = true",
                "",
                "[reports.sarif]",
                "enabled = true",
                'destination = "out/main.sarif"',
                "",
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["check", "--root", str(project), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert (project / "out" / "main.sarif").read_text(encoding="utf-8") == "sarif"


def test_invalid_property_is_usage_error(project: Path) -> None:
    result = runner.invoke(app, ["check", "--root", str(project), "--property", "novalue"])

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_parse_properties_keeps_everything_after_first_separator() -> None:
    assert parse_properties(["header=a=b", " severity =error", "empty="]) == {
        "header": "a=b",
        "severity": "error",
        "empty": "",
    }
    with pytest.raises(typer.BadParameter):
        parse_properties(["=value"])


def test_build_overrides_only_includes_given_flags(tmp_path: Path) -> None:
    overrides = build_overrides(
        paths=None,
        config_file=None,
        properties=["maxLine=120"],
        ignore_failures=None,
        show_violations=False,
        xml=tmp_path / "main.xml",
        sarif=None,
        engine=None,
        engine_classpath=None,
        classpath=[tmp_path / "classes"],
    )

    assert overrides == {
        "config_properties": {"maxLine": "120"},
        "show_violations": False,
        "classpath": [tmp_path / "classes"],
        "reports": {"xml": {"enabled": True, "destination": tmp_path / "main.xml"}},
    }
