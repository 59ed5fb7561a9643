# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application: run the check task and translate its outcome into an exit status."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final

import typer

from .. import __version__
from ..config.loader import load_settings
from ..errors import ConfigError, EngineUnavailable, TaskFailure
from ..logging import TaskLogger
from ..policy import OutcomeStatus
from ..task import CheckTask, TaskRunner

CONFIG_EXIT_CODE: Final[int] = 2
_PROPERTY_SEPARATOR: Final[str] = "="

app = typer.Typer(help="Run a static-analysis engine as a build gate.", no_args_is_help=True)


def parse_properties(raw: Sequence[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` tokens into a mapping.

    Raises:
        typer.BadParameter: If a token has no ``=`` or an empty key.
    """

    properties: dict[str, str] = {}
    for token in raw:
        key, separator, value = token.partition(_PROPERTY_SEPARATOR)
        if not separator or not key.strip():
            raise typer.BadParameter(f"expected KEY=VALUE, got '{token}'", param_hint="--property")
        properties[key.strip()] = value
    return properties


def build_overrides(
    *,
    paths: Sequence[Path] | None,
    config_file: Path | None,
    properties: Sequence[str] | None,
    ignore_failures: bool | None,
    show_violations: bool | None,
    xml: Path | None,
    sarif: Path | None,
    engine: str | None,
    engine_classpath: Sequence[Path] | None,
    classpath: Sequence[Path] | None,
) -> dict[str, Any]:
    """Collect the settings explicitly provided on the command line."""

    overrides: dict[str, Any] = {}
    if paths:
        overrides["source"] = list(paths)
    if config_file is not None:
        overrides["config_file"] = config_file
    if properties:
        overrides["config_properties"] = parse_properties(properties)
    if ignore_failures is not None:
        overrides["ignore_failures"] = ignore_failures
    if show_violations is not None:
        overrides["show_violations"] = show_violations
    if engine is not None:
        overrides["engine"] = engine
    if engine_classpath:
        overrides["engine_classpath"] = list(engine_classpath)
    if classpath:
        overrides["classpath"] = list(classpath)
    reports: dict[str, dict[str, Any]] = {}
    if xml is not None:
        reports["xml"] = {"enabled": True, "destination": xml}
    if sarif is not None:
        reports["sarif"] = {"enabled": True, "destination": sarif}
    if reports:
        overrides["reports"] = reports
    return overrides


@app.command("check")
def check_command(
    paths: list[Path] | None = typer.Argument(None, help="Source files or directories to analyse."),
    root: Path | None = typer.Option(None, "--root", "-r", help="Project root (defaults to the current directory)."),
    settings_file: Path | None = typer.Option(
        None,
        "--settings",
        help="Settings file (defaults to lintgate.toml or [tool.lintgate] in pyproject.toml).",
    ),
    config_file: Path | None = typer.Option(None, "--config-file", "-c", help="Rule configuration file."),
    properties: list[str] | None = typer.Option(
        None,
        "--property",
        "-P",
        help="KEY=VALUE property substituted into the rule configuration.",
    ),
    ignore_failures: bool | None = typer.Option(
        None,
        "--ignore-failures/--no-ignore-failures",
        help="Report violations as a warning instead of failing.",
    ),
    show_violations: bool | None = typer.Option(
        None,
        "--show-violations/--hide-violations",
        help="List violations on the console.",
    ),
    xml: Path | None = typer.Option(None, "--xml", help="Write an XML report to this path."),
    sarif: Path | None = typer.Option(None, "--sarif", help="Write a SARIF report to this path."),
    engine: str | None = typer.Option(None, "--engine", help="Engine name or module:attribute entry point."),
    engine_classpath: list[Path] | None = typer.Option(
        None,
        "--engine-classpath",
        help="Location of the engine library (repeatable).",
    ),
    classpath: list[Path] | None = typer.Option(
        None,
        "--classpath",
        help="Location of compiled code under analysis (repeatable).",
    ),
    use_emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Toggle emoji output."),
    debug: bool = typer.Option(False, "--debug", help="Print debug details."),
) -> None:
    """Run the analysis engine and fail when rule violations are found."""

    logger = TaskLogger(use_emoji=use_emoji, debug_enabled=debug)
    overrides = build_overrides(
        paths=paths,
        config_file=config_file,
        properties=properties,
        ignore_failures=ignore_failures,
        show_violations=show_violations,
        xml=xml,
        sarif=sarif,
        engine=engine,
        engine_classpath=engine_classpath,
        classpath=classpath,
    )
    try:
        settings = load_settings(root or Path.cwd(), settings_file=settings_file, overrides=overrides)
        task = CheckTask.from_settings(settings)
        outcome = task.run(TaskRunner(logger=logger))
    except TaskFailure as exc:
        logger.fail(exc.message)
        raise typer.Exit(code=exc.exit_code) from exc
    except (ConfigError, EngineUnavailable) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=CONFIG_EXIT_CODE) from exc

    if outcome.status is OutcomeStatus.SUCCESS:
        logger.ok("No rule violations were found.")


@app.command("version")
def version_command() -> None:
    """Print the installed lintgate version."""

    typer.echo(__version__)


__all__ = ["app", "build_overrides", "parse_properties"]
