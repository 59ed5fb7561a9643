# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Checkstyle engine driven through its command-line entry point.

Checkstyle is executed once with XML output. The XML document is then fanned
out to every requested formatter: a plain listing on the console, a verbatim
copy for XML reports, and a SARIF 2.1.0 rendering for SARIF reports.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
import xml.etree.ElementTree as ET  # nosec B405 - parses output produced locally by Checkstyle
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..errors import EngineInternalError, EngineUnavailable
from ..logging import LOGGER, echo
from ..process import CommandOptions, run_command
from ..reports import ReportFormat
from .interfaces import EngineProject, EngineRequest, FormatterSpec

ENGINE_NAME: Final[str] = "checkstyle"
MAIN_CLASS: Final[str] = "com.puppycrawl.tools.checkstyle.Main"
JAVA_HOME_ENV: Final[str] = "JAVA_HOME"
SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"
_SARIF_LEVELS: Final[dict[str, str]] = {
    "error": "error",
    "warning": "warning",
    "info": "note",
    "ignore": "none",
}
_CHECK_SUFFIX: Final[str] = "Check"


@dataclass(frozen=True, slots=True)
class CheckstyleEvent:
    """Single violation recorded in a Checkstyle XML report."""

    file: str
    line: int | None
    column: int | None
    severity: str
    message: str
    source: str

    @property
    def check_name(self) -> str:
        """Return the short check name, e.g. ``LineLength``."""

        name = self.source.rsplit(".", 1)[-1]
        return name[: -len(_CHECK_SUFFIX)] if name.endswith(_CHECK_SUFFIX) and name != _CHECK_SUFFIX else name

    def render_plain(self) -> str:
        location = self.file
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        suffix = f" [{self.check_name}]" if self.source else ""
        return f"[{self.severity.upper()}] {location}: {self.message}{suffix}"


@dataclass(frozen=True, slots=True)
class CheckstyleResult:
    """Parsed Checkstyle XML report."""

    version: str | None
    events: tuple[CheckstyleEvent, ...]

    def count(self, severity: str) -> int:
        return sum(1 for event in self.events if event.severity == severity)


def _optional_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_checkstyle_xml(document: str) -> CheckstyleResult:
    """Parse a Checkstyle XML report.

    Args:
        document: XML text produced by Checkstyle's XML logger.

    Returns:
        CheckstyleResult: Parsed events in document order.

    Raises:
        EngineInternalError: If the document is malformed or records an
            exception raised while auditing.
    """

    try:
        root = ET.fromstring(document)  # nosec B314 - trusted, locally produced document
    except ET.ParseError as exc:
        raise EngineInternalError(f"Checkstyle produced an unreadable report: {exc}") from exc
    if root.tag != "checkstyle":
        raise EngineInternalError(f"Unexpected Checkstyle report root element <{root.tag}>")
    exception = root.find(".//exception")
    if exception is not None:
        raise EngineInternalError(f"Checkstyle failed while auditing: {(exception.text or '').strip()}")
    events: list[CheckstyleEvent] = []
    for file_node in root.iter("file"):
        name = file_node.get("name", "")
        for error in file_node.iter("error"):
            events.append(
                CheckstyleEvent(
                    file=name,
                    line=_optional_int(error.get("line")),
                    column=_optional_int(error.get("column")),
                    severity=error.get("severity", "error"),
                    message=error.get("message", ""),
                    source=error.get("source", ""),
                ),
            )
    return CheckstyleResult(version=root.get("version"), events=tuple(events))


def render_sarif(result: CheckstyleResult) -> dict[str, object]:
    """Return a SARIF 2.1.0 document describing ``result``."""

    rules: dict[str, dict[str, object]] = {}
    results: list[dict[str, object]] = []
    for event in result.events:
        rule_id = event.source or ENGINE_NAME
        if rule_id not in rules:
            rules[rule_id] = {
                "id": rule_id,
                "name": event.check_name or rule_id,
                "shortDescription": {"text": event.message[:120]},
            }
        entry: dict[str, object] = {
            "ruleId": rule_id,
            "level": _SARIF_LEVELS.get(event.severity, "warning"),
            "message": {"text": event.message},
        }
        if event.file:
            physical_location: dict[str, object] = {"artifactLocation": {"uri": Path(event.file).as_posix()}}
            region: dict[str, int] = {}
            if event.line is not None:
                region["startLine"] = event.line
            if event.column is not None:
                region["startColumn"] = event.column
            if region:
                physical_location["region"] = region
            entry["locations"] = [{"physicalLocation": physical_location}]
        results.append(entry)
    return {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "Checkstyle",
                        "version": result.version or "unknown",
                        "rules": list(rules.values()),
                    },
                },
                "results": results,
            },
        ],
    }


def _unicode_escape(char: str) -> list[str]:
    """Return the ``\\uXXXX`` escapes for ``char``, a surrogate pair above the BMP."""

    encoded = char.encode("utf-16-be")
    units = [int.from_bytes(encoded[offset : offset + 2], "big") for offset in range(0, len(encoded), 2)]
    return [f"\\u{unit:04x}" for unit in units]


def _escape_property(text: str, *, is_key: bool) -> str:
    """Escape ``text`` for a Java ``.properties`` file.

    Java reads properties files as ISO-8859-1; characters outside printable
    ASCII are written as ``\\uXXXX`` escapes.
    """

    escaped: list[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            escaped.append("\\\\")
        elif char == "\n":
            escaped.append("\\n")
        elif char == "\r":
            escaped.append("\\r")
        elif char == "\t":
            escaped.append("\\t")
        elif char in "=:#!" or (char == " " and (is_key or index == 0)):
            escaped.append(f"\\{char}")
        elif ord(char) > 0x7E or ord(char) < 0x20:
            escaped.extend(_unicode_escape(char))
        else:
            escaped.append(char)
    return "".join(escaped)


def write_properties(properties: Mapping[str, str], path: Path) -> Path:
    """Write ``properties`` as a Java properties file and return ``path``."""

    lines = [
        f"{_escape_property(key, is_key=True)}={_escape_property(value, is_key=False)}"
        for key, value in properties.items()
    ]
    path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="ascii")
    return path


def _jars(classpath: Iterable[Path]) -> list[Path]:
    jars: list[Path] = []
    for entry in classpath:
        if entry.is_dir():
            jars.extend(sorted(entry.glob("*.jar")))
        elif entry.suffix == ".jar":
            jars.append(entry)
    return jars


def _find_java() -> str | None:
    java_home = os.environ.get(JAVA_HOME_ENV)
    if java_home:
        candidate = Path(java_home) / "bin" / "java"
        if candidate.is_file():
            return str(candidate)
    return shutil.which("java")


class CheckstyleEngine:
    """Engine adapter launching ``com.puppycrawl.tools.checkstyle.Main``."""

    def __init__(self, classpath: Sequence[Path], *, java: str | None = None, timeout: float | None = None) -> None:
        """Validate that Checkstyle can be launched from ``classpath``.

        Args:
            classpath: Engine classpath; must contain a Checkstyle jar.
            java: Java executable, defaulting to ``$JAVA_HOME/bin/java`` or ``java`` on ``PATH``.
            timeout: Optional timeout for the Checkstyle process in seconds.

        Raises:
            EngineUnavailable: If no Checkstyle jar or Java runtime is found.
        """

        self.classpath = tuple(_jars(classpath))
        if not any(jar.name.lower().startswith(ENGINE_NAME) for jar in self.classpath):
            raise EngineUnavailable(ENGINE_NAME, "no checkstyle jar found on the engine classpath")
        resolved_java = java or _find_java()
        if resolved_java is None:
            raise EngineUnavailable(ENGINE_NAME, "no Java runtime found; set JAVA_HOME or put java on PATH")
        self.java = resolved_java
        self.timeout = timeout

    def build_command(self, request: EngineRequest, *, output: Path, properties_file: Path | None) -> list[str]:
        """Return the Checkstyle command line for ``request``."""

        classpath = os.pathsep.join(str(entry) for entry in (*self.classpath, *request.classpath))
        command = [self.java, "-cp", classpath, MAIN_CLASS, "-c", str(request.config_file)]
        if properties_file is not None:
            command.extend(["-p", str(properties_file)])
        command.extend(["-f", "xml", "-o", str(output)])
        command.extend(str(path) for path in request.files)
        return command

    def execute(self, project: EngineProject, request: EngineRequest) -> None:
        """Run Checkstyle once and fan the result out to every formatter.

        Raises:
            EngineInternalError: If Checkstyle does not produce a usable
                report, or when violations are found and the request asks the
                engine to fail on them.
        """

        with tempfile.TemporaryDirectory(prefix="lintgate-checkstyle-") as scratch:
            scratch_dir = Path(scratch)
            output = scratch_dir / "checkstyle-result.xml"
            properties_file = (
                write_properties(request.properties, scratch_dir / "checkstyle.properties")
                if request.properties
                else None
            )
            command = self.build_command(request, output=output, properties_file=properties_file)
            LOGGER.debug("running checkstyle command=%s", " ".join(command))
            completed = run_command(command, options=CommandOptions(check=False, timeout=self.timeout))
            if not output.is_file():
                detail = (completed.stderr or completed.stdout or "").strip() or f"exit status {completed.returncode}"
                raise EngineInternalError(f"Checkstyle did not produce a report: {detail}")
            result = parse_checkstyle_xml(output.read_text(encoding="utf-8"))
            for formatter in request.formatters:
                self._emit(formatter, result, output)

        errors = result.count("error")
        if errors:
            project.set_property(request.failure_property)
        if errors and request.fail_on_violation:
            raise EngineInternalError(f"Got {errors} errors and {result.count('warning')} warnings.")

    @staticmethod
    def _emit(formatter: FormatterSpec, result: CheckstyleResult, raw_report: Path) -> None:
        if formatter.format is ReportFormat.PLAIN and formatter.to_console:
            echo("Starting audit...")
            for event in result.events:
                echo(event.render_plain())
            echo("Audit done.")
            return
        destination = formatter.destination
        if destination is None:
            raise EngineInternalError(f"The {formatter.format.value} formatter requires a destination")
        destination.parent.mkdir(parents=True, exist_ok=True)
        if formatter.format is ReportFormat.XML:
            shutil.copyfile(raw_report, destination)
        elif formatter.format is ReportFormat.SARIF:
            destination.write_text(json.dumps(render_sarif(result), indent=2), encoding="utf-8")
        else:
            lines = [event.render_plain() for event in result.events]
            destination.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")


__all__ = [
    "CheckstyleEngine",
    "CheckstyleEvent",
    "CheckstyleResult",
    "parse_checkstyle_xml",
    "render_sarif",
    "write_properties",
]
