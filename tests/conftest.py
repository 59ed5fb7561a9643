# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared pytest fixtures."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from textwrap import dedent

import pytest

from lintgate.engine.interfaces import EngineProject, EngineRequest
from lintgate.resources import FileTextResource

FAKE_ENGINE_SOURCE = dedent(
    """
    from pathlib import Path


    class FakeEngine:
        def __init__(self, classpath):
            self.classpath = tuple(classpath)

        def execute(self, project, request):
            for formatter in request.formatters:
                if formatter.destination is None:
                    print("plain: " + ", ".join(str(path) for path in request.files))
                    continue
                formatter.destination.parent.mkdir(parents=True, exist_ok=True)
                formatter.destination.write_text(formatter.format.value, encoding="utf-8")
            if any("Bad" in Path(path).name for path in request.files):
                project.set_property(request.failure_property)


    def broken_factory(classpath):
        raise RuntimeError("engine exploded while starting")


    NOT_CALLABLE = 42
    """
)


@dataclass
class RecordingEngine:
    """Engine double recording every request it receives."""

    violations: bool = False
    error: Exception | None = None
    requests: list[EngineRequest] = field(default_factory=list)

    def execute(self, project: EngineProject, request: EngineRequest) -> None:
        self.requests.append(request)
        for formatter in request.formatters:
            if formatter.destination is not None:
                formatter.destination.parent.mkdir(parents=True, exist_ok=True)
                formatter.destination.write_text(formatter.format.value, encoding="utf-8")
        if self.error is not None:
            raise self.error
        if self.violations:
            project.set_property(request.failure_property)


@dataclass
class StubLoader:
    """Loader double returning a fixed engine."""

    engine: RecordingEngine
    calls: list[tuple[str, tuple[Path, ...]]] = field(default_factory=list)

    def load(self, name: str, classpath: Sequence[Path] = ()) -> RecordingEngine:
        self.calls.append((name, tuple(classpath)))
        return self.engine


@pytest.fixture
def rule_config(tmp_path: Path) -> FileTextResource:
    """Return a minimal rule configuration on disk."""

    path = tmp_path / "config" / "checkstyle.xml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('<module name="Checker"/>\n', encoding="utf-8")
    return FileTextResource(path)


@pytest.fixture
def fake_engine_lib(tmp_path: Path) -> Callable[[], tuple[Path, str]]:
    """Return a factory writing a uniquely named engine module to a classpath directory.

    The factory returns ``(classpath_dir, module_name)``.
    """

    def _write() -> tuple[Path, str]:
        module_name = f"fake_engine_{uuid.uuid4().hex}"
        lib_dir = tmp_path / "engine-lib" / module_name
        lib_dir.mkdir(parents=True)
        (lib_dir / f"{module_name}.py").write_text(FAKE_ENGINE_SOURCE, encoding="utf-8")
        return lib_dir, module_name

    return _write


@pytest.fixture
def recording_engine() -> RecordingEngine:
    """Return an engine double that reports no violations until told otherwise."""

    return RecordingEngine()


@pytest.fixture
def stub_loader(recording_engine: RecordingEngine) -> StubLoader:
    """Return a loader double handing out :func:`recording_engine`."""

    return StubLoader(recording_engine)
