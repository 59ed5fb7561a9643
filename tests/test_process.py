# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrapper."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

import pytest

from lintgate import process
from lintgate.process import CommandOptions, SubprocessExecutionError, run_command


def _fake_run(returncode: int, stderr: str = ""):
    calls: list[list[str]] = []

    def _run(args: Sequence[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        calls.append(list(args))
        return subprocess.CompletedProcess(list(args), returncode, stdout="out", stderr=stderr)

    return _run, calls


def test_executable_resolved_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    fake, calls = _fake_run(0)
    monkeypatch.setattr(process.shutil, "which", lambda name: f"/opt/bin/{name}")
    monkeypatch.setattr(process.subprocess, "run", fake)

    completed = run_command(["java", "-version"])

    assert calls == [["/opt/bin/java", "-version"]]
    assert completed.stdout == "out"


def test_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.shutil, "which", lambda _name: None)

    with pytest.raises(FileNotFoundError, match="'java' was not found"):
        run_command(["java"])


def test_non_zero_exit_raises_when_checked(monkeypatch: pytest.MonkeyPatch) -> None:
    fake, _calls = _fake_run(3, stderr="boom")
    monkeypatch.setattr(process.subprocess, "run", fake)

    with pytest.raises(SubprocessExecutionError, match="status 3. stderr: boom"):
        run_command(["/usr/bin/java"])

    unchecked = run_command(["/usr/bin/java"], options=CommandOptions(check=False))
    assert unchecked.returncode == 3


def test_timeout_is_reported_as_exit_status(monkeypatch: pytest.MonkeyPatch) -> None:
    def _timeout(args: Sequence[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(list(args), 1.5, output=b"partial", stderr=None)

    monkeypatch.setattr(process.subprocess, "run", _timeout)

    completed = run_command(["/usr/bin/java"], options=CommandOptions(check=False, timeout=1.5))

    assert completed.returncode == process.TIMEOUT_RETURNCODE
    assert completed.stdout == "partial"
    assert completed.stderr == "Command timed out after 1.5s"


def test_empty_command_rejected() -> None:
    with pytest.raises(ValueError, match="at least one argument"):
        run_command([])
