# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration text resources and resolution."""

from __future__ import annotations

import urllib.error
import urllib.request
from io import BytesIO
from pathlib import Path

import pytest

from lintgate.config import Classpath, ConfigResolver, RuleConfiguration, TaskConfigResolver
from lintgate.errors import ConfigError
from lintgate.resources import FileTextResource, StringTextResource, TextResource, UrlTextResource
from lintgate.task import CheckTask


def test_file_resource_round_trips(rule_config: FileTextResource) -> None:
    assert isinstance(rule_config, TextResource)
    assert rule_config.as_file() == rule_config.path
    assert rule_config.as_string().startswith("<module")


def test_missing_file_names_the_resource(tmp_path: Path) -> None:
    resource = FileTextResource(tmp_path / "nope.xml")

    with pytest.raises(ConfigError, match="nope.xml"):
        resource.as_file()


def test_string_resource_materialises_once() -> None:
    resource = StringTextResource('<module name="Checker"/>')

    first = resource.as_file()
    second = resource.as_file()

    assert first == second
    assert first.suffix == ".xml"
    assert first.read_text(encoding="utf-8") == '<module name="Checker"/>'


def test_closing_removes_the_temporary_copy() -> None:
    resource = StringTextResource("<module/>")
    path = resource.as_file()

    resource.close()

    assert not path.parent.exists()
    assert resource.as_file().read_text(encoding="utf-8") == "<module/>"
    resource.close()


def test_url_resource_downloads_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_urlopen(url: str, timeout: float) -> BytesIO:
        calls.append(url)
        return BytesIO(b"<module name='Checker'/>")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    resource = UrlTextResource("https://example.com/rules/checkstyle.xml?ref=main")

    path = resource.as_file()
    assert resource.as_file() == path
    assert path.suffix == ".xml"
    assert path.read_text(encoding="utf-8") == "<module name='Checker'/>"
    assert calls == ["https://example.com/rules/checkstyle.xml?ref=main"]

    resource.close()
    assert not path.exists()
    assert resource.as_file().is_file()
    assert len(calls) == 1
    resource.close()


def test_url_resource_failure_names_the_url(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(url: str, timeout: float) -> BytesIO:
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(ConfigError, match="https://example.com/checkstyle.xml"):
        UrlTextResource("https://example.com/checkstyle.xml").as_file()


def test_rule_configuration_stringifies_every_property(rule_config: FileTextResource) -> None:
    config = RuleConfiguration(rule_config, {"severity": "error", "maxLine": 120, "ratio": 0.5})

    assert config.engine_properties() == {"severity": "error", "maxLine": "120", "ratio": "0.5"}
    assert list(config.engine_properties()) == ["severity", "maxLine", "ratio"]


def test_task_resolver_is_idempotent(tmp_path: Path) -> None:
    task = CheckTask(
        config=StringTextResource("<module/>"),
        config_properties={"maxLine": 100},
        engine_classpath=[tmp_path / "cs.jar"],
        classpath=["build/classes"],
    )
    resolver = TaskConfigResolver(task)

    assert isinstance(resolver, ConfigResolver)
    config = resolver.resolve_config()
    assert resolver.resolve_config() is config
    assert config.as_file() == resolver.resolve_config().as_file()
    assert resolver.resolve_classpath() == Classpath(engine=(tmp_path / "cs.jar",), analysis=(Path("build/classes"),))


def test_task_resolver_fails_fast_for_missing_document(tmp_path: Path) -> None:
    task = CheckTask(config=FileTextResource(tmp_path / "absent.xml"))

    with pytest.raises(ConfigError, match="absent.xml"):
        TaskConfigResolver(task).resolve_config()
