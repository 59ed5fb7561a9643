# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Text resources backing the rule-configuration document.

A resource may live on disk, in memory, or behind a URL. Engines only accept a
file path, so every resource can be materialised with :meth:`as_file`; failures
raise :class:`~lintgate.errors.ConfigError` naming the resource. Temporary
copies are removed again by :meth:`TextResource.close`.
"""

from __future__ import annotations

import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .errors import ConfigError

_DEFAULT_TIMEOUT: Final[float] = 30.0
_TEMP_PREFIX: Final[str] = "lintgate-config-"


@runtime_checkable
class TextResource(Protocol):
    """Read-only text document that can be materialised to a file."""

    def as_string(self) -> str:
        """Return the resource contents."""

        raise NotImplementedError

    def as_file(self) -> Path:
        """Return a file holding the resource contents."""

        raise NotImplementedError

    def describe(self) -> str:
        """Return a short description naming the resource."""

        raise NotImplementedError

    def close(self) -> None:
        """Remove any file created by :meth:`as_file`."""

        raise NotImplementedError


class _Materialised:
    """Temporary copy of a resource, removed by :meth:`close` or on collection."""

    def __init__(self) -> None:
        self._workdir: tempfile.TemporaryDirectory[str] | None = None
        self.file: Path | None = None

    def write(self, text: str, *, suffix: str) -> Path:
        """Return the temporary file holding ``text``, creating it on first use."""

        if self.file is None or not self.file.is_file():
            self.close()
            self._workdir = tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX)
            target = Path(self._workdir.name) / f"config{suffix}"
            target.write_text(text, encoding="utf-8")
            self.file = target
        return self.file

    def close(self) -> None:
        if self._workdir is not None:
            self._workdir.cleanup()
        self._workdir = None
        self.file = None


class FileTextResource:
    """Resource backed by a file on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def as_file(self) -> Path:
        """Return the backing file.

        Raises:
            ConfigError: If the file does not exist or is not a regular file.
        """

        if not self._path.is_file():
            raise ConfigError(f"Configuration file '{self._path}' does not exist")
        return self._path

    def as_string(self) -> str:
        try:
            return self.as_file().read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to read configuration file '{self._path}': {exc}") from exc

    def describe(self) -> str:
        return f"file '{self._path}'"

    def close(self) -> None:
        """Nothing to remove; the file belongs to the project."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FileTextResource) and other._path == self._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"FileTextResource({str(self._path)!r})"


class StringTextResource:
    """Resource held in memory; written to a temporary file on first use."""

    def __init__(self, text: str, *, name: str = "inline configuration", suffix: str = ".xml") -> None:
        self._text = text
        self._name = name
        self._suffix = suffix
        self._copy = _Materialised()

    def as_string(self) -> str:
        return self._text

    def as_file(self) -> Path:
        try:
            return self._copy.write(self._text, suffix=self._suffix)
        except OSError as exc:
            raise ConfigError(f"Unable to materialise {self.describe()}: {exc}") from exc

    def describe(self) -> str:
        return self._name

    def close(self) -> None:
        self._copy.close()

    def __repr__(self) -> str:
        return f"StringTextResource(name={self._name!r})"


class UrlTextResource:
    """Resource fetched from a URL; downloaded once and cached for the instance."""

    def __init__(self, url: str, *, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self._url = url
        self._timeout = timeout
        self._text: str | None = None
        self._copy = _Materialised()

    @property
    def url(self) -> str:
        return self._url

    def as_string(self) -> str:
        """Return the downloaded document.

        Raises:
            ConfigError: If the URL cannot be fetched or decoded.
        """

        if self._text is None:
            try:
                with urllib.request.urlopen(self._url, timeout=self._timeout) as response:  # nosec B310
                    payload: bytes = response.read()
            except (urllib.error.URLError, OSError, ValueError) as exc:
                raise ConfigError(f"Unable to download configuration from '{self._url}': {exc}") from exc
            try:
                self._text = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ConfigError(f"Configuration at '{self._url}' is not valid UTF-8") from exc
        return self._text

    def as_file(self) -> Path:
        suffix = Path(self._url.split("?", 1)[0]).suffix or ".xml"
        text = self.as_string()
        try:
            return self._copy.write(text, suffix=suffix)
        except OSError as exc:
            raise ConfigError(f"Unable to materialise configuration from '{self._url}': {exc}") from exc

    def describe(self) -> str:
        return f"URL '{self._url}'"

    def close(self) -> None:
        """Remove the materialised copy; the downloaded text is kept."""

        self._copy.close()

    def __repr__(self) -> str:
        return f"UrlTextResource({self._url!r})"


__all__ = [
    "FileTextResource",
    "StringTextResource",
    "TextResource",
    "UrlTextResource",
]
