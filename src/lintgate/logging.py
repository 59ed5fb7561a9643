# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from rich.text import Text

from .console import detect_tty, get_console_manager

LOGGER = logging.getLogger("lintgate")


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def echo(msg: str) -> None:
    """Write ``msg`` verbatim to the console without styling."""

    _print_line(msg, style=None, use_emoji=False, use_color=False)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


@dataclass(slots=True)
class TaskLogger:
    """Adapter around the console helpers that mirrors messages onto :mod:`logging`.

    Warnings and failures are printed for humans and recorded on the
    ``lintgate`` logger so that build tooling capturing log records sees them too.
    """

    use_emoji: bool = True
    debug_enabled: bool = False
    logger: logging.Logger = field(default=LOGGER)
    _key_value_re: re.Pattern[str] = field(default=re.compile(r"([\w.-]+)=(\".*?\"|\S+)"), repr=False)

    def warn(self, message: str) -> None:
        """Emit ``message`` on the warning channel.

        Args:
            message: Text describing the warning condition.
        """

        warn(message, use_emoji=self.use_emoji)
        self.logger.warning(message)

    def fail(self, message: str) -> None:
        """Emit ``message`` on the error channel.

        Args:
            message: Text describing the failure state.
        """

        fail(message, use_emoji=self.use_emoji)
        self.logger.error(message)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        ok(message, use_emoji=self.use_emoji)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with ``key=value`` highlighting.
        """

        self.logger.debug(message)
        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            text.append(match.group(1), style="bold magenta")
            text.append("=", style="dim")
            text.append(match.group(2), style="bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        get_console_manager().get(color=detect_tty(), emoji=self.use_emoji).print(text)


__all__ = [
    "LOGGER",
    "TaskLogger",
    "echo",
    "emoji",
    "fail",
    "ok",
    "warn",
]
