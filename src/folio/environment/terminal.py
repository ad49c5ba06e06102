"""Terminal styling for build diagnostics.

Diagnostics go to stderr, so colour follows ``sys.stderr.isatty()``.
``NO_COLOR`` turns colour off and ``FORCE_COLOR`` turns it back on.

Text is styled by diagnostic role rather than by colour name:

    >>> paint("code", "F-PAR-002")      # bright red, bold
    >>> paint("location", "a.folio:3")  # cyan
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_RESET = "\033[0m"

_SGR = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

Role = Literal["code", "location", "lineno", "error", "hint", "muted"]

_ROLES: dict[str, tuple[str, ...]] = {
    "code": ("bright_red", "bold"),
    "location": ("cyan",),
    "lineno": ("yellow",),
    "error": ("bright_red",),
    "hint": ("green",),
    "muted": ("dim",),
}

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")

# Width of the line-number gutter, including the error marker
_GUTTER = 4


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True when diagnostics will carry ANSI colour codes."""
    return _USE_COLORS


def colorize(text: str, *styles: str) -> str:
    """Wrap ``text`` in SGR codes for ``styles``; unknown names are ignored."""
    if not _USE_COLORS:
        return text
    prefix = "".join(_SGR.get(style, "") for style in styles)
    return f"{prefix}{text}{_RESET}" if prefix else text


def paint(role: Role, text: str) -> str:
    """Style ``text`` for a diagnostic role."""
    return colorize(text, *_ROLES[role])


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return _ANSI_ESCAPE.sub("", text)


def gutter(lineno: int | None = None, *, marked: bool = False) -> str:
    """Left margin of a snippet line: ``">  12 |"`` or a blank ``"     |"``."""
    if lineno is None:
        return paint("muted", " " * (_GUTTER + 1) + "|")
    number = (">" if marked else " ") + str(lineno).rjust(_GUTTER - 1)
    return f"{paint('lineno', number)} |"


def format_error_header(code: str | None, message: str) -> str:
    """Format ``CODE: message`` with the code highlighted."""
    return f"{paint('code', code)}: {message}" if code else message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """One numbered snippet line; the error line is marked and highlighted."""
    body = paint("error", content) if is_error else paint("muted", content)
    return f"{gutter(lineno, marked=is_error)} {body}"
