"""ANSI styling for render diagnostics.

Each part of a diagnostic has a role (error code, location, gutter, ...)
and every role maps to a fixed style. Styling is applied only when stdout
is a terminal, unless ``NO_COLOR`` or ``FORCE_COLOR`` say otherwise
(``FORCE_COLOR`` wins).

    >>> style("location", "page.mustache:3:7")
    '\\033[36mpage.mustache:3:7\\033[0m'   # on a color terminal

"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_RESET = "\033[0m"

Role = Literal["error_code", "location", "gutter", "error_line", "dim", "docs_url"]

_STYLES: dict[str, str] = {
    "error_code": "\033[91m\033[1m",  # bright red, bold
    "location": "\033[36m",  # cyan
    "gutter": "\033[33m",  # yellow
    "error_line": "\033[91m",  # bright red
    "dim": "\033[2m",
    "docs_url": "\033[94m",  # bright blue
}

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _color_enabled() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _color_enabled()


def supports_color() -> bool:
    return _USE_COLORS


def style(role: Role, text: str) -> str:
    """Wrap ``text`` in the ANSI style for ``role``; plain when colors are off."""
    codes = _STYLES.get(role)
    if not _USE_COLORS or not codes:
        return text
    return f"{codes}{text}{_RESET}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences."""
    return _ANSI_ESCAPE.sub("", text)


def format_error_header(code: str | None, message: str) -> str:
    """``S-SEC-003: Tag start/end key mismatch``, with the code highlighted."""
    if not code:
        return message
    return f"{style('error_code', code)}: {message}"


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """One gutter-numbered source line; the error line is marked with ``>``."""
    gutter = style("gutter", f"{'>' if is_error else ' '}{lineno:>3}")
    body = style("error_line" if is_error else "dim", content)
    return f"{gutter} | {body}"


def format_caret(column: int) -> str:
    """Marker line pointing at ``column`` of the preceding source line."""
    return f"{style('dim', '   |')}   {style('error_line', ' ' * column + '^')}"
