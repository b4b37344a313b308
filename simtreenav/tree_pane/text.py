"""ANSI-aware width measurement and clipping for pane rows."""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    """Terminal columns used by one character (wide glyphs take two)."""
    if unicodedata.combining(ch) or ch == "\ufe0f":
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return terminal column width for ANSI-styled text."""
    return sum(char_display_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward the width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        width = char_display_width(text[i])
        if col + width > max_cols:
            break
        out.append(text[i])
        col += width
        i += 1
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip then right-pad ``text`` to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    used = display_width(clipped)
    if used < width:
        return clipped + " " * (width - used)
    return clipped
