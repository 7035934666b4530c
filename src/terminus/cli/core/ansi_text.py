"""ANSI text utilities - measuring, cutting and wrapping strings with SGR codes."""

from __future__ import annotations

import re
from typing import Iterator

from terminus.core.style import RESET

# CSI sequences (colors, cursor moves) plus the short ESC 7 / ESC 8 forms
_ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z~]|\x1b[78]')


def _segments(s: str) -> Iterator[tuple[bool, str]]:
    """Split ``s`` into (is_escape, text) pieces; text pieces are single characters."""
    pos = 0
    for match in _ANSI_ESCAPE.finditer(s):
        for ch in s[pos:match.start()]:
            yield False, ch
        yield True, match.group()
        pos = match.end()
    for ch in s[pos:]:
        yield False, ch


def strip_ansi(s: str) -> str:
    return _ANSI_ESCAPE.sub('', s)


def visible_len(s: str) -> int:
    """Get visible length of string (excluding ANSI escape codes)."""
    return len(strip_ansi(s))


def truncate(s: str, max_width: int) -> str:
    """
    Cut an ANSI-escaped string to at most ``max_width`` visible characters.

    Escape codes are kept; a reset is appended when text was dropped so
    colors do not bleed past the cut.
    """
    if max_width <= 0:
        return ""
    out: list[str] = []
    width = 0
    for is_escape, piece in _segments(s):
        if is_escape:
            out.append(piece)
            continue
        if width == max_width:
            out.append(RESET)
            break
        out.append(piece)
        width += 1
    return "".join(out)


def fit(s: str, width: int) -> str:
    """Truncate if too long, pad with spaces if too short: exactly ``width`` visible characters."""
    vlen = visible_len(s)
    if vlen > width:
        return truncate(s, width)
    return s + " " * (width - vlen)


def wrap(s: str, width: int) -> list[str]:
    """
    Hard-wrap ``s`` into rows of at most ``width`` visible characters.

    Active escape codes are carried over to the start of each new row.
    """
    if width <= 0 or visible_len(s) <= width:
        return [s]
    rows: list[str] = []
    current: list[str] = []
    active: list[str] = []
    count = 0
    for is_escape, piece in _segments(s):
        if is_escape:
            current.append(piece)
            active = [] if piece == RESET else active + [piece]
            continue
        if count == width:
            rows.append("".join(current))
            current = list(active)
            count = 0
        current.append(piece)
        count += 1
    rows.append("".join(current))
    return rows
