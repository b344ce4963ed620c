"""ANSI-aware measurement, wrapping and slicing for panel text.

Escape sequences never count toward width and stay attached to the text they
style. Tabs expand to 8-column stops; wide characters take two cells.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
TAB_STOP = 8
RESET = "\033[0m"
_SGR_RESETS = frozenset({"\x1b[0m", "\x1b[m"})


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies once printed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def sanitize_service_text(text: str) -> str:
    """Drop service-side color codes and escape remaining control bytes.

    Compiler diagnostics often arrive colorized; those escapes are removed so
    the panel owns all styling. Other C0/C1 bytes are shown as ``\\xNN``.
    """
    text = strip_ansi(text).rstrip("\r\n")
    if _CONTROL_RE.search(text) is None:
        return text
    out: list[str] = []
    for ch in text:
        if ch == "\t" or not _CONTROL_RE.match(ch):
            out.append(ch)
        else:
            out.append(f"\\x{ord(ch):02x}")
    return "".join(out)


def _tokens(text: str):
    """Yield ``(is_escape, fragment)`` pairs in order."""
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                yield True, match.group(0)
                i = match.end()
                continue
        yield False, text[i]
        i += 1


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Wrap a styled line into rows of at most ``width`` cells.

    Nothing is dropped: every character lands on some row. Tabs are expanded
    relative to the row they end up on. Each continuation row starts with the
    SGR sequences still in effect, since rows are reset when padded.
    """
    if width <= 0 or not text:
        return [text] if width > 0 else [""]

    rows: list[str] = []
    chunk: list[str] = []
    active_sgr: list[str] = []
    col = 0
    for is_escape, fragment in _tokens(text):
        if is_escape:
            chunk.append(fragment)
            if fragment in _SGR_RESETS:
                active_sgr.clear()
            elif fragment.endswith("m"):
                active_sgr.append(fragment)
            continue
        w = char_display_width(fragment, col)
        if col + w > width and col > 0:
            rows.append("".join(chunk))
            chunk = list(active_sgr)
            col = 0
            w = char_display_width(fragment, col)
        if fragment == "\t":
            chunk.append(" " * min(w, width))
        else:
            chunk.append(fragment)
        col += w
    rows.append("".join(chunk))
    return rows


def slice_ansi_line(text: str, start_cols: int, max_cols: int) -> str:
    """Return a horizontal viewport of a styled line.

    The most recent SGR sequence before ``start_cols`` is replayed so the
    visible part keeps its styling.
    """
    if max_cols <= 0 or not text:
        return ""
    start_cols = max(0, start_cols)

    out: list[str] = []
    col = 0
    shown = 0
    pending_sgr = ""
    for is_escape, fragment in _tokens(text):
        if shown >= max_cols:
            break
        if is_escape:
            if col >= start_cols:
                out.append(fragment)
            elif fragment.endswith("m"):
                pending_sgr = fragment
            continue
        w = char_display_width(fragment, col)
        if col + w <= start_cols:
            col += w
            continue
        if pending_sgr:
            out.append(pending_sgr)
            pending_sgr = ""
        if fragment == "\t" or col < start_cols:
            # Partially visible tab or wide char: show the visible cells as spaces.
            visible = min(col + w - max(col, start_cols), max_cols - shown)
            out.append(" " * visible)
            shown += visible
        elif shown + w > max_cols:
            break
        else:
            out.append(fragment)
            shown += w
        col += w
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to exactly ``width`` cells, resetting style."""
    used = display_width(text)
    suffix = RESET if "\x1b[" in text else ""
    return f"{text}{suffix}{' ' * max(0, width - used)}"
