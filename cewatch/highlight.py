"""Syntax highlighting for assembly listings.

Uses Pygments terminal formatters. Unknown style names fall back to
``monokai``; formatters are cached per style.
"""

from __future__ import annotations

import logging

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import GasLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

FALLBACK_STYLE = "monokai"

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def _normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return FALLBACK_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, FALLBACK_STYLE)
        _INVALID_STYLES.add(style)
        return FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def _highlight_lines(lines: list[str], lexer, style: str) -> list[str]:
    if not lines:
        return []
    formatter = _formatter_for_style(_normalize_style(style))
    rendered = pygments_highlight("\n".join(lines) + "\n", lexer, formatter)
    out = rendered.split("\n")
    if out and out[-1] == "":
        out.pop()
    # Lexers may merge or drop blank lines; keep plain text rather than misalign rows.
    if len(out) != len(lines):
        return list(lines)
    return out


def highlight_assembly(lines: list[str], style: str = FALLBACK_STYLE) -> list[str]:
    """Return ``lines`` colored as GNU assembler, one output row per input line."""
    return _highlight_lines(lines, GasLexer(stripnl=False, ensurenl=False), style)

