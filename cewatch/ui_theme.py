"""UI theme definitions and selection helpers.

Themes only color borders, titles and the status row.
Assembly syntax colors come from the separate Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """SGR prefixes for each piece of panel chrome; empty strings mean no styling."""

    name: str
    reset: str
    border: str
    border_selected: str
    title: str
    title_busy: str
    placeholder: str
    status: str
    diagnostic_error: str
    diagnostic_warning: str
    diagnostic_note: str

    @property
    def colored(self) -> bool:
        return bool(self.reset)


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    border="\033[2m",
    border_selected="\033[1m",
    title="\033[1;35m",
    title_busy="\033[33m",
    placeholder="\033[2;38;5;250m",
    status="\033[7m",
    diagnostic_error="\033[31m",
    diagnostic_warning="\033[33m",
    diagnostic_note="\033[36m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    border="\033[2;38;5;31m",
    border_selected="\033[1;38;5;45m",
    title="\033[1;38;5;45m",
    title_busy="\033[38;5;229m",
    placeholder="\033[2;38;5;110m",
    status="\033[48;5;24;38;5;255m",
    diagnostic_error="\033[38;5;203m",
    diagnostic_warning="\033[38;5;221m",
    diagnostic_note="\033[38;5;117m",
)

PLAIN_THEME = UITheme(name="plain", **{f.name: "" for f in fields(UITheme) if f.name != "name"})

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME)}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and the ``theme`` config key."""
    return tuple(sorted(_THEMES))


def normalize_theme_name(name: str | None) -> str:
    key = (name or "").strip().lower()
    return key if key in _THEMES else DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Pick the palette for a session; ``no_color`` always wins."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]
