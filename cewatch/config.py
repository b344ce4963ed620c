"""Read-only JSON config helpers.

Supplies defaults for compiler, service URL, orientation and display style.
A missing or malformed file, or a value of the wrong type, reads as unset.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "cewatch"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_COMPILER_ID = "clang_trunk"
DEFAULT_SERVICE_URL = "https://godbolt.org"
DEFAULT_ORIENTATION = "vertical"
DEFAULT_STYLE = "monokai"
ORIENTATION_NAMES = ("vertical", "horizontal")


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_compiler_id() -> str | None:
    """Load the configured Compiler Explorer compiler id."""
    return _load_string("compiler")


def load_service_url() -> str | None:
    """Load the configured service base URL without a trailing slash."""
    value = _load_string("url")
    return value.rstrip("/") if value else None


def load_orientation() -> str | None:
    """Load panel stacking orientation; only known names are accepted."""
    value = _load_string("orientation")
    if value is None:
        return None
    value = value.lower()
    return value if value in ORIENTATION_NAMES else None


def load_execute() -> bool | None:
    """Return the run-after-compile preference.

    Only explicit boolean values are accepted.
    """
    value = load_config().get("execute")
    return value if isinstance(value, bool) else None


def load_style() -> str | None:
    """Load the pygments style name used for assembly highlighting."""
    return _load_string("style")


def load_theme_name() -> str | None:
    """Load UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")
