"""Load the watched file as source text."""

from __future__ import annotations

from pathlib import Path

from ..errors import FileDecodeError, FileReadError


def read_source(path: Path) -> str:
    """Return the file's text.

    Raises ``FileReadError`` when the file cannot be read and
    ``FileDecodeError`` when it is not UTF-8 text (NUL bytes count as binary).
    """
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileReadError(path, exc.strerror or str(exc)) from exc
    if b"\0" in data:
        raise FileDecodeError(path, "contains NUL bytes")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FileDecodeError(path, f"invalid UTF-8 at byte {exc.start}") from exc
