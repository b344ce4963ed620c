"""Error taxonomy for the watch/compile/display session.

Fatal errors end the session (after terminal restore); recoverable errors are
turned into a one-line status shown on the next frame.
"""

from __future__ import annotations

from pathlib import Path


class CewatchError(Exception):
    """Base class for all errors raised by cewatch."""

    label = "error"

    def status_text(self) -> str:
        """Return a single-line description suitable for the status row."""
        message = " ".join(str(self).split())
        return f"{self.label}: {message}" if message else self.label


class WatchError(CewatchError):
    label = "watch error"


class WatchSetupError(WatchError):
    """The directory subscription could not be established."""

    label = "cannot watch"


class WatchRuntimeError(WatchError):
    """The watch subsystem failed while the session was running."""


class SourceError(CewatchError):
    """The watched file could not be turned into source text."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class FileReadError(SourceError):
    label = "read failed"


class FileDecodeError(SourceError):
    label = "not a text file"


class CompileError(CewatchError):
    """The compile service round trip did not produce a result."""


class CompileTransportError(CompileError):
    label = "compile request failed"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CompileProtocolError(CompileError):
    label = "unexpected compile response"
