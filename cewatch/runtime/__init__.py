"""Runtime orchestration: the session loop and its process-level wiring."""

from .app import SessionOptions, compile_once, print_result, run_interactive, run_once, run_session
from .session import OutcomeKind, Session, SessionOutcome
from .source import read_source

__all__ = [
    "OutcomeKind",
    "Session",
    "SessionOptions",
    "SessionOutcome",
    "compile_once",
    "print_result",
    "read_source",
    "run_interactive",
    "run_once",
    "run_session",
]
