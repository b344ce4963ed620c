"""Terminal control helpers for the interactive session.

Owns raw-mode lifecycle, alternate-screen switching and frame painting.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions and full-frame writes."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI)
        self._active = True

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen and restore tty state."""
        os.write(self.stdout_fd, LEAVE_TUI)
        self._active = False
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @property
    def active(self) -> bool:
        return self._active

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket the session with TUI enter/exit; exit runs on every path."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` of the terminal, 80x24 when unknown."""
        term = shutil.get_terminal_size((80, 24))
        return max(1, term.columns), max(1, term.lines)

    def write_frame(self, rows: list[str]) -> None:
        """Paint ``rows`` from the top-left corner, clearing each line's tail."""
        payload = "\x1b[H" + "\r\n".join(f"{row}\x1b[0m\x1b[K" for row in rows) + "\x1b[J"
        data = payload.encode("utf-8", errors="replace")
        # Raw-mode stdout may accept partial writes for large frames.
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]
