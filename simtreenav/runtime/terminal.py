"""Terminal control helpers for the interactive viewer.

Owns raw-mode lifecycle, alternate-screen switching, and mouse reporting.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

HOME_AND_CLEAR = "\x1b[H\x1b[2J"
CURSOR_HOME = "\x1b[H"


class TerminalController:
    """Manage terminal mode transitions and frame output."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen, hide cursor, enable SGR mouse reporting.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h")

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state."""
        os.write(self.stdout_fd, b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write_frame(self, lines: list[str], *, clear: bool = False) -> None:
        """Draw ``lines`` from the top-left corner, one terminal row each."""
        prefix = HOME_AND_CLEAR if clear else CURSOR_HOME
        payload = prefix + "\r\n".join(lines)
        os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
