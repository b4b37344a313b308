"""Interactive event loop for the terminal viewer.

Each iteration paints one frame, waits for a key, and hands the key to the
key handler, which turns it into session intents. Keys that arrive in a
burst are all applied before the next repaint.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from os import terminal_size

from ..input import ViewerKeyHandler, read_key
from ..session import TreeViewSession
from .frame import click_to_intent, pane_for_session
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_MS = 250
BURST_POLL_MS = 0


def run_viewer(
    session: TreeViewSession,
    stdin_fd: int,
    stdout_fd: int,
    get_terminal_size: Callable[..., terminal_size] = shutil.get_terminal_size,
) -> None:
    """Run the viewer until the user quits."""
    terminal = TerminalController(stdin_fd, stdout_fd)
    pane = pane_for_session(session, 80, 24, session.theme)

    def page_rows() -> int:
        return pane.tree_rows_available()

    def on_click(col: int, row: int) -> bool:
        intent = click_to_intent(session, pane, col, row)
        if intent is None:
            return False
        session.dispatch(intent)
        return True

    handler = ViewerKeyHandler(session, page_rows, on_click)
    last_size: tuple[int, int] | None = None

    with terminal.raw_mode():
        while not handler.quit_requested:
            size = get_terminal_size((80, 24))
            columns, lines = max(1, size.columns), max(2, size.lines)
            pane = pane_for_session(session, columns, lines, session.theme, search_editing=handler.search_editing)
            terminal.write_frame(pane.render_lines(), clear=(columns, lines) != last_size)
            last_size = (columns, lines)

            key = read_key(stdin_fd, timeout_ms=KEY_POLL_MS)
            while key:
                handler.handle_key(key)
                if handler.quit_requested:
                    break
                key = read_key(stdin_fd, timeout_ms=BURST_POLL_MS)
    logger.debug("viewer loop finished")
