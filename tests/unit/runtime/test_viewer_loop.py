from __future__ import annotations

import os
import unittest
from contextlib import contextmanager
from unittest import mock

from simtreenav.runtime.loop import BURST_POLL_MS, KEY_POLL_MS, run_viewer
from simtreenav.runtime.terminal import CURSOR_HOME, HOME_AND_CLEAR, TerminalController
from simtreenav.session import TreeViewSession
from simtreenav.store import IndexStore
from simtreenav.tree_model import Node
from simtreenav.ui_theme import PLAIN_THEME


class _FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[tuple[list[str], bool]] = []

    @contextmanager
    def raw_mode(self):
        yield

    def write_frame(self, lines: list[str], *, clear: bool = False) -> None:
        self.frames.append((list(lines), clear))


def _make_session() -> TreeViewSession:
    root = Node(id="r", name="Root", children=(Node(id="a", name="Alpha"), Node(id="b", name="Beta")))
    return TreeViewSession(IndexStore([root]), theme=PLAIN_THEME)


class RunViewerTests(unittest.TestCase):
    def test_keys_are_applied_in_bursts_between_frames(self) -> None:
        session = _make_session()
        terminal = _FakeTerminal()
        keys = iter(["+", "j", "", "q"])
        timeouts: list[int | None] = []

        def fake_read_key(_fd: int, timeout_ms: int | None = None) -> str:
            timeouts.append(timeout_ms)
            return next(keys)

        with mock.patch("simtreenav.runtime.loop.TerminalController", return_value=terminal), mock.patch(
            "simtreenav.runtime.loop.read_key", side_effect=fake_read_key
        ):
            run_viewer(session, 0, 1, get_terminal_size=lambda *_: os.terminal_size((30, 6)))

        self.assertEqual(len(terminal.frames), 2)
        self.assertTrue(terminal.frames[0][1])
        self.assertFalse(terminal.frames[1][1])
        self.assertEqual(timeouts, [KEY_POLL_MS, BURST_POLL_MS, BURST_POLL_MS, KEY_POLL_MS])
        self.assertEqual(session.store.state.selected_id, "r")
        second_frame = [line.rstrip() for line in terminal.frames[1][0]]
        self.assertEqual(second_frame[1], "    📄 Alpha")
        self.assertTrue(second_frame[0].startswith("\033[7m"))

    def test_resize_repaints_with_clear(self) -> None:
        session = _make_session()
        terminal = _FakeTerminal()
        sizes = iter([os.terminal_size((30, 6)), os.terminal_size((50, 8))])
        keys = iter(["x", "", "q"])

        with mock.patch("simtreenav.runtime.loop.TerminalController", return_value=terminal), mock.patch(
            "simtreenav.runtime.loop.read_key", side_effect=lambda *_a, **_k: next(keys, "")
        ):
            run_viewer(session, 0, 1, get_terminal_size=lambda *_: next(sizes))

        self.assertEqual([clear for _lines, clear in terminal.frames], [True, True])
        self.assertEqual(len(terminal.frames[1][0]), 8)
        self.assertEqual(session.viewport_height, 7)


class TerminalControllerTests(unittest.TestCase):
    def test_write_frame_joins_lines_from_home(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            with mock.patch("simtreenav.runtime.terminal.termios.tcgetattr", return_value=[]):
                terminal = TerminalController(0, write_fd)
            terminal.write_frame(["a", "b"])
            terminal.write_frame(["c"], clear=True)
            os.close(write_fd)
            write_fd = -1
            data = os.read(read_fd, 1024).decode("utf-8")
        finally:
            os.close(read_fd)
            if write_fd != -1:
                os.close(write_fd)

        self.assertEqual(data, f"{CURSOR_HOME}a\r\nb{HOME_AND_CLEAR}c")


if __name__ == "__main__":
    unittest.main()
