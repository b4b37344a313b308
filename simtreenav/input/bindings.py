"""Key-token to intent bindings for the interactive viewer."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..intents import (
    CollapseAll,
    CollapseSelected,
    ExpandAll,
    ExpandSelected,
    MoveSelection,
    NavigateChange,
    ScrollTo,
    Select,
    SetChangedOnly,
    SetSearch,
    ToggleSelected,
)
from ..runtime.config import save_show_icons, save_theme_name
from ..session import TreeViewSession
from ..ui_theme import DEFAULT_THEME, available_theme_names, resolve_theme

WHEEL_SCROLL_ROWS = 3


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], object]


class KeyComboRegistry:
    """Exact-match key dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register bindings; later bindings overwrite earlier ones for a combo."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str) -> bool:
        """Invoke bound handler for ``key``; returns False when nothing is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


class ViewerKeyHandler:
    """Translate key tokens into session intents.

    Holds the only input-layer state: whether the search prompt is being
    edited. ``page_rows`` reports the current tree viewport height and
    ``on_click`` maps a mouse click at ``(col, row)`` to an action.
    """

    def __init__(
        self,
        session: TreeViewSession,
        page_rows: Callable[[], int],
        on_click: Callable[[int, int], bool] | None = None,
    ) -> None:
        self.session = session
        self.page_rows = page_rows
        self.on_click = on_click
        self.search_editing = False
        self.quit_requested = False
        self.registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q", "CTRL_C"), self._quit),
            KeyComboBinding(("/",), self._start_search),
            KeyComboBinding(("n",), lambda: session.dispatch(NavigateChange(1))),
            KeyComboBinding(("p",), lambda: session.dispatch(NavigateChange(-1))),
            KeyComboBinding(("c",), self._toggle_changed_only),
            KeyComboBinding(("i",), self._toggle_icons),
            KeyComboBinding(("t",), self._cycle_theme),
            KeyComboBinding(("UP", "k"), lambda: session.dispatch(MoveSelection(-1))),
            KeyComboBinding(("DOWN", "j"), lambda: session.dispatch(MoveSelection(1))),
            KeyComboBinding(("RIGHT", "l"), lambda: session.dispatch(ExpandSelected())),
            KeyComboBinding(("LEFT", "h"), lambda: session.dispatch(CollapseSelected())),
            KeyComboBinding(("ENTER",), lambda: session.dispatch(ToggleSelected())),
            KeyComboBinding(("ESC",), lambda: session.dispatch(Select(None))),
            KeyComboBinding(("+",), lambda: session.dispatch(ExpandAll())),
            KeyComboBinding(("-",), lambda: session.dispatch(CollapseAll())),
            KeyComboBinding(("CTRL_D",), lambda: self._scroll_rows(max(1, self.page_rows() // 2))),
            KeyComboBinding(("CTRL_U",), lambda: self._scroll_rows(-max(1, self.page_rows() // 2))),
            KeyComboBinding(("PAGE_DOWN", " "), lambda: self._scroll_rows(max(1, self.page_rows()))),
            KeyComboBinding(("PAGE_UP",), lambda: self._scroll_rows(-max(1, self.page_rows()))),
            KeyComboBinding(("g", "HOME"), lambda: session.dispatch(ScrollTo(0))),
            KeyComboBinding(("G", "END"), lambda: session.dispatch(ScrollTo(session.window.total_height))),
        )

    def _quit(self) -> None:
        self.quit_requested = True

    def _start_search(self) -> None:
        self.search_editing = True

    def _toggle_changed_only(self) -> None:
        self.session.dispatch(SetChangedOnly(not self.session.store.state.changed_only))

    def _toggle_icons(self) -> None:
        self.session.set_show_icons(not self.session.show_icons)
        save_show_icons(self.session.show_icons)

    def _cycle_theme(self) -> None:
        """Advance to the next named theme and remember it."""
        names = available_theme_names()
        current = self.session.theme.name if self.session.theme is not None else DEFAULT_THEME.name
        if current not in names:
            # No-color mode keeps its plain palette.
            return
        next_name = names[(names.index(current) + 1) % len(names)]
        self.session.set_theme(resolve_theme(next_name))
        save_theme_name(next_name)

    def _scroll_rows(self, rows: int) -> None:
        offset = self.session.scroll_top + rows * self.session.window.row_height
        self.session.dispatch(ScrollTo(offset))

    def _handle_mouse(self, key: str) -> bool:
        col, row = parse_mouse_col_row(key)
        if key.startswith("MOUSE_WHEEL_UP:"):
            self._scroll_rows(-WHEEL_SCROLL_ROWS)
            return True
        if key.startswith("MOUSE_WHEEL_DOWN:"):
            self._scroll_rows(WHEEL_SCROLL_ROWS)
            return True
        if key.startswith("MOUSE_LEFT_DOWN:") and col is not None and row is not None and self.on_click is not None:
            return self.on_click(col, row)
        return True

    def _handle_search_key(self, key: str) -> bool:
        query = self.session.store.state.search_query
        if key == "ENTER":
            self.search_editing = False
        elif key == "ESC":
            self.search_editing = False
            self.session.dispatch(SetSearch(""))
        elif key == "BACKSPACE":
            self.session.dispatch(SetSearch(query[:-1]))
        elif key == "CTRL_U":
            self.session.dispatch(SetSearch(""))
        elif key == "CTRL_C":
            self.quit_requested = True
        elif len(key) == 1 and key.isprintable():
            self.session.dispatch(SetSearch(query + key))
        else:
            return False
        return True

    def handle_key(self, key: str) -> bool:
        """Handle one key token; returns whether anything consumed it."""
        if not key:
            return False
        if key.startswith("MOUSE"):
            return self._handle_mouse(key)
        if self.search_editing:
            return self._handle_search_key(key)
        return self.registry.dispatch(key)
