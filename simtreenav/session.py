"""View session wiring the index store, visibility engine, and window.

The session listens to store notifications: row-affecting changes rebuild
the visible row list, selection changes only refresh pooled handles.
Scroll changes never touch the row list. A rebuild that fails inside a
notification leaves the session stale; the next session call retries it
and raises to its caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .intents import (
    CollapseAll,
    CollapseSelected,
    ExpandAll,
    ExpandSelected,
    Intent,
    MoveSelection,
    NavigateChange,
    Resize,
    ScrollTo,
    Select,
    SetChangedOnly,
    SetSearch,
    Toggle,
    ToggleSelected,
)
from .notifications import ROW_AFFECTING, FilterChange, Notification, SelectionChange
from .store import IndexStore
from .tree_model.filtering import FlattenOptions, flatten
from .tree_model.navigation import (
    find_next_changed,
    index_of_node,
    scroll_offset_to_reveal,
    step_selection_index,
)
from .tree_model.rendering import format_visible_row
from .tree_model.types import NodeId, VisibleRow
from .tree_pane.window import DegradedListener, DegradedMode, ReconcileResult, WindowRenderer
from .ui_theme import UITheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeStats:
    total_visible: int
    expanded_count: int
    rendered_count: int


class TreeViewSession:
    """One scrollable, filterable view over an ``IndexStore``."""

    def __init__(
        self,
        store: IndexStore | None = None,
        *,
        window: WindowRenderer | None = None,
        viewport_height: float = 0,
        show_icons: bool = True,
        theme: UITheme | None = None,
    ) -> None:
        self.store = store if store is not None else IndexStore()
        self.window = window if window is not None else WindowRenderer()
        if self.window.formatter is None:
            self.window.formatter = self._format_row
        self.show_icons = show_icons
        self.theme = theme
        self.scroll_top: float = 0
        self.viewport_height: float = max(0, viewport_height)
        self.last_reconcile: ReconcileResult | None = None
        self._stale = True
        self._unsubscribe = self.store.subscribe(self._on_notification)
        self.rebuild()

    def close(self) -> None:
        self._unsubscribe()

    def _format_row(self, row: VisibleRow) -> str:
        return format_visible_row(
            row,
            search_query=self.store.state.search_query,
            show_icons=self.show_icons,
            theme=self.theme,
            show_changed_marker=False,
        )

    def _on_notification(self, notification: Notification) -> None:
        if isinstance(notification, SelectionChange):
            self.render()
            return
        if isinstance(notification, FilterChange) and notification.kind == "search":
            # Pooled text carries the search highlight.
            self.window.clear_pool()
        if isinstance(notification, ROW_AFFECTING):
            self._stale = True
            self.rebuild()

    def _ensure_current(self) -> None:
        """Retry a rebuild that failed inside a store notification."""
        if self._stale:
            self.rebuild()

    # Derived rows and window

    def rebuild(self) -> list[VisibleRow]:
        """Recompute visible rows from the store and re-render the window."""
        state = self.store.state
        rows = flatten(
            self.store.roots,
            FlattenOptions(
                expanded=state.expanded,
                search=state.search_query,
                changed_only=state.changed_only,
                changed_ids=state.changed_ids,
            ),
        )
        self._stale = False
        self.window.set_rows(rows)
        self.scroll_top = self._clamp_scroll(self.scroll_top)
        self.render()
        return self.window.rows

    def render(self) -> ReconcileResult:
        self._ensure_current()
        self.last_reconcile = self.window.render(
            self.scroll_top,
            self.viewport_height,
            self.store.state.selected_id,
        )
        return self.last_reconcile

    def _clamp_scroll(self, offset: float) -> float:
        max_scroll = max(0, self.window.total_height - self.viewport_height)
        return max(0, min(offset, max_scroll))

    def visible_rows(self) -> list[VisibleRow]:
        """Snapshot of the current (possibly truncated) visible rows."""
        self._ensure_current()
        return list(self.window.rows)

    def stats(self) -> TreeStats:
        self._ensure_current()
        return TreeStats(
            total_visible=self.window.total_rows,
            expanded_count=len(self.store.state.expanded),
            rendered_count=self.window.rendered_count,
        )

    @property
    def degraded(self) -> DegradedMode | None:
        return self.window.degraded

    def add_degraded_listener(self, listener: DegradedListener):
        return self.window.add_degraded_listener(listener)

    def selected_index(self) -> int | None:
        self._ensure_current()
        return index_of_node(self.window.rows, self.store.state.selected_id)

    # Intents

    def toggle(self, node_id: NodeId) -> None:
        self.store.toggle_expand(node_id)
        self._ensure_current()

    def select(self, node_id: NodeId | None, *, reveal: bool = True) -> None:
        self.store.select(node_id)
        if reveal and node_id is not None:
            self.reveal(node_id)

    def set_search(self, text: str) -> None:
        self.store.set_search_query(text)
        self._ensure_current()

    def set_changed_only(self, enabled: bool) -> None:
        self.store.set_changed_only_mode(enabled)
        self._ensure_current()

    def expand_all(self) -> None:
        self.store.expand_all()
        self._ensure_current()

    def collapse_all(self) -> None:
        self.store.collapse_all()
        self._ensure_current()

    def set_show_icons(self, enabled: bool) -> None:
        self.show_icons = bool(enabled)
        self.window.clear_pool()
        self.render()

    def set_theme(self, theme: UITheme | None) -> None:
        """Switch palettes; pooled row text is re-formatted with the new one."""
        self.theme = theme
        self.window.clear_pool()
        self.render()

    def scroll_to(self, offset: float) -> ReconcileResult:
        self.scroll_top = self._clamp_scroll(offset)
        return self.render()

    def scroll_by(self, delta: float) -> ReconcileResult:
        return self.scroll_to(self.scroll_top + delta)

    def resize(self, viewport_height: float) -> ReconcileResult:
        self.viewport_height = max(0, viewport_height)
        self.scroll_top = self._clamp_scroll(self.scroll_top)
        return self.render()

    def reveal(self, node_id: NodeId) -> bool:
        """Scroll just enough to show ``node_id``; False when it is not visible."""
        self._ensure_current()
        index = index_of_node(self.window.rows, node_id)
        if index is None:
            return False
        target = scroll_offset_to_reveal(index, self.window.row_height, self.scroll_top, self.viewport_height)
        if target != self.scroll_top:
            self.scroll_to(target)
        return True

    def navigate_change(self, direction: int) -> NodeId | None:
        """Select the next changed row in ``direction`` and bring it into view."""
        self._ensure_current()
        target = find_next_changed(self.window.rows, self.store.state.selected_id, direction)
        if target is None:
            logger.debug("no changed row in direction %d", direction)
            return None
        self.store.expand_to_node(target)
        self.select(target)
        return target

    def move_selection(self, delta: int) -> NodeId | None:
        self._ensure_current()
        rows = self.window.rows
        index = step_selection_index(rows, self.selected_index(), delta)
        if index is None:
            return None
        node_id = rows[index].node.id
        self.select(node_id)
        return node_id

    def expand_selected(self) -> None:
        node_id = self.store.state.selected_id
        if node_id is not None and not self.store.is_expanded(node_id):
            self.toggle(node_id)

    def collapse_selected(self) -> None:
        node_id = self.store.state.selected_id
        if node_id is not None and self.store.is_expanded(node_id):
            self.toggle(node_id)

    def toggle_selected(self) -> None:
        node_id = self.store.state.selected_id
        if node_id is not None:
            self.toggle(node_id)

    def dispatch(self, intent: Intent) -> None:
        """Apply one input intent."""
        if isinstance(intent, Toggle):
            self.toggle(intent.node_id)
        elif isinstance(intent, Select):
            self.select(intent.node_id)
        elif isinstance(intent, SetSearch):
            self.set_search(intent.text)
        elif isinstance(intent, SetChangedOnly):
            self.set_changed_only(intent.enabled)
        elif isinstance(intent, ExpandAll):
            self.expand_all()
        elif isinstance(intent, CollapseAll):
            self.collapse_all()
        elif isinstance(intent, ScrollTo):
            self.scroll_to(intent.offset)
        elif isinstance(intent, NavigateChange):
            self.navigate_change(intent.direction)
        elif isinstance(intent, MoveSelection):
            self.move_selection(intent.delta)
        elif isinstance(intent, ExpandSelected):
            self.expand_selected()
        elif isinstance(intent, CollapseSelected):
            self.collapse_selected()
        elif isinstance(intent, ToggleSelected):
            self.toggle_selected()
        elif isinstance(intent, Resize):
            self.resize(intent.viewport_height)
        else:
            raise TypeError(f"unsupported intent: {intent!r}")
