"""Build painted frames for a session and map screen clicks back to rows."""

from __future__ import annotations

import math

from ..intents import Intent, Select, Toggle
from ..session import TreeViewSession
from ..tree_model.filtering import count_search_matches
from ..tree_pane.rendering import PaneChrome, TreePaneRenderer
from ..ui_theme import UITheme


def chrome_for_session(session: TreeViewSession, *, search_editing: bool = False) -> PaneChrome:
    state = session.store.state
    degraded = session.degraded
    return PaneChrome(
        search_query=state.search_query,
        search_editing=search_editing,
        search_match_count=count_search_matches(session.store.roots, state.search_query),
        changed_only=state.changed_only,
        expanded_count=len(state.expanded),
        degraded_message=degraded.message() if degraded is not None else None,
    )


def pane_for_session(
    session: TreeViewSession,
    width: int,
    height: int,
    theme: UITheme | None = None,
    *,
    search_editing: bool = False,
) -> TreePaneRenderer:
    """Return a pane renderer for the session, resizing its viewport to fit.

    The tree viewport is whatever remains after chrome rows; when that
    differs from the session's viewport the window is re-rendered first.
    """
    pane = TreePaneRenderer(
        session.window,
        width,
        height,
        chrome_for_session(session, search_editing=search_editing),
        theme,
    )
    tree_rows = pane.tree_rows_available()
    viewport_height = tree_rows * session.window.row_height
    if viewport_height != session.viewport_height:
        session.resize(viewport_height)
        # Resizing can clamp scroll; chrome depends only on store state.
        pane = TreePaneRenderer(session.window, width, height, pane.chrome, theme)
    return pane


def click_to_intent(
    session: TreeViewSession,
    pane: TreePaneRenderer,
    col: int,
    row: int,
) -> Intent | None:
    """Map a 1-based terminal click position to a select or toggle intent.

    Clicking the expand marker of a row with children toggles it; clicking
    anywhere else on a row selects it.
    """
    tree_line = (row - 1) - len(pane.header_lines())
    if tree_line < 0 or tree_line >= pane.tree_rows_available():
        return None
    window = session.window
    index = math.floor(session.scroll_top / window.row_height) + tree_line
    if index < 0 or index >= window.total_rows:
        return None
    visible = window.rows[index]
    marker_col = visible.depth * 2
    if visible.has_children and marker_col <= col - 1 <= marker_col + 1:
        return Toggle(visible.node.id)
    return Select(visible.node.id)
