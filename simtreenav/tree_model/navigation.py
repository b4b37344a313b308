"""Row-index navigation helpers over the flattened visible rows."""

from __future__ import annotations

from collections.abc import Sequence

from .types import NodeId, VisibleRow


def index_of_node(rows: Sequence[VisibleRow], node_id: NodeId | None) -> int | None:
    """Return the first row index showing ``node_id``, if it is visible."""
    if node_id is None:
        return None
    for idx, row in enumerate(rows):
        if row.node.id == node_id:
            return idx
    return None


def find_next_changed(
    rows: Sequence[VisibleRow],
    from_id: NodeId | None,
    direction: int,
) -> NodeId | None:
    """Return the id of the next changed row in ``direction``.

    The scan starts just past the row showing ``from_id``; without a visible
    selection it starts at the first row (forward) or last row (backward).
    It stops at the sequence boundary and never wraps.
    """
    if not rows or direction == 0:
        return None
    step = 1 if direction > 0 else -1
    current = index_of_node(rows, from_id)
    if current is None:
        idx = 0 if step > 0 else len(rows) - 1
    else:
        idx = current + step
    while 0 <= idx < len(rows):
        if rows[idx].is_changed:
            return rows[idx].node.id
        idx += step
    return None


def scroll_offset_to_reveal(
    index: int,
    row_height: float,
    current_scroll_top: float,
    viewport_height: float,
) -> float:
    """Return the minimal scroll offset that brings row ``index`` into view."""
    row_top = index * row_height
    row_bottom = row_top + row_height
    if row_top < current_scroll_top:
        return row_top
    if row_bottom > current_scroll_top + viewport_height:
        return max(0, row_bottom - viewport_height)
    return current_scroll_top


def step_selection_index(
    rows: Sequence[VisibleRow],
    current_index: int | None,
    delta: int,
) -> int | None:
    """Move a row cursor by ``delta``, clamped to the row bounds.

    With no current row the cursor lands on the first row.
    """
    if not rows:
        return None
    if current_index is None:
        return 0
    return max(0, min(len(rows) - 1, current_index + delta))
