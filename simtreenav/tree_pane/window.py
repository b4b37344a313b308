"""Windowed materialization of visible rows against a scroll position.

Only rows inside ``[visible_start, visible_end)`` get a ``RowHandle``. Handles
live in a pool keyed by absolute row index and are reused across frames: a
handle whose row identity is unchanged only has its selection and changed
flags refreshed. The rendered block is placed with one offset,
``visible_start * row_height``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..tree_model.types import NodeId, VisibleRow

logger = logging.getLogger(__name__)

DEFAULT_ROW_HEIGHT = 1
DEFAULT_BUFFER_ROWS = 10
DEFAULT_MAX_ROWS = 10_000

RowFormatter = Callable[[VisibleRow], str]
DegradedListener = Callable[["DegradedMode | None"], None]


@dataclass(frozen=True)
class DegradedMode:
    """Raised to the host when the row list was cut down to ``max_rows``."""

    max_rows: int
    actual_count: int

    def message(self) -> str:
        return (
            f"Large dataset: {self.actual_count:,} rows. "
            f"Showing first {self.max_rows:,} for performance."
        )


@dataclass
class RowHandle:
    """Pooled representation of one materialized row."""

    index: int
    row: VisibleRow
    selected: bool
    changed: bool
    text: str = ""


@dataclass(frozen=True)
class ReconcileResult:
    start: int
    end: int
    created: int = 0
    updated: int = 0
    removed: int = 0

    @property
    def churn(self) -> int:
        return self.created + self.removed


def compute_visible_range(
    scroll_top: float,
    viewport_height: float,
    total_rows: int,
    row_height: float = DEFAULT_ROW_HEIGHT,
    buffer_rows: int = DEFAULT_BUFFER_ROWS,
) -> tuple[int, int]:
    """Return the ``[start, end)`` row range to materialize.

    ``start`` is never negative, ``end`` never exceeds ``total_rows``, and the
    range is never inverted when scrolled past the end.
    """
    scroll_top = max(0.0, scroll_top)
    viewport_height = max(0.0, viewport_height)
    total_rows = max(0, total_rows)
    start = max(0, math.floor(scroll_top / row_height) - buffer_rows)
    end = min(total_rows, math.ceil((scroll_top + viewport_height) / row_height) + buffer_rows)
    return min(start, end), end


def _same_identity(handle: RowHandle, row: VisibleRow) -> bool:
    current = handle.row
    return (
        current.node is row.node
        and current.depth == row.depth
        and current.is_expanded == row.is_expanded
        and current.has_children == row.has_children
    )


class WindowRenderer:
    """Keep a bounded pool of row handles in sync with a scroll window."""

    def __init__(
        self,
        row_height: float = DEFAULT_ROW_HEIGHT,
        buffer_rows: int = DEFAULT_BUFFER_ROWS,
        max_rows: int = DEFAULT_MAX_ROWS,
        formatter: RowFormatter | None = None,
    ) -> None:
        if row_height <= 0:
            raise ValueError("row_height must be positive")
        if buffer_rows < 0:
            raise ValueError("buffer_rows must be >= 0")
        if max_rows <= 0:
            raise ValueError("max_rows must be positive")
        self.row_height = row_height
        self.buffer_rows = buffer_rows
        self.max_rows = max_rows
        self.formatter = formatter
        self.rows: list[VisibleRow] = []
        self.pool: dict[int, RowHandle] = {}
        self.visible_start = 0
        self.visible_end = 0
        self.scroll_top: float = 0
        self.viewport_height: float = 0
        self.degraded: DegradedMode | None = None
        self._degraded_listeners: list[DegradedListener] = []

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def total_height(self) -> float:
        return len(self.rows) * self.row_height

    @property
    def block_offset(self) -> float:
        """Offset applied once to the whole rendered block."""
        return self.visible_start * self.row_height

    def add_degraded_listener(self, listener: DegradedListener):
        self._degraded_listeners.append(listener)

        def remove() -> None:
            if listener in self._degraded_listeners:
                self._degraded_listeners.remove(listener)

        return remove

    def set_rows(self, rows: Sequence[VisibleRow]) -> DegradedMode | None:
        """Install a new row list, keeping only the first ``max_rows`` rows.

        Degraded listeners hear about every truncated list, and hear ``None``
        once when the list fits again.
        """
        previous = self.degraded
        actual_count = len(rows)
        if actual_count > self.max_rows:
            self.rows = list(rows[: self.max_rows])
            self.degraded = DegradedMode(self.max_rows, actual_count)
            logger.warning("visible rows truncated to %d of %d", self.max_rows, actual_count)
        else:
            self.rows = list(rows)
            self.degraded = None

        if self.degraded is not None or previous is not None:
            for listener in list(self._degraded_listeners):
                listener(self.degraded)
        return self.degraded

    def compute_range(self, scroll_top: float, viewport_height: float, total_rows: int | None = None) -> tuple[int, int]:
        if total_rows is None:
            total_rows = len(self.rows)
        return compute_visible_range(scroll_top, viewport_height, total_rows, self.row_height, self.buffer_rows)

    def _create(self, index: int, row: VisibleRow, selected_id: NodeId | None) -> RowHandle:
        text = self.formatter(row) if self.formatter is not None else ""
        return RowHandle(
            index=index,
            row=row,
            selected=selected_id is not None and row.node.id == selected_id,
            changed=row.is_changed,
            text=text,
        )

    def render(
        self,
        scroll_top: float,
        viewport_height: float,
        selected_id: NodeId | None = None,
    ) -> ReconcileResult:
        """Reconcile the handle pool with the window for ``scroll_top``.

        Calling this again with the same inputs reports no work.
        """
        self.scroll_top = scroll_top
        self.viewport_height = viewport_height
        start, end = self.compute_range(scroll_top, viewport_height)
        self.visible_start, self.visible_end = start, end

        removed = 0
        for index in [idx for idx in self.pool if idx < start or idx >= end]:
            del self.pool[index]
            removed += 1

        created = 0
        updated = 0
        for index in range(start, end):
            row = self.rows[index]
            handle = self.pool.get(index)
            if handle is None:
                self.pool[index] = self._create(index, row, selected_id)
                created += 1
                continue
            if not _same_identity(handle, row):
                self.pool[index] = self._create(index, row, selected_id)
                removed += 1
                created += 1
                continue
            selected = selected_id is not None and row.node.id == selected_id
            if handle.selected != selected or handle.changed != row.is_changed:
                handle.selected = selected
                handle.changed = row.is_changed
                updated += 1
            handle.row = row

        return ReconcileResult(start, end, created=created, updated=updated, removed=removed)

    def clear_pool(self) -> None:
        """Discard every handle so the next render rebuilds them all."""
        self.pool.clear()

    def handles(self) -> list[RowHandle]:
        return [self.pool[index] for index in sorted(self.pool)]

    @property
    def rendered_count(self) -> int:
        return len(self.pool)
