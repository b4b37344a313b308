"""Tree-pane windowing and painting."""

from .rendering import PaneChrome, TreePaneRenderer
from .window import (
    DegradedMode,
    ReconcileResult,
    RowHandle,
    WindowRenderer,
    compute_visible_range,
)

__all__ = [
    "DegradedMode",
    "PaneChrome",
    "ReconcileResult",
    "RowHandle",
    "TreePaneRenderer",
    "WindowRenderer",
    "compute_visible_range",
]
