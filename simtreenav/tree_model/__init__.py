"""Tree-model types, indexing, filtering, navigation, and row formatting.

Defines ``Node``/``VisibleRow`` and the pure functions that turn a node
tree plus view filters into an ordered row list.
"""

from __future__ import annotations

from .filtering import FlattenOptions, count_search_matches, flatten, node_matches_search
from .index import TreeIndex
from .navigation import (
    find_next_changed,
    index_of_node,
    scroll_offset_to_reveal,
    step_selection_index,
)
from .rendering import format_visible_row, highlight_substring, node_icon
from .types import Node, NodeId, VisibleRow, node_from_dict, nodes_from_document

__all__ = [
    "Node",
    "NodeId",
    "VisibleRow",
    "node_from_dict",
    "nodes_from_document",
    "TreeIndex",
    "FlattenOptions",
    "flatten",
    "count_search_matches",
    "node_matches_search",
    "find_next_changed",
    "index_of_node",
    "scroll_offset_to_reveal",
    "step_selection_index",
    "format_visible_row",
    "highlight_substring",
    "node_icon",
]
