from __future__ import annotations

from dataclasses import dataclass, field

from .tree_model.types import NodeId


@dataclass
class ViewState:
    selected_id: NodeId | None = None
    expanded: set[NodeId] = field(default_factory=set)
    search_query: str = ""
    changed_only: bool = False
    changed_ids: frozenset[NodeId] = field(default_factory=frozenset)
