"""Index store: the canonical tree, its derived indexes, and view state.

``IndexStore`` is an ordinary object; create one per viewed tree. Every
mutator updates ``ViewState`` and then emits one typed notification so
listeners can tell an expansion change from a selection change.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .notifications import (
    ExpansionChange,
    FilterChange,
    Listener,
    Notification,
    SelectionChange,
    TreeReplaced,
)
from .state import ViewState
from .tree_model.index import TreeIndex
from .tree_model.types import Node, NodeId

logger = logging.getLogger(__name__)


def _normalize_roots(nodes: Sequence[Node] | Node | None) -> tuple[Node, ...]:
    if nodes is None:
        return ()
    if isinstance(nodes, Node):
        return (nodes,)
    return tuple(node for node in nodes if isinstance(node, Node))


class IndexStore:
    """Owns one tree plus expansion, selection, and filter state."""

    def __init__(
        self,
        roots: Sequence[Node] | Node | None = None,
        *,
        state: ViewState | None = None,
    ) -> None:
        self._state = state if state is not None else ViewState()
        self._roots: tuple[Node, ...] = ()
        self._index = TreeIndex()
        self._listeners: list[Listener] = []
        if roots is not None:
            self._replace_tree(roots)

    @property
    def roots(self) -> tuple[Node, ...]:
        return self._roots

    @property
    def index(self) -> TreeIndex:
        return self._index

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: Listener):
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, notification: Notification) -> None:
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("listener %r failed handling %r", listener, notification)

    # Tree and indexes

    def _replace_tree(self, nodes: Sequence[Node] | Node | None) -> None:
        self._roots = _normalize_roots(nodes)
        self._index = TreeIndex.build(self._roots)

    def set_tree(self, nodes: Sequence[Node] | Node | None) -> None:
        """Replace the tree and rebuild both indexes; view state is kept."""
        self._replace_tree(nodes)
        self._emit(TreeReplaced(len(self._index)))

    def get(self, node_id: NodeId | None) -> Node | None:
        return self._index.get(node_id)

    def get_parent_id(self, node_id: NodeId | None) -> NodeId | None:
        return self._index.parent_of(node_id)

    def get_ancestors(self, node_id: NodeId) -> list[NodeId]:
        """Ancestor ids, root-most first; raises ``TreeConsistencyError`` on loops."""
        return self._index.ancestors(node_id)

    # Expansion

    def is_expanded(self, node_id: NodeId | None) -> bool:
        return node_id in self._state.expanded

    def toggle_expand(self, node_id: NodeId) -> None:
        expanded = self._state.expanded
        if node_id in expanded:
            expanded.discard(node_id)
        else:
            expanded.add(node_id)
        self._emit(ExpansionChange(node_id, "node"))

    def expand_all(self) -> None:
        self._state.expanded.update(self._index.ids_with_children())
        self._emit(ExpansionChange(None, "all"))

    def collapse_all(self) -> None:
        self._state.expanded.clear()
        self._emit(ExpansionChange(None, "all"))

    def expand_to_node(self, node_id: NodeId) -> None:
        """Expand every ancestor of ``node_id`` so its row can become visible."""
        ancestors = self.get_ancestors(node_id)
        self._state.expanded.update(ancestors)
        self._emit(ExpansionChange(node_id, "path"))

    # Selection and filters

    def select(self, node_id: NodeId | None) -> None:
        previous = self._state.selected_id
        self._state.selected_id = node_id
        self._emit(SelectionChange(node_id, previous))

    def selected_node(self) -> Node | None:
        return self._index.get(self._state.selected_id)

    def set_search_query(self, query: str) -> None:
        self._state.search_query = query or ""
        self._emit(FilterChange("search", self._state.search_query))

    def set_changed_only_mode(self, enabled: bool) -> None:
        self._state.changed_only = bool(enabled)
        self._emit(FilterChange("changed_only", self._state.changed_only))

    def set_changed_ids(self, changed_ids: Iterable[NodeId]) -> None:
        self._state.changed_ids = frozenset(changed_ids)
        self._emit(FilterChange("changed_ids", self._state.changed_ids))

    def reset(self) -> None:
        """Drop the tree and return every piece of view state to its default."""
        self._roots = ()
        self._index = TreeIndex()
        self._state.selected_id = None
        self._state.expanded.clear()
        self._state.search_query = ""
        self._state.changed_only = False
        self._state.changed_ids = frozenset()
        self._emit(TreeReplaced(0))
