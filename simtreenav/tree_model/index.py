"""Flat id->node and id->parent lookup tables built from a root list."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..errors import TreeConsistencyError
from .types import Node, NodeId

logger = logging.getLogger(__name__)


@dataclass
class TreeIndex:
    """Derived lookup tables for one tree.

    Nodes keep no parent references; the parent relation lives only in
    ``parents`` so the tree itself stays acyclic.
    """

    nodes: dict[NodeId, Node] = field(default_factory=dict)
    parents: dict[NodeId, NodeId] = field(default_factory=dict)

    @classmethod
    def build(cls, roots: Iterable[Node]) -> TreeIndex:
        """Index every node in one pre-order pass.

        When ids repeat, the node visited later in pre-order wins.
        """
        index = cls()
        duplicates = 0
        stack: list[tuple[Node, NodeId | None]] = [(root, None) for root in reversed(list(roots))]
        while stack:
            node, parent_id = stack.pop()
            if node.id is not None:
                if node.id in index.nodes:
                    duplicates += 1
                index.nodes[node.id] = node
                if parent_id is not None:
                    index.parents[node.id] = parent_id
                else:
                    index.parents.pop(node.id, None)
            for child in reversed(node.children):
                stack.append((child, node.id))
        if duplicates:
            logger.debug("tree index saw %d duplicate node id(s); later entries won", duplicates)
        return index

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: NodeId | None) -> Node | None:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def parent_of(self, node_id: NodeId | None) -> NodeId | None:
        if node_id is None:
            return None
        return self.parents.get(node_id)

    def ancestors(self, node_id: NodeId) -> list[NodeId]:
        """Return ancestor ids from the root-most down to the direct parent.

        A chain longer than the number of indexed nodes can only come from a
        loop in ``parents``; that raises ``TreeConsistencyError``.
        """
        limit = len(self.nodes)
        chain: list[NodeId] = []
        current = self.parents.get(node_id)
        while current is not None:
            if len(chain) >= limit:
                raise TreeConsistencyError(node_id, limit)
            chain.append(current)
            current = self.parents.get(current)
        chain.reverse()
        return chain

    def ids_with_children(self) -> set[NodeId]:
        return {node_id for node_id, node in self.nodes.items() if node.children}
