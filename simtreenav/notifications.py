"""Typed change notifications emitted by ``IndexStore``.

Listeners receive exactly one of the variants in ``Notification`` and can
branch on its type to decide what to recompute.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Union

from .tree_model.types import NodeId

ExpansionScope = Literal["node", "all", "path"]
FilterKind = Literal["search", "changed_only", "changed_ids"]


@dataclass(frozen=True)
class ExpansionChange:
    """Expansion set changed for one node, a path of ancestors, or everything."""

    node_id: NodeId | None
    scope: ExpansionScope = "node"


@dataclass(frozen=True)
class SelectionChange:
    node_id: NodeId | None
    previous_id: NodeId | None


@dataclass(frozen=True)
class FilterChange:
    """Search text, changed-only flag, or changed-id set was replaced."""

    kind: FilterKind
    value: object


@dataclass(frozen=True)
class TreeReplaced:
    node_count: int


Notification = Union[ExpansionChange, SelectionChange, FilterChange, TreeReplaced]
Listener = Callable[[Notification], None]

# Notifications after which the visible row list must be rebuilt.
ROW_AFFECTING = (ExpansionChange, FilterChange, TreeReplaced)

__all__ = [
    "ExpansionChange",
    "SelectionChange",
    "FilterChange",
    "TreeReplaced",
    "Notification",
    "Listener",
    "ROW_AFFECTING",
]
