"""Node and visible-row datatypes shared by the index, filter, and pane modules."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

logger = logging.getLogger(__name__)

NodeId = Union[str, int]

_NAME_KEYS = ("name", "caption")
_TYPE_KEYS = ("niceName", "nodeType", "className")
_RESERVED_KEYS = frozenset({"id", "children", "path", *_NAME_KEYS, *_TYPE_KEYS})


@dataclass(frozen=True, eq=False)
class Node:
    """One immutable entry in the process tree.

    Nodes compare by identity: two nodes with the same id are still distinct
    objects, which keeps duplicate-id input well defined.
    """

    id: NodeId | None
    name: str = ""
    children: tuple[Node, ...] = ()
    path: str = ""
    node_type: str = ""
    attrs: Mapping[str, Any] = field(default_factory=dict)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def label(self) -> str:
        """Display text, falling back to ``Node <id>`` for unnamed nodes."""
        return self.name or f"Node {self.id}"


@dataclass(frozen=True)
class VisibleRow:
    """One row of the flattened, filtered tree."""

    node: Node
    depth: int
    is_expanded: bool
    has_children: bool
    is_changed: bool

    @property
    def node_id(self) -> NodeId | None:
        return self.node.id


def _first_text(data: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return ""


def _object_children(data: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    raw_children = data.get("children") or ()
    if not isinstance(raw_children, list):
        return []
    children: list[Mapping[str, Any]] = []
    for child in raw_children:
        if isinstance(child, Mapping):
            children.append(child)
        else:
            logger.debug("skipping non-object child %r under node %r", child, data.get("id"))
    return children


def _make_node(data: Mapping[str, Any], children: list[Node]) -> Node:
    raw_id = data.get("id")
    node_id = raw_id if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool) else None
    extra = {key: value for key, value in data.items() if key not in _RESERVED_KEYS}
    return Node(
        id=node_id,
        name=_first_text(data, _NAME_KEYS),
        children=tuple(children),
        path=str(data.get("path") or ""),
        node_type=_first_text(data, _TYPE_KEYS),
        attrs=MappingProxyType(extra),
    )


def node_from_dict(data: Mapping[str, Any]) -> Node:
    """Build a ``Node`` (and its subtree) from one decoded JSON object.

    Non-object children are dropped. Ids keep their JSON type so numeric ids
    stay numeric. Nodes are frozen, so the subtree is assembled bottom-up
    with an explicit stack.
    """
    built: list[Node] = []
    # Each frame: the object, its pending child objects, the nodes built for
    # its children so far, and the list its own node is appended to.
    stack = [(data, iter(_object_children(data)), [], built)]
    while stack:
        current, pending, children, parent_children = stack[-1]
        child = next(pending, None)
        if child is None:
            stack.pop()
            parent_children.append(_make_node(current, children))
            continue
        stack.append((child, iter(_object_children(child)), [], children))
    return built[0]


def nodes_from_document(document: Any) -> list[Node]:
    """Normalize the accepted nodes-document shapes into a root list.

    Accepts a list of node objects, ``{"root": {...}}``, ``{"nodes": [...]}``
    or a single node object. Anything else yields an empty list.
    """
    if isinstance(document, list):
        entries = document
    elif isinstance(document, Mapping):
        if isinstance(document.get("root"), Mapping):
            entries = [document["root"]]
        elif isinstance(document.get("nodes"), list):
            entries = document["nodes"]
        elif "id" in document:
            entries = [document]
        else:
            entries = []
    else:
        entries = []

    roots: list[Node] = []
    for entry in entries:
        if isinstance(entry, Mapping):
            roots.append(node_from_dict(entry))
        else:
            logger.debug("skipping non-object root entry %r", entry)
    return roots
