"""Flatten the node tree into ordered visible rows under search/changed filters."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .types import Node, NodeId, VisibleRow


@dataclass(frozen=True)
class FlattenOptions:
    """View filters applied by ``flatten``."""

    expanded: frozenset[NodeId] | set[NodeId] = field(default_factory=frozenset)
    search: str = ""
    changed_only: bool = False
    changed_ids: frozenset[NodeId] | set[NodeId] = field(default_factory=frozenset)


def node_matches_search(node: Node, folded_query: str) -> bool:
    """Return whether the node's own name, path, or id contains the query.

    ``folded_query`` must already be case-folded; an empty query matches.
    """
    if not folded_query:
        return True
    return (
        folded_query in node.name.casefold()
        or folded_query in node.path.casefold()
        or (node.id is not None and folded_query in str(node.id).casefold())
    )


def _scan_subtrees(
    roots: Sequence[Node],
    folded_query: str,
    changed_ids: frozenset[NodeId] | set[NodeId],
) -> dict[int, tuple[bool, bool]]:
    """Descendant flags for every node under ``roots`` in one post-order pass.

    Maps ``id(node)`` to ``(descendant_name_hit, self_or_descendant_changed)``.
    Keying by object identity keeps duplicate ids from sharing an answer.
    """
    flags: dict[int, tuple[bool, bool]] = {}
    stack: list[tuple[Node, bool]] = [(root, False) for root in roots]
    while stack:
        node, children_done = stack.pop()
        if id(node) in flags:
            continue
        if not children_done:
            stack.append((node, True))
            stack.extend((child, False) for child in node.children if id(child) not in flags)
            continue

        name_hit = False
        changed = node.id in changed_ids
        for child in node.children:
            child_name_hit, child_changed = flags[id(child)]
            if folded_query and (child_name_hit or folded_query in child.name.casefold()):
                name_hit = True
            if child_changed:
                changed = True
        flags[id(node)] = (name_hit, changed)
    return flags


def flatten(roots: Iterable[Node] | None, options: FlattenOptions) -> list[VisibleRow]:
    """Return the visible rows for ``roots`` in depth-first order.

    A node is emitted when it passes the search predicate (own match or a
    descendant name match) and, in changed-only mode, is changed itself or
    has a changed descendant. A node failing either predicate is skipped with
    its whole subtree. Children of an emitted, expanded node are judged one
    by one at ``depth + 1``.
    """
    if not roots:
        return []

    roots = list(roots)
    folded_query = options.search.casefold() if options.search else ""
    expanded = options.expanded
    changed_ids = options.changed_ids
    if folded_query or options.changed_only:
        flags = _scan_subtrees(roots, folded_query, changed_ids)
    else:
        flags = {}

    rows: list[VisibleRow] = []
    stack: list[tuple[Node, int]] = [(root, 0) for root in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        name_hit, changed = flags.get(id(node), (False, False))
        if not (node_matches_search(node, folded_query) or name_hit):
            continue
        if options.changed_only and not changed:
            continue

        is_expanded = node.id in expanded
        has_children = bool(node.children)
        rows.append(
            VisibleRow(
                node=node,
                depth=depth,
                is_expanded=is_expanded,
                has_children=has_children,
                is_changed=node.id in changed_ids,
            )
        )
        if has_children and is_expanded:
            # Reversed so siblings pop in document order.
            stack.extend((child, depth + 1) for child in reversed(node.children))
    return rows


def count_search_matches(roots: Iterable[Node] | None, search: str) -> int:
    """Count nodes anywhere in the tree whose own name, path, or id matches."""
    folded_query = search.casefold() if search else ""
    if not folded_query or not roots:
        return 0
    total = 0
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node_matches_search(node, folded_query):
            total += 1
        stack.extend(node.children)
    return total
