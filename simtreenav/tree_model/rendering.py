"""Formatting helpers for visible tree rows."""

from __future__ import annotations

import re

from ..ui_theme import DEFAULT_THEME, UITheme
from .types import Node, VisibleRow

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

# Checked in order; first case-insensitive substring hit on the node type wins.
NODE_TYPE_ICONS: tuple[tuple[str, str], ...] = (
    ("project", "📁"),
    ("plant", "🏭"),
    ("line", "📏"),
    ("station", "⚙️"),
    ("cell", "🔲"),
    ("robot", "🤖"),
    ("resource", "🔧"),
    ("part", "📦"),
    ("assembly", "🔩"),
    ("operation", "▶️"),
    ("study", "📋"),
    ("library", "📚"),
    ("folder", "📂"),
)
DEFAULT_NODE_ICON = "📄"
CHANGED_MARKER = "●"


def node_icon(node: Node) -> str:
    """Return the icon for a node based on its type tag."""
    folded = node.node_type.casefold()
    if folded:
        for key, icon in NODE_TYPE_ICONS:
            if key in folded:
                return icon
    return DEFAULT_NODE_ICON


def sanitize_label(text: str) -> str:
    """Escape control characters so node names cannot drive the terminal."""
    if _CONTROL_RE.search(text) is None:
        return text
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", text)


def highlight_substring(text: str, query: str, theme: UITheme | None = None) -> str:
    """Highlight first case-insensitive substring match in ``text``."""
    if not query:
        return text
    active_theme = theme or DEFAULT_THEME
    if not active_theme.tree_search_hit:
        return text
    match = re.search(re.escape(query), text, re.IGNORECASE)
    if match is None:
        return text
    start, end = match.span()
    return text[:start] + active_theme.tree_search_hit + text[start:end] + "\033[27;22m" + text[end:]


def format_visible_row(
    row: VisibleRow,
    search_query: str = "",
    show_icons: bool = True,
    theme: UITheme | None = None,
    show_changed_marker: bool = True,
) -> str:
    """Render one visible row as ANSI-styled display text.

    Selection styling is applied later by the pane so pooled rows can keep
    this text across selection changes. The pane passes
    ``show_changed_marker=False`` and draws the marker from the pooled
    handle's own changed flag.
    """
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * row.depth
    if row.has_children:
        marker = "▾ " if row.is_expanded else "▸ "
        label_color = active_theme.tree_container
    else:
        marker = "  "
        label_color = active_theme.tree_label

    label = highlight_substring(sanitize_label(row.node.label), search_query, active_theme)
    parts = [f"{indent}{active_theme.tree_marker}{marker}{reset}"]
    if show_icons:
        parts.append(f"{node_icon(row.node)} ")
    parts.append(f"{label_color}{label}{reset}")
    if row.node.node_type:
        parts.append(f" {active_theme.tree_badge}{sanitize_label(row.node.node_type)}{reset}")
    if show_changed_marker and row.is_changed:
        parts.append(changed_marker(active_theme))
    return "".join(parts)


def changed_marker(theme: UITheme | None = None) -> str:
    active_theme = theme or DEFAULT_THEME
    return f" {active_theme.tree_changed}{CHANGED_MARKER}{active_theme.reset}"
