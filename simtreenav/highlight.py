"""JSON export of visible rows, with Pygments highlighting for terminals."""

from __future__ import annotations

import json
from collections.abc import Sequence

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .tree_model.types import VisibleRow

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def _normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return "monokai"
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return "monokai"
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def row_to_dict(row: VisibleRow) -> dict[str, object]:
    node = row.node
    data: dict[str, object] = {
        "id": node.id,
        "name": node.label,
        "depth": row.depth,
        "isExpanded": row.is_expanded,
        "hasChildren": row.has_children,
        "isChanged": row.is_changed,
    }
    if node.node_type:
        data["nodeType"] = node.node_type
    if node.path:
        data["path"] = node.path
    return data


def rows_to_json(rows: Sequence[VisibleRow]) -> str:
    return json.dumps([row_to_dict(row) for row in rows], indent=2, ensure_ascii=False) + "\n"


def colorize_json(text: str, style: str = "monokai") -> str:
    """Highlight JSON text for a terminal using the named Pygments style."""
    style = _normalize_style(style)
    return pygments_highlight(text, JsonLexer(), _formatter_for_style(style))
