"""Paint the windowed tree pane and its chrome rows as terminal lines."""

from __future__ import annotations

from dataclasses import dataclass

from ..tree_model.rendering import changed_marker
from ..ui_theme import DEFAULT_THEME, UITheme
from .text import clip_ansi_line, pad_ansi_line
from .window import RowHandle, WindowRenderer

SEARCH_PROMPT = "/"
SEARCH_PLACEHOLDER = "type to search names, paths, ids"


def selected_with_ansi(text: str, reverse: str = "\033[7m") -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not reverse:
        return text

    # Re-enter the selection style after every internal reset.
    return reverse + text.replace("\033[0m", "\033[0m" + reverse) + "\033[0m"


@dataclass(frozen=True)
class PaneChrome:
    """Status values shown around the tree rows."""

    search_query: str = ""
    search_editing: bool = False
    search_match_count: int = 0
    changed_only: bool = False
    expanded_count: int = 0
    degraded_message: str | None = None


def format_status_line(window: WindowRenderer, chrome: PaneChrome) -> str:
    parts = [
        f"Rows: {window.total_rows:,}",
        f"Expanded: {chrome.expanded_count:,}",
        f"Rendered: {window.rendered_count:,}",
    ]
    if chrome.changed_only:
        parts.append("[changed only]")
    parts.append("n/p changes · c changed · / search · q quit")
    return " · ".join(parts)


def format_search_line(chrome: PaneChrome, theme: UITheme) -> str:
    """Build the search prompt row, with the match count once a query exists."""
    if chrome.search_query:
        text = f"{theme.search_query}{SEARCH_PROMPT} {chrome.search_query}"
    else:
        text = f"{theme.search_hint}{SEARCH_PROMPT} {SEARCH_PLACEHOLDER}"
    if chrome.search_editing:
        text += "_"
    text += theme.reset
    if chrome.search_query:
        noun = "match" if chrome.search_match_count == 1 else "matches"
        label = f"{chrome.search_match_count:,} {noun}" if chrome.search_match_count else "no results"
        text += f"{theme.search_hint}  {label}{theme.reset}"
    return text


class TreePaneRenderer:
    """Lay pooled row handles out on screen lines.

    Handles are placed as one contiguous block starting at
    ``window.block_offset``; the scroll offset is subtracted once for the
    whole block rather than per row.
    """

    def __init__(
        self,
        window: WindowRenderer,
        width: int,
        height: int,
        chrome: PaneChrome | None = None,
        theme: UITheme | None = None,
    ) -> None:
        self.window = window
        self.width = max(1, width)
        self.height = max(0, height)
        self.chrome = chrome or PaneChrome()
        self.theme = theme or DEFAULT_THEME

    @property
    def show_search_row(self) -> bool:
        return self.chrome.search_editing or bool(self.chrome.search_query)

    def header_lines(self) -> list[str]:
        lines: list[str] = []
        if self.chrome.degraded_message:
            lines.append(f"{self.theme.status_warning}{self.chrome.degraded_message}{self.theme.reset}")
        if self.show_search_row:
            lines.append(format_search_line(self.chrome, self.theme))
        return lines

    def tree_rows_available(self) -> int:
        """Rows left for tree content after header and status lines."""
        return max(0, self.height - len(self.header_lines()) - 1)

    def render_handle(self, handle: RowHandle) -> str:
        text = handle.text
        if handle.changed:
            text += changed_marker(self.theme)
        text = clip_ansi_line(text, self.width)
        if handle.selected:
            return selected_with_ansi(pad_ansi_line(text, self.width), self.theme.reverse)
        return text

    def tree_lines(self, rows: int) -> list[str]:
        """Return exactly ``rows`` lines of tree content for the viewport."""
        lines = [""] * rows
        row_height = self.window.row_height
        first_line = round((self.window.block_offset - self.window.scroll_top) / row_height)
        for position, handle in enumerate(self.window.handles()):
            line = first_line + position
            if 0 <= line < rows:
                lines[line] = self.render_handle(handle)
        return lines

    def render_lines(self) -> list[str]:
        """Return the full pane: header rows, tree rows, then the status row."""
        header = self.header_lines()
        body = self.tree_lines(self.tree_rows_available())
        status = f"{self.theme.status_text}{format_status_line(self.window, self.chrome)}{self.theme.reset}"
        lines = header + body + [status]
        return [pad_ansi_line(line, self.width) for line in lines[: max(1, self.height)]]
