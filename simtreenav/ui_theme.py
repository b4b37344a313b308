"""UI theme definitions and selection helpers.

Themes are ANSI palettes for tree rows and the status/search chrome. JSON
highlighting for ``--json`` output uses a separate Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by row and pane renderers."""

    name: str
    reset: str
    reverse: str
    tree_marker: str
    tree_label: str
    tree_container: str
    tree_badge: str
    tree_changed: str
    tree_search_hit: str
    search_query: str
    search_hint: str
    status_text: str
    status_warning: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    tree_marker="\033[38;5;44m",
    tree_label="\033[38;5;252m",
    tree_container="\033[1;34m",
    tree_badge="\033[2;38;5;250m",
    tree_changed="\033[38;5;214m",
    tree_search_hit="\033[7;1m",
    search_query="\033[1;38;5;81m",
    search_hint="\033[2;38;5;250m",
    status_text="\033[2m",
    status_warning="\033[1;38;5;214m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[48;5;24m",
    tree_marker="\033[38;5;39m",
    tree_label="\033[38;5;153m",
    tree_container="\033[1;38;5;45m",
    tree_badge="\033[2;38;5;110m",
    tree_changed="\033[38;5;215m",
    tree_search_hit="\033[7;1m",
    search_query="\033[1;38;5;45m",
    search_hint="\033[2;38;5;110m",
    status_text="\033[2;38;5;31m",
    status_warning="\033[1;38;5;215m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    # Reverse video is not color; the selection stays visible.
    reverse="\033[7m",
    tree_marker="",
    tree_label="",
    tree_container="",
    tree_badge="",
    tree_changed="",
    tree_search_hit="",
    search_query="",
    search_hint="",
    status_text="",
    status_warning="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
