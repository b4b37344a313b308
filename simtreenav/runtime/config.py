"""Persistent JSON config helpers.

Stores window sizing limits, theme, JSON highlight style, and icon preference.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..tree_pane.window import DEFAULT_BUFFER_ROWS, DEFAULT_MAX_ROWS

APP_NAME = "simtreenav"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class ViewSettings:
    buffer_rows: int = DEFAULT_BUFFER_ROWS
    max_rows: int = DEFAULT_MAX_ROWS
    theme: str | None = None
    style: str = DEFAULT_STYLE
    show_icons: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored; a config that cannot be written only
    loses the preference.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _coerce_int(value: object, default: int, minimum: int) -> int:
    """Accept real integers at or above ``minimum``; anything else is ``default``.

    Booleans are rejected even though they are ``int`` instances.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < minimum:
        return default
    return value


def _coerce_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_view_settings() -> ViewSettings:
    """Read window and display preferences with per-key validation."""
    data = load_config()
    show_icons = data.get("show_icons")
    return ViewSettings(
        buffer_rows=_coerce_int(data.get("buffer_rows"), DEFAULT_BUFFER_ROWS, 0),
        max_rows=_coerce_int(data.get("max_rows"), DEFAULT_MAX_ROWS, 1),
        theme=_coerce_text(data.get("theme")),
        style=_coerce_text(data.get("style")) or DEFAULT_STYLE,
        show_icons=show_icons if isinstance(show_icons, bool) else True,
    )


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def save_show_icons(show_icons: bool) -> None:
    config = load_config()
    config["show_icons"] = bool(show_icons)
    save_config(config)
