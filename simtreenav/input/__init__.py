"""Terminal key decoding and key-to-intent bindings."""

from .bindings import KeyComboBinding, KeyComboRegistry, ViewerKeyHandler, parse_mouse_col_row
from .keys import read_key

__all__ = [
    "KeyComboBinding",
    "KeyComboRegistry",
    "ViewerKeyHandler",
    "parse_mouse_col_row",
    "read_key",
]
