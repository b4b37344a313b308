"""Runtime entry points: interactive viewer loop, frames, and config.

``run_viewer`` is imported lazily so importing config helpers does not pull
in terminal handling (``termios`` is POSIX-only).
"""

from __future__ import annotations


def run_viewer(*args, **kwargs):
    """Lazily import the viewer loop to keep package imports lightweight."""
    from .loop import run_viewer as _run_viewer

    return _run_viewer(*args, **kwargs)


__all__ = ["run_viewer"]
