"""Public package surface for simtreenav.

Exports ``main`` for programmatic CLI invocation.
The reusable core lives in ``simtreenav.store``, ``simtreenav.tree_model``
and ``simtreenav.tree_pane``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
