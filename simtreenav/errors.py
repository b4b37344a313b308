"""Exception types raised by the tree index and dataset loader."""

from __future__ import annotations


class SimTreeNavError(RuntimeError):
    """Base class for simtreenav failures."""


class TreeConsistencyError(SimTreeNavError):
    """Parent index is corrupted (for example an ancestor chain loops)."""

    def __init__(self, node_id: object, steps: int) -> None:
        super().__init__(f"ancestor chain of {node_id!r} exceeded {steps} steps; parent index is inconsistent")
        self.node_id = node_id
        self.steps = steps


class DatasetError(SimTreeNavError):
    """A nodes document is missing, unreadable, or not shaped like a tree."""
