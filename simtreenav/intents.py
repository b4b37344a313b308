"""Discrete user intents delivered by the input layer to a view session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .tree_model.types import NodeId


@dataclass(frozen=True)
class Toggle:
    node_id: NodeId


@dataclass(frozen=True)
class Select:
    node_id: NodeId | None


@dataclass(frozen=True)
class SetSearch:
    text: str


@dataclass(frozen=True)
class SetChangedOnly:
    enabled: bool


@dataclass(frozen=True)
class ExpandAll:
    pass


@dataclass(frozen=True)
class CollapseAll:
    pass


@dataclass(frozen=True)
class ScrollTo:
    offset: float


@dataclass(frozen=True)
class NavigateChange:
    direction: int


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class ExpandSelected:
    pass


@dataclass(frozen=True)
class CollapseSelected:
    pass


@dataclass(frozen=True)
class ToggleSelected:
    pass


@dataclass(frozen=True)
class Resize:
    viewport_height: float


Intent = Union[
    Toggle,
    Select,
    SetSearch,
    SetChangedOnly,
    ExpandAll,
    CollapseAll,
    ScrollTo,
    NavigateChange,
    MoveSelection,
    ExpandSelected,
    CollapseSelected,
    ToggleSelected,
    Resize,
]
