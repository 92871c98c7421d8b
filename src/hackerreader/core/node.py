"""Node model for the cached remote item tree.

// [LAW:one-source-of-truth] NodeKind is the closed set of render strategies.
// [LAW:one-way-deps] No store, widget, or network imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


ROOT_ID = 0


class NodeState(Enum):
    UNREQUESTED = auto()
    PENDING = auto()
    LOADED = auto()
    FAILED = auto()


class NodeKind(Enum):
    """Tagged variant that selects how a node renders.

    POLL nodes keep comment ids in ``children`` and poll option ids in
    ``payload.parts``.
    """

    COLLECTION = auto()
    ENTRY = auto()
    THREAD = auto()
    POLL = auto()
    POLL_OPTION = auto()


# API "type" field → kind. Unknown types render as plain entries.
_KIND_BY_TYPE: dict[str, NodeKind] = {
    "story": NodeKind.ENTRY,
    "job": NodeKind.ENTRY,
    "comment": NodeKind.THREAD,
    "poll": NodeKind.POLL,
    "pollopt": NodeKind.POLL_OPTION,
}


def kind_from_type(item_type: str) -> NodeKind:
    return _KIND_BY_TYPE.get(item_type, NodeKind.ENTRY)


@dataclass(frozen=True)
class RawItem:
    """One item as delivered by the data source, before store mapping."""

    id: int
    type: str = ""
    by: str = ""
    time: int = 0
    title: str = ""
    text: str = ""
    url: str = ""
    score: int = 0
    descendants: int = 0
    kids: tuple[int, ...] = ()
    parts: tuple[int, ...] = ()
    poll: int = 0
    parent: int = 0
    dead: bool = False
    deleted: bool = False


@dataclass(frozen=True)
class Payload:
    """Content fields of a loaded item."""

    title: str = ""
    body: str = ""  # HTML, as delivered by the API
    author: str = ""
    score: int = 0
    time: int = 0  # unix seconds
    url: str = ""
    domain: str = ""
    descendants: int = 0
    parts: tuple[int, ...] = ()
    parent: int = 0
    dead: bool = False
    deleted: bool = False


@dataclass
class Node:
    """Session-cached state for one remote item.

    Mutated only through NodeStore; ``children`` is assigned once, when the
    node becomes LOADED.
    """

    id: int
    state: NodeState = NodeState.UNREQUESTED
    kind: NodeKind = NodeKind.ENTRY
    children: tuple[int, ...] = ()
    payload: Payload | None = None
    hidden: bool = False
    error: str = ""

    @property
    def is_loaded(self) -> bool:
        return self.state is NodeState.LOADED

    @property
    def is_gone(self) -> bool:
        return self.payload is not None and (self.payload.dead or self.payload.deleted)

    @property
    def child_count(self) -> int:
        return len(self.children)

    def has_children(self) -> bool:
        return len(self.children) > 0

    def has_url(self) -> bool:
        return self.payload is not None and bool(self.payload.url)

    def toggle_hidden(self) -> None:
        self.hidden = not self.hidden
