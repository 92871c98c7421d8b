"""Node store: session cache of remote items plus pending-fetch bookkeeping.

// [LAW:one-source-of-truth] Every Node lives in NodeStore._nodes; nothing else
//   creates nodes.
// [LAW:single-enforcer] get_or_queue is the only creation path, so every
//   referenced id becomes visible to the fetch scheduler.

Only the app's update loop mutates the store. Fetch workers never touch it;
their results arrive as messages that the loop turns into resolve()/fail().
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hackerreader.core.formatting import domain_from_url
from hackerreader.core.node import (
    ROOT_ID,
    Node,
    NodeKind,
    NodeState,
    Payload,
    RawItem,
    kind_from_type,
)

logger = logging.getLogger(__name__)


def payload_from_raw(item: RawItem) -> Payload:
    return Payload(
        title=item.title,
        body=item.text,
        author=item.by,
        score=item.score,
        time=item.time,
        url=item.url,
        domain=domain_from_url(item.url),
        descendants=item.descendants,
        parts=tuple(item.parts),
        parent=item.parent,
        dead=item.dead,
        deleted=item.deleted,
    )


class NodeStore:
    """Id → Node map with a deduplicated pending queue.

    The synthetic root (ROOT_ID) exists from construction as a PENDING
    COLLECTION; its children arrive via resolve_collection() rather than
    through the pending queue.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, Node] = {}
        # dict as an ordered set: drain order follows request order
        self._pending: dict[int, None] = {}
        self._nodes[ROOT_ID] = Node(
            id=ROOT_ID,
            state=NodeState.PENDING,
            kind=NodeKind.COLLECTION,
        )

    # ─── Reads ────────────────────────────────────────────────────────

    @property
    def root(self) -> Node:
        return self._nodes[ROOT_ID]

    def get(self, item_id: int) -> Node | None:
        """Return the cached node without queueing anything."""
        return self._nodes.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, item_id: int) -> bool:
        return item_id in self._pending

    # ─── Creation / queueing ──────────────────────────────────────────

    def get_or_queue(self, item_id: int) -> Node:
        """Return the node for item_id, creating and queueing it when unseen.

        Never blocks. A node only enters the pending queue while UNREQUESTED,
        so an id already PENDING, LOADED or FAILED is never queued twice.
        """
        node = self._nodes.get(item_id)
        if node is None:
            node = Node(id=item_id)
            self._nodes[item_id] = node
        if node.state is NodeState.UNREQUESTED:
            node.state = NodeState.PENDING
            self._pending[item_id] = None
        return node

    def prefetch(self, item_ids: Iterable[int], limit: int) -> int:
        """Queue up to ``limit`` ids from item_ids. Returns how many were newly queued."""
        queued = 0
        for index, item_id in enumerate(item_ids):
            if index >= limit:
                break
            before = len(self._pending)
            self.get_or_queue(item_id)
            queued += len(self._pending) - before
        return queued

    def drain_pending(self) -> list[int]:
        """Return and clear the pending queue, in request order."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

    # ─── Resolution ───────────────────────────────────────────────────

    def resolve(self, item_id: int, item: RawItem) -> Node | None:
        """Apply a successful fetch result.

        Unknown ids and nodes already LOADED/FAILED are left untouched; a
        node's children are assigned exactly once.
        """
        node = self._nodes.get(item_id)
        if node is None:
            logger.debug("resolve for unknown id %s ignored", item_id)
            return None
        if node.state in (NodeState.LOADED, NodeState.FAILED):
            logger.debug("resolve for settled id %s ignored", item_id)
            return node

        node.kind = kind_from_type(item.type)
        node.payload = payload_from_raw(item)
        node.children = tuple(item.kids)
        node.error = ""
        node.state = NodeState.LOADED

        if node.kind is NodeKind.POLL:
            # Options render inline with the poll, so load them right away.
            for part_id in node.payload.parts:
                self.get_or_queue(part_id)
        return node

    def fail(self, item_id: int, error: str) -> Node | None:
        """Mark a fetch as failed. Failed nodes are never re-queued."""
        node = self._nodes.get(item_id)
        if node is None:
            return None
        if node.state in (NodeState.LOADED, NodeState.FAILED):
            return node
        node.state = NodeState.FAILED
        node.error = error
        return node

    def resolve_collection(self, item_ids: Iterable[int]) -> Node:
        """Populate the synthetic root with the top-level collection."""
        root = self.root
        if root.state is NodeState.LOADED:
            return root
        root.children = tuple(item_ids)
        root.payload = Payload(descendants=len(root.children))
        root.state = NodeState.LOADED
        return root

    def fail_collection(self, error: str) -> Node:
        root = self.root
        if root.state is not NodeState.LOADED:
            root.state = NodeState.FAILED
            root.error = error
        return root
