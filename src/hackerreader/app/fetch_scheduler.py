"""Timer-driven fetch scheduler.

// [LAW:single-enforcer] tick() is the only place pending ids turn into fetch
//   tasks, so cursor bursts between ticks coalesce into one batch.
// [LAW:one-way-deps] Knows the NodeStore and a dispatch callable; no Textual
//   imports. The app supplies a dispatch that runs a worker thread.

Completions come back through the app's message loop; the app calls
complete() once the result has been written into the store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from hackerreader.core.node_store import NodeStore

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 1.0


class FetchScheduler:
    """Drains the store's pending queue into dispatched fetch tasks."""

    def __init__(
        self,
        store: NodeStore,
        dispatch: Callable[[int], None],
        *,
        interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self._store = store
        self._dispatch = dispatch
        self.interval = interval
        self._in_flight: set[int] = set()
        self.dispatched_total = 0
        self.failed_total = 0

    @property
    def in_flight(self) -> frozenset[int]:
        return frozenset(self._in_flight)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def tick(self) -> list[int]:
        """Drain pending ids and dispatch one fetch task per id.

        An id leaves the pending queue the instant it is drained, so it can
        never be dispatched twice while its first fetch is outstanding.
        """
        batch = [item_id for item_id in self._store.drain_pending() if item_id not in self._in_flight]
        for item_id in batch:
            self._in_flight.add(item_id)
            self.dispatched_total += 1
            self._dispatch(item_id)
        if batch:
            logger.debug("dispatched %d fetches (%d in flight)", len(batch), len(self._in_flight))
        return batch

    def complete(self, item_id: int, *, failed: bool = False) -> None:
        self._in_flight.discard(item_id)
        if failed:
            self.failed_total += 1
