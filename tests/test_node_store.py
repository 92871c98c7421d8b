"""Tests for NodeStore: creation, queueing, dedup, and resolution."""

from hackerreader.core.node import ROOT_ID, NodeKind, NodeState
from hackerreader.core.node_store import NodeStore, payload_from_raw
from tests.harness.builders import make_comment, make_item, make_story


class TestRoot:
    def test_root_exists_pending_collection(self, store):
        root = store.root
        assert root.id == ROOT_ID
        assert root.kind is NodeKind.COLLECTION
        assert root.state is NodeState.PENDING
        # root children come from the collection fetch, not the queue
        assert store.pending_count == 0

    def test_resolve_collection_populates_children_in_order(self, store):
        store.resolve_collection([10, 20, 30])
        assert store.root.state is NodeState.LOADED
        assert store.root.children == (10, 20, 30)
        assert store.root.payload.descendants == 3

    def test_resolve_collection_only_once(self, store):
        store.resolve_collection([10, 20])
        store.resolve_collection([99])
        assert store.root.children == (10, 20)

    def test_fail_collection(self, store):
        store.fail_collection("boom")
        assert store.root.state is NodeState.FAILED
        assert store.root.error == "boom"


class TestGetOrQueue:
    def test_creates_pending_and_queues(self, store):
        node = store.get_or_queue(42)
        assert node.state is NodeState.PENDING
        assert store.is_pending(42)
        assert 42 in store

    def test_second_call_returns_same_node_without_requeue(self, store):
        first = store.get_or_queue(42)
        assert store.drain_pending() == [42]
        second = store.get_or_queue(42)
        assert second is first
        assert store.pending_count == 0

    def test_concurrent_references_queue_once(self, store):
        store.get_or_queue(7)
        store.get_or_queue(7)
        assert store.drain_pending() == [7]

    def test_get_does_not_queue(self, store):
        assert store.get(5) is None
        assert store.pending_count == 0

    def test_drain_returns_request_order_and_clears(self, store):
        for item_id in (3, 1, 2):
            store.get_or_queue(item_id)
        assert store.drain_pending() == [3, 1, 2]
        assert store.drain_pending() == []

    def test_prefetch_respects_limit(self, store):
        queued = store.prefetch([1, 2, 3, 4], limit=2)
        assert queued == 2
        assert store.drain_pending() == [1, 2]

    def test_prefetch_counts_only_new_ids(self, store):
        store.get_or_queue(1)
        assert store.prefetch([1, 2], limit=5) == 1


class TestResolve:
    def test_scenario_pending_then_loaded_children_in_order(self, store):
        store.resolve_collection([10, 20, 30])
        node = store.get_or_queue(20)
        assert node.state is NodeState.PENDING
        assert store.drain_pending() == [20]

        store.resolve(20, make_story(20, kids=[21, 22]))

        again = store.get_or_queue(20)
        assert again.state is NodeState.LOADED
        assert again.children == (21, 22)
        assert store.pending_count == 0

    def test_resolve_unknown_id_is_noop(self, store):
        assert store.resolve(999, make_story(999)) is None
        assert 999 not in store

    def test_resolve_is_idempotent(self, store):
        store.get_or_queue(5)
        store.resolve(5, make_story(5, kids=[6], title="first"))
        store.resolve(5, make_story(5, kids=[7, 8], title="second"))
        node = store.get(5)
        assert node.children == (6,)
        assert node.payload.title == "first"

    def test_resolve_maps_kind(self, store):
        for item_id, item_type in ((1, "story"), (2, "comment"), (3, "job"), (4, "pollopt"), (5, "mystery")):
            store.get_or_queue(item_id)
            store.resolve(item_id, make_item(item_id, item_type))
        assert store.get(1).kind is NodeKind.ENTRY
        assert store.get(2).kind is NodeKind.THREAD
        assert store.get(3).kind is NodeKind.ENTRY
        assert store.get(4).kind is NodeKind.POLL_OPTION
        assert store.get(5).kind is NodeKind.ENTRY

    def test_poll_queues_its_options(self, store):
        store.get_or_queue(50)
        store.drain_pending()
        store.resolve(50, make_item(50, "poll", parts=[51, 52], kids=[60]))
        node = store.get(50)
        assert node.kind is NodeKind.POLL
        assert node.children == (60,)
        assert store.drain_pending() == [51, 52]

    def test_fail_marks_failed_and_never_requeues(self, store):
        store.get_or_queue(8)
        store.drain_pending()
        store.fail(8, "timeout")
        node = store.get_or_queue(8)
        assert node.state is NodeState.FAILED
        assert node.error == "timeout"
        assert store.pending_count == 0

    def test_fail_after_load_is_ignored(self, store):
        store.get_or_queue(8)
        store.resolve(8, make_story(8))
        store.fail(8, "late error")
        assert store.get(8).state is NodeState.LOADED


class TestPayload:
    def test_payload_from_raw(self):
        item = make_story(1, url="https://blog.example.co.uk/post", score=42, by="dang")
        payload = payload_from_raw(item)
        assert payload.domain == "co.uk"
        assert payload.score == 42
        assert payload.author == "dang"

    def test_deleted_comment_is_gone(self, store):
        store.get_or_queue(3)
        store.resolve(3, make_comment(3, parent=1, deleted=True, text=""))
        assert store.get(3).is_gone

    def test_hidden_toggle_is_local(self):
        s = NodeStore()
        a = s.get_or_queue(1)
        b = s.get_or_queue(2)
        a.toggle_hidden()
        assert a.hidden and not b.hidden
