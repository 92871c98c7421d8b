"""Pytest configuration and shared fixtures for hackerreader tests."""

import pytest

import hackerreader.io.logging_setup
from hackerreader.core.node_store import NodeStore
from tests.harness.builders import make_thread


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config and log locations at a per-test temp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HACKERREADER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("HACKERREADER_LOG_FILE", raising=False)
    monkeypatch.delenv("HACKERREADER_LOG_LEVEL", raising=False)
    yield tmp_path
    hackerreader.io.logging_setup.reset()


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    """Fresh NodeStore with an unloaded root."""
    return NodeStore()


@pytest.fixture
def thread_data():
    """(collection_ids, items) for 5 stories with 3 comments each."""
    return make_thread(n_stories=5, comments_per_story=3)


@pytest.fixture
def loaded_store(thread_data):
    """NodeStore whose root and every story/comment is LOADED."""
    collection, items = thread_data
    s = NodeStore()
    s.resolve_collection(collection)
    for item_id, item in items.items():
        s.get_or_queue(item_id)
        s.resolve(item_id, item)
    s.drain_pending()
    return s
