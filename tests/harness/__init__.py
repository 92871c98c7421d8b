"""Textual in-process test harness for hackerreader.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, load_all, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.builders import (
    NOW,
    FakeClient,
    make_comment,
    make_item,
    make_story,
    make_thread,
)
from tests.harness.interactions import (
    load_all,
    press_and_settle,
    press_sequence,
    resize_and_settle,
)


def frame_text(app) -> str:
    """Plain text of the last composed frame."""
    if app.last_frame is None:
        return ""
    return app.last_frame.to_text().plain


__all__ = [
    "NOW",
    "FakeClient",
    "frame_text",
    "load_all",
    "make_comment",
    "make_item",
    "make_story",
    "make_thread",
    "press_and_settle",
    "press_sequence",
    "resize_and_settle",
    "run_app",
]
