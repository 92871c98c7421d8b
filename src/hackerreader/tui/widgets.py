"""Main reader widget.

The view owns no navigation state: the app composes a Frame and hands it
over through show_frame().
"""

from textual import events
from textual.widgets import Static

from hackerreader.tui.input_modes import Action
from hackerreader.tui.rendering import Frame


class ReaderView(Static):
    """Full-screen text surface for the composed frame."""

    DEFAULT_CSS = """
    ReaderView {
        height: 1fr;
        width: 1fr;
        overflow: hidden;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.frame: Frame | None = None

    def show_frame(self, frame: Frame) -> None:
        self.frame = frame
        self.update(frame.to_text())

    @property
    def viewport(self) -> tuple[int, int]:
        """(width, height) available for the frame; never below 1x1."""
        return max(1, self.size.width), max(1, self.size.height)

    def on_resize(self, event: events.Resize) -> None:
        """Recompose the frame for the new viewport size."""
        self.call_after_refresh(self.app.dispatch_action, Action.RESIZE)

    # Wheel scrolling maps onto the same actions as j/k.
    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.stop()
        self.app.dispatch_action(Action.CURSOR_DOWN)

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.stop()
        self.app.dispatch_action(Action.CURSOR_UP)
