"""Status footer: mode key hints plus fetch activity."""

from dataclasses import dataclass

from rich.text import Text
from textual.widgets import Static

from hackerreader.tui.input_modes import FOOTER_KEYS, InputMode


@dataclass(frozen=True)
class FooterState:
    mode: InputMode = InputMode.BROWSING
    in_flight: int = 0
    pending: int = 0
    failed: int = 0
    depth: int = 0


def render_footer(state: FooterState) -> Text:
    """// [LAW:dataflow-not-control-flow] Fixed layout; the state decides the content."""
    text = Text()
    for key, label in FOOTER_KEYS[state.mode]:
        text.append(f" {key}", style="bold")
        text.append(f" {label} ", style="dim")
    activity = state.in_flight + state.pending
    if activity:
        text.append(f"  loading {activity}", style="bold yellow")
    if state.failed:
        text.append(f"  failed {state.failed}", style="bold red")
    if state.depth:
        text.append(f"  depth {state.depth}", style="dim")
    return text


class StatusFooter(Static):
    """// [LAW:single-enforcer] update_display() is the sole render entry."""

    ALLOW_SELECT = False

    DEFAULT_CSS = """
    StatusFooter {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self.state = FooterState()
        self._rendered = False

    def update_display(self, state: FooterState) -> None:
        if state == self.state and self._rendered:
            return
        self.state = state
        self._rendered = True
        self.update(render_footer(state))
