"""Keys panel showing keyboard shortcuts."""

from rich.text import Text
from textual.widgets import Static

from hackerreader.tui.input_modes import key_groups


def render_keys_panel(page_size: int = 10) -> Text:
    """Grouped key legend built from KEY_GROUPS."""
    text = Text()
    text.append("Keys\n", style="bold")
    for group_name, keys in key_groups(page_size):
        text.append(f"\n{group_name}\n", style="bold underline")
        for key, description in keys:
            text.append(f" {key:>8} ", style="bold")
            text.append(f"{description}\n")
    return text


class KeysPanel(Static):
    """Side panel showing keyboard shortcuts."""

    DEFAULT_CSS = """
    KeysPanel {
        dock: right;
        width: 28%;
        min-width: 24;
        max-width: 36;
        border-left: solid $accent;
        padding: 1;
        height: 1fr;
        overflow-y: auto;
    }
    """

    def __init__(self, page_size: int = 10, **kwargs):
        super().__init__(render_keys_panel(page_size), **kwargs)
