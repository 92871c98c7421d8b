"""Pure mode system for key dispatch.

All keyboard input routes through on_key based on current mode. Raw keys
become logical Actions here; nothing downstream sees key names.
Textual BINDINGS are not used - on_key is the sole dispatcher.
"""

from enum import Enum, auto


class InputMode(Enum):
    """Input modes mirror the navigation state machine."""
    BROWSING = auto()
    FOCUSED = auto()


class Action(Enum):
    """Closed set of logical input events."""
    CURSOR_UP = auto()
    CURSOR_DOWN = auto()
    CURSOR_FIRST = auto()
    CURSOR_LAST = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    JUMP_TO_DIGIT = auto()
    ENTER = auto()
    BACK = auto()
    TOGGLE_HIDDEN = auto()
    TOGGLE_COLLAPSE_MAIN = auto()
    OPEN_LINK = auto()
    OPEN_IN_EXTERNAL_VIEWER = auto()
    ENTER_FOCUS = auto()
    EXIT_FOCUS = auto()
    TOGGLE_KEYS = auto()
    QUIT = auto()
    RESIZE = auto()


_DIGIT_KEYS = {str(d): Action.JUMP_TO_DIGIT for d in range(10)}

# [LAW:one-source-of-truth] Key→action mapping per mode.
# BROWSING: path/cursor navigation
# FOCUSED: scroll-only view of one node
MODE_KEYMAP: dict[InputMode, dict[str, Action]] = {
    InputMode.BROWSING: {
        "up": Action.CURSOR_UP,
        "k": Action.CURSOR_UP,
        "down": Action.CURSOR_DOWN,
        "j": Action.CURSOR_DOWN,
        "g": Action.CURSOR_FIRST,
        "home": Action.CURSOR_FIRST,
        "G": Action.CURSOR_LAST,
        "end": Action.CURSOR_LAST,
        "pageup": Action.PAGE_UP,
        "pagedown": Action.PAGE_DOWN,
        **_DIGIT_KEYS,

        "enter": Action.ENTER,
        "right": Action.ENTER,
        "l": Action.ENTER,
        "escape": Action.BACK,
        "left": Action.BACK,
        "h": Action.BACK,

        "space": Action.TOGGLE_HIDDEN,
        "F": Action.TOGGLE_COLLAPSE_MAIN,
        "o": Action.OPEN_LINK,
        "O": Action.OPEN_IN_EXTERNAL_VIEWER,
        "f": Action.ENTER_FOCUS,

        "?": Action.TOGGLE_KEYS,
        "question_mark": Action.TOGGLE_KEYS,
        "q": Action.QUIT,
        "ctrl+c": Action.QUIT,
    },

    InputMode.FOCUSED: {
        # Scroll-only: cursor actions move the focus scroll offset
        "up": Action.CURSOR_UP,
        "k": Action.CURSOR_UP,
        "down": Action.CURSOR_DOWN,
        "j": Action.CURSOR_DOWN,
        "g": Action.CURSOR_FIRST,
        "home": Action.CURSOR_FIRST,
        "G": Action.CURSOR_LAST,
        "end": Action.CURSOR_LAST,
        "pageup": Action.PAGE_UP,
        "pagedown": Action.PAGE_DOWN,

        "f": Action.EXIT_FOCUS,
        "escape": Action.EXIT_FOCUS,

        "?": Action.TOGGLE_KEYS,
        "question_mark": Action.TOGGLE_KEYS,
        "q": Action.QUIT,
        "ctrl+c": Action.QUIT,
    },
}


def resolve_key(mode: InputMode, key: str) -> tuple[Action, int | None] | None:
    """Map a raw key to (action, argument); None when the key is unbound."""
    action = MODE_KEYMAP[mode].get(key)
    if action is None:
        return None
    if action is Action.JUMP_TO_DIGIT:
        return action, int(key)
    return action, None


# [LAW:one-source-of-truth] Footer display per mode.
FOOTER_KEYS: dict[InputMode, list[tuple[str, str]]] = {
    InputMode.BROWSING: [
        ("j/k", "move"),
        ("l/h", "in/out"),
        ("0-9", "jump"),
        ("space", "hide"),
        ("o/O", "open"),
        ("f", "focus"),
        ("F", "collapse"),
        ("?", "keys"),
        ("q", "quit"),
    ],
    InputMode.FOCUSED: [
        ("j/k", "scroll"),
        ("pgup/pgdn", "page"),
        ("g/G", "top/bottom"),
        ("f/esc", "back"),
        ("q", "quit"),
    ],
}


# [LAW:one-source-of-truth] Display data for keys panel.
# "{page_size}" is filled in by key_groups().
KEY_GROUPS: list[tuple[str, list[tuple[str, str]]]] = [
    ("Nav", [
        ("j/k", "Down / up"),
        ("g/G", "First / last"),
        ("PgUp/Dn", "{page_size} items"),
        ("0-9", "Jump to index"),
        ("l/enter", "Open item"),
        ("h/esc", "Go back"),
    ]),
    ("Items", [
        ("space", "Hide / show"),
        ("F", "Collapse header"),
        ("f", "Focus (read)"),
    ]),
    ("Browser", [
        ("o", "Open link"),
        ("O", "Open on HN"),
    ]),
    ("Other", [
        ("?", "This panel"),
        ("q", "Quit"),
    ]),
]


def key_groups(page_size: int = 10) -> list[tuple[str, list[tuple[str, str]]]]:
    """KEY_GROUPS with labels filled in from the current settings."""
    return [
        (group, [(key, label.format(page_size=page_size)) for key, label in keys])
        for group, keys in KEY_GROUPS
    ]
