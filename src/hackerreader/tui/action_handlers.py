"""Action handlers for navigation, focus, links, and panel toggles.

// [LAW:one-way-deps] Depends on navigation and input_modes. No upward deps.
// [LAW:locality-or-seam] All action logic here; app.py keeps thin delegates.
// [LAW:dataflow-not-control-flow] Handlers are looked up per mode in
//   MODE_HANDLERS; an action with no entry for the mode is ignored.

Every handler takes (app, arg) and returns True when the screen must be
redrawn.
"""

from __future__ import annotations

import logging
import webbrowser

from hackerreader.core.node import Node
from hackerreader.tui.input_modes import Action, InputMode

logger = logging.getLogger(__name__)


# ─── Browsing ─────────────────────────────────────────────────────────


def _cursor_up(app, arg) -> bool:
    return app.nav.cursor_up()


def _cursor_down(app, arg) -> bool:
    return app.nav.cursor_down()


def _cursor_first(app, arg) -> bool:
    return app.nav.cursor_first()


def _cursor_last(app, arg) -> bool:
    return app.nav.cursor_last()


def _page_up(app, arg) -> bool:
    return app.nav.page_up()


def _page_down(app, arg) -> bool:
    return app.nav.page_down()


def _jump_to_digit(app, arg) -> bool:
    return app.nav.jump_to_digit(int(arg or 0))


def _enter(app, arg) -> bool:
    return app.nav.enter()


def _back(app, arg) -> bool:
    return app.nav.back()


def _toggle_hidden(app, arg) -> bool:
    return app.nav.toggle_hidden()


def _toggle_collapse_main(app, arg) -> bool:
    return app.nav.toggle_collapse_main()


def _enter_focus(app, arg) -> bool:
    return app.nav.enter_focus()


def _open_url(app, url: str) -> bool:
    logger.info("opening %s", url)
    try:
        app.url_opener(url)
    except (webbrowser.Error, OSError) as e:
        logger.warning("could not open %s: %s", url, e)
        app.notify(f"Could not open browser: {e}", severity="error")
    return False


def discussion_url(app, node: Node) -> str:
    return f"{app.settings.item_url}{node.id}"


def _open_link(app, arg) -> bool:
    """Open the story URL; stories without one open their discussion page."""
    node = app.nav.link_target()
    if node is None or not node.is_loaded or node.is_gone:
        return False
    url = node.payload.url if node.has_url() else discussion_url(app, node)
    return _open_url(app, url)


def _open_in_external_viewer(app, arg) -> bool:
    """Open the discussion page of the hovered item, comments included."""
    node = app.nav.hovered()
    if node is None or not node.is_loaded or node.id <= 0:
        return False
    return _open_url(app, discussion_url(app, node))


# ─── Focused ──────────────────────────────────────────────────────────


def _focus_line_count(app) -> int | None:
    frame = app.last_frame
    return frame.focus_line_count if frame is not None else None


def _focus_page(app) -> int:
    return max(1, app.viewport_height() - 2)


def _scroll_up(app, arg) -> bool:
    return app.nav.scroll_focus(-1, _focus_line_count(app))


def _scroll_down(app, arg) -> bool:
    return app.nav.scroll_focus(1, _focus_line_count(app))


def _scroll_page_up(app, arg) -> bool:
    return app.nav.scroll_focus(-_focus_page(app), _focus_line_count(app))


def _scroll_page_down(app, arg) -> bool:
    return app.nav.scroll_focus(_focus_page(app), _focus_line_count(app))


def _scroll_top(app, arg) -> bool:
    return app.nav.scroll_focus(-app.nav.focus_offset, _focus_line_count(app))


def _scroll_bottom(app, arg) -> bool:
    count = _focus_line_count(app) or 0
    return app.nav.scroll_focus(count, count)


def _exit_focus(app, arg) -> bool:
    return app.nav.exit_focus()


# ─── Both modes ───────────────────────────────────────────────────────


def _toggle_keys(app, arg) -> bool:
    app.toggle_keys_panel()
    return False


def _quit(app, arg) -> bool:
    app.exit()
    return False


def _resize(app, arg) -> bool:
    return True


_COMMON = {
    Action.TOGGLE_KEYS: _toggle_keys,
    Action.QUIT: _quit,
    Action.RESIZE: _resize,
}

# [LAW:one-source-of-truth] Action → handler per mode.
MODE_HANDLERS = {
    InputMode.BROWSING: {
        Action.CURSOR_UP: _cursor_up,
        Action.CURSOR_DOWN: _cursor_down,
        Action.CURSOR_FIRST: _cursor_first,
        Action.CURSOR_LAST: _cursor_last,
        Action.PAGE_UP: _page_up,
        Action.PAGE_DOWN: _page_down,
        Action.JUMP_TO_DIGIT: _jump_to_digit,
        Action.ENTER: _enter,
        Action.BACK: _back,
        Action.TOGGLE_HIDDEN: _toggle_hidden,
        Action.TOGGLE_COLLAPSE_MAIN: _toggle_collapse_main,
        Action.OPEN_LINK: _open_link,
        Action.OPEN_IN_EXTERNAL_VIEWER: _open_in_external_viewer,
        Action.ENTER_FOCUS: _enter_focus,
        **_COMMON,
    },
    InputMode.FOCUSED: {
        Action.CURSOR_UP: _scroll_up,
        Action.CURSOR_DOWN: _scroll_down,
        Action.CURSOR_FIRST: _scroll_top,
        Action.CURSOR_LAST: _scroll_bottom,
        Action.PAGE_UP: _scroll_page_up,
        Action.PAGE_DOWN: _scroll_page_down,
        Action.EXIT_FOCUS: _exit_focus,
        **_COMMON,
    },
}


def dispatch(app, mode: InputMode, action: Action, arg=None) -> bool:
    """Run the handler for action in mode. Returns True when a redraw is due."""
    handler = MODE_HANDLERS[mode].get(action)
    if handler is None:
        return False
    return handler(app, arg)
