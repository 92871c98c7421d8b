"""Main TUI application using Textual.

// [LAW:locality-or-seam] Thin coordinator: actions live in action_handlers,
//   drawing in rendering, fetch bookkeeping in FetchScheduler.
// [LAW:single-enforcer] The Textual message loop is the only writer of the
//   NodeStore. Fetch workers run on threads and report back by posting
//   messages; their handlers do the store writes.
"""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable
from functools import partial

from textual.app import App, ComposeResult
from textual.css.query import NoMatches
from textual.message import Message

from hackerreader.app.fetch_scheduler import FetchScheduler
from hackerreader.core.navigation import NavigationController, NavMode
from hackerreader.core.node import RawItem
from hackerreader.core.node_store import NodeStore
from hackerreader.io.hn_api import FetchError, HackerNewsClient
from hackerreader.io.settings import ReaderSettings
from hackerreader.tui import action_handlers as _actions
from hackerreader.tui.custom_footer import FooterState, StatusFooter
from hackerreader.tui.input_modes import Action, InputMode, resolve_key
from hackerreader.tui.keys_panel import KeysPanel
from hackerreader.tui.rendering import Frame, Renderer, compose_frame
from hackerreader.tui.theme import DEFAULT_THEME, ThemeColors
from hackerreader.tui.widgets import ReaderView

logger = logging.getLogger(__name__)

SPINNER_INTERVAL = 0.1


class CollectionFetched(Message):
    """Top-level story ids arrived from a worker thread."""

    def __init__(self, item_ids: list[int]) -> None:
        self.item_ids = item_ids
        super().__init__()


class CollectionFailed(Message):
    def __init__(self, error: str) -> None:
        self.error = error
        super().__init__()


class ItemFetched(Message):
    """One item arrived from a worker thread."""

    def __init__(self, item_id: int, item: RawItem) -> None:
        self.item_id = item_id
        self.item = item
        super().__init__()


class ItemFailed(Message):
    def __init__(self, item_id: int, error: str) -> None:
        self.item_id = item_id
        self.error = error
        super().__init__()


class HackerReaderApp(App):
    """Keyboard-driven Hacker News reader."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(
        self,
        client: HackerNewsClient,
        settings: ReaderSettings | None = None,
        theme_colors: ThemeColors = DEFAULT_THEME,
        *,
        open_url: Callable[[str], object] = webbrowser.open,
        renderer: Renderer | None = None,
        auto_tick: bool = True,
    ) -> None:
        super().__init__()
        self.client = client
        self.settings = settings or ReaderSettings()
        self.url_opener = open_url
        self.store = NodeStore()
        self.nav = NavigationController(
            self.store,
            prefetch_count=self.settings.prefetch_count,
            page_size=self.settings.page_size,
        )
        self.scheduler = FetchScheduler(
            self.store,
            self._dispatch_fetch,
            interval=self.settings.tick_interval,
        )
        self.renderer = renderer or Renderer(theme_colors)
        self.last_frame: Frame | None = None
        self._auto_tick = auto_tick
        self._reader_id = "reader"
        self._keys_id = "keys-panel"

    # ─── Layout ───────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield ReaderView(id=self._reader_id)
        keys = KeysPanel(page_size=self.settings.page_size, id=self._keys_id)
        keys.display = False
        yield keys
        yield StatusFooter()

    def on_mount(self) -> None:
        logger.info("starting reader for %s", self.client.collection)
        self.screen.styles.background = self.renderer.theme.background
        self.run_worker(self._fetch_collection_worker, thread=True, exclusive=False, group="fetch")
        if self._auto_tick:
            self.set_interval(self.scheduler.interval, self.fetch_tick)
            self.set_interval(SPINNER_INTERVAL, self._spinner_tick)
        self.call_after_refresh(self.redraw)

    def _get_reader(self) -> ReaderView | None:
        try:
            return self.query_one(f"#{self._reader_id}", ReaderView)
        except NoMatches:
            return None

    def _get_footer(self) -> StatusFooter | None:
        try:
            return self.query_one(StatusFooter)
        except NoMatches:
            return None

    def viewport_height(self) -> int:
        reader = self._get_reader()
        return reader.viewport[1] if reader is not None else 1

    @property
    def input_mode(self) -> InputMode:
        return InputMode.FOCUSED if self.nav.mode is NavMode.FOCUSED else InputMode.BROWSING

    # ─── Drawing ──────────────────────────────────────────────────────

    def redraw(self) -> None:
        """// [LAW:single-enforcer] Sole path from state to screen."""
        reader = self._get_reader()
        if reader is None:
            return
        width, height = reader.viewport
        self.last_frame = compose_frame(
            self.renderer,
            self.store,
            self.nav,
            width,
            height,
            max_width=self.settings.max_width,
            subtitle=self.client.collection,
        )
        reader.show_frame(self.last_frame)
        footer = self._get_footer()
        if footer is not None:
            footer.update_display(FooterState(
                mode=self.input_mode,
                in_flight=self.scheduler.in_flight_count,
                pending=self.store.pending_count,
                failed=self.scheduler.failed_total,
                depth=self.nav.depth,
            ))

    def _spinner_tick(self) -> None:
        # Only frames that showed a spinner need animating.
        if self.last_frame is not None and self.last_frame.used_spinner:
            self.redraw()

    def toggle_keys_panel(self) -> None:
        try:
            panel = self.query_one(f"#{self._keys_id}", KeysPanel)
        except NoMatches:
            return
        panel.display = not panel.display
        self.call_after_refresh(self.redraw)

    # ─── Input ────────────────────────────────────────────────────────

    def dispatch_action(self, action: Action, arg=None) -> None:
        if _actions.dispatch(self, self.input_mode, action, arg):
            self.redraw()

    async def on_key(self, event) -> None:
        """// [LAW:single-enforcer] on_key is the sole key dispatcher."""
        resolved = resolve_key(self.input_mode, event.key)
        if resolved is None and event.character:
            # uppercase letters and punctuation arrive under varying key names
            resolved = resolve_key(self.input_mode, event.character)
        if resolved is None:
            return
        event.prevent_default()
        event.stop()
        action, arg = resolved
        self.dispatch_action(action, arg)

    def action_quit(self) -> None:
        self.exit()

    # ─── Fetching ─────────────────────────────────────────────────────

    def fetch_tick(self) -> list[int]:
        """Hand every pending id to a worker thread."""
        return self.scheduler.tick()

    def _dispatch_fetch(self, item_id: int) -> None:
        self.run_worker(
            partial(self._fetch_item_worker, item_id),
            thread=True,
            exclusive=False,
            group="fetch",
        )

    def _fetch_item_worker(self, item_id: int) -> None:
        """Runs on a worker thread; must not touch the store."""
        try:
            item = self.client.fetch_item(item_id)
        except FetchError as e:
            logger.warning("fetch of item %s failed: %s", item_id, e)
            self.post_message(ItemFailed(item_id, str(e)))
            return
        except Exception as e:
            # a node must never stay PENDING because its worker died
            logger.exception("unexpected error fetching item %s", item_id)
            self.post_message(ItemFailed(item_id, f"{type(e).__name__}: {e}"))
            return
        self.post_message(ItemFetched(item_id, item))

    def _fetch_collection_worker(self) -> None:
        try:
            item_ids = self.client.fetch_collection()
        except FetchError as e:
            logger.error("fetch of %s failed: %s", self.client.collection, e)
            self.post_message(CollectionFailed(str(e)))
            return
        self.post_message(CollectionFetched(item_ids))

    # ─── Fetch results (app loop) ─────────────────────────────────────

    def on_collection_fetched(self, message: CollectionFetched) -> None:
        logger.info("loaded %d ids for %s", len(message.item_ids), self.client.collection)
        self.store.resolve_collection(message.item_ids)
        self.nav.lookahead()
        self.fetch_tick()
        self.redraw()

    def on_collection_failed(self, message: CollectionFailed) -> None:
        self.store.fail_collection(message.error)
        self.redraw()
        # Nothing to browse without the collection.
        self.exit(
            return_code=1,
            message=f"Could not load {self.client.collection}: {message.error}",
        )

    def on_item_fetched(self, message: ItemFetched) -> None:
        self.store.resolve(message.item_id, message.item)
        self.scheduler.complete(message.item_id)
        if message.item_id == self.nav.hovered_id():
            # the hovered item's children become known only now
            self.nav.lookahead()
        self.redraw()

    def on_item_failed(self, message: ItemFailed) -> None:
        self.store.fail(message.item_id, message.error)
        self.scheduler.complete(message.item_id, failed=True)
        self.redraw()
