"""Navigation controller: path/cursor state over the partially-loaded tree.

// [LAW:one-source-of-truth] path + cursor_stack + cursor are the only record
//   of where the user is; rendering derives everything else from them.
// [LAW:one-way-deps] Depends on NodeStore. No widget or network imports.

Illegal requests (entering an unloaded node, backing out of the root, ...)
are absorbed as no-ops. Every mutating method returns True when state
changed so the caller can mark the view dirty.
"""

from __future__ import annotations

from enum import Enum, auto

from hackerreader.core.node import ROOT_ID, Node
from hackerreader.core.node_store import NodeStore

DEFAULT_PREFETCH_COUNT = 2
DEFAULT_PAGE_SIZE = 10


class NavMode(Enum):
    BROWSING = auto()
    FOCUSED = auto()


class NavigationController:
    """Browsing/Focused state machine over a NodeStore.

    Invariants:
      - ``path`` is never empty and always starts at ROOT_ID.
      - ``len(cursor_stack) == len(path) - 1``.
      - every id in ``path`` except the last is LOADED.
    """

    def __init__(
        self,
        store: NodeStore,
        *,
        prefetch_count: int = DEFAULT_PREFETCH_COUNT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self.prefetch_count = max(0, prefetch_count)
        self.page_size = max(1, page_size)
        self.path: list[int] = [ROOT_ID]
        self.cursor_stack: list[int] = []
        self.cursor = 0
        self.mode = NavMode.BROWSING
        self.focus_id: int | None = None
        self.focus_offset = 0
        self.collapse_main = False

    # ─── Derived state ────────────────────────────────────────────────

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    @property
    def at_root(self) -> bool:
        return len(self.path) == 1

    @property
    def current_id(self) -> int:
        return self.path[-1]

    def current(self) -> Node:
        """The node whose children are being listed."""
        return self._store.get_or_queue(self.current_id)

    def hovered_id(self) -> int | None:
        current = self.current()
        if not current.has_children():
            return None
        index = min(max(self.cursor, 0), current.child_count - 1)
        return current.children[index]

    def hovered(self) -> Node | None:
        hovered_id = self.hovered_id()
        if hovered_id is None:
            return None
        return self._store.get_or_queue(hovered_id)

    # ─── Cursor movement ──────────────────────────────────────────────

    def move_cursor(self, target_index: int) -> bool:
        """Clamp target_index into the current child range and move there.

        A negative target means "last child". Hovering a child queues it,
        its first few children, and the next few siblings.
        """
        count = self.current().child_count
        if target_index < 0:
            target_index = count - 1
        target_index = max(0, min(target_index, count - 1))
        changed = target_index != self.cursor
        self.cursor = target_index
        self.lookahead()
        return changed

    def cursor_up(self) -> bool:
        return self.move_cursor(max(self.cursor - 1, 0))

    def cursor_down(self) -> bool:
        return self.move_cursor(self.cursor + 1)

    def cursor_first(self) -> bool:
        return self.move_cursor(0)

    def cursor_last(self) -> bool:
        return self.move_cursor(-1)

    def page_up(self) -> bool:
        return self.move_cursor(self.cursor - min(self.page_size, self.cursor))

    def page_down(self) -> bool:
        return self.move_cursor(self.cursor + self.page_size)

    def jump_to_digit(self, digit: int) -> bool:
        return self.move_cursor(max(0, digit))

    def lookahead(self) -> int:
        """Queue the hovered child, its first children and the next siblings.

        Returns how many ids were newly queued.
        """
        current = self.current()
        if not current.has_children():
            return 0
        start = self.cursor + 1
        queued = self._store.prefetch(
            current.children[self.cursor:start + self.prefetch_count],
            limit=self.prefetch_count + 1,
        )
        hovered = self._store.get_or_queue(current.children[self.cursor])
        if hovered.is_loaded:
            queued += self._store.prefetch(hovered.children, limit=self.prefetch_count)
        return queued

    # ─── Path movement ────────────────────────────────────────────────

    def enter(self) -> bool:
        """Descend into the hovered child when it is LOADED and has children."""
        hovered = self.hovered()
        if hovered is None or not hovered.is_loaded or not hovered.has_children():
            return False
        self.cursor_stack.append(self.cursor)
        self.path.append(hovered.id)
        self.cursor = 0
        self.collapse_main = False
        self.lookahead()
        return True

    def back(self) -> bool:
        """Pop one level, restoring the cursor that was active before entering."""
        if self.at_root:
            return False
        self.path.pop()
        self.cursor = self.cursor_stack.pop()
        self.collapse_main = False
        return True

    def toggle_hidden(self) -> bool:
        """Flip ``hidden`` on the hovered child only."""
        hovered = self.hovered()
        if hovered is None or not hovered.is_loaded:
            return False
        hovered.toggle_hidden()
        return True

    def toggle_collapse_main(self) -> bool:
        if self.at_root:
            return False
        self.collapse_main = not self.collapse_main
        return True

    def link_target(self) -> Node | None:
        """Node whose URL "open link" should use.

        Nested: the open node itself. Root: the hovered story.
        """
        if not self.at_root:
            return self.current()
        return self.hovered()

    # ─── Focus mode ───────────────────────────────────────────────────

    def enter_focus(self, child_id: int | None = None) -> bool:
        if self.mode is NavMode.FOCUSED:
            return False
        if child_id is None:
            child_id = self.hovered_id()
        if child_id is None:
            return False
        self._store.get_or_queue(child_id)
        self.mode = NavMode.FOCUSED
        self.focus_id = child_id
        self.focus_offset = 0
        return True

    def exit_focus(self) -> bool:
        if self.mode is not NavMode.FOCUSED:
            return False
        self.mode = NavMode.BROWSING
        self.focus_id = None
        self.focus_offset = 0
        return True

    def scroll_focus(self, delta: int, line_count: int | None = None) -> bool:
        """Move the focus scroll offset, clamped to [0, line_count - 1]."""
        if self.mode is not NavMode.FOCUSED:
            return False
        offset = max(0, self.focus_offset + delta)
        if line_count is not None:
            offset = min(offset, max(0, line_count - 1))
        changed = offset != self.focus_offset
        self.focus_offset = offset
        return changed
