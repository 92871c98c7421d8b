"""Rendering: NodeStore + navigation state → styled text lines.

// [LAW:one-way-deps] Depends on core (node, store, navigation, paginate) and
//   theme. No widget imports; the ReaderView widget calls compose_frame().
// [LAW:dataflow-not-control-flow] Per-kind views are looked up in
//   Renderer._KIND_VIEWS, which covers every NodeKind.

Everything is rendered to lists of rich Text lines so the paginator can work
on exact line heights.
"""

from __future__ import annotations

import io
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from html.parser import HTMLParser

from rich import box
from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.spinner import Spinner
from rich.style import Style
from rich.text import Text

from hackerreader.core.formatting import relative_time
from hackerreader.core.navigation import NavigationController, NavMode
from hackerreader.core.node import Node, NodeKind, NodeState
from hackerreader.core.node_store import NodeStore
from hackerreader.core.paginate import LazyHeights, paginate
from hackerreader.tui.theme import DEFAULT_THEME, ThemeColors

APP_TITLE = "HackerReader"


# ─── HTML → Markdown ──────────────────────────────────────────────────


_MD_SPECIAL = str.maketrans({c: "\\" + c for c in "\\*_`[]<>"})


class _HtmlToMarkdown(HTMLParser):
    """Converts the small HTML subset the API emits (p, i, b, a, pre/code)."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._chunks: list[str] = []
        self._hrefs: list[str] = []
        self._in_pre = False

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag == "p":
            self._chunks.append("\n\n")
        elif tag in ("i", "em"):
            self._chunks.append("*")
        elif tag in ("b", "strong"):
            self._chunks.append("**")
        elif tag == "br":
            self._chunks.append("  \n")
        elif tag == "a":
            self._hrefs.append(dict(attrs).get("href") or "")
            self._chunks.append("[")
        elif tag == "pre":
            self._in_pre = True
            self._chunks.append("\n\n```\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in ("i", "em"):
            self._chunks.append("*")
        elif tag in ("b", "strong"):
            self._chunks.append("**")
        elif tag == "a":
            href = self._hrefs.pop() if self._hrefs else ""
            self._chunks.append(f"]({href})" if href else "]")
        elif tag == "pre":
            self._in_pre = False
            self._chunks.append("\n```\n\n")

    def handle_data(self, data: str) -> None:
        if self._in_pre:
            self._chunks.append(data.rstrip("\n"))
        else:
            self._chunks.append(data.translate(_MD_SPECIAL))

    def markdown(self) -> str:
        return "".join(self._chunks).strip()


def html_to_markdown(html_text: str) -> str:
    if not html_text:
        return ""
    parser = _HtmlToMarkdown()
    parser.feed(html_text)
    parser.close()
    return parser.markdown()


# ─── Frame ────────────────────────────────────────────────────────────


@dataclass
class Frame:
    """One composed screen."""

    lines: list[Text] = field(default_factory=list)
    used_spinner: bool = False
    window: tuple[int, int] = (0, -1)
    focus_line_count: int = 0

    def to_text(self) -> Text:
        return Text("\n").join(self.lines)


class Renderer:
    """Turns nodes into styled lines. Holds no navigation state.

    The theme is fixed at construction. ``clock`` drives the spinner and
    ``now`` the relative timestamps, so tests can pin both.
    """

    def __init__(
        self,
        theme: ThemeColors = DEFAULT_THEME,
        *,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], float] = time.time,
    ) -> None:
        self.theme = theme
        self._clock = clock
        self._now = now
        self._spinner = Spinner(theme.spinner, style=theme.spinner_style)
        self._console = Console(
            file=io.StringIO(),
            force_terminal=True,
            color_system="truecolor",
            highlight=False,
            legacy_windows=False,
            width=200,
        )
        self._markdown_cache: dict[tuple[int, int], list[Text]] = {}
        self.spinner_used = False

    # ─── Primitives ───────────────────────────────────────────────────

    def to_lines(self, renderable: RenderableType, width: int) -> list[Text]:
        """Render to a list of styled lines no wider than width."""
        width = max(1, width)
        options = self._console.options.update_width(width)
        lines: list[Text] = []
        for segments in self._console.render_lines(renderable, options, pad=False):
            line = Text(no_wrap=True)
            for segment in segments:
                if segment.control:
                    continue
                line.append(segment.text, segment.style)
            line.rstrip()
            lines.append(line)
        return lines

    def spinner_text(self) -> Text:
        self.spinner_used = True
        frame = self._spinner.render(self._clock())
        return frame if isinstance(frame, Text) else Text(str(frame))

    def _age(self, node: Node) -> str:
        if node.payload is None or not node.payload.time:
            return ""
        return relative_time(node.payload.time, now=self._now())

    def _body_lines(self, node: Node, width: int) -> list[Text]:
        """Markdown-rendered item text, cached per (node, width)."""
        key = (node.id, width)
        cached = self._markdown_cache.get(key)
        if cached is None:
            body = node.payload.body if node.payload is not None else ""
            markdown = html_to_markdown(body)
            if markdown:
                cached = self.to_lines(
                    Markdown(markdown, code_theme=self.theme.code_theme),
                    max(1, width - 1),
                )
            else:
                cached = []
            self._markdown_cache[key] = cached
        return cached

    # ─── Placeholders ─────────────────────────────────────────────────

    def _gone_view(self, node: Node, highlight: bool, width: int) -> RenderableType:
        return Text(
            f"[deleted] {self._age(node)}".rstrip(),
            style=self.theme.secondary_style + Style(bold=highlight),
        )

    def _hidden_view(self, node: Node, highlight: bool, width: int) -> RenderableType:
        author = node.payload.author if node.payload is not None else ""
        return Text(
            " ".join(part for part in ("(hidden)", author, self._age(node)) if part),
            style=self.theme.secondary_style + Style(bold=highlight),
        )

    def _loading_view(self, highlight: bool) -> RenderableType:
        text = Text()
        text.append_text(self.spinner_text())
        text.append(" Loading...\n...", style=self.theme.secondary_style + Style(bold=highlight))
        return text

    def _failed_view(self, node: Node, highlight: bool) -> RenderableType:
        return Text("[unavailable]", style=self.theme.error_style + Style(bold=highlight))

    # ─── Per-kind views ───────────────────────────────────────────────

    def _meta_line(self, node: Node, highlight: bool) -> Text:
        p = node.payload
        return Text(
            f"{p.score} points by {p.author} {self._age(node)} | {p.descendants} comments",
            style=self.theme.secondary_style + Style(bold=highlight),
        )

    def _title_block(self, node: Node, highlight: bool, width: int) -> RenderableType:
        p = node.payload
        title = Text(p.title or "(untitled)", style=self.theme.primary_style + Style(bold=highlight))
        if not p.domain:
            return title
        domain = f"({p.domain})"
        if title.cell_len + 1 + len(domain) <= width:
            title.append(" " + domain, style=self.theme.url_style + Style(bold=highlight))
            return title
        return Group(title, Text(domain, style=self.theme.url_style + Style(bold=highlight)))

    def _entry_view(self, node: Node, store: NodeStore, highlight: bool, selected: bool, width: int) -> RenderableType:
        parts: list[RenderableType] = [self._title_block(node, highlight, width)]
        if selected:
            parts.extend(self._body_lines(node, width))
            if node.kind is NodeKind.POLL:
                parts.extend(self._poll_options(node, store, width))
        parts.append(self._meta_line(node, highlight))
        return Group(*parts)

    def _poll_options(self, node: Node, store: NodeStore, width: int) -> list[Text]:
        lines: list[Text] = []
        for part_id in node.payload.parts:
            option = store.get_or_queue(part_id)
            option_lines = self.to_lines(
                self.node_view(option, store, highlight=False, selected=False, width=width - 2),
                width - 2,
            )
            for line in option_lines:
                lines.append(Text("  ") + line)
        return lines

    def _thread_view(self, node: Node, store: NodeStore, highlight: bool, selected: bool, width: int) -> RenderableType:
        header = Text(
            f"{node.payload.author} {self._age(node)}".strip(),
            style=self.theme.secondary_style + Style(bold=highlight),
        )
        return Group(header, *self._body_lines(node, width))

    def _poll_option_view(self, node: Node, store: NodeStore, highlight: bool, selected: bool, width: int) -> RenderableType:
        body = html_to_markdown(node.payload.body).replace("\\", "") or node.payload.title
        return Group(
            Text(body, style=self.theme.primary_style + Style(bold=highlight)),
            Text(f"{node.payload.score} points", style=Style(color=self.theme.vote, bold=highlight)),
        )

    def _collection_view(self, node: Node, store: NodeStore, highlight: bool, selected: bool, width: int) -> RenderableType:
        return Text(f"{node.child_count} stories", style=self.theme.secondary_style + Style(bold=highlight))

    _KIND_VIEWS = {
        NodeKind.COLLECTION: _collection_view,
        NodeKind.ENTRY: _entry_view,
        NodeKind.POLL: _entry_view,
        NodeKind.THREAD: _thread_view,
        NodeKind.POLL_OPTION: _poll_option_view,
    }

    def node_view(
        self,
        node: Node,
        store: NodeStore,
        *,
        highlight: bool,
        selected: bool,
        width: int,
    ) -> RenderableType:
        """Renderable for one node.

        ``selected`` means the node is shown as the open item (or in focus
        mode): hidden is ignored and full text/poll options are included.
        """
        if node.state is NodeState.FAILED:
            return self._failed_view(node, highlight)
        if node.state is not NodeState.LOADED:
            return self._loading_view(highlight)
        if node.is_gone:
            return self._gone_view(node, highlight, width)
        if node.hidden and not selected:
            return self._hidden_view(node, highlight, width)
        view = self._KIND_VIEWS[node.kind]
        return view(self, node, store, highlight, selected, width)

    # ─── Composite pieces ─────────────────────────────────────────────

    def title_bar(self, width: int, subtitle: str = "") -> Text:
        text = Text(f" {APP_TITLE}", style=self.theme.title_bar_style)
        if subtitle:
            text.append(f"  {subtitle}", style=Style(bold=False))
        text.truncate(max(1, width), pad=True)
        return text

    def list_item_lines(
        self,
        store: NodeStore,
        parent: Node,
        index: int,
        cursor: int,
        width: int,
    ) -> list[Text]:
        """Boxed list row: cursor mark, index, and the child's view."""
        node = store.get_or_queue(parent.children[index])
        highlight = index == cursor
        prefix = Text()
        prefix.append(">" if highlight else " ", style=self.theme.cursor_style)
        prefix.append(f" {index}. ", style=self.theme.primary_style + Style(bold=highlight))
        # 2 for borders, 2 for padding
        content_width = max(1, width - 4 - prefix.cell_len)
        view_lines = self.to_lines(
            self.node_view(node, store, highlight=highlight, selected=False, width=content_width),
            content_width,
        )
        rows: list[Text] = []
        pad = Text(" " * prefix.cell_len)
        for i, line in enumerate(view_lines or [Text("")]):
            rows.append((prefix if i == 0 else pad) + line)
        border = self.theme.accent if highlight else self.theme.secondary
        panel = Panel(
            Group(*rows),
            box=box.ROUNDED,
            border_style=Style(color=border),
            padding=(0, 1),
            width=width,
        )
        return self.to_lines(panel, width)

    def main_item_lines(self, store: NodeStore, node: Node, width: int, *, collapsed: bool) -> list[Text]:
        """Double-bordered header box for the currently open node."""
        inner_width = max(1, width - 4)
        if collapsed:
            content: RenderableType = Text("Collapsed story", style=self.theme.primary_style + Style(bold=True))
        else:
            content = Group(*self.to_lines(
                self.node_view(node, store, highlight=True, selected=True, width=inner_width),
                inner_width,
            ))
        panel = Panel(
            content,
            box=box.DOUBLE,
            border_style=Style(color=self.theme.border),
            padding=(0, 1),
            width=width,
        )
        return self.to_lines(panel, width)

    def focus_lines(self, store: NodeStore, node: Node, width: int) -> list[Text]:
        return self.to_lines(
            self.node_view(node, store, highlight=False, selected=True, width=width),
            width,
        )


def compose_frame(
    renderer: Renderer,
    store: NodeStore,
    nav: NavigationController,
    width: int,
    height: int,
    *,
    max_width: int = 135,
    subtitle: str = "",
) -> Frame:
    """Lay out the whole screen: title bar, open item, paginated children."""
    renderer.spinner_used = False
    frame = Frame()
    capped = max(10, min(width, max_width))
    frame.lines.append(renderer.title_bar(max(1, width), subtitle))
    remaining = height - len(frame.lines)

    root = store.root
    if root.state is not NodeState.LOADED:
        if root.state is NodeState.FAILED:
            frame.lines.append(Text(f"Could not load stories: {root.error}", style=renderer.theme.error_style))
        else:
            loading = Text()
            loading.append_text(renderer.spinner_text())
            loading.append(" Loading...", style=renderer.theme.secondary_style)
            frame.lines.append(loading)
        frame.used_spinner = renderer.spinner_used
        return frame

    if nav.mode is NavMode.FOCUSED and nav.focus_id is not None:
        focused = store.get_or_queue(nav.focus_id)
        lines = renderer.focus_lines(store, focused, capped)
        frame.focus_line_count = len(lines)
        start = min(nav.focus_offset, max(0, len(lines) - 1))
        frame.lines.extend(lines[start:start + max(0, remaining)])
        frame.used_spinner = renderer.spinner_used
        return frame

    current = nav.current()
    if not nav.at_root:
        main = renderer.main_item_lines(store, current, capped, collapsed=nav.collapse_main)
        main = main[:max(0, remaining)]
        frame.lines.extend(main)
        remaining -= len(main)

    if current.has_children() and remaining > 0:
        item_cache: dict[int, list[Text]] = {}

        def item_lines(index: int) -> list[Text]:
            lines = item_cache.get(index)
            if lines is None:
                lines = renderer.list_item_lines(store, current, index, nav.cursor, capped)
                item_cache[index] = lines
            return lines

        heights = LazyHeights(current.child_count, lambda i: len(item_lines(i)))
        first, last = paginate(current.children, nav.cursor, heights, remaining)
        frame.window = (first, last)
        body: list[Text] = []
        for index in range(first, last + 1):
            body.extend(item_lines(index))
        # only the hovered item fits and it is too tall: keep its top
        frame.lines.extend(body[:remaining])
    elif current.is_loaded and not current.has_children() and remaining > 0:
        frame.lines.append(Text(" No comments yet.", style=renderer.theme.secondary_style))

    frame.used_spinner = renderer.spinner_used
    return frame
