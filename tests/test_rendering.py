"""Tests for node views, HTML conversion and frame composition."""

import pytest

from hackerreader.core.navigation import NavigationController
from hackerreader.core.node_store import NodeStore
from hackerreader.tui.rendering import Renderer, compose_frame, html_to_markdown
from hackerreader.tui.theme import MONO_THEME, get_theme, DEFAULT_THEME
from rich.text import Text
from tests.harness.builders import NOW, make_comment, make_item, make_story


@pytest.fixture
def renderer():
    return Renderer(clock=lambda: 0.0, now=lambda: NOW)


def _frame(renderer, store, nav=None, width=80, height=30):
    nav = nav or NavigationController(store)
    return compose_frame(renderer, store, nav, width, height)


def _single(item):
    """Store with a one-item collection whose item is loaded."""
    store = NodeStore()
    store.resolve_collection([item.id])
    store.get_or_queue(item.id)
    store.resolve(item.id, item)
    store.drain_pending()
    return store


class TestHtmlToMarkdown:
    def test_paragraphs(self):
        assert html_to_markdown("First<p>Second") == "First\n\nSecond"

    def test_inline_styles(self):
        assert html_to_markdown("<i>a</i> <b>b</b>") == "*a* **b**"

    def test_links(self):
        html = '<a href="https://example.com/x" rel="nofollow">example.com/x</a>'
        assert html_to_markdown(html) == "[example.com/x](https://example.com/x)"

    def test_escapes_markdown_specials(self):
        assert html_to_markdown("snake_case *x*") == "snake\\_case \\*x\\*"

    def test_entities(self):
        assert html_to_markdown("it&#x27;s &gt; 1") == "it's \\> 1"

    def test_escapes_angle_brackets(self):
        assert html_to_markdown("Vec&lt;T&gt;") == "Vec\\<T\\>"

    def test_code_blocks_unescaped(self):
        html = "<pre><code>  x_1 = 2\n</code></pre>"
        assert html_to_markdown(html) == "```\n  x_1 = 2\n```"

    def test_empty(self):
        assert html_to_markdown("") == ""


class TestPrimitives:
    def test_to_lines_wraps_to_width(self, renderer):
        lines = renderer.to_lines(Text("word " * 20), 20)
        assert len(lines) > 1
        assert all(line.cell_len <= 20 for line in lines)

    def test_title_bar_fills_width(self, renderer):
        bar = renderer.title_bar(40, "topstories")
        assert bar.plain.startswith(" HackerReader  topstories")
        assert bar.cell_len == 40

    def test_theme_is_explicit(self):
        mono = Renderer(MONO_THEME)
        assert mono.theme is MONO_THEME
        assert Renderer().theme is DEFAULT_THEME
        assert get_theme("nope") is DEFAULT_THEME


class TestRootFrames:
    def test_loading_root(self, renderer):
        frame = _frame(renderer, NodeStore())
        assert "Loading..." in frame.to_text().plain
        assert frame.used_spinner

    def test_failed_root(self, renderer):
        store = NodeStore()
        store.fail_collection("HTTP 503")
        text = _frame(renderer, store).to_text().plain
        assert "Could not load stories: HTTP 503" in text

    def test_story_list(self, renderer, loaded_store):
        frame = _frame(renderer, loaded_store)
        text = frame.to_text().plain
        assert "> 0. Story 1" in text
        assert "  1. Story 2" in text
        assert "10 points by pg 3 hours ago | 3 comments" in text
        assert "Story 5" in text
        assert not frame.used_spinner
        assert frame.window == (0, 4)

    def test_frame_fits_height(self, renderer, loaded_store):
        frame = _frame(renderer, loaded_store, height=10)
        assert len(frame.lines) <= 10
        assert frame.window[0] == 0
        assert "Story 5" not in frame.to_text().plain

    def test_window_follows_cursor(self, renderer, loaded_store):
        nav = NavigationController(loaded_store)
        nav.cursor_last()
        frame = _frame(renderer, loaded_store, nav, height=10)
        assert frame.window[1] == 4
        assert "> 4. Story 5" in frame.to_text().plain

    def test_frame_respects_max_width(self, renderer, loaded_store):
        nav = NavigationController(loaded_store)
        frame = compose_frame(renderer, loaded_store, nav, 200, 30, max_width=60)
        assert all(line.cell_len <= 60 for line in frame.lines[1:])

    def test_domain_shown(self, renderer):
        store = _single(make_story(10, url="https://www.example.com/a"))
        assert "Story 10 (example.com)" in _frame(renderer, store).to_text().plain


class TestPlaceholders:
    def test_pending_child(self, renderer):
        store = NodeStore()
        store.resolve_collection([10])
        frame = _frame(renderer, store)
        assert "Loading..." in frame.to_text().plain
        assert frame.used_spinner

    def test_failed_child(self, renderer):
        store = NodeStore()
        store.resolve_collection([10])
        store.get_or_queue(10)
        store.fail(10, "gone")
        assert "[unavailable]" in _frame(renderer, store).to_text().plain

    def test_deleted(self, renderer):
        store = _single(make_comment(10, parent=1, deleted=True, text=""))
        assert "[deleted] 3 hours ago" in _frame(renderer, store).to_text().plain

    def test_comment_keeps_escaped_tags(self, renderer):
        store = _single(make_comment(10, parent=1, text="<p>use Vec&lt;T&gt; or &lt;div&gt; here"))
        assert "use Vec<T> or <div> here" in _frame(renderer, store).to_text().plain

    def test_hidden(self, renderer):
        store = _single(make_story(10))
        store.get(10).toggle_hidden()
        text = _frame(renderer, store).to_text().plain
        assert "(hidden) pg 3 hours ago" in text
        assert "Story 10" not in text


class TestNestedFrames:
    def test_open_story_and_comments(self, renderer, loaded_store):
        nav = NavigationController(loaded_store)
        nav.enter()
        text = _frame(renderer, loaded_store, nav).to_text().plain
        assert "╔" in text
        assert "Story 1" in text
        assert "Comment 100" in text
        assert "> 0. pg 3 hours ago" in text

    def test_collapsed_header(self, renderer, loaded_store):
        nav = NavigationController(loaded_store)
        nav.enter()
        nav.toggle_collapse_main()
        text = _frame(renderer, loaded_store, nav).to_text().plain
        assert "Collapsed story" in text
        assert "Story 1" not in text

    def test_story_without_comments(self, renderer):
        store = _single(make_story(10, text="<p>Ask HN body</p>"))
        nav = NavigationController(store)
        nav.enter_focus()
        frame = _frame(renderer, store, nav)
        assert "Ask HN body" in frame.to_text().plain


class TestFocusFrames:
    def test_focus_shows_full_text(self, renderer, loaded_store):
        nav = NavigationController(loaded_store)
        nav.enter_focus()
        frame = _frame(renderer, loaded_store, nav)
        text = frame.to_text().plain
        assert "Story 1" in text
        assert "╔" not in text
        assert frame.focus_line_count >= 2

    def test_focus_offset_scrolls(self, renderer):
        body = "".join(f"<p>line {i}" for i in range(30))
        store = _single(make_comment(10, parent=1, text=body))
        nav = NavigationController(store)
        nav.enter_focus()
        nav.scroll_focus(10)
        text = _frame(renderer, store, nav, height=8).to_text().plain
        assert "line 0" not in text

    def test_poll_options(self, renderer):
        store = _single(make_item(10, "poll", parts=[11, 12]))
        store.resolve(11, make_item(11, "pollopt", text="Yes", score=7))
        store.resolve(12, make_item(12, "pollopt", text="No", score=2))
        nav = NavigationController(store)
        nav.enter_focus()
        text = _frame(renderer, store, nav).to_text().plain
        assert "Yes" in text
        assert "7 points" in text
        assert "No" in text
