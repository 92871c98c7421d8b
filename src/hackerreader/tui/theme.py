"""Theme colors passed explicitly into the renderer.

// [LAW:no-shared-mutable-globals] ThemeColors is an immutable value handed to
//   Renderer at construction; nothing reads colors from module state.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style


@dataclass(frozen=True)
class ThemeColors:
    background: str = "#282a37"
    foreground: str = "#f8f8f2"
    secondary: str = "#867f74"
    accent: str = "#50fa7b"  # hovered item border, cursor mark
    border: str = "#8be9fd"  # open-item header box
    title_bg: str = "#FF6600"
    error: str = "#ff5555"
    vote: str = "#6EEFC0"
    code_theme: str = "dracula"
    spinner: str = "dots"

    @property
    def primary_style(self) -> Style:
        return Style(color=self.foreground)

    @property
    def secondary_style(self) -> Style:
        return Style(color=self.secondary)

    @property
    def url_style(self) -> Style:
        return Style(color=self.secondary, italic=True)

    @property
    def title_bar_style(self) -> Style:
        return Style(color=self.foreground, bgcolor=self.title_bg, bold=True)

    @property
    def cursor_style(self) -> Style:
        return Style(color=self.accent, bold=True)

    @property
    def error_style(self) -> Style:
        return Style(color=self.error)

    @property
    def spinner_style(self) -> Style:
        return Style(color=self.title_bg)


# Dracula palette with the Hacker News orange title bar.
DEFAULT_THEME = ThemeColors()

# Plain palette for terminals without truecolor.
MONO_THEME = ThemeColors(
    background="black",
    foreground="white",
    secondary="bright_black",
    accent="green",
    border="cyan",
    title_bg="dark_orange",
    error="red",
    vote="cyan",
    code_theme="monokai",
)

THEMES: dict[str, ThemeColors] = {
    "dracula": DEFAULT_THEME,
    "mono": MONO_THEME,
}


def get_theme(name: str | None) -> ThemeColors:
    return THEMES.get(name or "", DEFAULT_THEME)
