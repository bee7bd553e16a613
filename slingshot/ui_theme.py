"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the listing, prompt, and help overlay only;
preview highlighting has its own Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


def _rgb(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    bold: str
    entry_default: str
    entry_dim: str
    entry_marked: str
    match_hit: str
    prompt: str
    divider: str
    help_heading: str
    help_key: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    bold="\033[1m",
    entry_default=_rgb(0xCF, 0xC9, 0xC2),
    entry_dim=_rgb(0x56, 0x5F, 0x89),
    entry_marked=_rgb(0xF7, 0x76, 0x8E),
    match_hit="\033[4m",
    prompt=_rgb(0xF7, 0x76, 0x8E),
    divider="\033[2m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    bold="",
    entry_default="",
    entry_dim="",
    entry_marked="",
    match_hit="",
    prompt="",
    divider="",
    help_heading="",
    help_key="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(sorted(_THEMES))


def resolve_theme(name: str | None = None, *, no_color: bool = False) -> UITheme:
    """Return the theme for ``name``; ``no_color`` always wins with the plain palette."""
    if no_color:
        return PLAIN_THEME
    candidate = (name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "resolve_theme",
]
