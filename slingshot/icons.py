"""Nerd-font glyphs keyed by file extension."""

from __future__ import annotations

FILE_ICON = "󰈔 "
FOLDER_ICON = " "

ICONS: dict[str, str] = {
    "py": " ",
    "rs": " ",
    "js": " ",
    "ts": "󰛦 ",
    "svelte": " ",
    "c": " ",
    "h": " ",
    "cpp": " ",
    "hpp": " ",
    "zig": " ",
    "go": "󰟓 ",
    "pdf": " ",
    "json": " ",
    "toml": " ",
    "wav": "󰎈 ",
    "mp3": "󰎈 ",
    "flac": "󰎈 ",
    "gitignore": " ",
    "git": " ",
    "github": " ",
}


def glyph_for(name: str, extension: str, is_dir: bool) -> str:
    """Resolve the glyph for one listing row.

    Dotfiles without a further suffix (``.gitignore``) are looked up by their
    name minus the leading dot.
    """
    if is_dir:
        return FOLDER_ICON
    key = extension
    if not key and name.startswith("."):
        key = name[1:]
    return ICONS.get(key.lower(), FILE_ICON)


__all__ = ["FILE_ICON", "FOLDER_ICON", "ICONS", "glyph_for"]
