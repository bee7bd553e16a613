"""Preview text for the entry under the cursor.

Directories and unknown file types get a one-line description, text files
their first ``char_limit`` characters, and images an iTerm2 inline-image
escape sequence carrying the base64-encoded file.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass

from .catalog import Entry
from .errors import FilesystemError, describe_os_error
from .highlight import DEFAULT_STYLE, colorize_source, sanitize_terminal_text

DIRECTORY_PREVIEW = "directory"
UNSUPPORTED_PREVIEW = "Unsupported file extension"
DEFAULT_PREVIEW_CHARS = 2000

IMAGE_EXTENSIONS = frozenset(
    {"jpg", "jpeg", "png", "gif", "bmp", "tiff", "tif", "webp", "svg", "ico", "psd"}
)
TEXT_EXTENSIONS = frozenset(
    {
        "txt", "md", "rs", "py", "js", "ts", "svelte", "html", "hs", "ml",
        "c", "cpp", "h", "zig", "go", "json", "toml",
    }
)
TEXT_FILE_NAMES = frozenset({"MAKEFILE", "Makefile", "makefile"})


@dataclass(frozen=True)
class Preview:
    text: str
    is_image: bool = False


def _read_bytes(entry: Entry, limit: int | None = None) -> bytes:
    try:
        with open(entry.full_path, "rb") as handle:
            return handle.read() if limit is None else handle.read(limit)
    except OSError as exc:
        raise FilesystemError(describe_os_error(exc)) from exc


def iterm_inline_image(data: bytes) -> str:
    """Wrap image bytes in the iTerm2 inline image protocol escape."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"\x1b]1337;File=inline=1;size={len(data)}:{encoded}\x07"


def text_preview(entry: Entry, char_limit: int) -> str:
    # UTF-8 needs at most four bytes per character.
    raw = _read_bytes(entry, max(0, char_limit) * 4)
    return raw.decode("utf-8", errors="replace")[: max(0, char_limit)]


def preview_kind(entry: Entry) -> str:
    """Classify ``entry`` as ``directory``, ``image``, ``text`` or ``unsupported``."""
    if entry.is_dir:
        return "directory"
    extension = entry.extension
    if extension in IMAGE_EXTENSIONS:
        return "image"
    if extension in TEXT_EXTENSIONS or entry.display_name in TEXT_FILE_NAMES:
        return "text"
    return "unsupported"


def build_preview(
    entry: Entry,
    char_limit: int = DEFAULT_PREVIEW_CHARS,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> Preview:
    """Build the preview for ``entry``; read failures become the preview text."""
    kind = preview_kind(entry)
    if kind == "directory":
        return Preview(DIRECTORY_PREVIEW)
    if kind == "unsupported":
        return Preview(UNSUPPORTED_PREVIEW)
    try:
        if kind == "image":
            return Preview(iterm_inline_image(_read_bytes(entry)), is_image=True)
        text = sanitize_terminal_text(text_preview(entry, char_limit))
    except FilesystemError as exc:
        return Preview(str(exc))
    if not no_color and text:
        text = colorize_source(text, entry.full_path, style)
    return Preview(text)


__all__ = [
    "DIRECTORY_PREVIEW",
    "UNSUPPORTED_PREVIEW",
    "DEFAULT_PREVIEW_CHARS",
    "IMAGE_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "Preview",
    "build_preview",
    "iterm_inline_image",
    "preview_kind",
    "text_preview",
]
