"""Frame rendering for the browser.

Turns a ``StateSnapshot`` into one ANSI string: a header row, the entry list
(or command output), an optional preview column, and the status row. All
functions here are pure except ``write_frame``.
"""

from __future__ import annotations

import os
import re
import sys
import unicodedata

from .filtering import match_position
from .highlight import sanitize_terminal_text
from .preview import Preview
from .state import EditMode, PanelMode, StateSnapshot
from .ui_theme import DEFAULT_THEME, UITheme

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
MIN_PREVIEW_WIDTH = 60
PREVIEW_GAP = 3

HELP_LINES: dict[tuple[EditMode, PanelMode], tuple[tuple[str, str], ...]] = {
    (EditMode.NORMAL, PanelMode.FILE_EXPLORER): (
        ("i/a", "insert (filter)"),
        ("j/k, Up/Down", "move"),
        ("l/Enter", "open"),
        ("h", "parent directory"),
        ("d / Ctrl+D", "mark for deletion"),
        ("y / Ctrl+Y", "delete marked"),
        ("Ctrl+T", "create from input"),
        ("n / Ctrl+N", "command panel"),
        ("?", "help"),
        ("Ctrl+C", "quit"),
    ),
    (EditMode.INSERT, PanelMode.FILE_EXPLORER): (
        ("type/Backspace", "edit filter"),
        ("Enter", "open or create"),
        ("Up/Down", "move"),
        ("Left", "parent directory"),
        ("Esc", "normal mode"),
        ("Ctrl+C", "quit"),
    ),
    (EditMode.NORMAL, PanelMode.COMMAND): (
        ("i/a", "insert (command)"),
        ("Enter", "run command"),
        ("n / Ctrl+N", "file explorer"),
        ("?", "help"),
        ("Ctrl+C", "quit"),
    ),
    (EditMode.INSERT, PanelMode.COMMAND): (
        ("type/Backspace", "edit command"),
        ("Enter", "run command"),
        ("Esc", "normal mode"),
        ("Ctrl+N", "file explorer"),
        ("Ctrl+C", "quit"),
    ),
}


def char_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def fit(text: str, max_cols: int) -> str:
    """Clip ``text`` to ``max_cols`` cells, keeping escape sequences intact."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    used = 0
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        chunk, used, full = _fit_plain(text[pos:match.start()], max_cols, used)
        out.append(chunk)
        if full:
            return "".join(out)
        out.append(match.group(0))
        pos = match.end()
    chunk, _used, _full = _fit_plain(text[pos:], max_cols, used)
    out.append(chunk)
    return "".join(out)


def _fit_plain(text: str, max_cols: int, used: int) -> tuple[str, int, bool]:
    kept: list[str] = []
    for ch in text.expandtabs(4):
        width = char_width(ch)
        if used + width > max_cols:
            return "".join(kept), used, True
        kept.append(ch)
        used += width
    return "".join(kept), used, False


def _move(row: int, col: int = 1) -> str:
    return f"\x1b[{row};{col}H"


def list_window_start(cursor: int, rows: int) -> int:
    """First entry index shown so that ``cursor`` stays visible."""
    if rows <= 0 or cursor < rows:
        return 0
    return cursor - rows + 1


def _entry_row(snapshot: StateSnapshot, index: int, theme: UITheme, max_cols: int) -> str:
    entry = snapshot.entries[index]
    selected = index == snapshot.cursor_index
    if entry.deletion_marked:
        color = theme.entry_marked
    elif selected:
        color = theme.entry_default
    else:
        color = theme.entry_dim
    weight = theme.bold if selected else ""

    name_cols = max(0, max_cols - 2 - display_width(entry.kind_glyph))
    name = fit(sanitize_terminal_text(entry.display_name), name_cols)
    term = snapshot.input_buffer
    if term and theme.match_hit and snapshot.panel_mode is PanelMode.FILE_EXPLORER:
        hit = match_position(name, term) if len(name.lower()) == len(name) else -1
        if hit >= 0:
            end = hit + len(term)
            name = f"{name[:hit]}{theme.match_hit}{name[hit:end]}{theme.reset}{weight}{color}{name[end:]}"
    pointer = ">" if selected and not theme.bold else " "
    return f"{pointer} {entry.kind_glyph}{theme.reset}{weight}{color}{name}{theme.reset}"


def help_rows(snapshot: StateSnapshot, theme: UITheme) -> list[str]:
    rows = [f"{theme.help_heading}KEYS{theme.reset}"]
    for keys, action in HELP_LINES[(snapshot.edit_mode, snapshot.panel_mode)]:
        rows.append(f"{theme.help_key}{keys}{theme.reset}  {action}")
    return rows


def _explorer_rows(snapshot: StateSnapshot, body_rows: int, theme: UITheme, list_cols: int) -> list[str]:
    if snapshot.show_help:
        return help_rows(snapshot, theme)[:body_rows]
    start = list_window_start(snapshot.cursor_index, body_rows)
    stop = min(len(snapshot.entries), start + body_rows)
    return [_entry_row(snapshot, idx, theme, list_cols) for idx in range(start, stop)]


def _preview_rows(preview: Preview, body_rows: int, cols: int) -> list[str]:
    if preview.is_image:
        # Escape payload is written raw; the terminal sizes the image itself.
        return [preview.text]
    return [fit(line, cols) for line in preview.text.splitlines()[:body_rows]]


def render_frame(
    snapshot: StateSnapshot,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
    preview: Preview | None = None,
) -> str:
    """Compose a full-screen frame for ``snapshot`` at ``width`` x ``height``."""
    width = max(1, width)
    height = max(2, height)
    out: list[str] = ["\x1b[2J"]
    directory = sanitize_terminal_text(str(snapshot.working_directory))
    message = sanitize_terminal_text(snapshot.status_message)

    if snapshot.panel_mode is PanelMode.COMMAND:
        out.append(_move(1) + fit(f"{theme.bold}{directory}{theme.reset}", width))
        prompt = f"{theme.prompt}>{theme.reset} {snapshot.input_buffer}"
        out.append(_move(2) + fit(prompt, width))
        if snapshot.show_help:
            body = help_rows(snapshot, theme)
        else:
            body = message.splitlines()
        for offset, line in enumerate(body[: height - 2]):
            out.append(_move(3 + offset) + fit(line, width))
        cursor_col = min(width, 3 + display_width(snapshot.input_buffer))
        out.append(_move(2, cursor_col))
        return "".join(out)

    header = f".{theme.bold}{directory}/{theme.reset}{snapshot.input_buffer}"
    out.append(_move(1) + fit(header, width))

    body_rows = max(0, height - 2)
    show_preview = preview is not None and width >= MIN_PREVIEW_WIDTH
    list_cols = width // 2 if show_preview else width
    for offset, row in enumerate(_explorer_rows(snapshot, body_rows, theme, list_cols)):
        out.append(_move(2 + offset) + row)

    if show_preview and preview is not None and not snapshot.show_help:
        preview_col = list_cols + PREVIEW_GAP
        preview_cols = max(1, width - preview_col + 1)
        for offset, line in enumerate(_preview_rows(preview, body_rows, preview_cols)):
            out.append(_move(2 + offset, preview_col) + line + theme.reset)

    status = message.splitlines()[0] if message else ""
    out.append(_move(height) + fit(status, width) + theme.reset)

    if snapshot.edit_mode is EditMode.INSERT:
        cursor_col = min(width, 1 + display_width(f".{directory}/{snapshot.input_buffer}") + 1)
        out.append(_move(1, cursor_col))
    else:
        start = list_window_start(snapshot.cursor_index, body_rows)
        out.append(_move(2 + snapshot.cursor_index - start))
    return "".join(out)


def write_frame(frame: str, fd: int | None = None) -> None:
    """Write ``frame`` to the terminal in one call."""
    target = sys.stdout.fileno() if fd is None else fd
    data = frame.encode("utf-8", errors="replace")
    while data:
        written = os.write(target, data)
        data = data[written:]


__all__ = [
    "HELP_LINES",
    "MIN_PREVIEW_WIDTH",
    "display_width",
    "fit",
    "help_rows",
    "list_window_start",
    "render_frame",
    "write_frame",
]
