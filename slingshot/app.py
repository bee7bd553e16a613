"""Interactive session wiring: initial state, the key loop, and drawing.

The loop is single-threaded: read one key, apply it, draw, repeat. External
programs launched from a handler block the loop until they exit.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .catalog import Entry, load_catalog
from .config import Settings
from .input import read_key
from .keymap import KeyDispatcher
from .preview import Preview, build_preview
from .process import SubprocessRunner
from .render import render_frame, write_frame
from .state import AppState, PanelMode, StateSnapshot
from .terminal import TerminalController
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)

INPUT_POLL_MS = 250


@dataclass(frozen=True)
class LoopCallbacks:
    """I/O used by ``run_main_loop``; swapped for fakes in tests."""

    read_key: Callable[[], str]
    draw: Callable[[StateSnapshot], None]
    terminal_size: Callable[[], tuple[int, int]]


def run_main_loop(dispatcher: KeyDispatcher, callbacks: LoopCallbacks) -> None:
    """Draw, read one key, apply it; stop when the quit chord is handled.

    An empty token means the poll timed out; the frame is only redrawn then
    if the terminal was resized.
    """
    dirty = True
    last_size = callbacks.terminal_size()
    while True:
        if dirty:
            callbacks.draw(dispatcher.state.snapshot())
            dirty = False
        token = callbacks.read_key()
        if not token:
            size = callbacks.terminal_size()
            if size != last_size:
                last_size = size
                dirty = True
            continue
        if dispatcher.handle_token(token):
            return
        dirty = True


class PreviewCache:
    """Remembers the preview of the last entry shown."""

    def __init__(self, char_limit: int, style: str, no_color: bool) -> None:
        self.char_limit = char_limit
        self.style = style
        self.no_color = no_color
        self._key: tuple[Path, int | None] | None = None
        self._preview: Preview | None = None

    def preview_for(self, entry: Entry | None) -> Preview | None:
        if entry is None:
            return None
        try:
            mtime: int | None = entry.full_path.stat().st_mtime_ns
        except OSError:
            mtime = None
        key = (entry.full_path, mtime)
        if key != self._key:
            self._preview = build_preview(entry, self.char_limit, self.style, self.no_color)
            self._key = key
        return self._preview


def make_drawer(
    terminal_size: Callable[[], tuple[int, int]],
    theme: UITheme,
    previews: PreviewCache,
    write: Callable[[str], None] = write_frame,
) -> Callable[[StateSnapshot], None]:
    def draw(snapshot: StateSnapshot) -> None:
        width, height = terminal_size()
        preview = None
        if snapshot.panel_mode is PanelMode.FILE_EXPLORER:
            preview = previews.preview_for(snapshot.selected)
        write(render_frame(snapshot, width, height, theme, preview))

    return draw


def initial_state(start_directory: Path) -> AppState:
    """Read ``start_directory`` and make it the process working directory.

    Raises ``FilesystemError`` when the directory cannot be listed.
    """
    catalog = load_catalog(start_directory)
    os.chdir(catalog.directory_path)
    return AppState.initial(catalog)


def run_browser(settings: Settings) -> None:
    """Run the interactive browser until the quit chord."""
    state = initial_state(settings.start_directory)
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    runner = SubprocessRunner(settings.editor_command, suspend_tui=terminal.suspended)
    dispatcher = KeyDispatcher(state, runner)
    previews = PreviewCache(settings.preview_chars, settings.style, settings.no_color)
    theme = resolve_theme(settings.theme, no_color=settings.no_color)
    callbacks = LoopCallbacks(
        read_key=lambda: read_key(stdin_fd, timeout_ms=INPUT_POLL_MS),
        draw=make_drawer(terminal.size, theme, previews, lambda frame: write_frame(frame, stdout_fd)),
        terminal_size=terminal.size,
    )
    logger.info("session started in %s", state.working_directory)
    with terminal.raw_mode():
        run_main_loop(dispatcher, callbacks)
    logger.info("session ended in %s", state.working_directory)


__all__ = [
    "INPUT_POLL_MS",
    "LoopCallbacks",
    "PreviewCache",
    "initial_state",
    "make_drawer",
    "run_browser",
    "run_main_loop",
]
