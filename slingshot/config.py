"""Runtime settings from command-line options and the environment.

There is no settings file; ``load_settings`` only merges parsed CLI values
with a handful of environment variables and normalizes them.
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .highlight import DEFAULT_STYLE
from .preview import DEFAULT_PREVIEW_CHARS
from .process import DEFAULT_EDITOR

LOG_FILE_ENV = "SLINGSHOT_LOG_FILE"
LOG_LEVEL_ENV = "SLINGSHOT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


@dataclass(frozen=True)
class Settings:
    start_directory: Path
    editor_command: tuple[str, ...] = DEFAULT_EDITOR
    style: str = DEFAULT_STYLE
    theme: str | None = None
    no_color: bool = False
    preview_chars: int = DEFAULT_PREVIEW_CHARS
    log_file: Path | None = None
    log_level: int = DEFAULT_LOG_LEVEL


def resolve_editor_command(explicit: str | None, environ: Mapping[str, str]) -> tuple[str, ...]:
    """``explicit`` first, then ``$EDITOR``, then the default editor.

    Values are shell-split so ``"code --wait"`` works; an unparsable value
    falls through to the next source.
    """
    for raw in (explicit, environ.get("EDITOR")):
        if not raw or not raw.strip():
            continue
        try:
            parts = tuple(shlex.split(raw))
        except ValueError:
            continue
        if parts:
            return parts
    return DEFAULT_EDITOR


def parse_log_level(value: str | None, default: int = DEFAULT_LOG_LEVEL) -> int:
    """Accept level names (``debug``) or numbers; anything else gives ``default``."""
    if value is None:
        return default
    text = str(value).strip()
    if not text:
        return default
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


def load_settings(
    start_directory: Path,
    *,
    editor: str | None = None,
    style: str | None = None,
    theme: str | None = None,
    no_color: bool = False,
    preview_chars: int | None = None,
    log_file: str | None = None,
    log_level: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    env = os.environ if environ is None else environ
    raw_log_file = log_file or env.get(LOG_FILE_ENV) or None
    return Settings(
        start_directory=Path(os.path.abspath(start_directory)),
        editor_command=resolve_editor_command(editor, env),
        style=style or DEFAULT_STYLE,
        theme=theme,
        no_color=bool(no_color),
        preview_chars=preview_chars if preview_chars and preview_chars > 0 else DEFAULT_PREVIEW_CHARS,
        log_file=Path(raw_log_file).expanduser() if raw_log_file else None,
        log_level=parse_log_level(log_level if log_level is not None else env.get(LOG_LEVEL_ENV)),
    )


__all__ = [
    "LOG_FILE_ENV",
    "LOG_LEVEL_ENV",
    "Settings",
    "load_settings",
    "parse_log_level",
    "resolve_editor_command",
]
