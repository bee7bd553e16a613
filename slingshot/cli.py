"""Command-line front door for slingshot.

Parses CLI options, resolves the start directory and logging, then hands
over to the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import termios
from pathlib import Path

from .app import run_browser
from .config import load_settings
from .errors import FilesystemError
from .log import configure_logging
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slingshot",
        description="Keyboard-driven terminal file browser with vim-like keybinds.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--editor", default=None, help="Editor command (default: $EDITOR, then nvim).")
    parser.add_argument("--style", default=None, help="Pygments style name for previews.")
    parser.add_argument(
        "--theme",
        default=None,
        choices=available_theme_names(),
        help="UI theme name.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors and preview highlighting.")
    parser.add_argument(
        "--preview-chars",
        type=_positive_int,
        default=None,
        help="Maximum characters shown in a text preview.",
    )
    parser.add_argument("--log-file", default=None, help="Write logs to this file.")
    parser.add_argument("--log-level", default=None, help="Log level name, e.g. DEBUG or INFO.")
    return parser


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the browser.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path is not None else default_path
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    settings = load_settings(
        path,
        editor=args.editor,
        style=args.style,
        theme=args.theme,
        no_color=args.no_color,
        preview_chars=args.preview_chars,
        log_file=args.log_file,
        log_level=args.log_level,
    )
    configure_logging(settings)

    try:
        run_browser(settings)
    except FilesystemError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc
    except termios.error as exc:
        logger.error("terminal setup failed: %s", exc)
        raise SystemExit("slingshot needs an interactive terminal.") from exc


if __name__ == "__main__":
    main()
