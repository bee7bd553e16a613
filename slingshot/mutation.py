"""File creation and mark-then-confirm deletion."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .catalog import Catalog, Entry, load_catalog
from .errors import FilesystemError, describe_os_error

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "File successfully created"
REMOVED_MESSAGE = "Files successfully removed"
NOTHING_SELECTED_MESSAGE = "Nothing selected."


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a create/delete.

    ``catalog`` is the refreshed listing, or ``None`` when the listing was not
    rebuilt (aborted delete, unreadable directory).
    """

    message: str
    catalog: Catalog | None = None

    @property
    def refreshed(self) -> bool:
        return self.catalog is not None


def marked_names(entries: Sequence[Entry]) -> list[str]:
    return [entry.display_name for entry in entries if entry.deletion_marked]


def _format_names(names: Sequence[str]) -> str:
    return "[" + ", ".join(f'"{name}"' for name in names) + "]"


class MutationController:
    """Creates and deletes entries relative to an explicit directory."""

    def __init__(self, load: Callable[[Path], Catalog] = load_catalog) -> None:
        self._load = load

    def _refresh(self, directory: Path, message: str) -> MutationResult:
        try:
            catalog = self._load(directory)
        except FilesystemError as exc:
            logger.warning("refresh of %s failed: %s", directory, exc)
            return MutationResult(message=str(exc))
        return MutationResult(message=message, catalog=catalog)

    def create(self, name_hint: str, directory: Path) -> MutationResult:
        """Create a directory (hint has ``/``) or a file (hint has ``.``).

        A hint with neither character creates nothing. The listing is
        refreshed whatever happened.
        """
        target = directory / name_hint if name_hint else directory
        message = CREATED_MESSAGE
        try:
            if "/" in name_hint:
                target.mkdir()
                logger.info("created directory %s", target)
            elif "." in name_hint:
                target.touch(exist_ok=False)
                logger.info("created file %s", target)
            else:
                logger.debug("create ignored for %r: no '/' or '.'", name_hint)
        except OSError as exc:
            error = FilesystemError(describe_os_error(exc))
            logger.warning("create of %s failed: %s", target, error)
            message = str(error)
        return self._refresh(directory, message)

    def toggle_deletion_mark(self, entries: Sequence[Entry], index: int) -> str:
        """Flip the mark of ``entries[index]`` and describe everything marked."""
        if not 0 <= index < len(entries):
            return NOTHING_SELECTED_MESSAGE
        entries[index].toggle_deletion_mark()
        names = marked_names(entries)
        return f"Press Ctrl + Y to confirm deletion of files: {_format_names(names)}"

    def confirm_delete(self, entries: Sequence[Entry], directory: Path) -> MutationResult:
        """Remove every marked entry, stopping at the first failure.

        Entries after a failing one stay on disk and keep their marks; the
        listing is only refreshed when every removal succeeded.
        """
        for entry in entries:
            if not entry.deletion_marked:
                continue
            path = entry.full_path
            try:
                if entry.is_dir and not path.is_symlink():
                    os.rmdir(path)
                else:
                    os.unlink(path)
            except OSError as exc:
                error = FilesystemError(describe_os_error(exc))
                logger.warning("delete of %s failed: %s", path, error)
                return MutationResult(message=str(error))
            logger.info("deleted %s", path)
        return self._refresh(directory, REMOVED_MESSAGE)


__all__ = [
    "CREATED_MESSAGE",
    "REMOVED_MESSAGE",
    "NOTHING_SELECTED_MESSAGE",
    "MutationResult",
    "MutationController",
    "marked_names",
]
