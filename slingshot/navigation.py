"""Directory navigation: entering the selection and going to the parent.

The working directory is passed in and handed back explicitly. Changing the
process working directory is a side effect of a successful directory move,
done through the injected ``chdir`` so both always agree.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .catalog import Catalog, Entry, load_catalog
from .errors import (
    FilesystemError,
    PathError,
    ProcessLaunchError,
    SlingshotError,
    describe_os_error,
)
from .mutation import MutationController
from .process import ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a navigation request.

    ``catalog`` is set when the listing must be replaced (cursor and input
    reset with it). ``message`` of ``None`` leaves the status row untouched.
    """

    directory: Path
    catalog: Catalog | None = None
    message: str | None = None

    @property
    def moved(self) -> bool:
        return self.catalog is not None


def parent_directory(current: Path) -> Path:
    """Drop the last ``/`` segment of ``current``.

    Raises ``PathError`` at the filesystem root.
    """
    text = str(current).strip()
    if text in {"", "/"}:
        raise PathError("Already at the filesystem root.")
    head, _sep, _tail = text.rstrip("/").rpartition("/")
    parent = head.strip()
    return Path(parent or "/")


class NavigationController:
    """Resolves enter/back requests into new directory listings."""

    def __init__(
        self,
        runner: ProcessRunner,
        mutations: MutationController | None = None,
        load: Callable[[Path], Catalog] = load_catalog,
        chdir: Callable[[Path], None] = os.chdir,
    ) -> None:
        self._runner = runner
        self._mutations = mutations if mutations is not None else MutationController(load)
        self._load = load
        self._chdir = chdir

    def _move(self, target: Path, current_dir: Path) -> Catalog:
        try:
            self._chdir(target)
        except OSError as exc:
            raise PathError(describe_os_error(exc)) from exc
        try:
            catalog = self._load(target)
        except FilesystemError:
            try:
                self._chdir(current_dir)
            except OSError as exc:
                logger.warning("could not return to %s: %s", current_dir, exc)
            raise
        logger.info("moved to %s", catalog.directory_path)
        return catalog

    def _edit(self, entry: Entry, current_dir: Path) -> NavigationResult:
        try:
            status = self._runner.launch_editor(entry.display_name, current_dir)
        except ProcessLaunchError as exc:
            logger.warning("editor launch failed for %s: %s", entry.full_path, exc)
            return NavigationResult(directory=current_dir, message=str(exc))
        if status != 0:
            return NavigationResult(directory=current_dir, message=f"Editor exited with status {status}")
        return NavigationResult(directory=current_dir)

    def enter(self, selected: Entry | None, current_dir: Path, input_buffer: str = "") -> NavigationResult:
        """Open ``selected``: edit a file, or move into a directory.

        With nothing selected (empty view) the typed input is handed to
        creation instead.
        """
        if selected is None:
            created = self._mutations.create(input_buffer, current_dir)
            return NavigationResult(directory=current_dir, catalog=created.catalog, message=created.message)

        try:
            mode = os.stat(selected.full_path).st_mode
        except OSError as exc:
            error = FilesystemError(describe_os_error(exc))
            logger.warning("cannot stat %s: %s", selected.full_path, error)
            return NavigationResult(directory=current_dir, message=str(error))

        if stat.S_ISREG(mode):
            return self._edit(selected, current_dir)
        if not stat.S_ISDIR(mode):
            return NavigationResult(
                directory=current_dir,
                message=f"Cannot open {selected.display_name}: not a file or directory",
            )

        try:
            catalog = self._move(selected.full_path, current_dir)
        except SlingshotError as exc:
            logger.warning("cannot enter %s: %s", selected.full_path, exc)
            return NavigationResult(directory=current_dir, message=str(exc))
        return NavigationResult(directory=catalog.directory_path, catalog=catalog, message="")

    def go_back(self, current_dir: Path) -> NavigationResult:
        """Move to the parent of ``current_dir``."""
        try:
            parent = parent_directory(current_dir)
            catalog = self._move(parent, current_dir)
        except FilesystemError as exc:
            error = PathError(str(exc))
            logger.warning("cannot go back from %s: %s", current_dir, error)
            return NavigationResult(directory=current_dir, message=str(error))
        except PathError as exc:
            logger.warning("cannot go back from %s: %s", current_dir, exc)
            return NavigationResult(directory=current_dir, message=str(exc))
        return NavigationResult(directory=catalog.directory_path, catalog=catalog, message="")


__all__ = ["NavigationResult", "NavigationController", "parent_directory"]
