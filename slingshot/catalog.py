"""Directory listing into entry descriptors.

The catalog is always rebuilt wholesale: every read produces fresh ``Entry``
objects, which is also what clears deletion marks after a refresh.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from .errors import FilesystemError, describe_os_error
from .icons import glyph_for

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Entry:
    """One filesystem item of a listing.

    Entries compare by identity so filtered views can be checked as true
    subsets of the catalog they came from.
    """

    display_name: str
    full_path: Path
    extension: str = ""
    kind_glyph: str = ""
    is_dir: bool = False
    deletion_marked: bool = False

    def toggle_deletion_mark(self) -> None:
        self.deletion_marked = not self.deletion_marked


@dataclass(frozen=True)
class Catalog:
    """Full, unfiltered listing of one directory."""

    directory_path: Path
    entries: list[Entry] = field(default_factory=list)


def _extension_for(name: str, is_dir: bool) -> str:
    if is_dir:
        return ""
    return Path(name).suffix[1:]


def list_entries(directory: Path) -> list[Entry]:
    """Read ``directory`` and return its entries sorted by lower-cased name.

    Raises ``FilesystemError`` when the directory itself cannot be read.
    Children that cannot be statted (dangling links, races with deletion)
    are skipped.
    """
    entries: list[Entry] = []
    try:
        with os.scandir(directory) as it:
            for child in it:
                try:
                    mode = child.stat().st_mode
                except OSError:
                    logger.debug("skipping unreadable child %s", child.path)
                    continue
                is_dir = stat.S_ISDIR(mode)
                extension = _extension_for(child.name, is_dir)
                entries.append(
                    Entry(
                        display_name=child.name,
                        full_path=Path(child.path),
                        extension=extension,
                        kind_glyph=glyph_for(child.name, extension, is_dir),
                        is_dir=is_dir,
                    )
                )
    except OSError as exc:
        raise FilesystemError(describe_os_error(exc)) from exc

    entries.sort(key=lambda entry: entry.display_name.lower())
    logger.debug("listed %d entries in %s", len(entries), directory)
    return entries


def load_catalog(directory: Path) -> Catalog:
    """Resolve ``directory`` and build its catalog."""
    resolved = Path(os.path.abspath(directory))
    return Catalog(directory_path=resolved, entries=list_entries(resolved))


__all__ = ["Entry", "Catalog", "list_entries", "load_catalog"]
