from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import Catalog, Entry
from .filtering import filter_entries


class EditMode(enum.Enum):
    NORMAL = "normal"
    INSERT = "insert"


class PanelMode(enum.Enum):
    FILE_EXPLORER = "file_explorer"
    COMMAND = "command"


@dataclass(frozen=True)
class FilteredView:
    term: str = ""
    entries: list[Entry] = field(default_factory=list)

    @classmethod
    def of(cls, catalog: Catalog, term: str) -> FilteredView:
        return cls(term=term, entries=filter_entries(catalog.entries, term))


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only state handed to the renderer."""

    panel_mode: PanelMode
    edit_mode: EditMode
    working_directory: Path
    entries: tuple[Entry, ...]
    cursor_index: int
    input_buffer: str
    status_message: str
    show_help: bool = False

    @property
    def selected(self) -> Entry | None:
        if 0 <= self.cursor_index < len(self.entries):
            return self.entries[self.cursor_index]
        return None


@dataclass
class AppState:
    working_directory: Path
    catalog: Catalog
    filtered_view: FilteredView
    panel_mode: PanelMode = PanelMode.FILE_EXPLORER
    edit_mode: EditMode = EditMode.NORMAL
    cursor_index: int = 0
    input_buffer: str = ""
    status_message: str = ""
    show_help: bool = False

    @classmethod
    def initial(cls, catalog: Catalog) -> AppState:
        return cls(
            working_directory=catalog.directory_path,
            catalog=catalog,
            filtered_view=FilteredView.of(catalog, ""),
        )

    @property
    def visible_entries(self) -> list[Entry]:
        return self.filtered_view.entries

    def selected_entry(self) -> Entry | None:
        entries = self.filtered_view.entries
        if 0 <= self.cursor_index < len(entries):
            return entries[self.cursor_index]
        return None

    def refilter(self) -> None:
        """Recompute the view from the catalog and keep the cursor in range."""
        self.filtered_view = FilteredView.of(self.catalog, self.input_buffer)
        count = len(self.filtered_view.entries)
        if self.cursor_index >= count:
            self.cursor_index = max(0, count - 1)

    def replace_catalog(self, catalog: Catalog) -> None:
        """Install a freshly read listing, resetting input and cursor."""
        self.working_directory = catalog.directory_path
        self.catalog = catalog
        self.input_buffer = ""
        self.cursor_index = 0
        self.filtered_view = FilteredView.of(catalog, "")

    def refresh_catalog(self, catalog: Catalog) -> None:
        """Install a re-read of the same directory; the cursor is clamped, not reset."""
        self.working_directory = catalog.directory_path
        self.catalog = catalog
        self.input_buffer = ""
        self.refilter()

    def move_cursor(self, step: int) -> None:
        """Move by ``step`` rows, wrapping at both ends; no-op on an empty view."""
        count = len(self.filtered_view.entries)
        if count == 0:
            return
        self.cursor_index = (self.cursor_index + step) % count

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            panel_mode=self.panel_mode,
            edit_mode=self.edit_mode,
            working_directory=self.working_directory,
            entries=tuple(self.filtered_view.entries),
            cursor_index=self.cursor_index,
            input_buffer=self.input_buffer,
            status_message=self.status_message,
            show_help=self.show_help,
        )


__all__ = [
    "EditMode",
    "PanelMode",
    "FilteredView",
    "StateSnapshot",
    "AppState",
]
