"""Mode-aware key dispatch: the browser's state machine.

State is the product ``(EditMode, PanelMode)``. Each of the four states owns
an explicit plain-key table, and each panel owns a control-chord table, so
an event is only ever looked up in the one table its state selects. Unknown
keys go to that table's fallback rather than leaking into another mode.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .catalog import Catalog, load_catalog
from .errors import FilesystemError, ProcessLaunchError
from .input.events import BACKSPACE, DOWN, ENTER, ESC, LEFT, UP, KeyEvent
from .input.key_registry import KeyComboBinding, KeyComboRegistry
from .mutation import MutationController
from .navigation import NavigationController, NavigationResult
from .process import ProcessRunner
from .state import AppState, EditMode, PanelMode

logger = logging.getLogger(__name__)

UNSUPPORTED_INPUT_MESSAGE = "Unsupported input."
EMPTY_COMMAND_MESSAGE = "No command given."


class KeyDispatcher:
    """Applies key events to an ``AppState``.

    ``handle`` returns ``True`` only for the quit chord; every other outcome,
    errors included, ends up in ``state.status_message``.
    """

    def __init__(
        self,
        state: AppState,
        runner: ProcessRunner,
        navigation: NavigationController | None = None,
        mutations: MutationController | None = None,
        load: Callable[[Path], Catalog] = load_catalog,
    ) -> None:
        self.state = state
        self.runner = runner
        self.mutations = mutations if mutations is not None else MutationController(load)
        self.navigation = (
            navigation if navigation is not None else NavigationController(runner, self.mutations, load)
        )
        self._load = load
        self._tables = self._build_tables()
        self._chord_tables = self._build_chord_tables()

    def _build_tables(self) -> dict[tuple[EditMode, PanelMode], KeyComboRegistry]:
        normal_explorer = KeyComboRegistry(fallback=self._unsupported).register_bindings(
            KeyComboBinding(("i", "a"), self._enter_insert),
            KeyComboBinding(("h",), self._go_back),
            KeyComboBinding(("j", DOWN), self._move_down),
            KeyComboBinding(("k", UP), self._move_up),
            KeyComboBinding(("l", ENTER), self._enter_selected),
            KeyComboBinding(("d",), self._mark_for_deletion),
            KeyComboBinding(("y",), self._confirm_delete),
            KeyComboBinding(("n",), self._toggle_panel),
            KeyComboBinding(("?",), self._toggle_help),
        )
        normal_command = KeyComboRegistry(fallback=self._unsupported).register_bindings(
            KeyComboBinding(("i", "a"), self._enter_insert),
            KeyComboBinding(("n",), self._toggle_panel),
            KeyComboBinding((ENTER,), self._run_command),
            KeyComboBinding(("?",), self._toggle_help),
        )
        insert_explorer = KeyComboRegistry(fallback=self._append_filter_char).register_bindings(
            KeyComboBinding((BACKSPACE,), self._backspace_filter),
            KeyComboBinding((ENTER,), self._enter_selected),
            KeyComboBinding((DOWN,), self._move_down),
            KeyComboBinding((UP,), self._move_up),
            KeyComboBinding((LEFT,), self._go_back),
            KeyComboBinding((ESC,), self._leave_insert),
        )
        insert_command = KeyComboRegistry(fallback=self._append_command_char).register_bindings(
            KeyComboBinding((BACKSPACE,), self._backspace_command),
            KeyComboBinding((ENTER,), self._run_command),
            KeyComboBinding((ESC,), self._leave_insert),
        )
        return {
            (EditMode.NORMAL, PanelMode.FILE_EXPLORER): normal_explorer,
            (EditMode.NORMAL, PanelMode.COMMAND): normal_command,
            (EditMode.INSERT, PanelMode.FILE_EXPLORER): insert_explorer,
            (EditMode.INSERT, PanelMode.COMMAND): insert_command,
        }

    def _build_chord_tables(self) -> dict[PanelMode, KeyComboRegistry]:
        explorer = KeyComboRegistry(fallback=self._unsupported).register_bindings(
            KeyComboBinding(("CTRL_C",), self._quit),
            KeyComboBinding(("CTRL_N",), self._open_command_panel),
            KeyComboBinding(("CTRL_T",), self._create_from_input),
            KeyComboBinding(("CTRL_D",), self._mark_for_deletion),
            KeyComboBinding(("CTRL_Y",), self._confirm_delete),
        )
        command = KeyComboRegistry(fallback=self._unsupported).register_bindings(
            KeyComboBinding(("CTRL_C",), self._quit),
            KeyComboBinding(("CTRL_N",), self._open_command_panel),
        )
        return {PanelMode.FILE_EXPLORER: explorer, PanelMode.COMMAND: command}

    def table_for(self, edit_mode: EditMode, panel_mode: PanelMode) -> KeyComboRegistry:
        return self._tables[(edit_mode, panel_mode)]

    def chord_table_for(self, panel_mode: PanelMode) -> KeyComboRegistry:
        return self._chord_tables[panel_mode]

    def handle(self, event: KeyEvent) -> bool:
        """Apply one key event; return ``True`` when the app should quit."""
        state = self.state
        if event.is_chord:
            table = self._chord_tables[state.panel_mode]
        else:
            table = self._tables[(state.edit_mode, state.panel_mode)]
        return bool(table.dispatch(event))

    def handle_token(self, token: str) -> bool:
        return self.handle(KeyEvent.from_token(token))

    def _apply_navigation(self, result: NavigationResult) -> None:
        if result.catalog is not None:
            if result.catalog.directory_path == self.state.working_directory:
                self.state.refresh_catalog(result.catalog)
            else:
                self.state.replace_catalog(result.catalog)
        if result.message is not None:
            self.state.status_message = result.message

    def _unsupported(self, _event: KeyEvent) -> bool:
        self.state.status_message = UNSUPPORTED_INPUT_MESSAGE
        return False

    def _quit(self, _event: KeyEvent) -> bool:
        logger.info("quit requested")
        return True

    def _toggle_help(self, _event: KeyEvent) -> bool:
        self.state.show_help = not self.state.show_help
        return False

    def _enter_insert(self, _event: KeyEvent) -> bool:
        self.state.edit_mode = EditMode.INSERT
        return False

    def _leave_insert(self, _event: KeyEvent) -> bool:
        state = self.state
        if not state.visible_entries:
            # Over-filtered dead end: drop the term so the full listing returns.
            state.input_buffer = ""
            state.refilter()
        state.edit_mode = EditMode.NORMAL
        return False

    def _move_down(self, _event: KeyEvent) -> bool:
        self.state.move_cursor(1)
        return False

    def _move_up(self, _event: KeyEvent) -> bool:
        self.state.move_cursor(-1)
        return False

    def _append_filter_char(self, event: KeyEvent) -> bool:
        if not event.is_printable:
            return False
        self.state.input_buffer += event.key
        self.state.refilter()
        return False

    def _backspace_filter(self, _event: KeyEvent) -> bool:
        self.state.input_buffer = self.state.input_buffer[:-1]
        self.state.refilter()
        return False

    def _append_command_char(self, event: KeyEvent) -> bool:
        if event.is_printable:
            self.state.input_buffer += event.key
        return False

    def _backspace_command(self, _event: KeyEvent) -> bool:
        self.state.input_buffer = self.state.input_buffer[:-1]
        return False

    def _go_back(self, _event: KeyEvent) -> bool:
        self._apply_navigation(self.navigation.go_back(self.state.working_directory))
        return False

    def _enter_selected(self, _event: KeyEvent) -> bool:
        state = self.state
        selected = state.selected_entry()
        result = self.navigation.enter(selected, state.working_directory, state.input_buffer)
        if selected is None and result.catalog is None:
            # Create ran but its refresh failed; the typed name is still consumed.
            state.input_buffer = ""
            state.refilter()
        self._apply_navigation(result)
        return False

    def _create_from_input(self, _event: KeyEvent) -> bool:
        state = self.state
        result = self.mutations.create(state.input_buffer, state.working_directory)
        if result.catalog is not None:
            state.refresh_catalog(result.catalog)
        else:
            state.input_buffer = ""
            state.refilter()
        state.status_message = result.message
        return False

    def _mark_for_deletion(self, _event: KeyEvent) -> bool:
        state = self.state
        state.status_message = self.mutations.toggle_deletion_mark(state.visible_entries, state.cursor_index)
        return False

    def _confirm_delete(self, _event: KeyEvent) -> bool:
        state = self.state
        result = self.mutations.confirm_delete(state.visible_entries, state.working_directory)
        if result.catalog is not None:
            state.refresh_catalog(result.catalog)
        state.status_message = result.message
        return False

    def _toggle_panel(self, _event: KeyEvent) -> bool:
        state = self.state
        state.input_buffer = ""
        state.status_message = ""
        try:
            state.refresh_catalog(self._load(state.working_directory))
        except FilesystemError as exc:
            logger.warning("refresh on panel toggle failed: %s", exc)
            state.status_message = str(exc)
            state.refilter()
        if state.panel_mode is PanelMode.FILE_EXPLORER:
            state.panel_mode = PanelMode.COMMAND
        else:
            state.panel_mode = PanelMode.FILE_EXPLORER
        return False

    def _open_command_panel(self, event: KeyEvent) -> bool:
        self.state.edit_mode = EditMode.INSERT
        return self._toggle_panel(event)

    def _run_command(self, _event: KeyEvent) -> bool:
        state = self.state
        argv = state.input_buffer.split()
        try:
            if not argv:
                raise ProcessLaunchError(EMPTY_COMMAND_MESSAGE)
            output = self.runner.run_command(argv, state.working_directory)
        except ProcessLaunchError as exc:
            logger.warning("command %r failed to start: %s", state.input_buffer, exc)
            state.status_message = str(exc)
        else:
            state.status_message = output.summary()
        state.input_buffer = ""
        return False


__all__ = ["KeyDispatcher", "UNSUPPORTED_INPUT_MESSAGE", "EMPTY_COMMAND_MESSAGE"]
