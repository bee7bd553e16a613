"""Tests for frame composition.

Frames are decoded back into ``row -> [(col, text)]`` by splitting on cursor
moves, so assertions read like the screen a user would see.
"""

from __future__ import annotations

import os
import re
import unittest
from pathlib import Path

from slingshot.catalog import Entry
from slingshot.preview import Preview
from slingshot.render import (
    ANSI_ESCAPE_RE,
    display_width,
    fit,
    list_window_start,
    render_frame,
    write_frame,
)
from slingshot.state import EditMode, PanelMode, StateSnapshot
from slingshot.ui_theme import DEFAULT_THEME, PLAIN_THEME

MOVE_RE = re.compile(r"\x1b\[(\d+);(\d+)H")
ROOT = Path("/work/demo")


def _screen(frame: str) -> dict[int, list[tuple[int, str]]]:
    parts = MOVE_RE.split(frame)
    rows: dict[int, list[tuple[int, str]]] = {}
    for index in range(1, len(parts), 3):
        row, col, text = int(parts[index]), int(parts[index + 1]), parts[index + 2]
        if text:
            rows.setdefault(row, []).append((col, text))
    return rows


def _row_text(frame: str, row: int) -> str:
    return "".join(text for _col, text in _screen(frame).get(row, []))


def _snapshot(**overrides) -> StateSnapshot:
    entries = tuple(
        Entry(display_name=name, full_path=ROOT / name)
        for name in ("aaaatea.txt", "damn", "test.txt")
    )
    values = dict(
        panel_mode=PanelMode.FILE_EXPLORER,
        edit_mode=EditMode.NORMAL,
        working_directory=ROOT,
        entries=entries,
        cursor_index=0,
        input_buffer="",
        status_message="",
    )
    values.update(overrides)
    return StateSnapshot(**values)


class FitTests(unittest.TestCase):
    def test_clips_plain_text(self) -> None:
        self.assertEqual(fit("abcdef", 3), "abc")
        self.assertEqual(fit("abc", 0), "")

    def test_wide_characters_take_two_cells(self) -> None:
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(fit("日本語", 5), "日本")

    def test_escape_sequences_are_kept_and_not_counted(self) -> None:
        text = "\x1b[1mbold\x1b[0m tail"

        clipped = fit(text, 6)

        self.assertEqual(ANSI_ESCAPE_RE.sub("", clipped), "bold t")
        self.assertIn("\x1b[1m", clipped)
        self.assertIn("\x1b[0m", clipped)

    def test_list_window_keeps_cursor_visible(self) -> None:
        self.assertEqual(list_window_start(0, 5), 0)
        self.assertEqual(list_window_start(4, 5), 0)
        self.assertEqual(list_window_start(7, 5), 3)


class ExplorerFrameTests(unittest.TestCase):
    def test_header_list_and_status_rows(self) -> None:
        snapshot = _snapshot(cursor_index=1, input_buffer="", status_message="hello\nsecond line")

        frame = render_frame(snapshot, 40, 10, PLAIN_THEME)

        self.assertEqual(_row_text(frame, 1), f".{ROOT}/")
        self.assertEqual(_row_text(frame, 2), "  aaaatea.txt")
        self.assertEqual(_row_text(frame, 3), "> damn")
        self.assertEqual(_row_text(frame, 4), "  test.txt")
        self.assertEqual(_row_text(frame, 10), "hello")
        self.assertTrue(frame.endswith("\x1b[3;1H"))

    def test_insert_mode_puts_cursor_after_input(self) -> None:
        snapshot = _snapshot(edit_mode=EditMode.INSERT, input_buffer="te")

        frame = render_frame(snapshot, 80, 10, PLAIN_THEME)

        self.assertEqual(_row_text(frame, 1), f".{ROOT}/te")
        expected_col = len(f".{ROOT}/te") + 2
        self.assertTrue(frame.endswith(f"\x1b[1;{expected_col}H"))

    def test_long_lists_scroll_with_cursor(self) -> None:
        entries = tuple(Entry(display_name=f"file{i:02d}", full_path=ROOT / f"file{i:02d}") for i in range(20))
        snapshot = _snapshot(entries=entries, cursor_index=15)

        frame = render_frame(snapshot, 40, 7, PLAIN_THEME)

        self.assertEqual(_row_text(frame, 2), "  file11")
        self.assertEqual(_row_text(frame, 6), "> file15")

    def test_marked_entries_use_marked_color(self) -> None:
        snapshot = _snapshot()
        snapshot.entries[2].toggle_deletion_mark()

        frame = render_frame(snapshot, 40, 10, DEFAULT_THEME)

        self.assertIn(f"{DEFAULT_THEME.entry_marked}test.txt", _row_text(frame, 4))

    def test_filter_hit_is_underlined(self) -> None:
        snapshot = _snapshot(input_buffer="tea", entries=_snapshot().entries[:1])

        frame = render_frame(snapshot, 40, 10, DEFAULT_THEME)

        self.assertIn(f"aaa{DEFAULT_THEME.match_hit}tea{DEFAULT_THEME.reset}", _row_text(frame, 2))

    def test_control_bytes_in_names_and_messages_are_escaped(self) -> None:
        hostile = "evil\x1b[2J\x1b]0;pwned\x07.txt"
        entries = (Entry(display_name=hostile, full_path=ROOT / hostile),)
        snapshot = _snapshot(entries=entries, status_message="rm: \x1b]0;title\x07 failed")

        frame = render_frame(snapshot, 80, 10, PLAIN_THEME)

        self.assertNotIn("\x1b]", frame)
        self.assertNotIn("\x07", frame)
        self.assertNotIn("\x1b[2J", frame[len("\x1b[2J"):])
        self.assertEqual(_row_text(frame, 2), "> evil\\x1b[2J\\x1b]0;pwned\\x07.txt")
        self.assertEqual(_row_text(frame, 10), "rm: \\x1b]0;title\\x07 failed")

    def test_command_output_is_escaped(self) -> None:
        snapshot = _snapshot(panel_mode=PanelMode.COMMAND, status_message="ok\n\x1b]2;x\x07done")

        frame = render_frame(snapshot, 80, 10, PLAIN_THEME)

        self.assertNotIn("\x1b]", frame)
        self.assertEqual(_row_text(frame, 4), "\\x1b]2;x\\x07done")

    def test_match_highlight_skipped_when_case_fold_changes_length(self) -> None:
        entries = (Entry(display_name="İstanbul.txt", full_path=ROOT / "İstanbul.txt"),)
        snapshot = _snapshot(entries=entries, input_buffer="tan")

        row = _row_text(render_frame(snapshot, 80, 10, DEFAULT_THEME), 2)

        self.assertNotIn(DEFAULT_THEME.match_hit, row)
        self.assertIn("İstanbul.txt", row)

    def test_preview_column_needs_enough_width(self) -> None:
        snapshot = _snapshot()
        preview = Preview("first preview line\nsecond")

        wide = render_frame(snapshot, 80, 10, PLAIN_THEME, preview)
        narrow = render_frame(snapshot, 50, 10, PLAIN_THEME, preview)

        self.assertIn((43, "first preview line"), _screen(wide)[2])
        self.assertIn((43, "second"), _screen(wide)[3])
        self.assertNotIn("first preview line", narrow)

    def test_help_overlay_replaces_list(self) -> None:
        snapshot = _snapshot(show_help=True)

        frame = render_frame(snapshot, 60, 20, PLAIN_THEME, Preview("hidden"))

        self.assertEqual(_row_text(frame, 2), "KEYS")
        self.assertIn("mark for deletion", frame)
        self.assertNotIn("aaaatea.txt", frame)
        self.assertNotIn("hidden", frame)


class CommandFrameTests(unittest.TestCase):
    def test_prompt_and_multiline_output(self) -> None:
        snapshot = _snapshot(
            panel_mode=PanelMode.COMMAND,
            edit_mode=EditMode.INSERT,
            input_buffer="ls -a",
            status_message="one\ntwo",
        )

        frame = render_frame(snapshot, 40, 10, PLAIN_THEME)

        self.assertEqual(_row_text(frame, 1), str(ROOT))
        self.assertEqual(_row_text(frame, 2), "> ls -a")
        self.assertEqual(_row_text(frame, 3), "one")
        self.assertEqual(_row_text(frame, 4), "two")
        self.assertNotIn("aaaatea.txt", frame)
        self.assertTrue(frame.endswith("\x1b[2;8H"))


class WriteFrameTests(unittest.TestCase):
    def test_writes_whole_frame_to_descriptor(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            write_frame("héllo", write_fd)
            data = os.read(read_fd, 64)
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(data, "héllo".encode("utf-8"))


if __name__ == "__main__":
    unittest.main()
