"""Tests for create heuristics and mark-then-confirm deletion."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from slingshot.catalog import load_catalog
from slingshot.mutation import (
    CREATED_MESSAGE,
    NOTHING_SELECTED_MESSAGE,
    REMOVED_MESSAGE,
    MutationController,
    marked_names,
)


class CreateTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.controller = MutationController()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_name_with_dot_creates_empty_file(self) -> None:
        result = self.controller.create("testing.py", self.root)

        self.assertTrue((self.root / "testing.py").is_file())
        self.assertEqual((self.root / "testing.py").read_text(encoding="utf-8"), "")
        self.assertEqual(result.message, CREATED_MESSAGE)
        self.assertIn("testing.py", [e.display_name for e in result.catalog.entries])

    def test_name_with_slash_creates_directory(self) -> None:
        result = self.controller.create("newdir/", self.root)

        self.assertTrue((self.root / "newdir").is_dir())
        self.assertEqual(result.message, CREATED_MESSAGE)
        created = next(e for e in result.catalog.entries if e.display_name == "newdir")
        self.assertTrue(created.is_dir)

    def test_name_with_neither_slash_nor_dot_creates_nothing(self) -> None:
        result = self.controller.create("plainname", self.root)

        self.assertEqual(list(self.root.iterdir()), [])
        self.assertTrue(result.refreshed)
        self.assertEqual(result.catalog.entries, [])
        self.assertEqual(result.message, CREATED_MESSAGE)

    def test_existing_file_is_reported_not_truncated(self) -> None:
        target = self.root / "keep.txt"
        target.write_text("precious\n", encoding="utf-8")

        result = self.controller.create("keep.txt", self.root)

        self.assertEqual(target.read_text(encoding="utf-8"), "precious\n")
        self.assertIn("exists", result.message)
        self.assertTrue(result.refreshed)

    def test_nested_directory_with_missing_parent_is_reported(self) -> None:
        result = self.controller.create("a/b/", self.root)

        self.assertFalse((self.root / "a").exists())
        self.assertIn("No such file or directory", result.message)
        self.assertTrue(result.refreshed)


class DeletionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        for name in ("a.txt", "b.txt", "c.txt"):
            (self.root / name).write_text(name, encoding="utf-8")
        self.controller = MutationController()
        self.entries = load_catalog(self.root).entries

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_toggle_lists_all_marked_names(self) -> None:
        self.controller.toggle_deletion_mark(self.entries, 0)
        message = self.controller.toggle_deletion_mark(self.entries, 2)

        self.assertEqual(message, 'Press Ctrl + Y to confirm deletion of files: ["a.txt", "c.txt"]')
        self.assertEqual(marked_names(self.entries), ["a.txt", "c.txt"])

    def test_toggle_twice_unmarks(self) -> None:
        self.controller.toggle_deletion_mark(self.entries, 1)
        message = self.controller.toggle_deletion_mark(self.entries, 1)

        self.assertFalse(self.entries[1].deletion_marked)
        self.assertEqual(message, "Press Ctrl + Y to confirm deletion of files: []")

    def test_toggle_on_empty_view_is_noop(self) -> None:
        self.assertEqual(self.controller.toggle_deletion_mark([], 0), NOTHING_SELECTED_MESSAGE)

    def test_confirm_removes_marked_files_and_refreshes(self) -> None:
        self.controller.toggle_deletion_mark(self.entries, 1)

        result = self.controller.confirm_delete(self.entries, self.root)

        self.assertEqual(result.message, REMOVED_MESSAGE)
        self.assertFalse((self.root / "b.txt").exists())
        self.assertEqual([e.display_name for e in result.catalog.entries], ["a.txt", "c.txt"])
        self.assertEqual([e.display_name for e in load_catalog(self.root).entries], ["a.txt", "c.txt"])

    def test_confirm_removes_empty_directories(self) -> None:
        (self.root / "emptydir").mkdir()
        entries = load_catalog(self.root).entries
        index = [e.display_name for e in entries].index("emptydir")
        self.controller.toggle_deletion_mark(entries, index)

        result = self.controller.confirm_delete(entries, self.root)

        self.assertEqual(result.message, REMOVED_MESSAGE)
        self.assertFalse((self.root / "emptydir").exists())

    def test_first_failure_aborts_and_leaves_later_files(self) -> None:
        for entry in self.entries:
            entry.toggle_deletion_mark()
        (self.root / "b.txt").unlink()

        result = self.controller.confirm_delete(self.entries, self.root)

        self.assertFalse(result.refreshed)
        self.assertIn("b.txt", result.message)
        self.assertFalse((self.root / "a.txt").exists())
        self.assertTrue((self.root / "c.txt").exists())
        self.assertTrue(self.entries[2].deletion_marked)

    def test_confirm_with_nothing_marked_deletes_nothing(self) -> None:
        result = self.controller.confirm_delete(self.entries, self.root)

        self.assertEqual(result.message, REMOVED_MESSAGE)
        self.assertEqual(len(list(self.root.iterdir())), 3)


if __name__ == "__main__":
    unittest.main()
