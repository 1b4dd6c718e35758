"""Tests for training_log_parser/reader.py"""

import os
import tempfile
import unittest

from training_log_parser.reader import enumerate_files, read_lines


def _touch(path, content=""):
    with open(path, "w") as f:
        f.write(content)


class TestEnumerateFiles(unittest.TestCase):
    """Verify sorted, depth-first enumeration."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def test_sorted_by_name(self):
        for name in ["c.log", "a.log", "b.log"]:
            _touch(os.path.join(self.tmpdir, name))

        names = [os.path.basename(p) for p in enumerate_files(self.tmpdir)]
        self.assertEqual(names, ["a.log", "b.log", "c.log"])

    def test_directories_expanded_in_place(self):
        _touch(os.path.join(self.tmpdir, "a.log"))
        os.mkdir(os.path.join(self.tmpdir, "b_dir"))
        _touch(os.path.join(self.tmpdir, "b_dir", "z.log"))
        _touch(os.path.join(self.tmpdir, "b_dir", "y.log"))
        _touch(os.path.join(self.tmpdir, "c.log"))

        rel = [os.path.relpath(p, self.tmpdir) for p in enumerate_files(self.tmpdir)]
        self.assertEqual(
            rel,
            ["a.log", os.path.join("b_dir", "y.log"), os.path.join("b_dir", "z.log"), "c.log"],
        )

    def test_empty_folder(self):
        self.assertEqual(list(enumerate_files(self.tmpdir)), [])

    def test_missing_folder_raises(self):
        with self.assertRaises(FileNotFoundError):
            list(enumerate_files(os.path.join(self.tmpdir, "nope")))


class TestReadLines(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.filepath = os.path.join(self.tmpdir, "test.log")

    def test_strips_terminators(self):
        _touch(self.filepath, "line one\nline two\r\nline three")
        self.assertEqual(list(read_lines(self.filepath)), ["line one", "line two", "line three"])

    def test_empty_file(self):
        _touch(self.filepath)
        self.assertEqual(list(read_lines(self.filepath)), [])
