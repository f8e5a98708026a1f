"""Tests for root module."""

import os
import pytest

from src.treewatch.root import WatchRoot


class TestWatchRoot:
    """Tests for WatchRoot class."""

    def test_path_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        root = WatchRoot("sub")
        assert root.path == os.path.join(os.getcwd(), "sub")

    def test_trailing_separator_stripped(self, tmp_path):
        root = WatchRoot(str(tmp_path) + os.sep)
        assert root.path == str(tmp_path)

    def test_accepts_path_objects(self, tmp_path):
        assert WatchRoot(tmp_path).path == str(tmp_path)

    def test_filesystem_root_kept(self):
        root = WatchRoot(os.sep)
        assert root.path.endswith(os.sep)
        assert root.contains(os.path.join(os.sep, "anything"))

    def test_contains_root_itself(self, tmp_path):
        root = WatchRoot(tmp_path)
        assert root.contains(str(tmp_path))

    def test_contains_descendants(self, tmp_path):
        root = WatchRoot(tmp_path)
        assert root.contains(str(tmp_path / "a.txt"))
        assert root.contains(str(tmp_path / "a" / "b" / "c.txt"))
        assert str(tmp_path / "a.txt") in root

    def test_does_not_contain_outside(self, tmp_path):
        root = WatchRoot(tmp_path / "w")
        assert not root.contains(str(tmp_path / "other" / "a.txt"))
        assert not root.contains(str(tmp_path))

    def test_literal_prefix_matches_sibling(self, tmp_path):
        root = WatchRoot(tmp_path / "watch")
        assert root.contains(str(tmp_path / "watched-other" / "a.txt"))

    def test_segment_aware_rejects_sibling(self, tmp_path):
        root = WatchRoot(tmp_path / "watch", segment_aware=True)
        assert not root.contains(str(tmp_path / "watched-other" / "a.txt"))
        assert root.contains(str(tmp_path / "watch" / "a.txt"))
        assert root.contains(str(tmp_path / "watch"))

    def test_equality(self, tmp_path):
        assert WatchRoot(tmp_path) == WatchRoot(str(tmp_path) + os.sep)
        assert WatchRoot(tmp_path) != WatchRoot(tmp_path, segment_aware=True)
        assert len({WatchRoot(tmp_path), WatchRoot(tmp_path)}) == 1

    def test_str(self, tmp_path):
        assert str(WatchRoot(tmp_path)) == str(tmp_path)
