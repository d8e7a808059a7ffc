"""Tests for directory utilities."""

from pathlib import Path

import pytest

from content_index.dirops import (
    copy_directory,
    copy_file,
    empty_directory,
    list_all,
    list_files,
    remove_directory,
    should_exclude,
    walk_files,
)
from content_index.errors import DirectoryError


class TestListing:
    """Tests for listing directory contents."""

    def test_list_files_only_regular_files(self, sample_files: Path):
        assert list_files(sample_files) == ["a.txt", "b.txt", "same1.txt", "same2.txt"]

    def test_list_all_includes_directories(self, sample_files: Path):
        names = list_all(sample_files)
        assert "sub" in names
        assert "a.txt" in names
        assert "." not in names
        assert ".." not in names

    def test_list_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(DirectoryError):
            list_files(tmp_path / "missing")
        with pytest.raises(DirectoryError):
            list_all(tmp_path / "missing")

    def test_walk_files_recurses(self, sample_files: Path):
        assert walk_files(sample_files, []) == [
            "a.txt",
            "b.txt",
            "same1.txt",
            "same2.txt",
            "sub/nested.txt",
        ]

    def test_walk_files_prunes_excluded(self, sample_files: Path):
        assert "sub/nested.txt" not in walk_files(sample_files, ["sub"])
        assert "a.txt" not in walk_files(sample_files, ["a.*"])

    def test_should_exclude_patterns(self, tmp_path: Path):
        patterns = [".git", "*.tmp"]
        assert should_exclude(tmp_path / ".git", patterns) is True
        assert should_exclude(tmp_path / "x.tmp", patterns) is True
        assert should_exclude(tmp_path / "x.txt", patterns) is False


class TestCopy:
    """Tests for copying files and directories."""

    def test_copy_file(self, sample_files: Path, tmp_path: Path):
        dest = tmp_path / "copy.txt"
        assert copy_file(sample_files / "a.txt", dest) is True
        assert dest.read_bytes() == b"alpha"

    def test_copy_file_overwrites(self, sample_files: Path, tmp_path: Path):
        dest = tmp_path / "copy.txt"
        dest.write_bytes(b"old content that is longer")
        copy_file(sample_files / "a.txt", dest)
        assert dest.read_bytes() == b"alpha"

    def test_copy_missing_file_returns_false(self, tmp_path: Path):
        assert copy_file(tmp_path / "missing", tmp_path / "dest") is False

    def test_copy_directory_is_flat(self, sample_files: Path, tmp_path: Path):
        dest = tmp_path / "backup"
        assert copy_directory(sample_files, dest) is True
        assert list_files(dest) == list_files(sample_files)
        assert not (dest / "sub").exists()

    def test_copy_missing_directory_returns_false(self, tmp_path: Path):
        assert copy_directory(tmp_path / "missing", tmp_path / "dest") is False


class TestRemove:
    """Tests for emptying and removing directories."""

    def test_empty_directory_keeps_subdirectories(self, sample_files: Path):
        empty_directory(sample_files)
        assert list_files(sample_files) == []
        assert (sample_files / "sub" / "nested.txt").exists()

    def test_remove_directory_is_recursive(self, sample_files: Path):
        remove_directory(sample_files)
        assert not sample_files.exists()

    def test_remove_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(DirectoryError):
            remove_directory(tmp_path / "missing")
