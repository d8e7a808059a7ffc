"""Tests for content hashing."""

import hashlib
from pathlib import Path

import pytest

from content_index.errors import FileNotReadable
from content_index.hasher import check_algorithm, compute_file_hash, hash_bytes

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


class TestHashBytes:
    """Tests for hashing in-memory content."""

    def test_known_digest(self):
        assert hash_bytes(b"hello") == HELLO_SHA256

    def test_same_bytes_same_digest(self):
        assert hash_bytes(b"payload") == hash_bytes(b"payload")

    def test_other_algorithm(self):
        assert hash_bytes(b"hello", "md5") == hashlib.md5(b"hello").hexdigest()


class TestComputeFileHash:
    """Tests for hashing file content."""

    def test_matches_hash_bytes(self, tmp_path: Path):
        path = tmp_path / "x"
        path.write_bytes(b"hello")
        assert compute_file_hash(path) == HELLO_SHA256

    def test_identical_files_share_digest(self, tmp_path: Path):
        """Filename does not contribute to the digest."""
        first = tmp_path / "first.bin"
        second = tmp_path / "second.bin"
        first.write_bytes(b"\x00\x01same bytes")
        second.write_bytes(b"\x00\x01same bytes")

        assert compute_file_hash(first) == compute_file_hash(second)

    def test_different_content_different_digest(self, tmp_path: Path):
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        first.write_text("one")
        second.write_text("two")

        assert compute_file_hash(first) != compute_file_hash(second)

    def test_large_file_streams_in_chunks(self, tmp_path: Path):
        data = b"0123456789abcdef" * 4096
        path = tmp_path / "big.bin"
        path.write_bytes(data)

        assert compute_file_hash(path) == hashlib.sha256(data).hexdigest()

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty"
        path.write_bytes(b"")
        assert compute_file_hash(path) == hashlib.sha256(b"").hexdigest()

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotReadable) as exc_info:
            compute_file_hash(tmp_path / "missing.txt")
        assert "missing.txt" in str(exc_info.value)

    def test_directory_raises(self, tmp_path: Path):
        with pytest.raises(FileNotReadable):
            compute_file_hash(tmp_path)

    def test_file_not_readable_is_os_error(self, tmp_path: Path):
        with pytest.raises(OSError):
            compute_file_hash(tmp_path / "missing.txt")


class TestCheckAlgorithm:
    """Tests for algorithm validation."""

    def test_normalizes_case(self):
        assert check_algorithm("SHA256") == "sha256"

    def test_rejects_unknown(self):
        with pytest.raises(ValueError):
            check_algorithm("not-a-hash")

    def test_rejects_variable_length(self):
        with pytest.raises(ValueError):
            check_algorithm("shake_128")
