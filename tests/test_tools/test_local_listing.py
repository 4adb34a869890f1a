"""
Tests for local directory listing.
"""
from __future__ import annotations

import pytest

from mcp_server_oss.core.errors import InvalidPathError, LocalFileNotFoundError
from mcp_server_oss.tools.local.listing import list_local_files


@pytest.fixture
def photo_dir(tmp_path):
    (tmp_path / "b.png").write_bytes(b"12345")
    (tmp_path / "A.jpg").write_bytes(b"1")
    (tmp_path / "notes.txt").write_text("hi")
    (tmp_path / ".DS_Store").write_bytes(b"x")
    (tmp_path / "thumbs").mkdir()
    (tmp_path / ".cache").mkdir()
    return tmp_path


class TestListLocalFiles:
    """Tests for list_local_files."""

    def test_directories_first_then_names(self, photo_dir):
        entries = list_local_files(str(photo_dir))

        assert [e.name for e in entries] == ["thumbs", "A.jpg", "b.png", "notes.txt"]
        assert entries[0].is_directory is True
        assert entries[2].size == 5

    def test_hidden_entries_skipped(self, photo_dir):
        names = [e.name for e in list_local_files(str(photo_dir))]

        assert ".DS_Store" not in names
        assert ".cache" not in names

    def test_pattern(self, photo_dir):
        entries = list_local_files(str(photo_dir), "*.PNG")
        assert [e.name for e in entries] == ["b.png"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(LocalFileNotFoundError, match="Directory not found"):
            list_local_files(str(tmp_path / "nope"))

    def test_file_is_not_a_directory(self, photo_dir):
        with pytest.raises(InvalidPathError):
            list_local_files(str(photo_dir / "b.png"))

    def test_empty_directory(self, tmp_path):
        assert list_local_files(str(tmp_path)) == []
