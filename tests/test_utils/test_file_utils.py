"""
Tests for file utility functions.

Tests hashing, size calculation, hidden-path detection and relative paths.
All tests use temporary files/directories for safety.
"""

from pathlib import Path

from jsonsearch.utils.file_utils import (
    get_file_hash,
    get_file_size_mb,
    get_relative_path,
    is_hidden
)


class TestGetFileHash:
    """Tests for get_file_hash function."""

    def test_hash_returns_hex_string(self, temp_dir: Path):
        """Test that hash returns a valid hexadecimal string."""
        test_file = temp_dir / "scene.json"
        test_file.write_text('{"text": "Hello there"}')

        hash_value = get_file_hash(test_file)

        assert len(hash_value) == 32
        assert all(c in "0123456789abcdef" for c in hash_value)

    def test_same_content_same_hash(self, temp_dir: Path):
        """Test that identical content produces identical hash."""
        (temp_dir / "a.json").write_text("{}")
        (temp_dir / "b.json").write_text("{}")

        assert get_file_hash(temp_dir / "a.json") == get_file_hash(str(temp_dir / "b.json"))

    def test_edit_changes_hash(self, temp_dir: Path):
        """Test that editing the file changes its hash."""
        test_file = temp_dir / "scene.json"
        test_file.write_text('{"text": "It is a trap"}')
        before = get_file_hash(test_file)

        test_file.write_text('{"text": "It is a trap!"}')

        assert get_file_hash(test_file) != before

    def test_small_chunks(self, temp_dir: Path):
        """Test that the chunk size does not change the hash."""
        test_file = temp_dir / "scene.json"
        test_file.write_text("x" * 1000)

        assert get_file_hash(test_file, chunk_size=7) == get_file_hash(test_file)


class TestGetFileSizeMb:
    """Tests for get_file_size_mb function."""

    def test_small_file_size(self, temp_dir: Path):
        """Test size of small file rounds to zero."""
        test_file = temp_dir / "small.json"
        test_file.write_text("{}")

        assert get_file_size_mb(test_file) == 0.0

    def test_one_megabyte(self, temp_dir: Path):
        """Test size of a 1 MB file."""
        test_file = temp_dir / "big.json"
        test_file.write_bytes(b"x" * 1024 * 1024)

        assert get_file_size_mb(str(test_file)) == 1.0


class TestIsHidden:
    """Tests for is_hidden function."""

    def test_dot_file(self, temp_dir: Path):
        """Test that dot-files are hidden."""
        assert is_hidden(temp_dir / ".draft.json", temp_dir)

    def test_dot_directory(self, temp_dir: Path):
        """Test that files below a dot-directory are hidden."""
        assert is_hidden(temp_dir / ".cache" / "scene.json", temp_dir)

    def test_visible(self, temp_dir: Path):
        """Test that ordinary paths are visible."""
        assert not is_hidden(temp_dir / "episodes" / "scene.json", temp_dir)

    def test_root_not_considered(self, temp_dir: Path):
        """Test that a dotted root directory does not hide its files."""
        root = temp_dir / ".transcripts"

        assert not is_hidden(root / "scene.json", root)
        assert is_hidden(root / "scene.json")


class TestGetRelativePath:
    """Tests for get_relative_path function."""

    def test_relative_path_within_base(self, temp_dir: Path):
        """Test relative path for file within base directory."""
        base = temp_dir / "data"
        filepath = base / "episode4" / "cantina.json"

        assert get_relative_path(filepath, base) == str(Path("episode4") / "cantina.json")

    def test_relative_path_outside_base(self, temp_dir: Path):
        """Test that paths outside base come back absolute."""
        base = temp_dir / "data"
        filepath = temp_dir / "elsewhere" / "scene.json"

        assert get_relative_path(filepath, base) == str(filepath.resolve())
