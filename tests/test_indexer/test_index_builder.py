"""
Tests for the index builder.

Tests the indexing pipeline against the sample transcripts.

SAFETY NOTE: All tests use the `configured_db` fixture which:
- Creates a temporary directory via tempfile.mkdtemp()
- Configures the database singleton to use a temp path
- Cleans up all temp files after the test
- Never touches real data directories
"""

import json
from pathlib import Path
from unittest.mock import Mock

from jsonsearch.database import get_connection, get_statistics, SegmentRepository
from jsonsearch.indexer.index_builder import IndexBuilder, IndexingStats
from jsonsearch.search.spelling import DictionaryOracle


def _dictionary_words():
    with get_connection() as conn:
        return {row["word"]: row["frequency"] for row in conn.execute("SELECT word, frequency FROM dictionary")}


class TestIndexingStats:
    """Tests for IndexingStats dataclass."""

    def test_stats_creation(self):
        """Test creating indexing statistics."""
        stats = IndexingStats()

        assert stats.files_scanned == 0
        assert stats.files_indexed == 0
        assert stats.files_updated == 0
        assert stats.segments_indexed == 0
        assert stats.dictionary_words == 0
        assert stats.errors == []


class TestIndexBuilder:
    """Tests for IndexBuilder class."""

    def test_builder_defaults_from_config(self, configured_db, temp_config: Path):
        """Test that the builder reads its settings from config."""
        builder = IndexBuilder()

        assert builder.batch_size == 2
        assert builder.data_directory == temp_config.parent.parent / "data"
        assert builder.rebuild_dictionary is True

    def test_build_counts(self, indexed_db: IndexingStats):
        """Test that every object becomes a segment and text ones are searchable."""
        stats = indexed_db

        assert stats.files_scanned == 3
        assert stats.files_indexed == 3
        assert stats.files_failed == 0
        assert stats.segments_indexed == 11
        assert stats.searchable_segments == 7
        assert stats.dictionary_words > 0

    def test_bookmarks_stored(self, indexed_db):
        """Test that nested bookmark tags reach every segment of the file."""
        stats = get_statistics()

        assert stats["total_files"] == 3
        assert stats["total_bookmarks"] == 3

        segments = SegmentRepository().get_by_bookmark("B")
        assert len(segments) == 4
        assert segments[2].contents == "Prepare the ship for hyperspace."
        assert segments[2].start == 1.5

    def test_dictionary_built_from_vocabulary(self, indexed_db):
        """Test that the spelling dictionary holds exact terms with counts."""
        words = _dictionary_words()

        assert words["hyper"] == 2
        assert words["lightsaber"] == 1
        assert "wookiee" in words
        assert DictionaryOracle().exists("hyperspace")

    def test_progress_callback(self, configured_db, sample_transcripts):
        """Test that the callback is called once per file."""
        callback = Mock()

        IndexBuilder(progress_callback=callback).build()

        assert callback.call_count == 3
        callback.assert_called_with(3, 3, "hoth.json")

    def test_unchanged_files_skipped(self, indexed_db, sample_transcripts):
        """Test that a second run skips files with the same hash."""
        stats = IndexBuilder().build()

        assert stats.files_skipped == 3
        assert stats.files_indexed == 0
        assert SegmentRepository().count() == 11

    def test_changed_file_reindexed(self, indexed_db, sample_transcripts: Path):
        """Test that an edited file replaces its old segments."""
        (sample_transcripts / "endor.json").write_text(json.dumps({
            "bookmark_tag": "C",
            "text": "Ewoks everywhere"
        }))

        stats = IndexBuilder().build()

        assert stats.files_updated == 1
        assert stats.files_skipped == 2
        assert SegmentRepository().count() == 9
        words = _dictionary_words()
        assert "ewoks" in words
        assert "trap" not in words

    def test_invalid_file_counted_as_failure(self, configured_db, sample_transcripts: Path):
        """Test that a broken transcript is reported and the rest indexed."""
        (sample_transcripts / "broken.json").write_text("{ nope")

        stats = IndexBuilder().build()

        assert stats.files_failed == 1
        assert stats.files_indexed == 3
        assert "broken.json" in stats.errors[0]

    def test_reset_clears_index(self, indexed_db, sample_transcripts: Path):
        """Test that reset drops previous data before indexing."""
        (sample_transcripts / "cantina.json").unlink()

        stats = IndexBuilder(reset=True).build()

        assert stats.files_indexed == 2
        assert SegmentRepository().count() == 7
        assert "wookiee" not in _dictionary_words()

    def test_reindex_file(self, indexed_db, sample_transcripts: Path):
        """Test re-indexing a single file."""
        inserted = IndexBuilder().reindex_file(sample_transcripts / "cantina.json")

        assert inserted == 4
        assert SegmentRepository().count() == 11
