"""
Tests for the segment repository.

Tests batch insertion into both FTS tables, per-hit field lookup
and file bookkeeping.

SAFETY NOTE: All tests use the `configured_db` fixture which:
- Creates a temporary directory via tempfile.mkdtemp()
- Configures the database singleton to use a temp path
- Cleans up all temp files after the test
- Never touches real data directories
"""

import pytest

from jsonsearch.database.schema import init_schema, EXACT_FTS_TABLE, PHONETIC_FTS_TABLE
from jsonsearch.database.repository import NewSegment, SegmentRepository
from jsonsearch.database.connection import get_connection


@pytest.fixture
def repository(configured_db) -> SegmentRepository:
    """Create a repository with initialized schema in temp database."""
    init_schema()
    return SegmentRepository()


def _segment(position=0, filepath="/data/a.json", tag="A", text="hyper space", **kwargs):
    return NewSegment(
        filepath=filepath,
        filename=filepath.rsplit("/", 1)[-1],
        position=position,
        bookmark_tag=tag,
        contents=text,
        exact_terms=text.lower() if text else "",
        phonetic_terms="hpr spk" if text else "",
        file_hash=kwargs.pop("file_hash", "hash-a"),
        **kwargs
    )


def _fts_count(table: str) -> int:
    with get_connection() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestInsertBatch:
    """Tests for SegmentRepository.insert_batch."""

    def test_insert_batch_counts(self, repository: SegmentRepository):
        """Test that every new segment is inserted."""
        inserted = repository.insert_batch([_segment(0), _segment(1), _segment(2)])

        assert inserted == 3
        assert repository.count() == 3
        assert repository.count_files() == 1

    def test_duplicates_skipped(self, repository: SegmentRepository):
        """Test that the same filepath and position is stored once."""
        repository.insert_batch([_segment(0)])
        inserted = repository.insert_batch([_segment(0)])

        assert inserted == 0
        assert repository.count() == 1

    def test_segments_without_text_not_searchable(self, repository: SegmentRepository):
        """Test that objects without text are stored but not in FTS tables."""
        repository.insert_batch([_segment(0, text=None), _segment(1)])

        assert repository.count() == 2
        assert _fts_count(EXACT_FTS_TABLE) == 1
        assert _fts_count(PHONETIC_FTS_TABLE) == 1

    def test_typed_fields_round_trip(self, repository: SegmentRepository):
        """Test that extra fields keep their kind."""
        repository.insert_batch([_segment(
            0,
            start=1.5,
            end=3,
            fields=[("speaker", "string", "Han"), ("loud", "boolean", True), ("take", "integer", 2)]
        )])

        segment = repository.get_by_id(1)

        assert segment.start == 1.5
        assert segment.end == 3
        assert segment.fields == {"speaker": "Han", "loud": True, "take": 2}


class TestFieldLookup:
    """Tests for per-hit metadata lookup."""

    def test_get_fields_batch(self, repository: SegmentRepository):
        """Test that fields come back for known IDs only."""
        repository.insert_batch([_segment(0, start=0, end=4), _segment(1, tag="")])

        fields = repository.get_fields_batch([1, 2, 99])

        assert set(fields) == {1, 2}
        assert fields[1]["bookmark_tag"] == "A"
        assert fields[1]["start"] == 0
        assert fields[1]["end"] == 4
        assert fields[1]["contents"] == "hyper space"
        assert fields[2]["bookmark_tag"] == ""

    def test_get_fields_unknown(self, repository: SegmentRepository):
        """Test that an unknown ID returns None."""
        assert repository.get_fields(42) is None

    def test_get_by_bookmark_in_file_order(self, repository: SegmentRepository):
        """Test bookmark lookup ordering."""
        repository.insert_batch([_segment(2), _segment(0), _segment(1, tag="B")])

        segments = repository.get_by_bookmark("A")

        assert [s.position for s in segments] == [0, 2]


class TestFileBookkeeping:
    """Tests for exists, delete and hash tracking."""

    def test_exists(self, repository: SegmentRepository):
        """Test checking if a file is indexed."""
        assert not repository.exists("/data/a.json")

        repository.insert_batch([_segment(0)])

        assert repository.exists("/data/a.json")

    def test_delete_removes_fts_rows(self, repository: SegmentRepository):
        """Test that deleting a file removes its segments, fields and FTS rows."""
        repository.insert_batch([
            _segment(0, fields=[("speaker", "string", "Han")]),
            _segment(1),
            _segment(0, filepath="/data/b.json", file_hash="hash-b"),
        ])

        deleted = repository.delete_by_filepath("/data/a.json")

        assert deleted == 2
        assert repository.count() == 1
        assert _fts_count(EXACT_FTS_TABLE) == 1
        assert _fts_count(PHONETIC_FTS_TABLE) == 1
        with get_connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM segment_fields").fetchone()[0] == 0

    def test_get_indexed_hashes(self, repository: SegmentRepository):
        """Test that each file maps to its stored hash."""
        repository.insert_batch([
            _segment(0),
            _segment(0, filepath="/data/b.json", file_hash="hash-b"),
        ])

        assert repository.get_indexed_hashes() == {
            "/data/a.json": "hash-a",
            "/data/b.json": "hash-b",
        }
