"""
Segment repository for the segments table and its FTS companions.

Provides inserting analyzed segments into both full-text tables,
per-hit field lookup for the search gateway, and file bookkeeping
for incremental indexing.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..core import get_logger
from .connection import get_connection, get_cursor
from .schema import EXACT_FTS_TABLE, PHONETIC_FTS_TABLE

logger = get_logger(__name__)

# SQLite caps host parameters per statement; stay well below it
_LOOKUP_CHUNK = 500


@dataclass
class NewSegment:
    """A segment ready to be written, with its analyzed term strings."""
    filepath: str
    filename: str
    position: int
    bookmark_tag: str
    contents: Optional[str]
    exact_terms: str
    phonetic_terms: str
    relative_path: Optional[str] = None
    file_hash: Optional[str] = None
    start: Any = None
    end: Any = None
    fields: List[Tuple[str, str, Any]] = field(default_factory=list)


@dataclass
class Segment:
    """Represents a single stored segment."""
    id: int
    filepath: str
    filename: str
    position: int
    bookmark_tag: str
    contents: Optional[str]
    start: Any
    end: Any
    fields: Dict[str, Any] = field(default_factory=dict)


class SegmentRepository:
    """
    Repository for segment storage and lookup.

    Also serves as the document store read by the search gateway.
    """

    def insert_batch(self, segments: Iterable[NewSegment]) -> int:
        """
        Insert segments and their FTS rows in a single transaction.

        Segments without analyzed terms are stored but not made searchable.
        Duplicates (same filepath and position) are skipped.

        Args:
            segments: Segments to insert.

        Returns:
            Number of segments inserted.
        """
        inserted = 0

        with get_cursor() as cur:
            for seg in segments:
                cur.execute("""
                    INSERT OR IGNORE INTO segments
                    (filepath, filename, relative_path, file_hash, position,
                     bookmark_tag, contents, start_offset, end_offset)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    seg.filepath, seg.filename, seg.relative_path, seg.file_hash,
                    seg.position, seg.bookmark_tag, seg.contents, seg.start, seg.end
                ))

                if cur.rowcount == 0:
                    continue

                segment_id = cur.lastrowid
                inserted += 1

                if seg.fields:
                    cur.executemany(
                        "INSERT OR REPLACE INTO segment_fields (segment_id, name, kind, value) "
                        "VALUES (?, ?, ?, ?)",
                        [(segment_id, name, kind, value) for name, kind, value in seg.fields]
                    )

                if seg.exact_terms:
                    cur.execute(
                        f"INSERT INTO {EXACT_FTS_TABLE} (rowid, terms) VALUES (?, ?)",
                        (segment_id, seg.exact_terms)
                    )
                if seg.phonetic_terms:
                    cur.execute(
                        f"INSERT INTO {PHONETIC_FTS_TABLE} (rowid, terms) VALUES (?, ?)",
                        (segment_id, seg.phonetic_terms)
                    )

        return inserted

    def get_fields(self, segment_id: int) -> Optional[Dict[str, Any]]:
        """
        Read back the per-hit metadata of one segment.

        Args:
            segment_id: Segment row ID.

        Returns:
            Dict with bookmark_tag, start, end and contents, or None.
        """
        return self.get_fields_batch([segment_id]).get(segment_id)

    def get_fields_batch(self, segment_ids: List[int]) -> Dict[int, Dict[str, Any]]:
        """
        Read back per-hit metadata for several segments.

        Args:
            segment_ids: Segment row IDs.

        Returns:
            Mapping of segment ID to its fields; unknown IDs are absent.
        """
        result: Dict[int, Dict[str, Any]] = {}
        ids = list(dict.fromkeys(segment_ids))

        with get_connection(must_exist=True) as conn:
            for i in range(0, len(ids), _LOOKUP_CHUNK):
                chunk = ids[i:i + _LOOKUP_CHUNK]
                placeholders = ",".join("?" for _ in chunk)
                rows = conn.execute(f"""
                    SELECT id, bookmark_tag, start_offset, end_offset, contents, filename
                    FROM segments WHERE id IN ({placeholders})
                """, chunk).fetchall()

                for row in rows:
                    result[row["id"]] = {
                        "bookmark_tag": row["bookmark_tag"] or "",
                        "start": row["start_offset"],
                        "end": row["end_offset"],
                        "contents": row["contents"],
                        "filename": row["filename"],
                    }

        return result

    def get_by_id(self, segment_id: int) -> Optional[Segment]:
        """
        Fetch a segment with its extra fields.

        Args:
            segment_id: Segment row ID.

        Returns:
            Segment object or None.
        """
        with get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM segments WHERE id = ?",
                (segment_id,)
            ).fetchone()
            if not row:
                return None

            field_rows = conn.execute(
                "SELECT name, kind, value FROM segment_fields WHERE segment_id = ?",
                (segment_id,)
            ).fetchall()

        segment = self._row_to_segment(row)
        for field_row in field_rows:
            value = field_row["value"]
            if field_row["kind"] == "boolean":
                value = bool(value)
            segment.fields[field_row["name"]] = value
        return segment

    def get_by_bookmark(self, bookmark_tag: str, limit: int = 100) -> List[Segment]:
        """
        Fetch the segments grouped under one bookmark tag, in file order.

        Args:
            bookmark_tag: Tag to look up.
            limit: Maximum number of segments.

        Returns:
            List of Segment objects.
        """
        with get_connection() as conn:
            rows = conn.execute("""
                SELECT * FROM segments WHERE bookmark_tag = ?
                ORDER BY filepath, position LIMIT ?
            """, (bookmark_tag, limit)).fetchall()

        return [self._row_to_segment(row) for row in rows]

    def exists(self, filepath: Union[str, Path]) -> bool:
        """
        Check if a file is already indexed.

        Args:
            filepath: Path to check.

        Returns:
            True if any segments exist for this file.
        """
        with get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM segments WHERE filepath = ? LIMIT 1",
                (str(filepath),)
            ).fetchone()
            return row is not None

    def delete_by_filepath(self, filepath: Union[str, Path]) -> int:
        """
        Delete all segments for a file, including their FTS rows.

        Args:
            filepath: Path to the JSON file.

        Returns:
            Number of segments deleted.
        """
        with get_cursor() as cur:
            cur.execute(
                "DELETE FROM segments WHERE filepath = ?",
                (str(filepath),)
            )
            deleted = cur.rowcount

        if deleted > 0:
            logger.debug(f"Deleted {deleted} segments for: {filepath}")

        return deleted

    def count(self) -> int:
        """Get total segment count."""
        with get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) as count FROM segments").fetchone()
            return row["count"]

    def count_files(self) -> int:
        """Get number of distinct indexed files."""
        with get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(DISTINCT filepath) as count FROM segments"
            ).fetchone()
            return row["count"]

    def get_indexed_hashes(self) -> Dict[str, str]:
        """
        Get the stored content hash of every indexed file.

        Returns:
            Mapping of filepath to file hash.
        """
        with get_connection() as conn:
            rows = conn.execute(
                "SELECT filepath, MAX(file_hash) as file_hash FROM segments GROUP BY filepath"
            ).fetchall()
            return {row["filepath"]: row["file_hash"] for row in rows}

    @staticmethod
    def _row_to_segment(row) -> Segment:
        """Convert a database row to a Segment object."""
        return Segment(
            id=row["id"],
            filepath=row["filepath"],
            filename=row["filename"],
            position=row["position"],
            bookmark_tag=row["bookmark_tag"],
            contents=row["contents"],
            start=row["start_offset"],
            end=row["end_offset"]
        )
