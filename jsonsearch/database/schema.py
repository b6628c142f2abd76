"""
Database schema definitions for the transcript index.

Defines the segments table (one row per indexed JSON object), typed extra
fields, the exact and phonetic FTS5 tables with their vocabulary views,
and the spelling dictionary table.
"""

import sqlite3

from ..core import get_config, get_logger, DatabaseError
from .connection import get_cursor, get_connection

logger = get_logger(__name__)


EXACT_FTS_TABLE = "segments_fts"
PHONETIC_FTS_TABLE = "segments_phonetic_fts"
EXACT_VOCAB_TABLE = "segments_vocab"
PHONETIC_VOCAB_TABLE = "segments_phonetic_vocab"

SEGMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS segments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    filepath TEXT NOT NULL,
    filename TEXT NOT NULL,
    relative_path TEXT,
    file_hash TEXT,
    position INTEGER NOT NULL,
    bookmark_tag TEXT NOT NULL DEFAULT '',
    contents TEXT,
    start_offset,
    end_offset,
    indexed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(filepath, position)
)
"""

SEGMENT_FIELDS_TABLE = """
CREATE TABLE IF NOT EXISTS segment_fields (
    segment_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    kind TEXT NOT NULL CHECK (kind IN ('string', 'integer', 'float', 'boolean')),
    value,
    PRIMARY KEY (segment_id, name),
    FOREIGN KEY (segment_id) REFERENCES segments(id) ON DELETE CASCADE
)
"""

DICTIONARY_TABLE = """
CREATE TABLE IF NOT EXISTS dictionary (
    word TEXT PRIMARY KEY,
    frequency INTEGER NOT NULL,
    length INTEGER NOT NULL
)
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_segments_filepath ON segments(filepath)",
    "CREATE INDEX IF NOT EXISTS idx_segments_bookmark ON segments(bookmark_tag)",
    "CREATE INDEX IF NOT EXISTS idx_segments_hash ON segments(file_hash)",
    "CREATE INDEX IF NOT EXISTS idx_dictionary_length ON dictionary(length)"
]

SEGMENT_TRIGGERS = [
    f"""
    CREATE TRIGGER IF NOT EXISTS segments_ad AFTER DELETE ON segments BEGIN
        DELETE FROM {EXACT_FTS_TABLE} WHERE rowid = old.id;
        DELETE FROM {PHONETIC_FTS_TABLE} WHERE rowid = old.id;
    END
    """
]


def _get_fts_tables_sql() -> list:
    """Generate FTS5 and fts5vocab creation SQL with the configured tokenizer."""
    tokenizer = get_config().analysis.tokenizer

    return [
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {EXACT_FTS_TABLE} "
        f"USING fts5(terms, tokenize='{tokenizer}')",
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {PHONETIC_FTS_TABLE} "
        f"USING fts5(terms, tokenize='{tokenizer}')",
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {EXACT_VOCAB_TABLE} "
        f"USING fts5vocab({EXACT_FTS_TABLE}, 'row')",
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {PHONETIC_VOCAB_TABLE} "
        f"USING fts5vocab({PHONETIC_FTS_TABLE}, 'row')",
    ]


def init_schema() -> None:
    """
    Initialize database schema if not exists.

    Creates the segments tables, FTS5 tables, vocabulary views,
    the dictionary table, indexes and triggers.
    """
    logger.info("Initializing database schema")

    with get_cursor() as cur:
        cur.execute(SEGMENTS_TABLE)
        cur.execute(SEGMENT_FIELDS_TABLE)
        cur.execute(DICTIONARY_TABLE)

        for index_sql in INDEXES:
            cur.execute(index_sql)

        for fts_sql in _get_fts_tables_sql():
            try:
                cur.execute(fts_sql)
            except sqlite3.OperationalError as e:
                if "already exists" not in str(e):
                    raise DatabaseError(f"Failed to create FTS table: {e}")

        for trigger_sql in SEGMENT_TRIGGERS:
            try:
                cur.execute(trigger_sql)
            except sqlite3.OperationalError as e:
                if "already exists" not in str(e):
                    raise DatabaseError(f"Failed to create trigger: {e}")

    logger.info("Schema initialization complete")


def reset_schema() -> None:
    """
    Drop and recreate all tables.

    Warning: This deletes all indexed data.
    """
    logger.warning("Resetting database schema - all data will be deleted")

    with get_cursor() as cur:
        cur.execute("DROP TRIGGER IF EXISTS segments_ad")
        cur.execute(f"DROP TABLE IF EXISTS {EXACT_VOCAB_TABLE}")
        cur.execute(f"DROP TABLE IF EXISTS {PHONETIC_VOCAB_TABLE}")
        cur.execute(f"DROP TABLE IF EXISTS {EXACT_FTS_TABLE}")
        cur.execute(f"DROP TABLE IF EXISTS {PHONETIC_FTS_TABLE}")
        cur.execute("DROP TABLE IF EXISTS segment_fields")
        cur.execute("DROP TABLE IF EXISTS segments")
        cur.execute("DROP TABLE IF EXISTS dictionary")

    init_schema()

    logger.info("Schema reset complete")


def get_statistics() -> dict:
    """
    Get index statistics for dashboard display.

    Returns:
        Dictionary with segment, file, bookmark and dictionary counts.
    """
    with get_connection() as conn:
        stats = {}

        row = conn.execute("SELECT COUNT(*) as count FROM segments").fetchone()
        stats["total_segments"] = row["count"]

        row = conn.execute(
            "SELECT COUNT(DISTINCT filepath) as count FROM segments"
        ).fetchone()
        stats["total_files"] = row["count"]

        row = conn.execute(
            "SELECT COUNT(DISTINCT bookmark_tag) as count FROM segments WHERE bookmark_tag != ''"
        ).fetchone()
        stats["total_bookmarks"] = row["count"]

        row = conn.execute("SELECT COUNT(*) as count FROM dictionary").fetchone()
        stats["dictionary_words"] = row["count"]

        row = conn.execute(
            "SELECT MIN(indexed_at) as oldest, MAX(indexed_at) as newest FROM segments"
        ).fetchone()
        stats["oldest_index"] = row["oldest"]
        stats["newest_index"] = row["newest"]

    return stats
