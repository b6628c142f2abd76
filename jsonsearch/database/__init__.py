"""
Database module for SQLite persistence with FTS5 full-text search.

Provides connection management, schema definitions, and storage
of transcript segments with their exact and phonetic term indexes.
"""

from .connection import get_connection, get_cursor, DatabaseManager
from .schema import (
    init_schema,
    reset_schema,
    get_statistics,
    EXACT_FTS_TABLE,
    PHONETIC_FTS_TABLE,
    EXACT_VOCAB_TABLE,
    PHONETIC_VOCAB_TABLE
)
from .repository import SegmentRepository, Segment, NewSegment

__all__ = [
    "get_connection",
    "get_cursor",
    "DatabaseManager",
    "init_schema",
    "reset_schema",
    "get_statistics",
    "EXACT_FTS_TABLE",
    "PHONETIC_FTS_TABLE",
    "EXACT_VOCAB_TABLE",
    "PHONETIC_VOCAB_TABLE",
    "SegmentRepository",
    "Segment",
    "NewSegment"
]
