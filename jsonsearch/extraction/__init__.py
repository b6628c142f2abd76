"""
Extraction module for turning JSON transcripts into segments.

Provides file discovery and the JSON walk that maps every object
to a segment record with typed scalar fields.
"""

from .file_scanner import FileScanner, ScanStats
from .json_extractor import (
    JsonExtractor,
    SegmentRecord,
    FieldValue,
    FieldKind,
    ParseContext
)

__all__ = [
    "FileScanner",
    "ScanStats",
    "JsonExtractor",
    "SegmentRecord",
    "FieldValue",
    "FieldKind",
    "ParseContext"
]
