"""
Indexer module for orchestrating the transcript indexing pipeline.

Coordinates file scanning, JSON extraction, text analysis and database
storage to build the exact and phonetic full-text indexes.
"""

from .index_builder import IndexBuilder, IndexingStats, progress_printer

__all__ = [
    "IndexBuilder",
    "IndexingStats",
    "progress_printer"
]
