"""
JSON Transcript Search Package.

Indexes JSON transcript files into SQLite FTS5 and searches them with
exact, phonetic, fuzzy and wildcard matching, ranking results by bookmark tag.
"""

__version__ = "1.0.0"
