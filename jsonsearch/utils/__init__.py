"""
Utility module providing shared helper functions.

Contains file operations and text processing utilities used across
the application. Depends only on the standard library.
"""

from .file_utils import (
    get_file_hash,
    get_file_size_mb,
    get_relative_path,
    is_hidden
)
from .text_utils import (
    clean_text,
    truncate_text
)

__all__ = [
    "get_file_hash",
    "get_file_size_mb",
    "get_relative_path",
    "is_hidden",
    "clean_text",
    "truncate_text"
]
