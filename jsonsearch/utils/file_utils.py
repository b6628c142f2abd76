"""
File utility functions for the transcript indexer.

Provides content hashing for change detection, size checks,
hidden-file detection and relative path computation.
"""

import hashlib
from pathlib import Path
from typing import Union


def get_file_hash(filepath: Union[str, Path], chunk_size: int = 65536) -> str:
    """
    Compute the MD5 hash of a whole file.

    Transcripts are small and edited in place, so the full content is hashed.

    Args:
        filepath: Path to the file.
        chunk_size: Read buffer size in bytes.

    Returns:
        Hexadecimal MD5 hash string.
    """
    hasher = hashlib.md5()

    with open(Path(filepath), "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)

    return hasher.hexdigest()


def get_file_size_mb(filepath: Union[str, Path]) -> float:
    """
    Get file size in megabytes.

    Args:
        filepath: Path to the file.

    Returns:
        File size in MB, rounded to 2 decimal places.
    """
    size_bytes = Path(filepath).stat().st_size
    return round(size_bytes / (1024 * 1024), 2)


def is_hidden(filepath: Union[str, Path], root: Union[str, Path] = None) -> bool:
    """
    Check whether a path, or any of its parents below root, is a dot-file.

    Args:
        filepath: Path to check.
        root: Optional directory whose own name is not considered.

    Returns:
        True if any checked path component starts with a dot.
    """
    path = Path(filepath)
    if root is not None:
        try:
            path = path.relative_to(Path(root))
        except ValueError:
            pass
    return any(part.startswith(".") and part not in (".", "..") for part in path.parts)


def get_relative_path(filepath: Union[str, Path], base: Union[str, Path]) -> str:
    """
    Compute relative path from base directory.

    Args:
        filepath: Absolute path to the file.
        base: Base directory to compute relative path from.

    Returns:
        Relative path as string, or absolute path if not relative to base.
    """
    filepath = Path(filepath).resolve()
    base = Path(base).resolve()

    try:
        return str(filepath.relative_to(base))
    except ValueError:
        return str(filepath)
