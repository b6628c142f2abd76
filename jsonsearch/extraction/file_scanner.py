"""
Discovery of JSON transcripts under the data directory.

Hidden directories are pruned while walking, so nothing below a
dot-directory (editor caches, .git) is ever listed.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

from ..core import get_config, get_logger
from ..utils import get_file_size_mb, is_hidden

logger = get_logger(__name__)


@dataclass
class ScanStats:
    """Counters of the most recent scan."""
    found: int = 0
    hidden: int = 0
    too_large: int = 0
    unreadable: int = 0


class FileScanner:
    """
    Lists transcript files in a deterministic order.

    Within each directory, files come first in name order, then
    subdirectories in name order.
    """

    def __init__(
        self,
        root_directory: Union[str, Path] = None,
        extensions: List[str] = None,
        max_file_size_mb: float = None
    ):
        """
        Args:
            root_directory: Directory to scan. Defaults to paths.data_directory.
            extensions: Accepted suffixes, compared case-insensitively.
            max_file_size_mb: Larger files are skipped.
        """
        if root_directory is None or extensions is None or max_file_size_mb is None:
            indexing = get_config().indexing
            root_directory = root_directory or get_config().paths.data_directory
            extensions = extensions or indexing.supported_extensions
            max_file_size_mb = max_file_size_mb or indexing.max_file_size_mb

        self.root_directory = Path(root_directory)
        self.extensions = {ext.lower() for ext in extensions}
        self.max_file_size_mb = max_file_size_mb
        self.last_scan = ScanStats()

    def accepts(self, filepath: Path) -> bool:
        return filepath.suffix.lower() in self.extensions

    def _admit(self, filepath: Path, stats: ScanStats) -> bool:
        if is_hidden(filepath, self.root_directory):
            stats.hidden += 1
            return False
        try:
            size_mb = get_file_size_mb(filepath)
        except OSError as e:
            logger.warning(f"Cannot stat {filepath}: {e}")
            stats.unreadable += 1
            return False
        if size_mb > self.max_file_size_mb:
            logger.debug(f"Skipping {filepath.name}: {size_mb}MB over the limit")
            stats.too_large += 1
            return False
        return True

    def scan(self) -> Iterator[Path]:
        """
        Yield every accepted transcript file.

        A missing root directory yields nothing and is logged as an error.
        """
        stats = ScanStats()
        self.last_scan = stats

        if not self.root_directory.is_dir():
            logger.error(f"Data directory does not exist: {self.root_directory}")
            return

        logger.info(f"Scanning {self.root_directory}")

        for dirpath, dirnames, filenames in os.walk(self.root_directory):
            hidden_dirs = [name for name in dirnames if name.startswith(".")]
            stats.hidden += len(hidden_dirs)
            dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))

            for name in sorted(filenames):
                filepath = Path(dirpath) / name
                if not self.accepts(filepath) or not self._admit(filepath, stats):
                    continue
                stats.found += 1
                yield filepath

        logger.info(
            f"Scan complete: {stats.found} transcripts, {stats.too_large} too large, "
            f"{stats.hidden} hidden entries skipped"
        )

    def list_all(self) -> List[Path]:
        return list(self.scan())
