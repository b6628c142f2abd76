"""
Main indexing pipeline for JSON transcripts.

Orchestrates the complete indexing workflow: scanning files, extracting
segments, analyzing their text in exact and phonetic modes, storing them
in batches and refreshing the spelling dictionary.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..core import get_config, get_logger, ExtractionError
from ..database import init_schema, reset_schema, SegmentRepository, NewSegment
from ..extraction import FileScanner, JsonExtractor, SegmentRecord
from ..search.analyzer import AnalysisMode, TokenAnalyzer
from ..search.spelling import DictionaryOracle
from ..utils import get_file_hash, get_relative_path

logger = get_logger(__name__)


@dataclass
class IndexingStats:
    """Statistics from an indexing run."""
    files_scanned: int = 0
    files_indexed: int = 0
    files_updated: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    segments_indexed: int = 0
    searchable_segments: int = 0
    dictionary_words: int = 0
    errors: List[str] = field(default_factory=list)


class IndexBuilder:
    """
    Orchestrates the transcript indexing pipeline.

    Unchanged files (same content hash) are skipped; changed files are
    removed and indexed again.
    """

    def __init__(
        self,
        reset: bool = False,
        progress_callback: Callable[[int, int, str], None] = None,
        data_directory: Union[str, Path] = None,
        rebuild_dictionary: Optional[bool] = None
    ):
        """
        Initialize the index builder.

        Args:
            reset: If True, drop and recreate the database schema.
            progress_callback: Optional callback(current, total, filename)
                              called during indexing for progress updates.
            data_directory: Directory to index. Defaults to config value.
            rebuild_dictionary: Rebuild the spelling dictionary after indexing.
                               If None, uses config spelling.rebuild_on_index.
        """
        self.config = get_config()
        self.reset = reset
        self.progress_callback = progress_callback
        self.data_directory = Path(data_directory or self.config.paths.data_directory)

        self.scanner = FileScanner(root_directory=self.data_directory)
        self.extractor = JsonExtractor()
        self.analyzer = TokenAnalyzer.from_config()
        self.repository = SegmentRepository()

        self.batch_size = self.config.indexing.batch_size
        self.skip_existing = self.config.indexing.skip_existing
        self.log_every = self.config.indexing.log_progress_every

        if rebuild_dictionary is None:
            rebuild_dictionary = self.config.spelling.rebuild_on_index
        self.rebuild_dictionary = rebuild_dictionary

    def build(self) -> IndexingStats:
        """
        Run the complete indexing pipeline.

        Returns:
            IndexingStats with counts and any errors encountered.
        """
        stats = IndexingStats()

        logger.info(f"Starting indexing pipeline for {self.data_directory}")

        if self.reset:
            reset_schema()
        else:
            init_schema()

        indexed_hashes = self.repository.get_indexed_hashes()

        json_files = list(self.scanner.scan())
        stats.files_scanned = len(json_files)

        logger.info(f"Found {stats.files_scanned} JSON files to process")

        batch: List[NewSegment] = []

        for i, filepath in enumerate(json_files):
            filepath_str = str(filepath)

            if self.progress_callback:
                self.progress_callback(i + 1, stats.files_scanned, filepath.name)

            try:
                file_hash = get_file_hash(filepath)
                previous_hash = indexed_hashes.get(filepath_str)

                if previous_hash is not None:
                    if self.skip_existing and previous_hash == file_hash:
                        stats.files_skipped += 1
                        continue
                    self.repository.delete_by_filepath(filepath_str)
                    stats.files_updated += 1

                segments = self._prepare_file(filepath, file_hash)
                batch.extend(segments)

                stats.files_indexed += 1
                stats.searchable_segments += sum(1 for s in segments if s.exact_terms)

            except ExtractionError as e:
                stats.files_failed += 1
                error_msg = f"{e.location or filepath}: {e.message}"
                stats.errors.append(error_msg)
                logger.warning(f"Failed to extract: {error_msg}")

            except Exception as e:
                stats.files_failed += 1
                error_msg = f"{filepath.name}: {str(e)}"
                stats.errors.append(error_msg)
                logger.error(f"Unexpected error: {error_msg}")

            if len(batch) >= self.batch_size:
                stats.segments_indexed += self._commit_batch(batch)
                batch.clear()

            if (i + 1) % self.log_every == 0:
                logger.info(
                    f"Progress: {i + 1}/{stats.files_scanned} files "
                    f"({stats.files_indexed} indexed, {stats.files_failed} failed)"
                )

        if batch:
            stats.segments_indexed += self._commit_batch(batch)

        logger.info(
            f"Indexing complete: {stats.files_indexed} files indexed, "
            f"{stats.segments_indexed} segments, {stats.files_failed} failures"
        )

        oracle = DictionaryOracle()
        stats.dictionary_words = oracle.build_dictionary(
            rebuild=self.rebuild_dictionary or self.reset
        )

        return stats

    def _prepare_file(self, filepath: Path, file_hash: str) -> List[NewSegment]:
        """
        Extract and analyze a single transcript.

        Args:
            filepath: Path to the JSON file.
            file_hash: Content hash stored for change detection.

        Returns:
            Segments ready to be inserted.
        """
        records = self.extractor.extract(filepath)
        relative_path = get_relative_path(filepath, self.data_directory)

        return [self._to_segment(record, relative_path, file_hash) for record in records]

    def _to_segment(self, record: SegmentRecord, relative_path: str, file_hash: str) -> NewSegment:
        text = record.text or ""
        return NewSegment(
            filepath=str(record.filepath),
            filename=record.filepath.name,
            position=record.position,
            bookmark_tag=record.bookmark_tag,
            contents=record.text,
            exact_terms=self.analyzer.analyze(text, AnalysisMode.EXACT),
            phonetic_terms=self.analyzer.analyze(text, AnalysisMode.PHONETIC),
            relative_path=relative_path,
            file_hash=file_hash,
            start=record.start,
            end=record.end,
            fields=[(name, fv.kind.value, fv.value) for name, fv in record.fields.items()]
        )

    def _commit_batch(self, batch: List[NewSegment]) -> int:
        """
        Commit a batch of segments to the database.

        Args:
            batch: Segments to insert.

        Returns:
            Number of rows inserted.
        """
        if not batch:
            return 0

        inserted = self.repository.insert_batch(batch)
        logger.debug(f"Committed batch: {inserted} rows")
        return inserted

    def reindex_file(self, filepath: Path) -> int:
        """
        Re-index a single file, replacing existing entries.

        Args:
            filepath: Path to the JSON file.

        Returns:
            Number of segments indexed.
        """
        init_schema()
        filepath = Path(filepath)

        self.repository.delete_by_filepath(str(filepath))
        segments = self._prepare_file(filepath, get_file_hash(filepath))
        inserted = self._commit_batch(segments)

        DictionaryOracle().build_dictionary(rebuild=True)
        return inserted


def progress_printer(current: int, total: int, filename: str) -> None:
    """Progress callback redrawing a single-line bar on stdout."""
    ratio = current / total if total else 0.0
    filled = int(30 * ratio)
    bar = "#" * filled + "." * (30 - filled)
    print(f"\r[{bar}] {ratio:6.1%} {current}/{total} {filename[:40]:<40}", end="", flush=True)
