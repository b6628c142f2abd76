"""
Spelling dictionary built from the indexed vocabulary.

The dictionary table holds every exact term of the index with its
occurrence count. Similar words are ranked by normalized Levenshtein
similarity, then by frequency.
"""

import math
import sqlite3
from typing import List

import jellyfish

from ..core import get_config, get_logger, DatabaseError, IndexUnavailableError
from ..database import get_connection, get_cursor, EXACT_VOCAB_TABLE

logger = get_logger(__name__)


def similarity(a: str, b: str) -> float:
    """1 - edit distance / longest length; 1.0 means equal."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - jellyfish.levenshtein_distance(a, b) / longest


class DictionaryOracle:
    """
    Spelling oracle backed by the dictionary table.

    The table is filled (or rebuilt, when asked) on the first lookup, so
    searches that never need suggestions never touch it.

    Attributes:
        accuracy: Minimum similarity for a word to be suggested.
        rebuild: Refill the dictionary before the first lookup.
    """

    def __init__(self, accuracy: float = None, rebuild: bool = False):
        if accuracy is None:
            accuracy = get_config().spelling.accuracy
        self.accuracy = accuracy
        self.rebuild = rebuild
        self._prepared = False

    def _prepare(self) -> None:
        if not self._prepared:
            self.build_dictionary(rebuild=self.rebuild)

    def exists(self, term: str) -> bool:
        """Check whether the exact word is in the dictionary."""
        self._prepare()
        try:
            with get_connection(must_exist=True) as conn:
                row = conn.execute(
                    "SELECT 1 FROM dictionary WHERE word = ?", (term,)
                ).fetchone()
        except (sqlite3.Error, DatabaseError) as e:
            raise IndexUnavailableError(f"Spelling dictionary unavailable: {e}") from e
        return row is not None

    def suggest_similar(self, term: str, k: int) -> List[str]:
        """
        Find dictionary words similar to term.

        Args:
            term: Possibly misspelled word.
            k: Maximum number of suggestions.

        Returns:
            Up to k words, most similar first, never term itself.

        Raises:
            IndexUnavailableError: If the dictionary cannot be read.
        """
        if not term or k < 1:
            return []

        self._prepare()

        # Words outside this length window cannot reach the accuracy
        min_len = math.floor(len(term) * self.accuracy)
        max_len = math.ceil(len(term) / self.accuracy) if self.accuracy > 0 else 2 ** 31

        try:
            with get_connection(must_exist=True) as conn:
                rows = conn.execute(
                    "SELECT word, frequency FROM dictionary "
                    "WHERE length BETWEEN ? AND ? AND word != ?",
                    (min_len, max_len, term)
                ).fetchall()
        except (sqlite3.Error, DatabaseError) as e:
            raise IndexUnavailableError(f"Spelling dictionary unavailable: {e}") from e

        scored = []
        for row in rows:
            score = similarity(term, row["word"])
            if score >= self.accuracy:
                scored.append((-score, -row["frequency"], row["word"]))

        scored.sort()
        return [word for _, _, word in scored[:k]]

    def word_count(self) -> int:
        try:
            with get_connection(must_exist=True) as conn:
                return conn.execute("SELECT COUNT(*) FROM dictionary").fetchone()[0]
        except (sqlite3.Error, DatabaseError) as e:
            raise IndexUnavailableError(f"Spelling dictionary unavailable: {e}") from e

    def build_dictionary(self, rebuild: bool = False) -> int:
        """
        Fill the dictionary from the exact term vocabulary.

        An existing non-empty dictionary is kept unless rebuild is set.

        Args:
            rebuild: Drop and refill the dictionary.

        Returns:
            Number of words in the dictionary.
        """
        existing = self.word_count()
        if existing and not rebuild:
            logger.debug(f"Reusing spelling dictionary ({existing} words)")
            self._prepared = True
            return existing

        try:
            with get_cursor() as cur:
                cur.execute("DELETE FROM dictionary")
                cur.execute(f"""
                    INSERT INTO dictionary (word, frequency, length)
                    SELECT term, cnt, length(term) FROM {EXACT_VOCAB_TABLE}
                """)
        except (sqlite3.Error, DatabaseError) as e:
            raise IndexUnavailableError(f"Cannot build spelling dictionary: {e}") from e

        count = self.word_count()
        self._prepared = True
        logger.info(f"Spelling dictionary built: {count} words")
        return count
