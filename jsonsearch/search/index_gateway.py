"""
Index search gateway over SQLite FTS5.

Executes a composite query against the exact or phonetic FTS5 table.
Each clause becomes one MATCH expression; fuzzy and wildcard clauses are
first expanded against the table's fts5vocab term dictionary. Clause
scores are BM25 scaled by the clause boost and summed per segment.
"""

import sqlite3
from collections import defaultdict
from typing import Dict, List, Optional

import jellyfish

from ..core import get_config, get_logger, DatabaseError, IndexUnavailableError
from ..database import (
    get_connection,
    SegmentRepository,
    EXACT_FTS_TABLE,
    PHONETIC_FTS_TABLE,
    EXACT_VOCAB_TABLE,
    PHONETIC_VOCAB_TABLE,
)
from .analyzer import AnalysisMode
from .models import (
    CompositeQuery,
    FuzzyClause,
    PhraseClause,
    PrefixClause,
    ScoredHit,
    SearchHits,
    SubQuery,
    TermClause,
    WildcardClause,
    WildcardPhraseClause,
)

logger = get_logger(__name__)

# (fts table, vocabulary table) per analysis mode
MODE_TABLES = {
    AnalysisMode.EXACT: (EXACT_FTS_TABLE, EXACT_VOCAB_TABLE),
    AnalysisMode.PHONETIC: (PHONETIC_FTS_TABLE, PHONETIC_VOCAB_TABLE),
}


def quote_term(term: str) -> str:
    """Quote a term as an FTS5 string."""
    return '"' + term.replace('"', '""') + '"'


def glob_pattern(pattern: str) -> str:
    """Turn a * / ? wildcard pattern into a GLOB pattern."""
    return pattern.replace("[", "[[]")


def or_expression(terms: List[str]) -> Optional[str]:
    if not terms:
        return None
    if len(terms) == 1:
        return quote_term(terms[0])
    return "(" + " OR ".join(quote_term(t) for t in terms) + ")"


class IndexSearchGateway:
    """
    Runs composite queries against the FTS5 term indexes.

    Deterministic for a fixed index: hits are ordered by score descending,
    then by segment id.
    """

    def __init__(self, store: SegmentRepository = None, max_expansions: int = None):
        """
        Initialize the gateway.

        Args:
            store: Document store used to read back hit metadata.
            max_expansions: Cap on vocabulary terms a fuzzy or wildcard
                clause may expand to. Defaults to config value.
        """
        self.store = store or SegmentRepository()
        if max_expansions is None:
            max_expansions = get_config().search.max_expansions
        self.max_expansions = max_expansions

    def search(self, query: CompositeQuery, max_results: int) -> SearchHits:
        """
        Execute a composite query.

        Args:
            query: The composite query.
            max_results: Maximum number of hits returned.

        Returns:
            SearchHits with at most max_results hits and the uncapped total.

        Raises:
            IndexUnavailableError: If the index is missing or unreadable.
        """
        table, vocab = MODE_TABLES[query.mode]
        scores: Dict[int, float] = defaultdict(float)
        matched: Dict[int, int] = defaultdict(int)

        try:
            with get_connection(must_exist=True) as conn:
                self._check_tables(conn, table, vocab)

                for clause in query.clauses:
                    expression = self._to_match(clause.query, conn, vocab)
                    if expression is None:
                        logger.debug(f"Clause {clause.describe()} expands to nothing")
                        continue

                    rows = conn.execute(
                        f"SELECT rowid, bm25({table}) AS rank FROM {table} "
                        f"WHERE {table} MATCH ?",
                        (expression,)
                    ).fetchall()

                    logger.debug(f"Clause {clause.describe()} -> {expression}: {len(rows)} rows")

                    for row in rows:
                        # FTS5 bm25 is negative, lower is better
                        scores[row["rowid"]] += max(0.0, -row["rank"]) * clause.boost
                        matched[row["rowid"]] += 1

            required = max(1, query.minimum_should_match)
            ranked = sorted(
                (doc_id for doc_id, count in matched.items() if count >= required),
                key=lambda doc_id: (-scores[doc_id], doc_id)
            )

            top = ranked[:max(0, max_results)]
            fields = self.store.get_fields_batch(top) if top else {}
        except (sqlite3.Error, DatabaseError) as e:
            raise IndexUnavailableError(
                f"Index query failed: {e}",
                query=query.describe(),
                details={"table": table}
            ) from e

        hits = []
        for doc_id in top:
            meta = fields.get(doc_id, {})
            hits.append(ScoredHit(
                doc_id=doc_id,
                score=scores[doc_id],
                bookmark_tag=meta.get("bookmark_tag", ""),
                start=meta.get("start"),
                end=meta.get("end"),
                contents=meta.get("contents")
            ))

        return SearchHits(hits=hits, total_hits=len(ranked))

    @staticmethod
    def _check_tables(conn: sqlite3.Connection, table: str, vocab: str) -> None:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE name IN (?, ?)",
            (table, vocab)
        ).fetchall()
        found = {row["name"] for row in rows}
        missing = [name for name in (table, vocab) if name not in found]
        if missing:
            raise IndexUnavailableError(
                f"Index tables missing: {', '.join(missing)}. Run the indexer first.",
                details={"missing": missing}
            )

    def _to_match(self, sub: SubQuery, conn: sqlite3.Connection, vocab: str) -> Optional[str]:
        """Translate one clause into an FTS5 MATCH expression, None if it cannot match."""
        if isinstance(sub, PhraseClause):
            if sub.slop == 0 or len(sub.terms) == 1:
                return quote_term(" ".join(sub.terms))
            inner = " ".join(quote_term(t) for t in sub.terms)
            return f"NEAR({inner}, {sub.slop})"

        if isinstance(sub, TermClause):
            # Only a literal indexed token; FTS5 would split "hyper-space" into a phrase
            if not self._in_vocabulary(conn, vocab, sub.term):
                return None
            return quote_term(sub.term)

        if isinstance(sub, PrefixClause):
            return quote_term(sub.prefix) + " *"

        if isinstance(sub, FuzzyClause):
            return or_expression(self._expand_fuzzy(conn, vocab, sub.term, sub.max_edits))

        if isinstance(sub, WildcardClause):
            return or_expression(self._expand_wildcard(conn, vocab, sub.pattern))

        if isinstance(sub, WildcardPhraseClause):
            parts = [self._to_match(part, conn, vocab) for part in sub.parts]
            if not parts or any(part is None for part in parts):
                return None
            return " AND ".join(parts)

        raise TypeError(f"Unsupported clause type: {type(sub).__name__}")

    @staticmethod
    def _in_vocabulary(conn: sqlite3.Connection, vocab: str, term: str) -> bool:
        row = conn.execute(
            f"SELECT 1 FROM {vocab} WHERE term = ? LIMIT 1", (term,)
        ).fetchone()
        return row is not None

    def _expand_fuzzy(
        self,
        conn: sqlite3.Connection,
        vocab: str,
        term: str,
        max_edits: int
    ) -> List[str]:
        """Vocabulary terms within max_edits edits of term, nearest first."""
        rows = conn.execute(
            f"SELECT term FROM {vocab} WHERE length(term) BETWEEN ? AND ?",
            (len(term) - max_edits, len(term) + max_edits)
        ).fetchall()

        candidates = []
        for row in rows:
            distance = jellyfish.levenshtein_distance(term, row["term"])
            if distance <= max_edits:
                candidates.append((distance, row["term"]))

        candidates.sort()
        return [candidate for _, candidate in candidates[:self.max_expansions]]

    def _expand_wildcard(self, conn: sqlite3.Connection, vocab: str, pattern: str) -> List[str]:
        """Vocabulary terms matching a * / ? pattern, alphabetically."""
        rows = conn.execute(
            f"SELECT term FROM {vocab} WHERE term GLOB ? ORDER BY term LIMIT ?",
            (glob_pattern(pattern), self.max_expansions)
        ).fetchall()
        return [row["term"] for row in rows]
