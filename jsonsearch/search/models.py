"""
Data models for search functionality.

Defines the query clause types, the composite query built per search call,
scored hits returned by the index gateway, and the per-step and final
report objects produced by the orchestrator. Query objects are frozen.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .analyzer import AnalysisMode

# Bookmark tag -> cumulative score, in first-seen order
BookmarkScoreMap = Dict[str, float]


class QueryStrategy(Enum):
    """The matching strategy a clause stands for."""
    EXACT_PHRASE = "exact_phrase"
    PHONETIC_PHRASE = "phonetic_phrase"
    FUZZY = "fuzzy"
    WILDCARD = "wildcard"
    PREFIX = "prefix"
    CONCATENATED_VARIANT = "concatenated_variant"
    HYPHENATED_VARIANT = "hyphenated_variant"


@dataclass(frozen=True)
class TermClause:
    """Matches documents containing a single term."""
    term: str

    def describe(self) -> str:
        return self.term


@dataclass(frozen=True)
class PhraseClause:
    """Matches terms close together; slop is the allowed gap in positions."""
    terms: Tuple[str, ...]
    slop: int = 0

    def describe(self) -> str:
        text = f'"{" ".join(self.terms)}"'
        return f"{text}~{self.slop}" if self.slop else text


@dataclass(frozen=True)
class FuzzyClause:
    """Matches terms within max_edits Levenshtein edits of term."""
    term: str
    max_edits: int = 2

    def describe(self) -> str:
        return f"{self.term}~{self.max_edits}"


@dataclass(frozen=True)
class WildcardClause:
    """Matches terms against a pattern where * is any run and ? one character."""
    pattern: str

    def describe(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class PrefixClause:
    """Matches terms starting with prefix."""
    prefix: str

    def describe(self) -> str:
        return f"{self.prefix}*"


@dataclass(frozen=True)
class WildcardPhraseClause:
    """Every part must match in the same document."""
    parts: Tuple[Union[TermClause, PrefixClause, WildcardClause], ...]

    def describe(self) -> str:
        return "+(" + " ".join(part.describe() for part in self.parts) + ")"


SubQuery = Union[
    TermClause, PhraseClause, FuzzyClause, WildcardClause, PrefixClause, WildcardPhraseClause
]


@dataclass(frozen=True)
class BooleanClause:
    """A SHOULD clause of a composite query with its boost."""
    query: SubQuery
    boost: float
    strategy: QueryStrategy

    def describe(self) -> str:
        return f"{self.query.describe()}^{self.boost:g}"


@dataclass(frozen=True)
class CompositeQuery:
    """
    SHOULD clauses combined with a minimum-should-match threshold.

    Attributes:
        clauses: Clauses in the order they were added.
        minimum_should_match: How many clauses a document must match.
        mode: Which term index the clauses target.
        is_fuzzy: The phrase carried a ~ marker.
        is_wildcard: The phrase carried a * or ? marker.
    """
    clauses: Tuple[BooleanClause, ...]
    minimum_should_match: int = 1
    mode: AnalysisMode = AnalysisMode.EXACT
    is_fuzzy: bool = False
    is_wildcard: bool = False

    def __post_init__(self):
        if not self.clauses:
            raise ValueError("A composite query needs at least one clause")
        if not 0 <= self.minimum_should_match <= len(self.clauses):
            raise ValueError(
                f"minimum_should_match {self.minimum_should_match} outside "
                f"0..{len(self.clauses)}"
            )
        for clause in self.clauses:
            if clause.boost <= 0:
                raise ValueError(f"Boost must be positive: {clause.describe()}")

    @property
    def strategies(self) -> List[QueryStrategy]:
        """Strategy of each clause, in clause order."""
        return [clause.strategy for clause in self.clauses]

    def describe(self) -> str:
        """Human-readable rendering for logs."""
        body = " ".join(clause.describe() for clause in self.clauses)
        return f"[{self.mode.value}] {body} (msm={self.minimum_should_match})"


@dataclass(frozen=True)
class ScoredHit:
    """One matching segment, read-only."""
    doc_id: int
    score: float
    bookmark_tag: str = ""
    start: Optional[Union[int, float, str]] = None
    end: Optional[Union[int, float, str]] = None
    contents: Optional[str] = None


@dataclass
class SearchHits:
    """
    Hits of one query execution.

    Attributes:
        hits: At most max_results hits, highest score first.
        total_hits: Number of matching documents before the cap.
    """
    hits: List[ScoredHit] = field(default_factory=list)
    total_hits: int = 0

    def __iter__(self) -> Iterator[ScoredHit]:
        return iter(self.hits)

    def __len__(self) -> int:
        return len(self.hits)


class SessionState(Enum):
    """States of one search session."""
    IDLE = "idle"
    EXACT_SEARCH = "exact_search"
    PHONETIC_SEARCH = "phonetic_search"
    SUGGESTION_RETRY = "suggestion_retry"
    REPORTING = "reporting"
    DONE = "done"


@dataclass
class SearchStep:
    """
    Outcome of one query execution within a session.

    Attributes:
        state: Which session state ran the step.
        phrase: Phrase searched (the candidate, for suggestion retries).
        mode: Analysis mode of the query.
        total_hits: Matching documents reported by the gateway.
        bookmark_scores: Scores per tag from this step alone.
        hits: The returned hits.
        query: Rendered query, None if composition failed.
        error: Message of a recoverable failure, if any.
        execution_time_ms: Time spent on the step.
    """
    state: SessionState
    phrase: str
    mode: AnalysisMode
    total_hits: int = 0
    bookmark_scores: BookmarkScoreMap = field(default_factory=dict)
    hits: List[ScoredHit] = field(default_factory=list)
    query: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: float = 0.0


@dataclass
class SearchReport:
    """
    Final answer of a search session.

    Attributes:
        phrase: The user phrase.
        ranked_bookmarks: (tag, score) pairs, highest score first.
        total_hits: Hits accumulated over every step.
        significant: Whether total_hits cleared the min_occur threshold.
        min_occur: Threshold used for the decision.
        suggestions: Alternate phrases generated for retry.
        steps: Every executed step, in order.
        execution_time_ms: Total session time.
    """
    phrase: str
    ranked_bookmarks: List[Tuple[str, float]]
    total_hits: int
    significant: bool
    min_occur: int
    suggestions: List[str] = field(default_factory=list)
    steps: List[SearchStep] = field(default_factory=list)
    execution_time_ms: float = 0.0
