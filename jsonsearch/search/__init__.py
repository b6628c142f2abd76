"""
Search module for multi-strategy phrase search over transcripts.

Provides the token analyzer, query composition, FTS5 query execution,
bookmark score aggregation, spelling suggestions and the orchestrator
that ties them into one search session.
"""

from .analyzer import TokenAnalyzer, AnalysisMode
from .models import (
    QueryStrategy,
    BooleanClause,
    CompositeQuery,
    PhraseClause,
    TermClause,
    FuzzyClause,
    WildcardClause,
    PrefixClause,
    WildcardPhraseClause,
    ScoredHit,
    SearchHits,
    SearchStep,
    SearchReport,
    SessionState,
    BookmarkScoreMap
)
from .query_composer import QueryComposer
from .index_gateway import IndexSearchGateway
from .aggregator import to_bookmark_scores, merge, rank
from .spelling import DictionaryOracle
from .suggestions import SuggestionGenerator, SpellingOracle
from .orchestrator import SearchOrchestrator, SearchSession, create_orchestrator, run_search

__all__ = [
    "TokenAnalyzer",
    "AnalysisMode",
    "QueryStrategy",
    "BooleanClause",
    "CompositeQuery",
    "PhraseClause",
    "TermClause",
    "FuzzyClause",
    "WildcardClause",
    "PrefixClause",
    "WildcardPhraseClause",
    "ScoredHit",
    "SearchHits",
    "SearchStep",
    "SearchReport",
    "SessionState",
    "BookmarkScoreMap",
    "QueryComposer",
    "IndexSearchGateway",
    "to_bookmark_scores",
    "merge",
    "rank",
    "DictionaryOracle",
    "SuggestionGenerator",
    "SpellingOracle",
    "SearchOrchestrator",
    "SearchSession",
    "create_orchestrator",
    "run_search"
]
