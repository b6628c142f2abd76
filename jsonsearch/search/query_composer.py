"""
Query composer for multi-strategy phrase search.

Builds one composite query per phrase and analysis mode. The phrase clause
is always present; fuzzy, wildcard, prefix and compound-word variant
clauses are added depending on the markers found in the raw phrase.
"""

from typing import List, Optional

from ..core import get_config, get_logger, EmptyQueryError, SearchSettings
from .analyzer import AnalysisMode, TokenAnalyzer
from .models import (
    BooleanClause,
    CompositeQuery,
    FuzzyClause,
    PhraseClause,
    PrefixClause,
    QueryStrategy,
    TermClause,
    WildcardClause,
    WildcardPhraseClause,
)

logger = get_logger(__name__)

FUZZY_MARKER = "~"
WILDCARD_MARKERS = ("*", "?")


def has_fuzzy_marker(phrase: str) -> bool:
    return FUZZY_MARKER in phrase


def has_wildcard_marker(phrase: str) -> bool:
    return any(marker in phrase for marker in WILDCARD_MARKERS)


def is_trailing_prefix(word: str) -> bool:
    """True when the only wildcard in word is one trailing *."""
    return word.endswith("*") and word.count("*") == 1 and "?" not in word


class QueryComposer:
    """
    Translates a phrase and a mode into a CompositeQuery.

    In phonetic mode every literal term (phrase terms, fuzzy terms, prefix
    stems and plain words of a wildcard phrase) is replaced by its phonetic
    code so that clauses target the phonetic term index. Generic wildcard
    patterns are matched as typed.
    """

    def __init__(self, analyzer: TokenAnalyzer = None, settings: SearchSettings = None):
        """
        Initialize the composer.

        Args:
            analyzer: Token analyzer. Defaults to one built from config.
            settings: Search tunables. Defaults to the configured ones.
        """
        self.analyzer = analyzer or TokenAnalyzer.from_config()
        self.settings = settings or get_config().search

    def compose(self, phrase: str, mode: AnalysisMode = AnalysisMode.EXACT) -> CompositeQuery:
        """
        Build the composite query for a phrase.

        Args:
            phrase: Raw user phrase, possibly with ~, * or ? markers.
            mode: Which term index the query targets.

        Returns:
            Immutable CompositeQuery.

        Raises:
            EmptyQueryError: If analysis yields no terms.
        """
        terms = self.analyzer.tokenize(phrase or "", mode)
        if not terms:
            raise EmptyQueryError(f"No searchable terms in '{phrase}'", query=phrase)

        settings = self.settings
        clauses: List[BooleanClause] = []

        if mode is AnalysisMode.PHONETIC:
            clauses.append(BooleanClause(
                PhraseClause(tuple(terms), settings.phrase_slop),
                settings.boost_phonetic,
                QueryStrategy.PHONETIC_PHRASE
            ))
        else:
            clauses.append(BooleanClause(
                PhraseClause(tuple(terms), settings.phrase_slop),
                settings.boost_exact,
                QueryStrategy.EXACT_PHRASE
            ))

        is_fuzzy = has_fuzzy_marker(phrase)
        if is_fuzzy:
            clauses.extend(self._fuzzy_clauses(phrase, mode))

        is_wildcard = has_wildcard_marker(phrase)
        if is_wildcard:
            clauses.extend(self._wildcard_clauses(phrase, terms, mode))

        if mode is AnalysisMode.EXACT and len(terms) >= 2:
            clauses.extend(self._variant_clauses(terms))

        query = CompositeQuery(
            clauses=tuple(clauses),
            minimum_should_match=min(settings.min_should_match, len(clauses)),
            mode=mode,
            is_fuzzy=is_fuzzy,
            is_wildcard=is_wildcard
        )

        logger.debug(f"Composed {query.describe()}")
        return query

    def _literal(self, word: str, mode: AnalysisMode) -> Optional[str]:
        """Single index term for a word, None if nothing is left."""
        if mode is AnalysisMode.PHONETIC:
            code = "".join(self.analyzer.tokenize(word, AnalysisMode.PHONETIC))
            return code or None
        word = word.strip().lower()
        return word or None

    def _fuzzy_clauses(self, phrase: str, mode: AnalysisMode) -> List[BooleanClause]:
        settings = self.settings
        stripped = phrase.strip()

        if not any(ch.isspace() for ch in stripped):
            words = [stripped.replace(FUZZY_MARKER, "")]
        else:
            words = [w[:-1] for w in stripped.split() if w.endswith(FUZZY_MARKER)]

        clauses = []
        for word in words:
            term = self._literal(word, mode)
            if term is None:
                continue
            clauses.append(BooleanClause(
                FuzzyClause(term, settings.fuzzy_edits),
                settings.boost_fuzzy,
                QueryStrategy.FUZZY
            ))
        return clauses

    def _wildcard_clauses(
        self,
        phrase: str,
        terms: List[str],
        mode: AnalysisMode
    ) -> List[BooleanClause]:
        settings = self.settings
        parts = []

        for word in phrase.split():
            if has_wildcard_marker(word):
                if is_trailing_prefix(word):
                    stem = self._literal(word[:-1], mode)
                    if stem:
                        parts.append(PrefixClause(stem))
                else:
                    parts.append(WildcardClause(word.lower()))
            else:
                parts.extend(TermClause(t) for t in self.analyzer.tokenize(word, mode))

        clauses = []
        if parts:
            clauses.append(BooleanClause(
                WildcardPhraseClause(tuple(parts)),
                settings.boost_wildcard,
                QueryStrategy.WILDCARD
            ))

        raw = phrase.strip()
        if len(terms) == 1 and is_trailing_prefix(raw):
            stem = self._literal(raw[:-1], mode)
            if stem:
                clauses.append(BooleanClause(
                    PrefixClause(stem),
                    settings.boost_prefix,
                    QueryStrategy.PREFIX
                ))
        return clauses

    def _variant_clauses(self, terms: List[str]) -> List[BooleanClause]:
        boost = self.settings.boost_prefix
        clauses = []

        concatenated = "".join(terms)
        if concatenated:
            clauses.append(BooleanClause(
                TermClause(concatenated), boost, QueryStrategy.CONCATENATED_VARIANT
            ))

        hyphenated = "-".join(terms)
        if hyphenated:
            clauses.append(BooleanClause(
                TermClause(hyphenated), boost, QueryStrategy.HYPHENATED_VARIANT
            ))
        return clauses


if __name__ == "__main__":
    from ..core import SearchSettings as _Settings

    composer = QueryComposer(TokenAnalyzer(), _Settings())

    for text in ["hyper space", "lightsaber*", "wookie~", "darth vad* lord", "x?wing"]:
        for m in AnalysisMode:
            print(f"{text!r:>20} -> {composer.compose(text, m).describe()}")
