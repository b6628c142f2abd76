"""
Alternate phrase generation for under-performing searches.

Each unknown term is replaced by its closest dictionary words, and the
per-term options are combined left to right under a hard cap. Joined and
hyphenated forms of the whole phrase are added to recover compound words
that were split or merged by mistake.
"""

from typing import List, Protocol

from ..core import get_config, get_logger
from .analyzer import AnalysisMode, TokenAnalyzer

logger = get_logger(__name__)


class SpellingOracle(Protocol):
    """Dictionary lookups needed to build suggestions."""

    def exists(self, term: str) -> bool:
        ...

    def suggest_similar(self, term: str, k: int) -> List[str]:
        ...


class SuggestionGenerator:
    """
    Builds a bounded, ordered, duplicate-free list of retry phrases.

    Attributes:
        oracle: Spelling dictionary.
        per_term: Suggestions requested per unknown term.
        max_combos: Maximum number of phrases returned.
    """

    def __init__(
        self,
        oracle: SpellingOracle,
        analyzer: TokenAnalyzer = None,
        per_term: int = None,
        max_combos: int = None
    ):
        if per_term is None or max_combos is None:
            search = get_config().search
            per_term = per_term or search.spell_suggestions_per_term
            max_combos = max_combos or search.max_suggestion_combos

        self.oracle = oracle
        self.analyzer = analyzer or TokenAnalyzer.from_config()
        self.per_term = per_term
        self.max_combos = max_combos

    def suggest(self, phrase: str) -> List[str]:
        """
        Generate alternate phrases for phrase.

        Args:
            phrase: The user phrase.

        Returns:
            At most max_combos phrases, never phrase itself.
        """
        terms = self.analyzer.tokenize(phrase or "", AnalysisMode.EXACT)
        if not terms:
            return []

        options = [self._options_for(term) for term in terms]
        candidates = self._combine(options)

        for variant in ("".join(terms), "-".join(terms)):
            if variant.lower() == phrase.lower():
                continue
            if self.oracle.exists(variant):
                candidates.append(variant)
            else:
                candidates.extend(self.oracle.suggest_similar(variant, self.per_term))

        unique = [c for c in dict.fromkeys(candidates) if c != phrase]
        result = unique[:self.max_combos]

        logger.debug(f"Suggestions for '{phrase}': {result}")
        return result

    def _options_for(self, term: str) -> List[str]:
        """Replacement words for one term; never empty."""
        if self.oracle.exists(term):
            return [term]
        similar = self.oracle.suggest_similar(term, self.per_term)
        return list(similar) if similar else [term]

    def _combine(self, options: List[List[str]]) -> List[str]:
        """Cross product of the options, capped at max_combos at every step."""
        combined = [""]
        for opts in options:
            expanded: List[str] = []
            for prefix in combined:
                for opt in opts:
                    if len(expanded) >= self.max_combos:
                        break
                    expanded.append(f"{prefix} {opt}" if prefix else opt)
                if len(expanded) >= self.max_combos:
                    break
            combined = expanded
        return combined
