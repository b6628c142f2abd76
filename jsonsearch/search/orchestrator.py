"""
Search orchestrator sequencing the strategies of one user query.

Runs an exact search, then a phonetic search, then retries spelling
suggestions while the accumulated hit count stays below min_occur.
All per-tag scores are merged into one session map and ranked at the end.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from ..core import (
    get_config,
    get_logger,
    validate_search_settings,
    EmptyQueryError,
    SearchSettings,
)
from .aggregator import merge, rank, to_bookmark_scores
from .analyzer import AnalysisMode, TokenAnalyzer
from .index_gateway import IndexSearchGateway
from .models import BookmarkScoreMap, SearchReport, SearchStep, SessionState
from .query_composer import QueryComposer
from .spelling import DictionaryOracle
from .suggestions import SuggestionGenerator

logger = get_logger(__name__)

MAX_SUGGESTION_WORKERS = 4


@dataclass
class SearchSession:
    """
    Accumulators of one user query; never shared between queries.

    Attributes:
        phrase: The user phrase.
        state: Current state.
        total_hits: Hits summed over every executed step.
        scores: Merged per-tag scores.
        steps: Executed steps in order.
        suggestions: Retry candidates, if any were generated.
    """
    phrase: str
    state: SessionState = SessionState.IDLE
    total_hits: int = 0
    scores: BookmarkScoreMap = field(default_factory=dict)
    steps: List[SearchStep] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def enter(self, state: SessionState) -> None:
        logger.debug(f"Session '{self.phrase}': {self.state.value} -> {state.value}")
        self.state = state

    def record(self, step: SearchStep) -> None:
        """Fold one step into the accumulators."""
        merge(self.scores, step.bookmark_scores)
        self.total_hits += step.total_hits
        self.steps.append(step)


class SearchOrchestrator:
    """
    Runs the exact, phonetic and suggestion-retry searches of a query.

    Example:
        >>> orchestrator = SearchOrchestrator(gateway, composer, suggester)
        >>> report = orchestrator.run_search("hyper space")
        >>> report.ranked_bookmarks
    """

    def __init__(
        self,
        gateway: IndexSearchGateway,
        composer: QueryComposer,
        suggester: Optional[SuggestionGenerator] = None,
        settings: SearchSettings = None
    ):
        """
        Initialize the orchestrator.

        Args:
            gateway: Executes composite queries.
            composer: Builds composite queries.
            suggester: Builds retry phrases; None disables retries.
            settings: Search tunables. Defaults to the composer's settings.
        """
        self.gateway = gateway
        self.composer = composer
        self.suggester = suggester
        self.settings = settings or composer.settings

    def run_search(self, phrase: str) -> SearchReport:
        """
        Run every search step for a phrase and build the report.

        Args:
            phrase: The user phrase.

        Returns:
            SearchReport; a below-threshold total is reported, not raised.

        Raises:
            IndexUnavailableError: If the index cannot be searched.
        """
        start_time = time.time()
        settings = self.settings
        session = SearchSession(phrase=phrase)

        session.enter(SessionState.EXACT_SEARCH)
        session.record(self._execute(phrase, AnalysisMode.EXACT, SessionState.EXACT_SEARCH))

        session.enter(SessionState.PHONETIC_SEARCH)
        session.record(self._execute(phrase, AnalysisMode.PHONETIC, SessionState.PHONETIC_SEARCH))

        if session.total_hits < settings.min_occur and self.suggester is not None:
            session.suggestions = self.suggester.suggest(phrase)

            if session.suggestions:
                session.enter(SessionState.SUGGESTION_RETRY)
                logger.info(
                    f"{session.total_hits} hits below {settings.min_occur}, "
                    f"retrying {len(session.suggestions)} suggestions"
                )
                for step in self._run_suggestions(session.suggestions):
                    session.record(step)

        session.enter(SessionState.REPORTING)
        significant = self.is_significant(session.total_hits)

        report = SearchReport(
            phrase=phrase,
            ranked_bookmarks=rank(session.scores),
            total_hits=session.total_hits,
            significant=significant,
            min_occur=settings.min_occur,
            suggestions=list(session.suggestions),
            steps=session.steps,
            execution_time_ms=round((time.time() - start_time) * 1000, 2)
        )

        if significant:
            logger.info(
                f"Search '{phrase}': {report.total_hits} hits, "
                f"{len(report.ranked_bookmarks)} bookmarks in {report.execution_time_ms}ms"
            )
        else:
            logger.info(
                f"Search '{phrase}': no significant results "
                f"({report.total_hits} hits, min_occur {settings.min_occur})"
            )

        session.enter(SessionState.DONE)
        return report

    def is_significant(self, total_hits: int) -> bool:
        """Apply the configured significance policy."""
        if self.settings.significance_policy == "inclusive":
            return total_hits >= self.settings.min_occur
        return total_hits > self.settings.min_occur

    def _run_suggestions(self, candidates: List[str]) -> List[SearchStep]:
        """Search every candidate; results come back in candidate order."""
        state = SessionState.SUGGESTION_RETRY

        if not self.settings.parallel_suggestions or len(candidates) < 2:
            return [self._execute(c, AnalysisMode.EXACT, state) for c in candidates]

        workers = min(MAX_SUGGESTION_WORKERS, len(candidates))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._execute, c, AnalysisMode.EXACT, state)
                for c in candidates
            ]
            return [future.result() for future in futures]

    def _execute(self, phrase: str, mode: AnalysisMode, state: SessionState) -> SearchStep:
        """Compose and run one query; an empty query counts as zero hits."""
        start_time = time.time()

        try:
            query = self.composer.compose(phrase, mode)
        except EmptyQueryError as e:
            logger.warning(f"{mode.value.capitalize()} search skipped for '{phrase}': {e.message}")
            return SearchStep(state=state, phrase=phrase, mode=mode, error=e.message)

        hits = self.gateway.search(query, self.settings.max_search)
        scores = to_bookmark_scores(hits)

        step = SearchStep(
            state=state,
            phrase=phrase,
            mode=mode,
            total_hits=hits.total_hits,
            bookmark_scores=scores,
            hits=list(hits),
            query=query.describe(),
            execution_time_ms=round((time.time() - start_time) * 1000, 2)
        )

        logger.info(
            f"{state.value} '{phrase}': {step.total_hits} hits, "
            f"bookmarks {list(scores)}"
        )
        return step


def create_orchestrator(
    settings: SearchSettings = None,
    rebuild_dictionary: bool = False
) -> SearchOrchestrator:
    """
    Wire the default collaborators against the configured database.

    Args:
        settings: Search tunables. Defaults to the configured ones.
        rebuild_dictionary: Rebuild the spelling dictionary before its first use.

    Returns:
        Ready-to-use SearchOrchestrator.

    Raises:
        InvalidConfigurationError: If settings are out of range.
    """
    settings = validate_search_settings(settings or get_config().search)

    analyzer = TokenAnalyzer.from_config()
    oracle = DictionaryOracle(rebuild=rebuild_dictionary)

    return SearchOrchestrator(
        gateway=IndexSearchGateway(max_expansions=settings.max_expansions),
        composer=QueryComposer(analyzer, settings),
        suggester=SuggestionGenerator(
            oracle,
            analyzer,
            per_term=settings.spell_suggestions_per_term,
            max_combos=settings.max_suggestion_combos
        ),
        settings=settings
    )


def run_search(
    phrase: str,
    settings: SearchSettings = None,
    rebuild_dictionary: bool = False
) -> SearchReport:
    """
    Search the configured index for a phrase.

    Args:
        phrase: The user phrase.
        settings: Search tunables. Defaults to the configured ones.
        rebuild_dictionary: Rebuild the spelling dictionary before its first use.

    Returns:
        SearchReport with ranked bookmarks and the significance flag.
    """
    return create_orchestrator(settings, rebuild_dictionary).run_search(phrase)
