"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, sample JSON transcripts, mock configurations
and in-memory collaborators so tests are isolated and safe.
"""

import json
import os
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Generator, List

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


SAMPLE_TRANSCRIPTS = {
    "cantina.json": {
        "bookmark_tag": "A",
        "segments": [
            {"start": 0, "end": 4, "text": "We jumped into hyper space just in time."},
            {"start": 5, "end": 9, "text": "The wookiee roared at the droid.", "loud": True},
            {"start": 10, "end": 12, "text": "Hyper space travel is fast.", "speaker": "Han"},
        ]
    },
    "hoth.json": {
        "episode": 5,
        "scenes": [
            {"bookmark_tag": "B", "location": "Hoth"},
            {"start": 1.5, "end": 3.25, "text": "Prepare the ship for hyperspace."},
            {"start": 4, "end": 6, "text": "My lightsaber is ready."},
        ]
    },
    "endor.json": {
        "bookmark_tag": "C",
        "segments": [
            {"start": 0, "end": 2, "text": "It is a trap!"},
            {"start": 3, "end": 5, "text": "The lightsabers glow in the forest."},
        ]
    },
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="jsonsearch_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    data_dir = temp_dir / "data"
    data_dir.mkdir()

    output_dir = temp_dir / "output"
    output_dir.mkdir()

    logs_dir = output_dir / "logs"
    logs_dir.mkdir()

    config_data = {
        "paths": {
            "data_directory": str(data_dir),
            "database_path": str(output_dir / "test.db"),
            "logs_directory": str(logs_dir)
        },
        "indexing": {
            "batch_size": 2,
            "skip_existing": True,
            "log_progress_every": 5,
            "max_file_size_mb": 1,
            "supported_extensions": [".json"],
            "text_field": "text",
            "bookmark_field": "bookmark_tag",
            "start_field": "start",
            "end_field": "end"
        },
        "analysis": {
            "stopwords": [],
            "tokenizer": "unicode61 remove_diacritics 0"
        },
        "search": {
            "boost_exact": 2.0,
            "boost_phonetic": 1.0,
            "boost_wildcard": 5.0,
            "boost_fuzzy": 5.0,
            "boost_prefix": 1.5,
            "phrase_slop": 2,
            "min_should_match": 1,
            "fuzzy_edits": 2,
            "min_occur": 20,
            "max_search": 10,
            "max_expansions": 50,
            "spell_suggestions_per_term": 2,
            "max_suggestion_combos": 5,
            "significance_policy": "strict",
            "parallel_suggestions": False
        },
        "spelling": {
            "accuracy": 0.5,
            "rebuild_on_index": True
        },
        "gui": {
            "page_title": "Test Transcript Search",
            "results_per_page": 10,
            "show_step_details": True
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def sample_transcripts(temp_config: Path) -> Path:
    """
    Write the sample transcripts into the temp data directory.

    Returns:
        Path to the data directory.
    """
    data_dir = temp_config.parent.parent / "data"
    for name, content in SAMPLE_TRANSCRIPTS.items():
        with open(data_dir / name, "w", encoding="utf-8") as f:
            json.dump(content, f)

    # Ignored by the scanner
    (data_dir / "notes.txt").write_text("not a transcript")
    hidden = data_dir / ".cache"
    hidden.mkdir()
    (hidden / "stale.json").write_text(json.dumps({"bookmark_tag": "Z", "text": "hyper space"}))

    return data_dir


@pytest.fixture
def temp_database(temp_dir: Path) -> Path:
    """
    Create path for a temporary database.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path where test database should be created.
    """
    return temp_dir / "test.db"


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from jsonsearch.core import config_loader
    saved_env = os.environ.pop(config_loader.CONFIG_ENV_VAR, None)
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None
    if saved_env is not None:
        os.environ[config_loader.CONFIG_ENV_VAR] = saved_env


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag and root handlers between tests.
    """
    import logging
    from logging.handlers import RotatingFileHandler
    from jsonsearch.core import logger

    def ours(handler):
        return (
            handler.get_name() == logger.CONSOLE_HANDLER_NAME
            or isinstance(handler, RotatingFileHandler)
        )

    root = logging.getLogger()
    saved_handlers = [h for h in root.handlers if ours(h)]
    saved_level = root.level
    saved_flag = logger._logger_initialized
    for handler in saved_handlers:
        root.removeHandler(handler)
    logger._logger_initialized = False
    yield
    for handler in [h for h in root.handlers if ours(h)]:
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logger._logger_initialized = saved_flag


@pytest.fixture
def reset_db_singleton():
    """
    Reset the database manager singleton between tests.
    """
    from jsonsearch.database import connection
    connection._db_manager = None
    yield
    connection._db_manager = None


@pytest.fixture
def configured_db(temp_config, reset_config_singleton, reset_db_singleton):
    """
    Set up a fully configured database using temp config.

    This fixture initializes config with temp paths and resets
    both config and db singletons, ready for schema operations.
    """
    from jsonsearch.core.config_loader import get_config
    get_config(temp_config)
    yield
    # Cleanup happens via reset fixtures


@pytest.fixture
def indexed_db(configured_db, sample_transcripts):
    """
    Index the sample transcripts into the temp database.

    Returns:
        IndexingStats of the run.
    """
    from jsonsearch.indexer import IndexBuilder
    return IndexBuilder().build()


@pytest.fixture
def search_settings():
    """Default search tunables, independent of any config file."""
    from jsonsearch.core import SearchSettings
    return SearchSettings()


@pytest.fixture
def analyzer():
    """Analyzer without stopwords."""
    from jsonsearch.search.analyzer import TokenAnalyzer
    return TokenAnalyzer()


class FakeGateway:
    """
    In-memory gateway returning canned hits per (phrase, mode).

    Phrases without canned hits return nothing. Every call is recorded.
    """

    def __init__(self, hits: Dict = None, error: Exception = None):
        self.hits = hits or {}
        self.error = error
        self.calls: List = []

    def search(self, query, max_results):
        from jsonsearch.search.models import SearchHits

        self.calls.append((query, max_results))
        if self.error is not None:
            raise self.error

        phrase_clause = query.clauses[0].query
        key = (" ".join(phrase_clause.terms), query.mode)
        found = self.hits.get(key, [])
        return SearchHits(hits=list(found[:max_results]), total_hits=len(found))


class FakeOracle:
    """In-memory spelling oracle."""

    def __init__(self, words=(), similar: Dict[str, List[str]] = None):
        self.words = set(words)
        self.similar = similar or {}
        self.lookups: List[str] = []

    def exists(self, term: str) -> bool:
        self.lookups.append(term)
        return term in self.words

    def suggest_similar(self, term: str, k: int) -> List[str]:
        return list(self.similar.get(term, []))[:k]


@pytest.fixture
def fake_gateway_factory():
    """Build FakeGateway instances."""
    return FakeGateway


@pytest.fixture
def fake_oracle_factory():
    """Build FakeOracle instances."""
    return FakeOracle
