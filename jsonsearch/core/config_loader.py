"""
Configuration loader for the JSON transcript search engine.

Loads settings from config.json and provides typed access via dataclasses.
Supports singleton pattern for global access and runtime reload capability.
Search tunables are range-checked here before any query is built from them.
"""

import json
import math
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError, InvalidConfigurationError


@dataclass
class PathsConfig:
    """Configuration for file system paths."""
    data_directory: Path
    database_path: Path
    logs_directory: Path


@dataclass
class IndexingConfig:
    """Configuration for JSON discovery and indexing behavior."""
    batch_size: int
    skip_existing: bool
    log_progress_every: int
    max_file_size_mb: int
    supported_extensions: List[str]
    text_field: str
    bookmark_field: str
    start_field: str
    end_field: str


@dataclass
class AnalysisConfig:
    """Configuration for the token analyzer."""
    stopwords: List[str]
    tokenizer: str


@dataclass
class SearchSettings:
    """
    Tunables for query composition, execution and the search session.

    Defaults reproduce the reference boosts and thresholds.
    """
    boost_exact: float = 2.0
    boost_phonetic: float = 1.0
    boost_wildcard: float = 5.0
    boost_fuzzy: float = 5.0
    boost_prefix: float = 1.5
    phrase_slop: int = 2
    min_should_match: int = 1
    fuzzy_edits: int = 2
    min_occur: int = 20
    max_search: int = 10
    max_expansions: int = 50
    spell_suggestions_per_term: int = 2
    max_suggestion_combos: int = 5
    significance_policy: str = "strict"
    parallel_suggestions: bool = False


@dataclass
class SpellingConfig:
    """Configuration for the spelling dictionary."""
    accuracy: float
    rebuild_on_index: bool


@dataclass
class GUIConfig:
    """Configuration for Streamlit web interface."""
    page_title: str
    results_per_page: int
    show_step_details: bool


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str
    format: str
    max_file_size_mb: int
    backup_count: int


BOOST_FIELDS = (
    "boost_exact",
    "boost_phonetic",
    "boost_wildcard",
    "boost_fuzzy",
    "boost_prefix",
)

# Inclusive (min, max) bounds for integer tunables
INT_RANGES: Dict[str, Tuple[int, int]] = {
    "phrase_slop": (0, 100),
    "min_should_match": (0, 10),
    "fuzzy_edits": (0, 2),
    "min_occur": (0, 100000),
    "max_search": (1, 100000),
    "max_expansions": (1, 10000),
    "spell_suggestions_per_term": (1, 10),
    "max_suggestion_combos": (1, 100),
}

SIGNIFICANCE_POLICIES = ("strict", "inclusive")


def validate_setting(name: str, value: Any) -> Any:
    """
    Check a single search tunable and return it in canonical form.

    Args:
        name: SearchSettings field name.
        value: Candidate value (strings are converted).

    Returns:
        The converted value.

    Raises:
        InvalidConfigurationError: If the name is unknown or the value is out of range.
    """
    if name in BOOST_FIELDS:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidConfigurationError(
                f"{name} must be a number, got {value!r}", field=name, value=value
            )
        if not math.isfinite(number) or number <= 0:
            raise InvalidConfigurationError(
                f"{name} must be a positive number, got {value!r}", field=name, value=value
            )
        return number

    if name in INT_RANGES:
        if isinstance(value, bool):
            raise InvalidConfigurationError(
                f"{name} must be an integer, got {value!r}", field=name, value=value
            )
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidConfigurationError(
                f"{name} must be an integer, got {value!r}", field=name, value=value
            )
        if isinstance(value, float) and not value.is_integer():
            raise InvalidConfigurationError(
                f"{name} must be an integer, got {value!r}", field=name, value=value
            )
        low, high = INT_RANGES[name]
        if number < low or number > high:
            raise InvalidConfigurationError(
                f"{name} must be between {low} and {high}, got {value!r}",
                field=name,
                value=value,
                details={"min": low, "max": high}
            )
        return number

    if name == "significance_policy":
        if value not in SIGNIFICANCE_POLICIES:
            raise InvalidConfigurationError(
                f"significance_policy must be one of {SIGNIFICANCE_POLICIES}, got {value!r}",
                field=name,
                value=value
            )
        return value

    if name == "parallel_suggestions":
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    raise InvalidConfigurationError(f"Unknown search setting: {name}", field=name, value=value)


def validate_search_settings(settings: SearchSettings) -> SearchSettings:
    """
    Validate every tunable of a SearchSettings object.

    Raises:
        InvalidConfigurationError: On the first out-of-range field.
    """
    for f in fields(SearchSettings):
        validate_setting(f.name, getattr(settings, f.name))
    return settings


def apply_overrides(
    settings: SearchSettings,
    overrides: Dict[str, Any]
) -> Tuple[SearchSettings, List[str]]:
    """
    Apply caller overrides, keeping the previous value for any rejected one.

    Args:
        settings: Current settings.
        overrides: Mapping of field name to new value. None values are ignored.

    Returns:
        Tuple of (new SearchSettings, list of warning messages).
    """
    accepted: Dict[str, Any] = {}
    warnings: List[str] = []

    for name, value in overrides.items():
        if value is None:
            continue
        try:
            accepted[name] = validate_setting(name, value)
        except InvalidConfigurationError as e:
            previous = getattr(settings, name, None)
            warnings.append(f"{e.message}; keeping {previous!r}")

    if warnings:
        from .logger import get_logger
        log = get_logger(__name__)
        for warning in warnings:
            log.warning(f"Invalid setting rejected: {warning}")

    return replace(settings, **accepted), warnings


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    indexing: IndexingConfig
    analysis: AnalysisConfig
    search: SearchSettings
    spelling: SpellingConfig
    gui: GUIConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.

        Returns:
            Populated Config instance.

        Raises:
            ConfigurationError: If file is missing or invalid.
        """
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        project_root = config_path.parent.parent

        return cls._parse_config(data, project_root)

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Parse raw config dict into typed Config object."""
        paths_data = data.get("paths", {})
        paths = PathsConfig(
            data_directory=cls._resolve_path(paths_data.get("data_directory", "data"), project_root),
            database_path=cls._resolve_path(paths_data.get("database_path", "output/index.db"), project_root),
            logs_directory=cls._resolve_path(paths_data.get("logs_directory", "output/logs"), project_root)
        )

        idx_data = data.get("indexing", {})
        indexing = IndexingConfig(
            batch_size=idx_data.get("batch_size", 500),
            skip_existing=idx_data.get("skip_existing", True),
            log_progress_every=idx_data.get("log_progress_every", 100),
            max_file_size_mb=idx_data.get("max_file_size_mb", 100),
            supported_extensions=idx_data.get("supported_extensions", [".json"]),
            text_field=idx_data.get("text_field", "text"),
            bookmark_field=idx_data.get("bookmark_field", "bookmark_tag"),
            start_field=idx_data.get("start_field", "start"),
            end_field=idx_data.get("end_field", "end")
        )

        analysis_data = data.get("analysis", {})
        analysis = AnalysisConfig(
            stopwords=analysis_data.get("stopwords", []),
            tokenizer=analysis_data.get("tokenizer", "unicode61 remove_diacritics 0")
        )

        search_data = data.get("search", {})
        known = {f.name for f in fields(SearchSettings)}
        unknown = sorted(set(search_data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown search settings: {', '.join(unknown)}",
                {"keys": unknown}
            )
        try:
            search = validate_search_settings(SearchSettings(**{
                name: validate_setting(name, value)
                for name, value in search_data.items()
            }))
        except InvalidConfigurationError as e:
            raise ConfigurationError(
                f"Invalid search configuration: {e.message}",
                {"field": e.field, "value": e.value}
            )

        spelling_data = data.get("spelling", {})
        spelling = SpellingConfig(
            accuracy=spelling_data.get("accuracy", 0.5),
            rebuild_on_index=spelling_data.get("rebuild_on_index", True)
        )

        gui_data = data.get("gui", {})
        gui = GUIConfig(
            page_title=gui_data.get("page_title", "Transcript Search"),
            results_per_page=gui_data.get("results_per_page", 20),
            show_step_details=gui_data.get("show_step_details", True)
        )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "INFO"),
            format=log_data.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            max_file_size_mb=log_data.get("max_file_size_mb", 10),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            indexing=indexing,
            analysis=analysis,
            search=search,
            spelling=spelling,
            gui=gui,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str)
        if path.is_absolute():
            return path
        return project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If config cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()
        _config_instance = Config.from_file(Path(config_path))

    return _config_instance


CONFIG_ENV_VAR = "JSONSEARCH_CONFIG"


def _find_config_file() -> Path:
    """
    Locate config.json.

    The JSONSEARCH_CONFIG environment variable wins; otherwise search
    upward from the current directory for config/config.json.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    raise ConfigurationError(
        "Could not find config/config.json in current directory or parents"
    )


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)


if __name__ == "__main__":
    try:
        config = get_config()
        print(f"Project root: {config.project_root}")
        print(f"Data directory: {config.paths.data_directory}")
        print(f"Database path: {config.paths.database_path}")
        print(f"Search settings: {config.search}")
    except ConfigurationError as e:
        print(f"Config error: {e.message}")
