"""
Core module providing foundational components.

This module contains the configuration loader, centralized logging setup,
and custom exception hierarchy. It has no internal dependencies.
"""

from .config_loader import (
    get_config,
    reload_config,
    apply_overrides,
    validate_search_settings,
    Config,
    SearchSettings,
)
from .logger import get_logger, set_console_level
from .exceptions import (
    JsonSearchError,
    ConfigurationError,
    InvalidConfigurationError,
    ExtractionError,
    DatabaseError,
    SearchError,
    EmptyQueryError,
    IndexUnavailableError
)

__all__ = [
    "get_config",
    "reload_config",
    "apply_overrides",
    "validate_search_settings",
    "Config",
    "SearchSettings",
    "get_logger",
    "set_console_level",
    "JsonSearchError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "ExtractionError",
    "DatabaseError",
    "SearchError",
    "EmptyQueryError",
    "IndexUnavailableError"
]
