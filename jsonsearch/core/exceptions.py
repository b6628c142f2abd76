"""
Custom exception hierarchy for the JSON transcript search engine.

Provides specific exception types for different failure modes:
configuration errors, extraction failures, database issues, and search problems.
"""


class JsonSearchError(Exception):
    """Base exception for all JSON search engine errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(JsonSearchError):
    """Raised when configuration is invalid or missing."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when a search tunable is outside its accepted range."""

    def __init__(self, message: str, field: str = None, value=None, details: dict = None):
        """
        Initialize invalid configuration error.

        Args:
            message: Error description.
            field: Name of the rejected setting.
            value: The rejected value.
            details: Additional context.
        """
        super().__init__(message, details)
        self.field = field
        self.value = value


class ExtractionError(JsonSearchError):
    """Raised when a JSON transcript cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        filepath: str = None,
        line: int = None,
        column: int = None,
        details: dict = None
    ):
        """
        Args:
            message: Error description.
            filepath: Path to the problematic JSON file.
            line: 1-based line of a syntax error, if known.
            column: 1-based column of a syntax error, if known.
            details: Additional context.
        """
        super().__init__(message, details)
        self.filepath = filepath
        self.line = line
        self.column = column

    @property
    def location(self) -> str:
        """Where the error occurred, as path:line:column when known."""
        parts = [str(part) for part in (self.filepath, self.line, self.column) if part is not None]
        return ":".join(parts)


class DatabaseError(JsonSearchError):
    """Raised when SQLite operations fail."""
    pass


class SearchError(JsonSearchError):
    """Raised when search query execution fails."""

    def __init__(self, message: str, query: str = None, details: dict = None):
        """
        Initialize search error.

        Args:
            message: Error description.
            query: The problematic search phrase.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query


class EmptyQueryError(SearchError):
    """Raised when analysis of a phrase yields no terms. Treated as zero hits."""
    pass


class IndexUnavailableError(SearchError):
    """Raised when the index cannot be reached or is corrupt. Aborts the search."""
    pass

