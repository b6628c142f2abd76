"""
Tests for custom exception classes.

Tests the hierarchy, message formatting, and the extra attributes
carried by configuration, extraction and search errors.
"""

import pytest

from jsonsearch.core.exceptions import (
    JsonSearchError,
    ConfigurationError,
    InvalidConfigurationError,
    ExtractionError,
    DatabaseError,
    SearchError,
    EmptyQueryError,
    IndexUnavailableError
)


class TestJsonSearchError:
    """Tests for base JsonSearchError."""

    def test_basic_creation(self):
        """Test creating exception with just a message."""
        error = JsonSearchError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_creation_with_details(self):
        """Test creating exception with details dict."""
        error = JsonSearchError("File error", {"filename": "scene.json", "size": 1024})

        assert error.details["filename"] == "scene.json"
        assert error.details["size"] == 1024


class TestConfigurationErrors:
    """Tests for ConfigurationError and InvalidConfigurationError."""

    def test_can_be_caught_as_base(self):
        """Test that ConfigurationError can be caught as JsonSearchError."""
        with pytest.raises(JsonSearchError):
            raise ConfigurationError("Test error")

    def test_invalid_configuration_carries_field(self):
        """Test that the rejected field and value are kept."""
        error = InvalidConfigurationError("fuzzy_edits out of range", field="fuzzy_edits", value=5)

        assert isinstance(error, ConfigurationError)
        assert error.field == "fuzzy_edits"
        assert error.value == 5


class TestExtractionError:
    """Tests for ExtractionError."""

    def test_with_filepath_and_details(self):
        """Test ExtractionError with filepath and details."""
        error = ExtractionError(
            "Invalid JSON",
            filepath="/data/scene.json",
            details={"line": 3}
        )

        assert error.filepath == "/data/scene.json"
        assert error.details["line"] == 3

    def test_location_includes_line_and_column(self):
        """Test that the location reads path:line:column for syntax errors."""
        error = ExtractionError("Invalid JSON", filepath="/data/scene.json", line=4, column=12)

        assert error.location == "/data/scene.json:4:12"

    def test_location_without_position(self):
        """Test that the location falls back to the path alone."""
        assert ExtractionError("Cannot read file", filepath="/data/x.json").location == "/data/x.json"


class TestDatabaseError:
    """Tests for DatabaseError."""

    def test_database_error_message(self):
        """Test DatabaseError with database operation details."""
        error = DatabaseError("Connection failed", {"database": "test.db"})

        assert "Connection failed" in error.message
        assert error.details["database"] == "test.db"


class TestSearchErrors:
    """Tests for SearchError and its subclasses."""

    def test_search_error_with_query(self):
        """Test SearchError with query parameter."""
        error = SearchError("Bad phrase", query="hyper~ space", details={"position": 5})

        assert error.query == "hyper~ space"
        assert error.details["position"] == 5

    def test_empty_query_is_search_error(self):
        """Test that EmptyQueryError is a recoverable SearchError."""
        error = EmptyQueryError("No terms", query="...")

        assert isinstance(error, SearchError)
        assert error.query == "..."

    def test_index_unavailable_is_distinct(self):
        """Test that the fatal error is not an EmptyQueryError."""
        error = IndexUnavailableError("Index missing")

        assert isinstance(error, SearchError)
        assert not isinstance(error, EmptyQueryError)
