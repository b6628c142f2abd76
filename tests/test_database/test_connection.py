"""
Tests for database connection management.

Tests connection creation, context managers, and SQLite configuration.
"""

import sqlite3
from pathlib import Path

import pytest

from jsonsearch.core.exceptions import DatabaseError
from jsonsearch.database.connection import (
    DatabaseManager,
    get_connection,
    get_cursor,
    get_db_manager,
)


class TestDatabaseManager:
    """Tests for DatabaseManager class."""

    def test_connection_creates_parent_directory(self, temp_dir: Path):
        """Test that the first write connection creates missing directories."""
        db_path = temp_dir / "subdir" / "nested" / "test.db"
        manager = DatabaseManager(db_path)

        assert not db_path.parent.exists()

        with manager.connection():
            pass

        assert manager.exists()

    def test_must_exist_refuses_missing_file(self, temp_database: Path):
        """Test that read access never creates an empty database."""
        manager = DatabaseManager(temp_database)

        with pytest.raises(DatabaseError) as exc_info:
            with manager.connection(must_exist=True):
                pass

        assert exc_info.value.details["database"] == str(temp_database)
        assert not temp_database.exists()

    def test_wal_journal_mode(self, temp_database: Path):
        """Test that connections use WAL so searches can read during indexing."""
        manager = DatabaseManager(temp_database)

        with manager.connection() as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"

    def test_connection_uses_row_factory(self, temp_database: Path):
        """Test that rows can be read by column name."""
        manager = DatabaseManager(temp_database)

        with manager.connection() as conn:
            assert isinstance(conn, sqlite3.Connection)
            row = conn.execute("SELECT 1 AS one").fetchone()
            assert row["one"] == 1

    def test_foreign_keys_enabled(self, temp_database: Path):
        """Test that every connection enforces foreign keys."""
        manager = DatabaseManager(temp_database)

        with manager.connection() as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_cursor_commits(self, temp_database: Path):
        """Test cursor context manager commits on success."""
        manager = DatabaseManager(temp_database)

        with manager.cursor() as cursor:
            cursor.execute("CREATE TABLE test (id INTEGER PRIMARY KEY)")
            cursor.execute("INSERT INTO test (id) VALUES (1)")

        with manager.connection() as conn:
            assert conn.execute("SELECT id FROM test").fetchone()[0] == 1

    def test_cursor_rollback_on_error(self, temp_database: Path):
        """Test that errors cause rollback."""
        manager = DatabaseManager(temp_database)

        with manager.cursor() as cursor:
            cursor.execute("CREATE TABLE test (id INTEGER PRIMARY KEY)")

        with pytest.raises(sqlite3.IntegrityError):
            with manager.cursor() as cursor:
                cursor.execute("INSERT INTO test (id) VALUES (1)")
                cursor.execute("INSERT INTO test (id) VALUES (1)")

        with manager.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM test").fetchone()[0] == 0


class TestSingleton:
    """Tests for the module-level manager."""

    def test_manager_uses_configured_path(self, configured_db, temp_config: Path):
        """Test that the singleton points at the configured database."""
        manager = get_db_manager()

        assert manager.db_path == temp_config.parent.parent / "output" / "test.db"
        assert get_db_manager() is manager

    def test_cursor_without_commit_discards(self, configured_db):
        """Test that commit=False leaves the database unchanged."""
        with get_cursor() as cur:
            cur.execute("CREATE TABLE probe (id INTEGER)")

        with get_cursor(commit=False) as cur:
            cur.execute("INSERT INTO probe (id) VALUES (1)")

        with get_connection(must_exist=True) as conn:
            assert conn.execute("SELECT COUNT(*) FROM probe").fetchone()[0] == 0
