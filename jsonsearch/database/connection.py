"""
SQLite connection handling for the transcript index.

The indexer writes through cursors that commit or roll back as one
unit. Search only reads, and may run from several threads at once
while suggestion retries execute, so every call gets its own
connection and WAL mode keeps readers off the writer's back.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from ..core import get_config, get_logger, DatabaseError

logger = get_logger(__name__)

# Applied to every new connection, in order
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA temp_store=MEMORY",
)

BUSY_TIMEOUT_SECONDS = 30.0


class DatabaseManager:
    """
    Opens connections to one index database file.

    Connections are never shared between calls. Write access creates
    the database (and its directory) on demand; read access can
    require the file to exist so a search never leaves an empty
    database behind.
    """

    def __init__(self, db_path: Path = None):
        if db_path is None:
            db_path = get_config().paths.database_path
        self.db_path = Path(db_path)

    def exists(self) -> bool:
        return self.db_path.is_file()

    def _open(self, must_exist: bool) -> sqlite3.Connection:
        if must_exist and not self.exists():
            raise DatabaseError(
                "Index database does not exist, run the indexer first",
                {"database": str(self.db_path)}
            )

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=BUSY_TIMEOUT_SECONDS
            )
            conn.row_factory = sqlite3.Row
            for pragma in CONNECTION_PRAGMAS:
                conn.execute(pragma)
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Cannot open index database: {e}",
                {"database": str(self.db_path)}
            ) from e

        return conn

    @contextmanager
    def connection(self, must_exist: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield a connection with rows readable by column name.

        Args:
            must_exist: Raise DatabaseError instead of creating a missing file.
        """
        conn = self._open(must_exist)
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def cursor(self, commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
        """
        Yield a cursor whose statements form one transaction.

        Everything executed in the block is committed on success
        (unless commit is False) and rolled back on any exception.
        """
        with self.connection() as conn:
            cur = conn.cursor()
            try:
                yield cur
            except Exception:
                conn.rollback()
                raise
            else:
                if commit:
                    conn.commit()
            finally:
                cur.close()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get the manager for the configured database, creating it once."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
        logger.debug(f"Index database: {_db_manager.db_path}")
    return _db_manager


@contextmanager
def get_connection(must_exist: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """Connection to the configured database, see DatabaseManager.connection."""
    with get_db_manager().connection(must_exist=must_exist) as conn:
        yield conn


@contextmanager
def get_cursor(commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
    """Transactional cursor on the configured database."""
    with get_db_manager().cursor(commit=commit) as cur:
        yield cur
