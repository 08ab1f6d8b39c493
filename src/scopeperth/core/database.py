"""
Database Helper Functions

Provides context managers and helper functions for the SQLite database that
holds local user preferences (theme, favourites, notes, dismissed hero).

Usage:
    from scopeperth.core.database import get_connection, fetch_one

    with get_connection() as conn:
        row = fetch_one(conn, "SELECT value FROM preferences WHERE key = ?", ("theme",))
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple, Union

from scopeperth.config import get_config
from scopeperth.core.constants import TABLE_PREFERENCES
from scopeperth.exceptions import DatabaseConnectionError, DatabaseError
from scopeperth.logging_config import get_logger

logger = get_logger(__name__)

# Type aliases
Row = Dict[str, Any]
Params = Union[Tuple, Dict[str, Any], None]


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> Dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


@contextmanager
def get_connection(
    db_path: Optional[str] = None,
    as_dict: bool = True,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections.

    Args:
        db_path: Path to database file. Uses config default if not specified.
        as_dict: If True, rows are returned as dictionaries.

    Yields:
        SQLite connection object.

    Raises:
        DatabaseConnectionError: If unable to connect to the database.
    """
    if db_path is None:
        db_path = get_config().database.path

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = None
    try:
        conn = sqlite3.connect(db_path)
        if as_dict:
            conn.row_factory = dict_factory
        else:
            conn.row_factory = sqlite3.Row
        logger.debug("Connected to database: %s", db_path)
        yield conn
    except sqlite3.Error as e:
        logger.error("Database connection error: %s", e)
        raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e
    finally:
        if conn:
            conn.close()
            logger.debug("Closed database connection")


def fetch_all(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
) -> List[Row]:
    """Execute a query and fetch all results.

    Args:
        conn: Database connection.
        query: SQL query string.
        params: Query parameters (tuple or dict).

    Returns:
        List of result rows as dictionaries.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        return cursor.fetchall()
    except sqlite3.Error as e:
        logger.error("Query failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Query failed: {e}") from e


def fetch_one(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
) -> Optional[Row]:
    """Execute a query and fetch one result.

    Args:
        conn: Database connection.
        query: SQL query string.
        params: Query parameters (tuple or dict).

    Returns:
        Single result row as dictionary, or None if no results.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        return cursor.fetchone()
    except sqlite3.Error as e:
        logger.error("Query failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Query failed: {e}") from e


def execute(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
    commit: bool = True,
) -> int:
    """Execute a query (INSERT, UPDATE, DELETE).

    Args:
        conn: Database connection.
        query: SQL query string.
        params: Query parameters (tuple or dict).
        commit: If True, commit the transaction.

    Returns:
        Number of rows affected.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        if commit:
            conn.commit()
        return cursor.rowcount
    except sqlite3.Error as e:
        logger.error("Execute failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Execute failed: {e}") from e


def table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    """Check if a table exists in the database.

    Args:
        conn: Database connection.
        table_name: Name of the table to check.

    Returns:
        True if table exists, False otherwise.
    """
    result = fetch_one(
        conn,
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,),
    )
    return result is not None


def init_preferences_table(conn: sqlite3.Connection) -> bool:
    """Create the key/value preferences table if it doesn't exist.

    Args:
        conn: Database connection.

    Returns:
        True if the table was created, False if it already existed.
    """
    if table_exists(conn, TABLE_PREFERENCES):
        return False

    execute(conn, f"""
        CREATE TABLE IF NOT EXISTS {TABLE_PREFERENCES} (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT
        )
    """)
    logger.info("Created %s table", TABLE_PREFERENCES)
    return True
