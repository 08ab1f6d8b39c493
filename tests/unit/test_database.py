"""
Unit tests for database module.
"""

import pytest

from scopeperth.core.database import (
    execute,
    fetch_all,
    fetch_one,
    get_connection,
    init_preferences_table,
    table_exists,
)
from scopeperth.exceptions import DatabaseError


def _seed(conn):
    execute(conn, "CREATE TABLE notes (id INTEGER, body TEXT)")
    execute(conn, "INSERT INTO notes VALUES (1, 'first')")
    execute(conn, "INSERT INTO notes VALUES (2, 'second')")


class TestGetConnection:
    """Tests for get_connection context manager."""

    def test_connection_opens_and_closes(self, temp_db):
        with get_connection(temp_db) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            assert cursor.fetchone() is not None

    def test_dict_factory_enabled_by_default(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
            row = fetch_one(conn, "SELECT * FROM notes WHERE id = 1")
            assert isinstance(row, dict)
            assert row == {"id": 1, "body": "first"}

    def test_row_factory_when_not_dict(self, temp_db):
        with get_connection(temp_db, as_dict=False) as conn:
            _seed(conn)
            row = fetch_one(conn, "SELECT * FROM notes WHERE id = 1")
            assert row["body"] == "first"

    def test_uses_configured_path(self, test_config):
        with get_connection() as conn:
            init_preferences_table(conn)
        with get_connection(test_config.database.path) as conn:
            assert table_exists(conn, "preferences")


class TestFetchAll:
    """Tests for fetch_all function."""

    def test_returns_list(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
            results = fetch_all(conn, "SELECT * FROM notes ORDER BY id")
            assert [r["body"] for r in results] == ["first", "second"]

    def test_with_params(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
            results = fetch_all(conn, "SELECT * FROM notes WHERE id = ?", (2,))
            assert len(results) == 1
            assert results[0]["body"] == "second"

    def test_invalid_query_raises(self, temp_db):
        with get_connection(temp_db) as conn:
            with pytest.raises(DatabaseError):
                fetch_all(conn, "SELECT * FROM missing_table")


class TestFetchOne:
    """Tests for fetch_one function."""

    def test_no_match_returns_none(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
            assert fetch_one(conn, "SELECT * FROM notes WHERE id = ?", (99,)) is None

    def test_invalid_query_raises(self, temp_db):
        with get_connection(temp_db) as conn:
            with pytest.raises(DatabaseError):
                fetch_one(conn, "SELECT FROM")


class TestExecute:
    """Tests for execute function."""

    def test_returns_rowcount(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
            assert execute(conn, "UPDATE notes SET body = ?", ("edited",)) == 2

    def test_commit_persists(self, temp_db):
        with get_connection(temp_db) as conn:
            _seed(conn)
        with get_connection(temp_db) as conn:
            assert len(fetch_all(conn, "SELECT * FROM notes")) == 2

    def test_invalid_statement_raises(self, temp_db):
        with get_connection(temp_db) as conn:
            with pytest.raises(DatabaseError):
                execute(conn, "INSERT INTO missing_table VALUES (1)")


class TestTableExists:
    """Tests for table_exists and init_preferences_table."""

    def test_missing_table(self, temp_db):
        with get_connection(temp_db) as conn:
            assert table_exists(conn, "preferences") is False

    def test_init_creates_once(self, temp_db):
        with get_connection(temp_db) as conn:
            assert init_preferences_table(conn) is True
            assert init_preferences_table(conn) is False
            assert table_exists(conn, "preferences") is True
