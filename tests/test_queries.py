"""Tests for query classification and table extraction."""
import pytest

from db_viewer.parser.queries import (
    classify_query,
    extract_tables,
    get_query_type,
    normalize_sql,
)


class TestQueryType:
    """Test statement kind detection."""

    @pytest.mark.parametrize("sql,expected", [
        ("SELECT * FROM users WHERE id = ?", "SELECT"),
        ("  select id from users", "SELECT"),
        ("INSERT OR REPLACE INTO logs (a) VALUES (?)", "INSERT"),
        ("UPDATE users SET name = ?", "UPDATE"),
        ("DELETE FROM users WHERE id = ?", "DELETE"),
        ("CREATE TABLE t (id INTEGER)", "OTHER"),
        ("PRAGMA foreign_keys = ON", "OTHER"),
        ("DROP TABLE t", "OTHER"),
    ])
    def test_kinds(self, sql, expected):
        """The leading keyword decides the kind."""
        assert get_query_type(sql) == expected


class TestExtractTables:
    """Test keyword-anchored table extraction."""

    def test_select(self):
        """FROM contributes its table."""
        assert extract_tables("SELECT * FROM users WHERE id = ?") == ["users"]

    def test_insert_or_replace(self):
        """INSERT OR <mode> INTO is recognized."""
        assert extract_tables("INSERT OR REPLACE INTO logs (a, b) VALUES (?, ?)") == ["logs"]

    def test_joins_in_order(self):
        """Every joined table is collected, ordered by first appearance."""
        sql = """
            SELECT p.*, u.name FROM posts p
            JOIN users u ON p.user_id = u.id
            LEFT JOIN tags t ON t.post_id = p.id
        """
        assert extract_tables(sql) == ["posts", "users", "tags"]

    def test_deduplicated(self):
        """A table matched by several patterns appears once."""
        assert extract_tables("DELETE FROM users WHERE id IN (SELECT id FROM users)") == ["users"]

    def test_update(self):
        """UPDATE contributes its table."""
        assert extract_tables("UPDATE users SET name = ? WHERE id = ?") == ["users"]

    def test_subquery_tables(self):
        """Subqueries are scanned like the rest of the string."""
        sql = "SELECT * FROM orders WHERE user_id IN (SELECT id FROM customers)"
        assert extract_tables(sql) == ["orders", "customers"]

    def test_no_tables(self):
        """Statements without these keywords yield nothing."""
        assert extract_tables("PRAGMA journal_mode = WAL") == []


class TestClassifyQuery:
    """Test building query records."""

    def test_whitespace_collapsed(self):
        """Query text is whitespace-collapsed and trimmed."""
        query, tables = classify_query("""
            SELECT *
              FROM users
             WHERE id = ?
        """)

        assert query.sql == "SELECT * FROM users WHERE id = ?"
        assert query.type == "SELECT"
        assert tables == ["users"]

    def test_to_dict(self):
        """Serialized shape has sql and type."""
        query, _ = classify_query("DELETE FROM sessions")

        assert query.to_dict() == {"sql": "DELETE FROM sessions", "type": "DELETE"}

    def test_normalize_sql(self):
        """Tabs and newlines collapse to single spaces."""
        assert normalize_sql("a\t\tb\n\n c ") == "a b c"
