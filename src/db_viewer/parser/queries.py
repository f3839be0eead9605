"""Query classification and table extraction for embedded SQL.

This is keyword scanning over the whole string, not a SQL grammar: any
identifier after FROM / JOIN / INTO / UPDATE counts as a table, including
ones inside comments or subqueries.
"""
from __future__ import annotations

import re

from .models import ExtractedQuery, QueryType

TABLE_PATTERNS = [
    re.compile(r"\bFROM\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bJOIN\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bINSERT\s+(?:OR\s+\w+\s+)?INTO\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bUPDATE\s+(\w+)", re.IGNORECASE),
    re.compile(r"\bDELETE\s+FROM\s+(\w+)", re.IGNORECASE),
]

_STATEMENT_KINDS: tuple[QueryType, ...] = ("SELECT", "INSERT", "UPDATE", "DELETE")

_WHITESPACE = re.compile(r"\s+")


def get_query_type(sql: str) -> QueryType:
    """Map the leading keyword to a statement kind; anything else is OTHER."""
    normalized = sql.strip().upper()
    for kind in _STATEMENT_KINDS:
        if normalized.startswith(kind):
            return kind
    return "OTHER"


def extract_tables(sql: str) -> list[str]:
    """Return every table name referenced by the SQL.

    Matches from all patterns are merged, deduplicated, and ordered by where
    they first appear in the text.
    """
    hits: list[tuple[int, str]] = []
    for pattern in TABLE_PATTERNS:
        for match in pattern.finditer(sql):
            hits.append((match.start(1), match.group(1)))

    tables: list[str] = []
    for _, name in sorted(hits):
        if name not in tables:
            tables.append(name)
    return tables


def normalize_sql(sql: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", sql).strip()


def classify_query(sql: str) -> tuple[ExtractedQuery, list[str]]:
    """Build the query record for a fragment plus the tables it touches."""
    query = ExtractedQuery(sql=normalize_sql(sql), type=get_query_type(sql))
    return query, extract_tables(sql)
