"""Best-effort parser for CREATE TABLE and CREATE INDEX statements.

Each statement shape has its own matcher. A matcher returns None when the
text does not fit; nothing here raises on malformed SQL, it only produces
less.
"""
from __future__ import annotations

import logging
import re

from .models import ParsedColumn, ParsedForeignKey, ParsedIndex, ParsedTable

logger = logging.getLogger(__name__)

# Optionally quoted identifier; the bare name lands in the capture group
_IDENT = r'["`\[]?(\w+)["`\]]?'
_QUALIFIER = r'(?:["`\[]?\w+["`\]]?\.)?'

CREATE_TABLE_PATTERN = re.compile(
    r"CREATE\s+(?:TEMP(?:ORARY)?\s+)?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?"
    + _QUALIFIER + _IDENT + r"\s*\(",
    re.IGNORECASE,
)

CREATE_INDEX_PATTERN = re.compile(
    r"CREATE\s+(UNIQUE\s+)?INDEX\s+(?:IF\s+NOT\s+EXISTS\s+)?"
    + _QUALIFIER + _IDENT + r"\s+ON\s+" + _QUALIFIER + _IDENT
    + r"\s*\(([^)]+)\)",
    re.IGNORECASE,
)

TABLE_SHAPE_PATTERN = re.compile(r"CREATE\s+(?:TEMP(?:ORARY)?\s+)?TABLE\b", re.IGNORECASE)
INDEX_SHAPE_PATTERN = re.compile(r"CREATE\s+(?:UNIQUE\s+)?INDEX\b", re.IGNORECASE)

# Table-level items, checked in this order
_FOREIGN_KEY_ITEM = re.compile(r"^FOREIGN\s+KEY\b", re.IGNORECASE)
_PRIMARY_KEY_ITEM = re.compile(r"^PRIMARY\s+KEY\b", re.IGNORECASE)
_IGNORED_ITEM = re.compile(r"^(?:UNIQUE|CHECK|CONSTRAINT)\b", re.IGNORECASE)

_PRIMARY_KEY_COLUMNS = re.compile(r"PRIMARY\s+KEY\s*\(([^)]+)\)", re.IGNORECASE)

_FOREIGN_KEY_PATTERN = re.compile(
    r"FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+" + _QUALIFIER + _IDENT
    + r"\s*\(([^)]+)\)",
    re.IGNORECASE,
)

_ACTION = r"(SET\s+NULL|SET\s+DEFAULT|NO\s+ACTION|CASCADE|RESTRICT|\w+)"
_ON_DELETE_PATTERN = re.compile(r"\bON\s+DELETE\s+" + _ACTION, re.IGNORECASE)
_ON_UPDATE_PATTERN = re.compile(r"\bON\s+UPDATE\s+" + _ACTION, re.IGNORECASE)

_COLUMN_PATTERN = re.compile(r"^" + _IDENT + r"\s+(\S+)(.*)$", re.DOTALL)

_PRIMARY_KEY_FLAG = re.compile(r"\bPRIMARY\s+KEY\b", re.IGNORECASE)
_AUTOINCREMENT_FLAG = re.compile(r"\bAUTO_?INCREMENT\b", re.IGNORECASE)
_NOT_NULL_FLAG = re.compile(r"\bNOT\s+NULL\b", re.IGNORECASE)

_DEFAULT_PATTERN = re.compile(
    r"\bDEFAULT\s+(.+?)"
    r"(?:\s+(?:NOT\s+NULL|PRIMARY|FOREIGN|UNIQUE|CHECK|REFERENCES)\b|\s*$)",
    re.IGNORECASE | re.DOTALL,
)
_DEFAULT_TOKEN_PATTERN = re.compile(r"\bDEFAULT\s+(\S+)\s*$", re.IGNORECASE)

_COMMENT_PATTERN = re.compile(r"('(?:[^']|'')*')|--[^\n]*|/\*.*?\*/", re.DOTALL)


def is_create_table(sql: str) -> bool:
    return bool(TABLE_SHAPE_PATTERN.search(sql))


def is_create_index(sql: str) -> bool:
    return bool(INDEX_SHAPE_PATTERN.search(sql))


def parse_create_table(sql: str) -> ParsedTable | None:
    """Parse a CREATE TABLE statement.

    Args:
        sql: Statement text, possibly surrounded by other text

    Returns:
        ParsedTable, or None if the statement shape is not recognized
    """
    sql = strip_comments(sql)
    match = CREATE_TABLE_PATTERN.search(sql)
    if not match:
        return None

    open_paren = match.end() - 1
    close_paren = _find_balanced_paren(sql, open_paren)
    if close_paren == -1:
        # Unbalanced body: take everything up to the last close paren
        close_paren = sql.rfind(")")
        if close_paren <= open_paren:
            return None

    table = ParsedTable(name=match.group(1))
    body = sql[open_paren + 1:close_paren]

    for part in split_top_level(body):
        item = part.strip()
        if not item:
            continue

        if _FOREIGN_KEY_ITEM.match(item):
            table.foreign_keys.extend(parse_foreign_key(item))
            continue

        if _PRIMARY_KEY_ITEM.match(item):
            pk_match = _PRIMARY_KEY_COLUMNS.search(item)
            if pk_match:
                table.primary_key.extend(_split_names(pk_match.group(1)))
            continue

        if _IGNORED_ITEM.match(item):
            continue

        column = parse_column_definition(item)
        if column is None:
            logger.debug(f"Dropped unparseable item in {table.name}: {item!r}")
            continue

        table.columns.append(column)
        if column.is_primary_key:
            table.primary_key.append(column.name)

    return table


def parse_column_definition(definition: str) -> ParsedColumn | None:
    """Parse `<name> <TYPE> <constraints...>`.

    Only the first whitespace-delimited token after the name is the type, so
    `VARCHAR(255)` stays one word while `DOUBLE PRECISION` keeps only DOUBLE.
    """
    match = _COLUMN_PATTERN.match(definition.strip())
    if not match:
        return None

    name, type_word, rest = match.group(1), match.group(2), match.group(3) or ""

    is_primary_key = bool(_PRIMARY_KEY_FLAG.search(rest))
    is_auto_increment = bool(_AUTOINCREMENT_FLAG.search(rest))
    nullable = not (is_primary_key or _NOT_NULL_FLAG.search(rest))

    return ParsedColumn(
        name=name,
        type=type_word.upper(),
        nullable=nullable,
        is_primary_key=is_primary_key,
        is_auto_increment=is_auto_increment,
        default_value=_extract_default(rest),
    )


def parse_foreign_key(constraint: str) -> list[ParsedForeignKey]:
    """Parse a table-level FOREIGN KEY item.

    Composite keys give one ParsedForeignKey per column pair. An item that
    does not match yields an empty list.
    """
    match = _FOREIGN_KEY_PATTERN.search(constraint)
    if not match:
        return []

    columns = _split_names(match.group(1))
    ref_table = match.group(2)
    ref_columns = _split_names(match.group(3))
    on_delete, on_update = _extract_actions(constraint[match.end():])

    return [
        ParsedForeignKey(
            column=column,
            references_table=ref_table,
            references_column=ref_column,
            on_delete=on_delete,
            on_update=on_update,
        )
        for column, ref_column in zip(columns, ref_columns)
    ]


def parse_create_index(sql: str) -> tuple[str, ParsedIndex] | None:
    """Parse a CREATE INDEX statement.

    Returns:
        (owning table name, ParsedIndex) or None. Attaching the index to its
        table is the caller's job.
    """
    match = CREATE_INDEX_PATTERN.search(sql)
    if not match:
        return None

    index = ParsedIndex(
        name=match.group(2),
        columns=_split_names(match.group(4)),
        is_unique=match.group(1) is not None,
    )
    return match.group(3), index


def strip_comments(sql: str) -> str:
    """Remove `--` and `/* */` comments, leaving single-quoted literals alone."""
    return _COMMENT_PATTERN.sub(lambda m: m.group(1) or " ", sql)


def split_top_level(text: str, delimiter: str = ",") -> list[str]:
    """Split on delimiter only at parenthesis depth zero, outside quotes."""
    parts = []
    current = []
    depth = 0
    quote = None

    for char in text:
        if quote:
            if char == quote:
                quote = None
            current.append(char)
        elif char in ("'", '"', "`"):
            quote = char
            current.append(char)
        elif char == "(":
            depth += 1
            current.append(char)
        elif char == ")":
            depth -= 1
            current.append(char)
        elif char == delimiter and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)

    if "".join(current).strip():
        parts.append("".join(current))

    return parts


def split_statements(sql: str) -> list[str]:
    """Split SQL text into statements at top-level semicolons.

    Semicolons inside quotes, parentheses, `--` comments and `/* */`
    comments do not end a statement. Empty statements are dropped.
    """
    statements = []
    current = []
    depth = 0
    quote = None
    i = 0
    length = len(sql)

    while i < length:
        char = sql[i]

        if quote:
            current.append(char)
            if char == quote:
                quote = None
            i += 1
            continue

        if char == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            end = length if end == -1 else end
            current.append(sql[i:end])
            i = end
            continue

        if char == "/" and sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if char in ("'", '"', "`"):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    statement = "".join(current).strip()
    if statement:
        statements.append(statement)

    return statements


# ============================================================================
# Helper Functions
# ============================================================================

def _find_balanced_paren(text: str, start: int) -> int:
    """Find the close paren matching the open paren at `start`.

    Parentheses inside single- or double-quoted SQL literals are ignored.

    Returns:
        Position of the closing parenthesis, or -1 if not found
    """
    if start >= len(text) or text[start] != "(":
        return -1

    depth = 0
    quote = None

    for i in range(start, len(text)):
        char = text[i]

        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i

    return -1


def _extract_default(rest: str) -> str | None:
    match = _DEFAULT_PATTERN.search(rest)
    if match and match.group(1).strip():
        return match.group(1).strip()

    match = _DEFAULT_TOKEN_PATTERN.search(rest)
    if match:
        return match.group(1).strip()

    return None


def _extract_actions(text: str) -> tuple[str | None, str | None]:
    on_delete = _ON_DELETE_PATTERN.search(text)
    on_update = _ON_UPDATE_PATTERN.search(text)
    return (
        _normalize_action(on_delete.group(1)) if on_delete else None,
        _normalize_action(on_update.group(1)) if on_update else None,
    )


def _normalize_action(action: str) -> str:
    return " ".join(action.upper().split())


def _split_names(text: str) -> list[str]:
    """Split a flat comma list of column names, stripping identifier quotes."""
    names = []
    for raw in text.split(","):
        name = raw.strip().strip('"`[]')
        if name:
            names.append(name)
    return names
