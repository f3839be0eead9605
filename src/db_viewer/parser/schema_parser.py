"""Rebuild a database schema from SQL embedded in a source file.

Fragments are processed strictly in the order they appear. CREATE INDEX only
attaches to a table that has already been seen, so an index declared above
its table is dropped.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..language_detect import detect_language
from .ddl import (
    is_create_index,
    is_create_table,
    parse_create_index,
    parse_create_table,
    split_statements,
)
from .models import ParsedSchema, ParsedTable
from .source import read_source
from .sql_fragments import iter_sql_strings

logger = logging.getLogger(__name__)


def assemble_schema(fragments: Iterable[str]) -> ParsedSchema:
    """Fold SQL fragments into a schema.

    A later CREATE TABLE with the same name replaces the earlier one outright.

    Args:
        fragments: SQL fragments in source order

    Returns:
        ParsedSchema (possibly empty)
    """
    tables: dict[str, ParsedTable] = {}

    for fragment in fragments:
        for statement in split_statements(fragment):
            if is_create_table(statement):
                table = parse_create_table(statement)
                if table:
                    if table.name in tables:
                        logger.debug(f"Table {table.name} redefined; keeping the later definition")
                    tables[table.name] = table

            if is_create_index(statement):
                result = parse_create_index(statement)
                if result:
                    table_name, index = result
                    owner = tables.get(table_name)
                    if owner:
                        owner.indexes.append(index)
                    else:
                        logger.debug(f"Dropped index {index.name}: table {table_name} not seen yet")

    return ParsedSchema(tables=list(tables.values()))


def parse_schema_source(content: str, language: str = "typescript") -> ParsedSchema:
    """Parse a schema from in-memory source text.

    Plain SQL files are one big fragment; anything else is scanned for
    SQL-looking string literals.
    """
    if language == "sql":
        fragments: Iterable[str] = [content]
    else:
        fragments = iter_sql_strings(content)
    return assemble_schema(fragments)


def parse_schema_file(file_path: Path | str) -> ParsedSchema:
    """Read a file and rebuild the schema it declares.

    Raises:
        SourceReadError: If the file cannot be read
    """
    content = read_source(file_path)
    schema = parse_schema_source(content, detect_language(file_path))
    logger.debug(f"Parsed {len(schema.tables)} tables from {file_path}")
    return schema
