"""Source-embedded SQL extraction and schema reconstruction.

Two entry points:
- parse_schema_file: rebuild CREATE TABLE / CREATE INDEX definitions
- parse_functions_file: catalog top-level functions and the SQL they issue
"""
from __future__ import annotations

from .models import (
    ExtractedQuery,
    ParsedColumn,
    ParsedForeignKey,
    ParsedFunction,
    ParsedFunctions,
    ParsedIndex,
    ParsedParam,
    ParsedSchema,
    ParsedTable,
    QueryType,
    Relationship,
)
from .source import SourceReadError
from .schema_parser import assemble_schema, parse_schema_file, parse_schema_source
from .function_parser import parse_functions_file, parse_functions_source
from .relationships import derive_relationships

__all__ = [
    # Types
    "ExtractedQuery",
    "ParsedColumn",
    "ParsedForeignKey",
    "ParsedFunction",
    "ParsedFunctions",
    "ParsedIndex",
    "ParsedParam",
    "ParsedSchema",
    "ParsedTable",
    "QueryType",
    "Relationship",
    "SourceReadError",
    # Entry points
    "assemble_schema",
    "parse_schema_file",
    "parse_schema_source",
    "parse_functions_file",
    "parse_functions_source",
    "derive_relationships",
]
