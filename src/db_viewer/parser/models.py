"""Parsed schema and function catalog types.

Everything here is produced once per parse call and handed to the caller.
`to_dict()` returns the camelCase JSON shape served to the browser UI.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

QueryType = Literal["SELECT", "INSERT", "UPDATE", "DELETE", "OTHER"]


@dataclass
class ParsedColumn:
    """Column definition from a CREATE TABLE body."""
    name: str
    type: str  # first token after the name, upper-cased verbatim
    nullable: bool = True
    is_primary_key: bool = False
    is_auto_increment: bool = False
    default_value: str | None = None  # raw, unparsed

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "nullable": self.nullable,
            "isPrimaryKey": self.is_primary_key,
            "isAutoIncrement": self.is_auto_increment,
            "defaultValue": self.default_value,
        }


@dataclass
class ParsedForeignKey:
    """Foreign key owned by a single column.

    The referenced table is not validated and may not exist in the schema.
    """
    column: str
    references_table: str
    references_column: str
    on_delete: str | None = None
    on_update: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "column": self.column,
            "referencesTable": self.references_table,
            "referencesColumn": self.references_column,
            "onDelete": self.on_delete,
            "onUpdate": self.on_update,
        }


@dataclass
class ParsedIndex:
    """CREATE INDEX definition. Column order is significant."""
    name: str
    columns: list[str]
    is_unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "isUnique": self.is_unique,
        }


@dataclass
class ParsedTable:
    """CREATE TABLE statement.

    `indexes` is the only field that changes after construction: the schema
    assembler appends to it as later CREATE INDEX statements turn up.
    """
    name: str
    columns: list[ParsedColumn] = field(default_factory=list)
    primary_key: list[str] = field(default_factory=list)
    foreign_keys: list[ParsedForeignKey] = field(default_factory=list)
    indexes: list[ParsedIndex] = field(default_factory=list)

    def get_column(self, name: str) -> ParsedColumn | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "primaryKey": list(self.primary_key),
            "foreignKeys": [fk.to_dict() for fk in self.foreign_keys],
            "indexes": [idx.to_dict() for idx in self.indexes],
        }


@dataclass
class ParsedSchema:
    """All tables recovered from one file."""
    tables: list[ParsedTable] = field(default_factory=list)

    def get_table(self, name: str) -> ParsedTable | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"tables": [t.to_dict() for t in self.tables]}


@dataclass
class ParsedParam:
    """Function parameter. `type` is the raw annotation text or "unknown"."""
    name: str
    type: str = "unknown"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type}


@dataclass
class ExtractedQuery:
    """SQL found in a function body, whitespace-collapsed."""
    sql: str
    type: QueryType = "OTHER"

    def to_dict(self) -> dict[str, Any]:
        return {"sql": self.sql, "type": self.type}


@dataclass
class ParsedFunction:
    """Top-level function declaration and the SQL it issues."""
    name: str
    params: list[ParsedParam] = field(default_factory=list)
    return_type: str = "void"
    sql_queries: list[ExtractedQuery] = field(default_factory=list)
    tables_used: list[str] = field(default_factory=list)
    is_exported: bool = False
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "params": [p.to_dict() for p in self.params],
            "returnType": self.return_type,
            "sqlQueries": [q.to_dict() for q in self.sql_queries],
            "tablesUsed": list(self.tables_used),
            "isExported": self.is_exported,
        }
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class ParsedFunctions:
    """Function catalog for one file, in declaration order."""
    functions: list[ParsedFunction] = field(default_factory=list)

    @property
    def exported(self) -> list[ParsedFunction]:
        return [f for f in self.functions if f.is_exported]

    def get_function(self, name: str) -> ParsedFunction | None:
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"functions": [f.to_dict() for f in self.functions]}


@dataclass
class Relationship:
    """Directed foreign-key edge, derived from a schema on demand."""
    from_table: str
    from_column: str
    to_table: str
    to_column: str
    on_delete: str | None = None
    on_update: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fromTable": self.from_table,
            "fromColumn": self.from_column,
            "toTable": self.to_table,
            "toColumn": self.to_column,
            "onDelete": self.on_delete,
            "onUpdate": self.on_update,
        }
