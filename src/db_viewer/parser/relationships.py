"""Foreign-key relationships derived from a parsed schema."""
from __future__ import annotations

from .models import ParsedSchema, Relationship


def derive_relationships(schema: ParsedSchema) -> list[Relationship]:
    """Flatten every table's foreign keys into directed column edges."""
    return [
        Relationship(
            from_table=table.name,
            from_column=fk.column,
            to_table=fk.references_table,
            to_column=fk.references_column,
            on_delete=fk.on_delete,
            on_update=fk.on_update,
        )
        for table in schema.tables
        for fk in table.foreign_keys
    ]
