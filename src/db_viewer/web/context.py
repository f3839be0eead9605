"""Parsed artifacts shared by the API routes."""
from __future__ import annotations

import logging
import threading
from pathlib import Path

from db_viewer.parser import (
    ParsedFunctions,
    ParsedSchema,
    SourceReadError,
    parse_functions_file,
    parse_schema_file,
)

logger = logging.getLogger(__name__)


class ViewerContext:
    """Holds the schema and function catalog served by the app.

    Either artifact is None when its file is not configured or has never
    parsed successfully. Reloads replace an artifact wholesale, so readers
    always see a complete result.
    """

    def __init__(self, schema_path: Path | str | None = None, functions_path: Path | str | None = None):
        self.schema_path = str(schema_path) if schema_path else ""
        self.functions_path = str(functions_path) if functions_path else ""
        self.schema: ParsedSchema | None = None
        self.functions: ParsedFunctions | None = None
        self._lock = threading.Lock()

    def load(self) -> None:
        """Parse both files."""
        self.load_schema()
        self.load_functions()

    def load_schema(self) -> None:
        """Parse the schema file. On failure the previous result is kept."""
        if not self.schema_path or not Path(self.schema_path).exists():
            return

        try:
            schema = parse_schema_file(self.schema_path)
        except SourceReadError as e:
            logger.error(f"Error parsing schema: {e}")
            return

        with self._lock:
            self.schema = schema
        logger.info(f"Parsed schema: {len(schema.tables)} tables")

    def load_functions(self) -> None:
        """Parse the functions file. On failure the previous result is kept."""
        if not self.functions_path or not Path(self.functions_path).exists():
            return

        try:
            functions = parse_functions_file(self.functions_path)
        except SourceReadError as e:
            logger.error(f"Error parsing functions: {e}")
            return

        with self._lock:
            self.functions = functions
        logger.info(f"Parsed functions: {len(functions.exported)} exported functions")

    def reload_path(self, path: Path | str) -> None:
        """Re-parse whichever artifact comes from `path`."""
        resolved = str(Path(path).resolve())
        if self.schema_path and resolved == str(Path(self.schema_path).resolve()):
            self.load_schema()
        if self.functions_path and resolved == str(Path(self.functions_path).resolve()):
            self.load_functions()

    def snapshot(self) -> tuple[ParsedSchema | None, ParsedFunctions | None]:
        with self._lock:
            return self.schema, self.functions
