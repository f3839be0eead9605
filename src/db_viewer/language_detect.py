"""Language detection by file extension.

Function extraction needs a grammar (TypeScript, TSX, JavaScript). Schema
extraction only scans text, so it also accepts Python and plain SQL files.
"""
from __future__ import annotations
from pathlib import Path
from typing import Literal

Language = Literal["typescript", "tsx", "javascript", "python", "sql", "unknown"]

# Extension to language mapping
EXTENSION_MAP: dict[str, Language] = {
    # TypeScript
    ".ts": "typescript",
    ".mts": "typescript",  # TypeScript modules
    ".cts": "typescript",  # TypeScript CommonJS
    ".tsx": "tsx",  # React TypeScript

    # JavaScript
    ".js": "javascript",
    ".mjs": "javascript",  # ES modules
    ".cjs": "javascript",  # CommonJS
    ".jsx": "javascript",  # React JSX

    # Python (schema text scan only)
    ".py": "python",

    # SQL and related
    ".sql": "sql",
    ".ddl": "sql",
}

# Languages with a tree-sitter grammar for function extraction
GRAMMAR_LANGUAGES: frozenset[str] = frozenset({"typescript", "tsx", "javascript"})


def detect_language(file_path: Path | str) -> Language:
    """Detect language from file extension.

    Args:
        file_path: Path to the file

    Returns:
        Language identifier or "unknown"
    """
    path = Path(file_path)
    ext = path.suffix.lower()
    return EXTENSION_MAP.get(ext, "unknown")


def has_grammar(language: str) -> bool:
    """Check if function extraction is available for a language."""
    return language in GRAMMAR_LANGUAGES
