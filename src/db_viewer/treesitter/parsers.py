"""Tree-sitter parser setup for supported languages.

Uses the tree-sitter-typescript grammar package. JavaScript is parsed with
the TSX grammar, which accepts plain JS and JSX.
"""
from __future__ import annotations
import logging

import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

logger = logging.getLogger(__name__)

# Cached parsers for each language
_PARSERS: dict[str, Parser] = {}


def _load_language(language: str) -> Language | None:
    if language == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    if language in ("tsx", "javascript"):
        return Language(tree_sitter_typescript.language_tsx())
    return None


def get_parser(language: str) -> Parser | None:
    """Get or create a tree-sitter parser for the given language.

    Args:
        language: Language identifier (typescript, tsx, javascript)

    Returns:
        Parser instance or None if language not supported
    """
    if language in _PARSERS:
        return _PARSERS[language]

    ts_language = _load_language(language)
    if ts_language is None:
        return None

    parser = Parser(ts_language)
    _PARSERS[language] = parser
    logger.debug(f"Loaded tree-sitter parser for {language}")
    return parser


def parse_source(source: bytes, language: str) -> Tree | None:
    """Parse source bytes with tree-sitter.

    Tree-sitter recovers from syntax errors, so this only returns None when
    the language has no grammar. Error recovery is logged, not raised.

    Args:
        source: Source code bytes
        language: Language identifier

    Returns:
        Tree-sitter tree or None if the language is unsupported
    """
    parser = get_parser(language)
    if not parser:
        return None

    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(f"Syntax errors while parsing {language} source; continuing with recovered tree")
    return tree
