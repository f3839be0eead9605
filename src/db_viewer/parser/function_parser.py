"""Extract the function catalog of a TypeScript/JavaScript file.

The tree walk is kept apart from the catalog logic: `iter_function_declarations`
turns a tree-sitter tree into plain `FunctionDeclaration` records, and
`build_parsed_function` only ever sees those records. Supporting another
tree-shaped source means writing another declaration iterator.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from tree_sitter import Node, Tree

from ..language_detect import detect_language, has_grammar
from ..treesitter.parsers import parse_source
from .models import ExtractedQuery, ParsedFunction, ParsedFunctions, ParsedParam
from .queries import classify_query
from .source import SourceReadError, read_source
from .sql_fragments import iter_sql_from_node

logger = logging.getLogger(__name__)

FUNCTION_NODE_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
DEFAULT_EXPORT_NODE_TYPES = frozenset({"function_expression", "function", "generator_function"})
PARAMETER_NODE_TYPES = frozenset({"required_parameter", "optional_parameter"})

_DOC_TAG_LINE = re.compile(r"^@")


@dataclass
class FunctionDeclaration:
    """A named top-level function, as seen by the catalog builder."""
    name: str
    params: list[ParsedParam] = field(default_factory=list)
    return_type: str | None = None
    is_exported: bool = False
    doc_comment: str | None = None
    sql_fragments: list[str] = field(default_factory=list)


def build_parsed_function(declaration: FunctionDeclaration) -> ParsedFunction:
    """Classify a declaration's SQL and assemble its catalog entry."""
    queries: list[ExtractedQuery] = []
    tables_used: list[str] = []

    for sql in declaration.sql_fragments:
        query, tables = classify_query(sql)
        queries.append(query)
        for table in tables:
            if table not in tables_used:
                tables_used.append(table)

    return ParsedFunction(
        name=declaration.name,
        params=list(declaration.params),
        return_type=declaration.return_type or "void",
        sql_queries=queries,
        tables_used=tables_used,
        is_exported=declaration.is_exported,
        description=extract_doc_description(declaration.doc_comment),
    )


def extract_doc_description(comment: str | None) -> str | None:
    """Return the first description line of a `/** ... */` block.

    Lines after the first tag line (`@param`, `@returns`, ...) are not
    description. A block with no description text yields None.
    """
    if not comment or not comment.startswith("/**"):
        return None

    body = comment[3:]
    if body.endswith("*/"):
        body = body[:-2]

    for raw_line in body.splitlines():
        line = raw_line.strip().lstrip("*").strip()
        if not line:
            continue
        if _DOC_TAG_LINE.match(line):
            return None
        return line

    return None


def iter_function_declarations(tree: Tree, source: bytes) -> Iterator[FunctionDeclaration]:
    """Yield named top-level function declarations in source order.

    Both `function f() {}` and `export function f() {}` (including
    `export default function f() {}`) count. Overload signatures, ambient
    `declare function` and nested functions do not.
    """
    for node in tree.root_node.named_children:
        if node.type in FUNCTION_NODE_TYPES:
            declaration = _read_declaration(node, node, source, is_exported=False)
        elif node.type == "export_statement":
            function_node = _find_function_child(node)
            if function_node is None:
                continue
            declaration = _read_declaration(function_node, node, source, is_exported=True)
        else:
            continue

        if declaration is not None:
            yield declaration


def parse_functions_source(content: str, language: str = "typescript") -> ParsedFunctions:
    """Build the function catalog from in-memory source text.

    Raises:
        ValueError: If the language has no grammar
    """
    source = content.encode("utf-8")
    tree = parse_source(source, language)
    if tree is None:
        raise ValueError(f"No grammar available for language: {language}")

    functions = [build_parsed_function(d) for d in iter_function_declarations(tree, source)]
    return ParsedFunctions(functions=functions)


def parse_functions_file(file_path: Path | str) -> ParsedFunctions:
    """Read a source file and build its function catalog.

    Every named top-level function is returned, exported or not, in
    declaration order.

    Raises:
        SourceReadError: If the file cannot be read or has no grammar
    """
    language = detect_language(file_path)
    if not has_grammar(language):
        raise SourceReadError(file_path, f"unsupported language: {language}")

    content = read_source(file_path)
    result = parse_functions_source(content, language)
    logger.debug(
        f"Parsed {len(result.functions)} functions "
        f"({len(result.exported)} exported) from {file_path}"
    )
    return result


# Helper functions

def _read_declaration(
    node: Node,
    statement: Node,
    source: bytes,
    is_exported: bool
) -> FunctionDeclaration | None:
    """Read one function node. `statement` is the node that owns the doc comment."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None

    body = node.child_by_field_name("body")
    fragments = list(iter_sql_from_node(body, source)) if body is not None else []

    return FunctionDeclaration(
        name=_get_text(source, name_node),
        params=_read_params(node.child_by_field_name("parameters"), source),
        return_type=_read_type(node.child_by_field_name("return_type"), source),
        is_exported=is_exported,
        doc_comment=_read_doc_comment(statement, source),
        sql_fragments=fragments,
    )


def _read_params(params_node: Node, source: bytes) -> list[ParsedParam]:
    if params_node is None:
        return []

    params = []
    for child in params_node.named_children:
        if child.type in PARAMETER_NODE_TYPES:
            pattern = child.child_by_field_name("pattern")
            name = _get_text(source, pattern) if pattern is not None else _get_text(source, child)
            type_text = _read_type(child.child_by_field_name("type"), source)
        elif child.type == "identifier":
            name, type_text = _get_text(source, child), None
        else:
            continue

        params.append(ParsedParam(
            name=name.removeprefix("..."),
            type=type_text or "unknown",
        ))
    return params


def _read_type(annotation: Node, source: bytes) -> str | None:
    """Raw text of a type annotation without its leading colon."""
    if annotation is None:
        return None
    text = _get_text(source, annotation).strip()
    if text.startswith(":"):
        text = text[1:].strip()
    return text or None


def _read_doc_comment(statement: Node, source: bytes) -> str | None:
    prev = statement.prev_sibling
    if prev is not None and prev.type == "comment":
        text = _get_text(source, prev)
        if text.startswith("/**"):
            return text
    return None


def _find_function_child(node: Node) -> Node | None:
    """Find the function declaration exported by an export statement."""
    declaration = node.child_by_field_name("declaration")
    if declaration is not None and declaration.type in FUNCTION_NODE_TYPES:
        return declaration
    # `export default function name() {}` may come back as an expression
    value = node.child_by_field_name("value")
    if value is not None and value.type in DEFAULT_EXPORT_NODE_TYPES:
        return value
    for child in node.named_children:
        if child.type in FUNCTION_NODE_TYPES:
            return child
    return None


def _get_text(source: bytes, node: Node) -> str:
    """Get text for a node."""
    if node is None:
        return ""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
