"""Locate SQL-looking string literals in source code.

Two entry shapes:
- raw file text, scanned left to right (used for schema files)
- a tree-sitter subtree, walked depth-first (used for function bodies)

Both only look at literal contents; nothing is evaluated, so `${...}`
placeholders inside templates stay in the fragment as plain text.
"""
from __future__ import annotations

import re
from typing import Iterator

from tree_sitter import Node

SQL_PREFIX_PATTERN = re.compile(
    r"^\s*(SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER|DROP|PRAGMA)\b",
    re.IGNORECASE,
)

# One pass over the text. Comments are matched so their contents are skipped.
# Only the opening backtick of a template is matched here; the body is walked
# by _scan_template so nested `${...}` backticks do not end it. Single-quoted
# literals may not cross a newline, which keeps stray apostrophes in prose from
# swallowing the rest of the file.
_LITERAL_PATTERN = re.compile(
    r"//[^\n]*"
    r"|/\*.*?\*/"
    r"|(?P<tick>`)"
    r'|"(?P<double>(?:[^"\\]|\\.)*)"'
    r"|'(?P<single>(?:[^'\\\n]|\\.)*)'",
    re.DOTALL,
)

_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "`": "`",
    "\n": "",  # line continuation
}

TEMPLATE_NODE_TYPES = frozenset({"template_string"})
STRING_NODE_TYPES = frozenset({"string"})


def looks_like_sql(text: str) -> bool:
    """True if text starts (after whitespace) with a SQL statement keyword."""
    return bool(SQL_PREFIX_PATTERN.match(text))


def unescape_string(text: str) -> str:
    """Decode the common backslash escapes of a quoted literal."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), text)


def iter_sql_strings(content: str) -> Iterator[str]:
    """Yield SQL-looking literal bodies from source text in appearance order.

    Template bodies are yielded raw; quoted strings are unescaped first.
    Substitutions inside a template are scanned after the template itself,
    matching the order of the tree walk below. Every yielded fragment is
    stripped of surrounding whitespace.
    """
    pos = 0
    while True:
        match = _LITERAL_PATTERN.search(content, pos)
        if match is None:
            return

        if match.group("tick") is not None:
            end, substitutions = _scan_template(content, match.end())
            if end == -1:
                # Unterminated template; the backtick is not a literal
                pos = match.end()
                continue
            pos = end + 1
            candidate = content[match.end():end].strip()
            if looks_like_sql(candidate):
                yield candidate
            for substitution in substitutions:
                yield from iter_sql_strings(substitution)
            continue

        pos = match.end()
        quoted = match.group("double")
        if quoted is None:
            quoted = match.group("single")
        if quoted is None:
            continue  # comment

        candidate = unescape_string(quoted).strip()
        if looks_like_sql(candidate):
            yield candidate


def extract_sql_strings(content: str) -> list[str]:
    """Eager form of `iter_sql_strings`."""
    return list(iter_sql_strings(content))


def _scan_template(content: str, start: int) -> tuple[int, list[str]]:
    """Find the closing backtick of a template whose body begins at start.

    `${...}` substitutions are skipped with brace counting, stepping over any
    strings and nested templates inside them.

    Returns:
        (index of the closing backtick or -1, substitution texts)
    """
    substitutions = []
    i, n = start, len(content)
    while i < n:
        char = content[i]
        if char == "\\":
            i += 2
        elif char == "`":
            return i, substitutions
        elif content.startswith("${", i):
            expr_start = i + 2
            i = _skip_substitution(content, expr_start)
            if i == -1:
                return -1, substitutions
            substitutions.append(content[expr_start:i])
            i += 1
        else:
            i += 1
    return -1, substitutions


def _skip_substitution(content: str, start: int) -> int:
    """Index of the `}` closing a substitution, or -1."""
    depth = 1
    i, n = start, len(content)
    while i < n:
        char = content[i]
        if char in "\"'":
            i = _skip_quoted(content, i)
        elif char == "`":
            end, _ = _scan_template(content, i + 1)
            if end == -1:
                return -1
            i = end + 1
        elif char == "{":
            depth += 1
            i += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
            i += 1
        else:
            i += 1
    return -1


def _skip_quoted(content: str, start: int) -> int:
    quote = content[start]
    i, n = start + 1, len(content)
    while i < n:
        char = content[i]
        if char == "\\":
            i += 2
        elif char == quote or char == "\n":
            return i + 1
        else:
            i += 1
    return n


def iter_sql_from_node(node: Node, source: bytes) -> Iterator[str]:
    """Yield SQL-looking literals found anywhere under a tree-sitter node.

    Traversal is pre-order, so fragments come out in source order. A template
    literal is classified as a whole, then its substitutions are still visited,
    so SQL nested inside `${...}` expressions is found too.
    """
    stack = [node]
    while stack:
        current = stack.pop()

        if current.type in TEMPLATE_NODE_TYPES:
            text = _node_text(source, current)[1:-1].strip()
            if looks_like_sql(text):
                yield text
        elif current.type in STRING_NODE_TYPES:
            text = unescape_string(_node_text(source, current)[1:-1]).strip()
            if looks_like_sql(text):
                yield text
            # String children are only fragments and escapes
            continue

        stack.extend(reversed(current.children))


def extract_sql_from_node(node: Node, source: bytes) -> list[str]:
    """Eager form of `iter_sql_from_node`."""
    return list(iter_sql_from_node(node, source))


def _node_text(source: bytes, node: Node) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
