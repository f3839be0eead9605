"""Tree-sitter integration."""
from .parsers import get_parser, parse_source

__all__ = ["get_parser", "parse_source"]
