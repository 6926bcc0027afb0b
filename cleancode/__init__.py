"""
cleancode

Clean-code checker for Ruby sources.

Parses ``.rb`` files with tree-sitter and walks the resulting syntax tree
looking for four smells:
- methods taking more than three arguments
- arguments used directly as the condition of a branch
- methods whose syntax tree is too large
- call chains that break the law of demeter
"""

from loguru import logger

from cleancode.checker import Checker, check_file
from cleancode.context import Scope, TraversalContext
from cleancode.errors import CleanCodeError, FileAccessError, ParseError
from cleancode.issues import Issue
from cleancode.nodes import NodeKind, SyntaxNode
from cleancode.source_parser import RubySourceParser, parse_ruby_source

logger.disable("cleancode")

__version__ = "1.0.0"

__all__ = [
    # Syntax tree
    "NodeKind",
    "SyntaxNode",
    "RubySourceParser",
    "parse_ruby_source",

    # Checking
    "Checker",
    "check_file",
    "Issue",
    "Scope",
    "TraversalContext",

    # Errors
    "CleanCodeError",
    "FileAccessError",
    "ParseError",
]
