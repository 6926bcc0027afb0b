"""Shared utilities for Tree-sitter parsing and source discovery."""

from __future__ import annotations

import glob
import os
from pathlib import Path
from typing import Iterable, Iterator

import tree_sitter
import tree_sitter_ruby

SOURCE_SUFFIX = ".rb"


def ruby_language() -> tree_sitter.Language:
    return tree_sitter.Language(tree_sitter_ruby.language())


def create_ruby_parser() -> tree_sitter.Parser:
    """
    Create a Tree-sitter parser configured for Ruby.

    Supports both the modern bindings (language in the constructor) and
    older releases that expect ``set_language``.
    """

    language = ruby_language()
    try:
        parser = tree_sitter.Parser(language)
    except TypeError:
        parser = tree_sitter.Parser()
        parser.set_language(language)
    return parser


def node_text(node: tree_sitter.Node, source_bytes: bytes) -> str:
    """Decode the bytes that correspond to a node."""
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def iter_nodes(root: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Iterative preorder traversal of the syntax tree."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def first_error(root: tree_sitter.Node) -> tree_sitter.Node | None:
    """First ERROR or missing node in source order, if any."""
    if not root.has_error:
        return None
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return root


def iter_source_files(paths: Iterable[str | Path]) -> Iterator[str]:
    """
    Yield the Ruby files to check.

    Directories expand to every ``*.rb`` file below them, sorted so the
    order is stable for a given tree; hidden directories are skipped.
    Other paths are yielded unchanged.
    """
    for path in paths:
        path = str(path)
        if os.path.isdir(path):
            pattern = os.path.join(glob.escape(path), "**", f"*{SOURCE_SUFFIX}")
            yield from sorted(glob.glob(pattern, recursive=True))
        else:
            yield path
