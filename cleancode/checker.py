"""Coordinator that walks one file's tree and runs the checks."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from .checks import CHECKS
from .context import TraversalContext
from .issues import Issue
from .nodes import SyntaxNode
from .source_parser import RubySourceParser


class Checker:
    """
    Depth-first, pre-order walk over a ``SyntaxNode`` tree.

    At every node the context is updated first, then the check registered
    for the node's kind runs, then the children are walked in order.
    Issues are printed as soon as they are found.
    """

    def __init__(
        self,
        path: str | Path,
        tree: SyntaxNode,
        scoped: bool = True,
        out: Optional[TextIO] = None,
    ):
        self.path = str(path)
        self.tree = tree
        self.context = TraversalContext(scoped=scoped)
        self.out = out
        self.issues: list[Issue] = []

    def run(self) -> list[Issue]:
        # explicit work stack: (node, leaving) pairs, children pushed reversed
        stack: list[tuple[SyntaxNode, bool]] = [(self.tree, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                self.context.leave(node)
                continue
            self._visit(node)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(list(node.nodes())))
        return self.issues

    def _visit(self, node: SyntaxNode):
        logger.debug(f"VISIT {node.kind.name} {node.name or node.node_type} line={node.line}")
        self.context.enter(node)
        check = CHECKS.get(node.kind)
        if check is not None:
            issue = check(node, self.context)
            if issue is not None:
                self._report(issue)

    def _report(self, issue: Issue):
        logger.debug(f"ISSUE {issue.rule} line={issue.line}")
        self.issues.append(issue)
        out = self.out if self.out is not None else sys.stdout
        for line in issue.lines(self.path):
            print(line, file=out)


def check_file(
    path: str | Path,
    parser: Optional[RubySourceParser] = None,
    scoped: bool = True,
    out: Optional[TextIO] = None,
) -> list[Issue]:
    """Parse ``path`` and run the checker over it with a fresh context."""
    parser = parser or RubySourceParser()
    tree = parser.parse_file(path)
    return Checker(path, tree, scoped=scoped, out=out).run()
