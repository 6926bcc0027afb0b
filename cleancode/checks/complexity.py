"""Detect methods whose body is too large."""

from __future__ import annotations

from typing import Optional

from ..context import TraversalContext
from ..issues import Issue, make_issue, show
from ..nodes import SyntaxNode

MAX_MASS = 40


def run(node: SyntaxNode, ctx: TraversalContext) -> Optional[Issue]:
    mass = node.mass
    if mass <= MAX_MASS:
        return None

    return make_issue(
        "complexity",
        node,
        ctx.current_class,
        ctx.current_method,
        f"Warning, the method {show(ctx.current_method)} in {show(ctx.current_class)} "
        f"is too complex (mass: {mass})",
        "Split this method with the extract method refactoring pattern.",
    )
