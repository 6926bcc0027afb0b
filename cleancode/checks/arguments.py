"""Heuristics about method parameters."""

from __future__ import annotations

from typing import Optional

from ..context import TraversalContext
from ..issues import Issue, make_issue, show
from ..nodes import NodeKind, SyntaxNode

MAX_ARGUMENTS = 3


def run_too_many_arguments(node: SyntaxNode, ctx: TraversalContext) -> Optional[Issue]:
    if len(node.parameter_names) <= MAX_ARGUMENTS:
        return None

    return make_issue(
        "too_many_arguments",
        node,
        ctx.current_class,
        ctx.current_method,
        f"Warning, too many arguments found in class {show(ctx.current_class)} "
        f"for {show(ctx.current_method)}",
        f"Maximum {MAX_ARGUMENTS} arguments per method recommended.",
    )


def run_boolean_argument(node: SyntaxNode, ctx: TraversalContext) -> Optional[Issue]:
    """A parameter used as the whole condition of a branch."""
    test = node.test
    if test is None or test.kind is not NodeKind.LOCAL_VARIABLE:
        return None
    if test.name not in ctx.live_parameters:
        return None

    return make_issue(
        "boolean_argument",
        node,
        ctx.current_class,
        ctx.current_method,
        f"Warning, an argument is used as a boolean {show(ctx.current_class)} "
        f"for {show(ctx.current_method)}",
        "Split this method in 2 cases. One for the true, one for the false.",
    )
