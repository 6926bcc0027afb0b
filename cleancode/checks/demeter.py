"""Detection of call chains reaching through other objects."""

from __future__ import annotations

from typing import Optional

from ..context import TraversalContext
from ..issues import Issue, make_issue, show
from ..nodes import SyntaxNode, is_call

DEMETER_CHAIN_DEPTH = 3


def run(node: SyntaxNode, ctx: TraversalContext) -> Optional[Issue]:
    """
    Flag ``a.b.c``-style chains, at most once per method name.

    Only the receiver line of the visited call is followed; calls nested
    in arguments are reached when the walk visits them.
    """
    if not _is_chain(node):
        return None
    if ctx.current_method == ctx.last_demeter_method:
        return None

    ctx.last_demeter_method = ctx.current_method
    return make_issue(
        "law_of_demeter",
        node,
        ctx.current_class,
        ctx.current_method,
        f"Warning, the call in {show(ctx.current_method)} in {show(ctx.current_class)} "
        "violate the law of demeter",
        "Use the principle of 'Ask, don't tell.'",
    )


def _is_chain(node: SyntaxNode) -> bool:
    current = node
    for _ in range(DEMETER_CHAIN_DEPTH - 1):
        if not is_call(current):
            return False
        current = current.receiver
    return is_call(current)
