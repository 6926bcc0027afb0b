"""Registry of checks, keyed by the node kind each one inspects."""

from __future__ import annotations

from typing import Callable, Optional

from ..context import TraversalContext
from ..issues import Issue
from ..nodes import NodeKind, SyntaxNode

from . import arguments, complexity, demeter

Check = Callable[[SyntaxNode, TraversalContext], Optional[Issue]]

CHECKS: dict[NodeKind, Check] = {
    NodeKind.PARAMETER_LIST: arguments.run_too_many_arguments,
    NodeKind.CONDITIONAL: arguments.run_boolean_argument,
    NodeKind.METHOD_DEFINITION: complexity.run,
    NodeKind.CALL: demeter.run,
}

__all__ = ["CHECKS", "Check"]
