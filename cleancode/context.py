"""Traversal context shared by the checks while one file is walked."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .nodes import NodeKind, SyntaxNode

SCOPE_KINDS = frozenset({
    NodeKind.CLASS_DEFINITION,
    NodeKind.METHOD_DEFINITION,
    NodeKind.BLOCK,
})


@dataclass
class Scope:
    class_name: Optional[str] = None
    method_name: Optional[str] = None
    live_parameters: set[str] = field(default_factory=set)

    def copy(self) -> Scope:
        return Scope(self.class_name, self.method_name, set(self.live_parameters))


@dataclass
class TraversalContext:
    """
    Per-file state of the walk.

    In scoped mode every class definition, method definition and block
    gets its own frame, a copy of the enclosing one, which is dropped when
    the walk leaves the node. Unscoped mode keeps a single frame that is
    only ever overwritten, so names and parameter edits leak into whatever
    is visited next.

    ``last_demeter_method`` is file-wide in both modes.
    """

    scoped: bool = True
    last_demeter_method: Optional[str] = None
    frames: list[Scope] = field(default_factory=lambda: [Scope()])

    @property
    def frame(self) -> Scope:
        return self.frames[-1]

    @property
    def current_class(self) -> Optional[str]:
        return self.frame.class_name

    @property
    def current_method(self) -> Optional[str]:
        return self.frame.method_name

    @property
    def live_parameters(self) -> set[str]:
        return self.frame.live_parameters

    def opens_scope(self, node: SyntaxNode) -> bool:
        return self.scoped and node.kind in SCOPE_KINDS

    def enter(self, node: SyntaxNode):
        """Apply ``node``; pair with ``leave`` once its subtree is walked."""
        if self.opens_scope(node):
            self.frames.append(self.frame.copy())
        self.update(node)

    def leave(self, node: SyntaxNode):
        if self.opens_scope(node):
            self.frames.pop()

    @contextmanager
    def visit(self, node: SyntaxNode) -> Iterator[TraversalContext]:
        """Apply ``node`` to the context for as long as the block runs."""
        self.enter(node)
        try:
            yield self
        finally:
            self.leave(node)

    def update(self, node: SyntaxNode):
        # order matters: class, method, parameters, reassignments
        frame = self.frame
        if node.kind is NodeKind.CLASS_DEFINITION:
            frame.class_name = node.name
        if node.kind is NodeKind.METHOD_DEFINITION:
            frame.method_name = node.name
        if node.kind is NodeKind.PARAMETER_LIST:
            frame.live_parameters = set(node.parameter_names)
        if node.kind is NodeKind.LOCAL_ASSIGNMENT:
            frame.live_parameters.discard(node.name)
