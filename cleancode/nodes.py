"""
cleancode/nodes.py

Syntax tree model consumed by the checker.

Nodes are produced by the Ruby source parser (or built by hand in tests)
and are never mutated once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, Union


class NodeKind(Enum):
    """Kinds of syntax nodes the checker distinguishes."""
    PROGRAM = auto()
    CLASS_DEFINITION = auto()
    MODULE_DEFINITION = auto()
    METHOD_DEFINITION = auto()
    PARAMETER_LIST = auto()
    BLOCK = auto()
    CONDITIONAL = auto()
    CALL = auto()
    LOCAL_ASSIGNMENT = auto()
    LOCAL_VARIABLE = auto()
    LITERAL = auto()
    OTHER = auto()


Element = Union["SyntaxNode", str, None]


@dataclass(eq=False)
class SyntaxNode:
    """
    Tagged node of a parsed source file.

    Children keep source order. Strings are opaque leaf values (parameter
    names, the method name of a call, literal text); ``None`` stands for an
    absent call receiver.
    """
    kind: NodeKind
    children: list[Element] = field(default_factory=list)
    name: Optional[str] = None
    node_type: str = ""
    line: int = 0
    _mass: Optional[int] = field(default=None, init=False, repr=False)

    @property
    def mass(self) -> int:
        """Number of nodes in this subtree, this node included."""
        if self._mass is None:
            # post-order over an explicit stack; trees can nest deeper
            # than the interpreter's recursion limit
            order: list[SyntaxNode] = []
            stack = [self]
            while stack:
                node = stack.pop()
                if node._mass is None:
                    order.append(node)
                    stack.extend(node.nodes())
            for node in reversed(order):
                node._mass = 1 + sum(child._mass for child in node.nodes())
        return self._mass

    def nodes(self) -> Iterator[SyntaxNode]:
        """Child nodes in order, leaf values skipped."""
        for child in self.children:
            if isinstance(child, SyntaxNode):
                yield child

    @property
    def test(self) -> Optional[SyntaxNode]:
        """Test expression of a conditional."""
        if self.children and isinstance(self.children[0], SyntaxNode):
            return self.children[0]
        return None

    @property
    def receiver(self) -> Optional[SyntaxNode]:
        """Receiver of a call, ``None`` for receiver-less calls."""
        if self.children and isinstance(self.children[0], SyntaxNode):
            return self.children[0]
        return None

    @property
    def parameter_names(self) -> list[str]:
        return [child for child in self.children if isinstance(child, str)]

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<SyntaxNode {self.kind.name}{label} line={self.line}>"


def is_call(element: Element) -> bool:
    """True when ``element`` is a call node."""
    return isinstance(element, SyntaxNode) and element.kind is NodeKind.CALL
