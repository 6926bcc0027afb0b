"""Issue data model for checker findings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .nodes import SyntaxNode


@dataclass(frozen=True)
class Issue:
    """One warning: a message line and a remediation hint."""

    rule: str
    class_name: Optional[str]
    method_name: Optional[str]
    message: str
    hint: str
    line: int = 0

    def lines(self, path: str) -> tuple[str, str]:
        return f"{path}: {self.message}", f"{path}: {self.hint}"


def make_issue(
    rule: str,
    node: SyntaxNode,
    class_name: Optional[str],
    method_name: Optional[str],
    message: str,
    hint: str,
) -> Issue:
    """Create an Issue located at ``node``."""
    return Issue(
        rule=rule,
        class_name=class_name,
        method_name=method_name,
        message=message,
        hint=hint,
        line=node.line,
    )


def show(name: Optional[str]) -> str:
    """Render a possibly missing class or method name."""
    return name if name is not None else ""
