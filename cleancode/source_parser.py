"""
cleancode/source_parser.py

Tree-sitter based Ruby source parser.

Turns a tree-sitter Ruby tree into the ``SyntaxNode`` tree the checker
walks. Besides renaming grammar node types to ``NodeKind`` tags it does
the bits of work Ruby's own parser does and tree-sitter leaves out:

- bare identifiers are resolved against the local variables visible at
  that point, becoming either a local-variable reference or a call
  without receiver;
- methods without parentheses or parameters still get an (empty)
  parameter list;
- wrapper nodes such as ``body_statement`` are spliced into their parent,
  and so is a parenthesized group holding a single statement, so
  ``if (flag)`` tests ``flag`` itself. Groups of several statements stay
  together under one node.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

import tree_sitter

from .errors import FileAccessError, ParseError
from .nodes import NodeKind, SyntaxNode
from .utils import create_ruby_parser, first_error, iter_nodes, node_text

TRANSPARENT = frozenset({
    "body_statement",
    "then",
    "else",
    "do",
    "argument_list",
    "block_body",
})

SKIPPED = frozenset({"comment"})

CONDITIONALS = frozenset({
    "if",
    "unless",
    "elsif",
    "if_modifier",
    "unless_modifier",
    "conditional",
})

PARAMETER_LISTS = frozenset({
    "method_parameters",
    "block_parameters",
    "lambda_parameters",
})

# Grammar nodes that start a fresh set of local variables in Ruby.
SCOPE_GATES = frozenset({"program", "class", "module", "singleton_class"})


class RubySourceParser:
    """
    Ruby source parser using tree-sitter.

    Example:
        parser = RubySourceParser()
        tree = parser.parse_file("app/models/user.rb")
        for node in tree.nodes():
            print(node.kind, node.name)
    """

    def __init__(self):
        self.parser = create_ruby_parser()
        self.log = logging.getLogger(__name__)

    def parse_file(self, file_path: str | Path) -> SyntaxNode:
        """
        Read and parse a Ruby source file.

        Raises:
            FileAccessError: the file cannot be read
            ParseError: the file is not valid Ruby
        """
        try:
            with open(file_path, "rb") as f:
                source = f.read()
        except OSError as exc:
            raise FileAccessError(file_path, exc.strerror or str(exc)) from exc

        self.log.debug("parse sourcefile %s", file_path)
        return self.parse(source, file_path)

    def parse(self, source: bytes | str, path: str | Path = "<string>") -> SyntaxNode:
        """
        Parse Ruby source code into a ``SyntaxNode`` tree.

        Args:
            source: Ruby source, as bytes or text
            path: file name used in error messages

        Raises:
            ParseError: tree-sitter reported an error or missing node
        """
        if isinstance(source, str):
            source = source.encode("utf-8")

        tree = self.parser.parse(source)
        error = first_error(tree.root_node)
        if error is not None:
            line, column = error.start_point
            snippet = node_text(error, source).strip().splitlines()
            raise ParseError(path, line + 1, column + 1, snippet[0][:40] if snippet else None)

        return _TreeBuilder(source).build(tree.root_node)


def parse_ruby_source(file_path: str | Path) -> SyntaxNode:
    """Convenience function to parse a single Ruby source file."""
    return RubySourceParser().parse_file(file_path)


def _others(node: tree_sitter.Node, *excluded: Optional[tree_sitter.Node]) -> list[tree_sitter.Node]:
    """Named children of ``node`` except the ``excluded`` ones."""
    skip = [e for e in excluded if e is not None]
    return [c for c in node.named_children if not any(c == e for e in skip)]


class _TreeBuilder:
    """
    Converts one tree-sitter tree; holds the local-variable scopes.

    Handlers are generators. They yield a tree-sitter node whenever they
    need it converted and get the converted nodes sent back, so nesting
    depth is bounded by the work stack in ``build`` and not by the
    interpreter's recursion limit.
    """

    def __init__(self, source: bytes):
        self.source = source
        self.scopes: list[set[str]] = []
        self._handlers = {
            "class": self.class_definition,
            "module": self.module_definition,
            "method": self.method_definition,
            "singleton_method": self.method_definition,
            "block": self.block,
            "do_block": self.block,
            "lambda": self.block,
            "call": self.call,
            "assignment": self.assignment,
            "operator_assignment": self.assignment,
            "for": self.for_loop,
            "exception_variable": self.exception_variable,
            "parenthesized_statements": self.group,
        }
        for node_type in CONDITIONALS:
            self._handlers[node_type] = self.conditional

    def build(self, root: tree_sitter.Node) -> SyntaxNode:
        stack = [self.program(root)]
        converted = None
        while True:
            try:
                request = stack[-1].send(converted)
            except StopIteration as done:
                stack.pop()
                if not stack:
                    return done.value
                converted = done.value
                continue
            stack.append(self.convert(request))
            converted = None

    # -- helpers -----------------------------------------------------------

    def text(self, node: tree_sitter.Node | None) -> str:
        return node_text(node, self.source) if node is not None else ""

    def make(
        self,
        kind: NodeKind,
        node: tree_sitter.Node,
        children: list,
        name: Optional[str] = None,
    ) -> SyntaxNode:
        return SyntaxNode(
            kind=kind,
            children=children,
            name=name,
            node_type=node.type,
            line=node.start_point[0] + 1,
        )

    @contextmanager
    def local_scope(self, inherit: bool) -> Iterator[None]:
        if inherit and self.scopes:
            self.scopes.append(set(self.scopes[-1]))
        else:
            self.scopes.append(set())
        try:
            yield
        finally:
            self.scopes.pop()

    def declare(self, name: str):
        self.scopes[-1].add(name)

    def is_local(self, name: str) -> bool:
        return bool(self.scopes) and name in self.scopes[-1]

    def convert(self, node: tree_sitter.Node):
        """Work item for one node; returns the list it splices into its parent."""
        if node.type in SKIPPED:
            return []
        if node.type in TRANSPARENT:
            return (yield from self.each(node.named_children))
        if node.type in PARAMETER_LISTS:
            return [self.parameter_list(node)]
        if node.type == "identifier":
            return [self.identifier(node)]
        handler = self._handlers.get(node.type)
        if handler is None:
            if node.named_child_count == 0:
                return [self.make(NodeKind.LITERAL, node, [self.text(node)])]
            handler = self.generic
        return (yield from handler(node))

    def each(self, nodes: Iterable[tree_sitter.Node]):
        converted: list[SyntaxNode] = []
        for node in nodes:
            converted.extend((yield node))
        return converted

    def single(self, node: tree_sitter.Node | None):
        """Convert an expression slot; several results are kept under one node."""
        if node is None:
            return None
        converted = yield node
        if not converted:
            return None
        if len(converted) == 1:
            return converted[0]
        return self.make(NodeKind.OTHER, node, converted)

    # -- handlers ----------------------------------------------------------

    def generic(self, node: tree_sitter.Node):
        if node.type in SCOPE_GATES:
            with self.local_scope(inherit=False):
                children = yield from self.each(node.named_children)
        else:
            children = yield from self.each(node.named_children)
        return [self.make(NodeKind.OTHER, node, children)]

    def group(self, node: tree_sitter.Node):
        children = yield from self.each(node.named_children)
        if len(children) == 1:
            return children
        return [self.make(NodeKind.OTHER, node, children)]

    def program(self, node: tree_sitter.Node):
        with self.local_scope(inherit=False):
            children = yield from self.each(node.named_children)
        return self.make(NodeKind.PROGRAM, node, children)

    def class_definition(self, node: tree_sitter.Node):
        name_node = node.child_by_field_name("name")
        with self.local_scope(inherit=False):
            children = yield from self.each(_others(node, name_node))
        return [self.make(NodeKind.CLASS_DEFINITION, node, children, name=self.text(name_node))]

    def module_definition(self, node: tree_sitter.Node):
        name_node = node.child_by_field_name("name")
        with self.local_scope(inherit=False):
            children = yield from self.each(_others(node, name_node))
        return [self.make(NodeKind.MODULE_DEFINITION, node, children, name=self.text(name_node))]

    def method_definition(self, node: tree_sitter.Node):
        name_node = node.child_by_field_name("name")
        params = node.child_by_field_name("parameters")
        owner = node.child_by_field_name("object")

        # ``def self.name``: the owner is evaluated outside the method.
        children = (yield owner) if owner is not None else []
        with self.local_scope(inherit=False):
            if params is not None:
                children.append(self.parameter_list(params))
            else:
                children.append(SyntaxNode(
                    NodeKind.PARAMETER_LIST,
                    node_type="method_parameters",
                    line=node.start_point[0] + 1,
                ))
            children.extend((yield from self.each(_others(node, name_node, params, owner))))
        return [self.make(NodeKind.METHOD_DEFINITION, node, children, name=self.text(name_node))]

    def parameter_list(self, node: tree_sitter.Node) -> SyntaxNode:
        block_locals = node.children_by_field_name("locals")
        names: list[str] = []
        for child in _others(node, *block_locals):
            if child.type in SKIPPED:
                continue
            name = self.parameter_name(child)
            names.append(name)
            if child.type == "destructured_parameter":
                for inner in iter_nodes(child):
                    if inner.type == "identifier":
                        self.declare(self.text(inner))
            else:
                self.declare(name)
        for local in block_locals:
            self.declare(self.text(local))
        return self.make(NodeKind.PARAMETER_LIST, node, names)

    def parameter_name(self, node: tree_sitter.Node) -> str:
        if node.type == "identifier":
            return self.text(node)
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            return self.text(name_node)
        # anonymous splats, ``...`` and destructured parameters
        return self.text(node)

    def block(self, node: tree_sitter.Node):
        params = node.child_by_field_name("parameters")
        children: list = []
        with self.local_scope(inherit=True):
            if params is not None:
                children.append(self.parameter_list(params))
            children.extend((yield from self.each(_others(node, params))))
        return [self.make(NodeKind.BLOCK, node, children)]

    def conditional(self, node: tree_sitter.Node):
        condition = node.child_by_field_name("condition")
        children: list = [(yield from self.single(condition))]
        children.extend((yield from self.each(_others(node, condition))))
        return [self.make(NodeKind.CONDITIONAL, node, children)]

    def call(self, node: tree_sitter.Node):
        receiver = node.child_by_field_name("receiver")
        method = node.child_by_field_name("method")
        name = self.text(method) if method is not None else "call"

        children: list = [(yield from self.single(receiver)), name]
        children.extend((yield from self.each(_others(node, receiver, method))))
        return [self.make(NodeKind.CALL, node, children, name=name)]

    def identifier(self, node: tree_sitter.Node) -> SyntaxNode:
        name = self.text(node)
        if self.is_local(name):
            return self.make(NodeKind.LOCAL_VARIABLE, node, [name], name=name)
        # not a known local: a method call on self without arguments
        return self.make(NodeKind.CALL, node, [None, name], name=name)

    def local_assignment(self, target: tree_sitter.Node, values: Iterable[tree_sitter.Node] = ()):
        name = self.text(target)
        self.declare(name)
        children: list = [name]
        children.extend((yield from self.each(values)))
        return self.make(NodeKind.LOCAL_ASSIGNMENT, target, children, name=name)

    def assignment_targets(self, node: tree_sitter.Node):
        targets: list[SyntaxNode] = []
        for child in node.named_children:
            if child.type == "identifier":
                targets.append((yield from self.local_assignment(child)))
            elif child.type in ("rest_assignment", "destructured_left_assignment", "left_assignment_list"):
                targets.extend((yield from self.assignment_targets(child)))
            else:
                targets.extend((yield child))
        return targets

    def assignment(self, node: tree_sitter.Node):
        left = node.child_by_field_name("left")
        if left is not None and left.type == "identifier":
            assigned = yield from self.local_assignment(left, _others(node, left))
            assigned.node_type = node.type
            return [assigned]
        if left is not None and left.type == "left_assignment_list":
            children = yield from self.assignment_targets(left)
            children.extend((yield from self.each(_others(node, left))))
            return [self.make(NodeKind.OTHER, node, children)]
        return (yield from self.generic(node))

    def for_loop(self, node: tree_sitter.Node):
        pattern = node.child_by_field_name("pattern")
        children: list = []
        if pattern is not None:
            if pattern.type == "identifier":
                children.append((yield from self.local_assignment(pattern)))
            else:
                children.extend((yield from self.assignment_targets(pattern)))
        children.extend((yield from self.each(_others(node, pattern))))
        return [self.make(NodeKind.OTHER, node, children)]

    def exception_variable(self, node: tree_sitter.Node):
        children = yield from self.assignment_targets(node)
        return [self.make(NodeKind.OTHER, node, children)]
