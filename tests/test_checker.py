"""
Tests for the checker and its four rules on hand-built syntax trees.
"""

import io
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from cleancode import Checker, NodeKind, SyntaxNode


# ---------------------------------------------------------------------------
# Tree builders
# ---------------------------------------------------------------------------

def program(*children):
    return SyntaxNode(NodeKind.PROGRAM, list(children))


def klass(name, *body):
    return SyntaxNode(NodeKind.CLASS_DEFINITION, list(body), name=name)


def params(*names):
    return SyntaxNode(NodeKind.PARAMETER_LIST, list(names))


def method(name, parameters=(), *body):
    return SyntaxNode(NodeKind.METHOD_DEFINITION, [params(*parameters), *body], name=name)


def block(parameters=None, *body):
    children = [params(*parameters)] if parameters is not None else []
    return SyntaxNode(NodeKind.BLOCK, children + list(body))


def lvar(name):
    return SyntaxNode(NodeKind.LOCAL_VARIABLE, [name], name=name)


def lasgn(name, value=None):
    children = [name] + ([value] if value is not None else [])
    return SyntaxNode(NodeKind.LOCAL_ASSIGNMENT, children, name=name)


def call(receiver, name):
    return SyntaxNode(NodeKind.CALL, [receiver, name], name=name)


def chain(*names):
    """``chain("a", "b", "c")`` builds ``a.b.c`` with ``a`` a receiver-less call."""
    node = None
    for name in names:
        node = call(node, name)
    return node


def cond(test, *body):
    return SyntaxNode(NodeKind.CONDITIONAL, [test, *body])


def literals(count):
    return [SyntaxNode(NodeKind.LITERAL, ["1"]) for _ in range(count)]


def run(tree, scoped=True):
    out = io.StringIO()
    issues = Checker("sample.rb", tree, scoped=scoped, out=out).run()
    return issues, out.getvalue().splitlines()


def rules(issues):
    return [issue.rule for issue in issues]


# ---------------------------------------------------------------------------
# Too many arguments
# ---------------------------------------------------------------------------

class TestTooManyArguments:
    """Parameter lists longer than three."""

    def test_three_parameters_pass(self):
        issues, lines = run(program(klass("Account", method("open", ["a", "b", "c"]))))
        assert issues == []
        assert lines == []

    def test_four_parameters_warn_once(self):
        issues, lines = run(program(klass("Account", method("open", ["a", "b", "c", "d"]))))
        assert rules(issues) == ["too_many_arguments"]
        assert lines == [
            "sample.rb: Warning, too many arguments found in class Account for open",
            "sample.rb: Maximum 3 arguments per method recommended.",
        ]

    def test_each_parameter_list_is_checked(self):
        tree = program(klass(
            "Account",
            method("open", ["a", "b", "c", "d"]),
            method("close", ["a", "b", "c", "d", "e"]),
        ))
        issues, _ = run(tree)
        assert [(i.class_name, i.method_name) for i in issues] == [
            ("Account", "open"),
            ("Account", "close"),
        ]

    def test_missing_class_renders_empty(self):
        _, lines = run(program(method("helper", ["a", "b", "c", "d"])))
        assert lines[0] == "sample.rb: Warning, too many arguments found in class  for helper"


# ---------------------------------------------------------------------------
# Boolean argument
# ---------------------------------------------------------------------------

class TestBooleanArgument:
    """Parameters used directly as a branch condition."""

    def test_parameter_as_condition_warns(self):
        issues, lines = run(program(klass("Printer", method("render", ["draft"], cond(lvar("draft"))))))
        assert rules(issues) == ["boolean_argument"]
        assert lines == [
            "sample.rb: Warning, an argument is used as a boolean Printer for render",
            "sample.rb: Split this method in 2 cases. One for the true, one for the false.",
        ]

    def test_every_conditional_warns(self):
        tree = program(klass(
            "Printer",
            method("render", ["draft"], cond(lvar("draft")), cond(lvar("draft"))),
        ))
        issues, _ = run(tree)
        assert rules(issues) == ["boolean_argument", "boolean_argument"]

    def test_non_parameter_local_passes(self):
        tree = program(method("render", ["draft"], lasgn("ready"), cond(lvar("ready"))))
        issues, _ = run(tree)
        assert issues == []

    def test_compound_condition_passes(self):
        test = SyntaxNode(NodeKind.OTHER, [lvar("draft"), lvar("draft")], node_type="binary")
        issues, _ = run(program(method("render", ["draft"], cond(test))))
        assert issues == []

    def test_call_condition_passes(self):
        issues, _ = run(program(method("render", ["draft"], cond(call(None, "draft")))))
        assert issues == []

    def test_conditional_without_test_passes(self):
        empty = SyntaxNode(NodeKind.CONDITIONAL, [None])
        issues, _ = run(program(method("render", ["draft"], empty)))
        assert issues == []

    def test_reassigned_parameter_passes(self):
        tree = program(method(
            "render", ["draft"],
            cond(lvar("draft")),
            lasgn("draft", lvar("draft")),
            cond(lvar("draft")),
        ))
        issues, _ = run(tree)
        assert len(issues) == 1
        assert issues[0].rule == "boolean_argument"


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

class TestComplexity:
    """Methods whose mass exceeds 40."""

    def test_mass_forty_passes(self):
        body = method("compute", [], *literals(38))
        assert body.mass == 40
        issues, _ = run(program(klass("Ledger", body)))
        assert issues == []

    def test_mass_forty_one_warns(self):
        body = method("compute", [], *literals(39))
        assert body.mass == 41
        issues, lines = run(program(klass("Ledger", body)))
        assert rules(issues) == ["complexity"]
        assert lines == [
            "sample.rb: Warning, the method compute in Ledger is too complex (mass: 41)",
            "sample.rb: Split this method with the extract method refactoring pattern.",
        ]

    def test_mass_counts_nested_nodes(self):
        nested = cond(lvar("x"), call(call(None, "a"), "b"))
        assert nested.mass == 4
        assert method("m", ["x"], nested).mass == 6


# ---------------------------------------------------------------------------
# Law of demeter
# ---------------------------------------------------------------------------

class TestLawOfDemeter:
    """Chains of at least three nested calls."""

    def test_three_call_chain_warns(self):
        issues, lines = run(program(klass("Report", method("total", [], chain("a", "b", "c")))))
        assert rules(issues) == ["law_of_demeter"]
        assert lines == [
            "sample.rb: Warning, the call in total in Report violate the law of demeter",
            "sample.rb: Use the principle of 'Ask, don't tell.'",
        ]

    def test_two_call_chain_passes(self):
        issues, _ = run(program(method("total", [], chain("a", "b"))))
        assert issues == []

    def test_chain_on_local_variable(self):
        tree = program(method("total", ["order"], call(call(call(lvar("order"), "a"), "b"), "c")))
        issues, _ = run(tree)
        assert rules(issues) == ["law_of_demeter"]

    def test_one_warning_per_method(self):
        tree = program(klass(
            "Report",
            method("total", [], chain("a", "b", "c"), chain("d", "e", "f", "g")),
            method("average", [], chain("a", "b", "c")),
        ))
        issues, _ = run(tree)
        assert [i.method_name for i in issues] == ["total", "average"]

    def test_same_method_name_in_other_class_passes(self):
        tree = program(
            klass("Report", method("total", [], chain("a", "b", "c"))),
            klass("Invoice", method("total", [], chain("a", "b", "c"))),
        )
        issues, _ = run(tree)
        assert len(issues) == 1
        assert issues[0].class_name == "Report"

    def test_chain_outside_method_passes(self):
        issues, _ = run(program(chain("a", "b", "c")))
        assert issues == []


# ---------------------------------------------------------------------------
# Scoping
# ---------------------------------------------------------------------------

class TestScoping:
    """Scoped versus unscoped context."""

    def _nested_class_tree(self):
        return program(klass(
            "Outer",
            klass("Inner", method("helper")),
            method("build", ["a", "b", "c", "d"]),
        ))

    def test_scoped_restores_class_name(self):
        issues, _ = run(self._nested_class_tree())
        assert (issues[0].class_name, issues[0].method_name) == ("Outer", "build")

    def test_unscoped_keeps_inner_class_name(self):
        issues, _ = run(self._nested_class_tree(), scoped=False)
        assert (issues[0].class_name, issues[0].method_name) == ("Inner", "build")

    def test_scoped_restores_parameters_after_block(self):
        tree = program(method("each_line", ["strip"], block(["line"]), cond(lvar("strip"))))
        issues, _ = run(tree)
        assert rules(issues) == ["boolean_argument"]

    def test_unscoped_block_parameters_replace_method_parameters(self):
        tree = program(method("each_line", ["strip"], block(["line"]), cond(lvar("strip"))))
        issues, _ = run(tree, scoped=False)
        assert issues == []

    def test_scoped_block_reassignment_stays_in_block(self):
        tree = program(method(
            "each_line", ["strip"],
            block(None, lasgn("strip")),
            cond(lvar("strip")),
        ))
        scoped, _ = run(tree)
        unscoped, _ = run(tree, scoped=False)
        assert rules(scoped) == ["boolean_argument"]
        assert unscoped == []

    def test_scoped_method_name_restored_after_nested_definition(self):
        tree = program(klass(
            "Outer",
            method("outer", [], method("inner"), chain("a", "b", "c")),
        ))
        scoped, _ = run(tree)
        unscoped, _ = run(tree, scoped=False)
        assert [i.method_name for i in scoped] == ["outer"]
        assert [i.method_name for i in unscoped] == ["inner"]


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

class TestChecker:

    def test_issues_follow_preorder(self):
        tree = program(klass(
            "Job",
            method("perform", ["a", "b", "c", "d"], cond(lvar("a")), chain("x", "y", "z"), *literals(40)),
        ))
        issues, _ = run(tree)
        assert rules(issues) == [
            "complexity",
            "too_many_arguments",
            "boolean_argument",
            "law_of_demeter",
        ]

    def test_running_twice_gives_same_output(self):
        tree = program(klass("Job", method("perform", ["a", "b", "c", "d"], cond(lvar("a")))))
        _, first = run(tree)
        _, second = run(tree)
        assert first == second
        assert len(first) == 4

    @pytest.mark.parametrize("scoped", [True, False])
    def test_fresh_context_per_checker(self, scoped):
        tree = program(method("total", [], chain("a", "b", "c")))
        first, _ = run(tree, scoped=scoped)
        second, _ = run(tree, scoped=scoped)
        assert len(first) == len(second) == 1

    def test_tree_is_not_modified(self):
        tree = program(method("render", ["draft"], lasgn("draft"), cond(lvar("draft"))))
        run(tree)
        parameter_list = tree.children[0].children[0]
        assert parameter_list.parameter_names == ["draft"]

    def test_issue_records_line(self):
        node = SyntaxNode(NodeKind.PARAMETER_LIST, ["a", "b", "c", "d"], line=7)
        tree = program(SyntaxNode(NodeKind.METHOD_DEFINITION, [node], name="m", line=7))
        issues, _ = run(tree)
        assert issues[0].line == 7

    def test_deep_chain(self):
        deep = chain(*["a"] * 5000)
        tree = program(method("m", [], deep))
        issues, _ = run(tree)
        assert rules(issues) == ["complexity", "law_of_demeter"]
        assert tree.mass == 5003
