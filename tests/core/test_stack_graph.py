"""Tests for stack graph mutation and its invariants."""

from datetime import timedelta

import pytest

from branchstack.core.errors import (
    BranchExistsError,
    InvalidReorderError,
    StackExistsError,
    UnknownBranchError,
    UnknownStackError,
)
from branchstack.core.stack_graph import Stack, StackGraph
from branchstack.core.stack_types import BranchStatus
from tests.test_utils.stack_helpers import BASE_TIME, b, build_payments_graph, sha


def _assert_tree_invariants(graph: StackGraph) -> None:
    for stack in graph.stacks.values():
        assert stack.invariant_violations() == []
        roots = [name for name in stack.branches if graph.parent_of(name) is None]
        assert roots == [stack.root]
        for name in stack.branches:
            assert graph.branch_to_stack[name] == stack.name


def test_new_stack_registers_root() -> None:
    graph = StackGraph()

    stack = graph.new_stack("payments", b("payments/base"), "alice", tip=sha(1), now=BASE_TIME)

    assert stack.name == "payments"
    assert stack.root == b("payments/base")
    assert stack.children == {b("payments/base"): []}
    root = stack.branches[b("payments/base")]
    assert root.parent is None
    assert root.is_root
    assert root.status == BranchStatus.DRAFT
    assert root.author == "alice"
    assert root.tip == sha(1)
    assert root.created_at == BASE_TIME
    assert root.updated_at == BASE_TIME
    assert graph.stack_for_branch(b("payments/base")) is stack


def test_new_stack_rejects_duplicate_name() -> None:
    graph = StackGraph()
    graph.new_stack("payments", b("payments/base"), "alice")

    with pytest.raises(StackExistsError) as exc_info:
        graph.new_stack("payments", b("other/base"), "alice")

    assert exc_info.value.name == "payments"
    assert list(graph.stacks) == ["payments"]
    assert b("other/base") not in graph.branch_to_stack


def test_new_stack_rejects_root_owned_by_another_stack() -> None:
    graph = build_payments_graph()

    with pytest.raises(BranchExistsError) as exc_info:
        graph.new_stack("other", b("feat/a"), "alice")

    assert exc_info.value.branch == b("feat/a")
    assert not graph.has_stack("other")


def test_new_stack_defaults_timestamps_to_utc_now() -> None:
    graph = StackGraph()

    stack = graph.new_stack("s", b("base"), "alice")

    node = stack.branches[b("base")]
    assert node.created_at.tzinfo is not None
    assert node.tip is None


def test_add_child_appends_in_insertion_order() -> None:
    graph = build_payments_graph()
    stack = graph.stacks["payments"]

    assert stack.children[b("payments/base")] == [b("feat/a"), b("feat/b")]
    assert stack.children[b("feat/a")] == [b("feat/a-1")]
    assert stack.children[b("feat/a-1")] == []

    child = stack.branches[b("feat/a-1")]
    assert child.parent == b("feat/a")
    assert child.status == BranchStatus.DRAFT
    assert child.author == "bob"
    _assert_tree_invariants(graph)


def test_add_child_unknown_parent() -> None:
    graph = build_payments_graph()

    with pytest.raises(UnknownBranchError) as exc_info:
        graph.add_child("payments", b("missing"), b("feat/c"), "alice")

    assert exc_info.value.branch == b("missing")
    assert b("feat/c") not in graph.branch_to_stack


def test_add_child_unknown_stack() -> None:
    graph = build_payments_graph()

    with pytest.raises(UnknownStackError):
        graph.add_child("nope", b("payments/base"), b("feat/c"), "alice")


def test_add_child_rejects_name_in_same_stack() -> None:
    graph = build_payments_graph()

    with pytest.raises(BranchExistsError):
        graph.add_child("payments", b("feat/b"), b("feat/a"), "alice")

    # Parent link of the existing branch is untouched
    assert graph.parent_of(b("feat/a")).name == b("payments/base")  # type: ignore[union-attr]
    assert graph.children_of(b("feat/b")) == ()


def test_add_child_rejects_name_owned_by_different_stack() -> None:
    graph = build_payments_graph()
    graph.new_stack("search", b("search/base"), "dave")

    with pytest.raises(BranchExistsError) as exc_info:
        graph.add_child("search", b("search/base"), b("feat/a-1"), "dave")

    assert exc_info.value.branch == b("feat/a-1")
    assert graph.stack_for_branch(b("feat/a-1")).name == "payments"  # type: ignore[union-attr]
    assert graph.stacks["search"].children[b("search/base")] == []
    assert b("feat/a-1") not in graph.stacks["search"].branches


def test_failed_add_child_leaves_graph_unchanged() -> None:
    graph = build_payments_graph()
    before = build_payments_graph()

    with pytest.raises(BranchExistsError):
        graph.add_child("payments", b("feat/a"), b("feat/b"), "alice")

    assert graph == before
    assert graph.branch_to_stack == before.branch_to_stack


def test_reorder_children_permutation_succeeds() -> None:
    graph = StackGraph()
    graph.new_stack("s", b("base"), "alice")
    graph.add_child("s", b("base"), b("a"), "alice")
    graph.add_child("s", b("base"), b("b"), "alice")

    graph.reorder_children("s", b("base"), [b("b"), b("a")])

    assert graph.stacks["s"].children[b("base")] == [b("b"), b("a")]
    assert graph.next_of(b("b")) == b("a")
    assert graph.prev_of(b("a")) == b("b")
    _assert_tree_invariants(graph)


def test_reorder_children_rejects_different_set() -> None:
    graph = StackGraph()
    graph.new_stack("s", b("base"), "alice")
    graph.add_child("s", b("base"), b("a"), "alice")
    graph.add_child("s", b("base"), b("b"), "alice")

    with pytest.raises(InvalidReorderError) as exc_info:
        graph.reorder_children("s", b("base"), [b("a"), b("c")])

    err = exc_info.value
    assert err.parent == b("base")
    assert err.expected == [b("a"), b("b")]
    assert err.got == [b("a"), b("c")]
    assert "expected: ['a', 'b']" in str(err)
    assert graph.stacks["s"].children[b("base")] == [b("a"), b("b")]


def test_reorder_children_rejects_dropped_or_duplicated_entries() -> None:
    graph = build_payments_graph()

    with pytest.raises(InvalidReorderError):
        graph.reorder_children("payments", b("payments/base"), [b("feat/a")])
    with pytest.raises(InvalidReorderError):
        graph.reorder_children(
            "payments", b("payments/base"), [b("feat/a"), b("feat/a"), b("feat/b")]
        )


def test_reorder_children_unknown_parent() -> None:
    graph = build_payments_graph()

    with pytest.raises(UnknownBranchError):
        graph.reorder_children("payments", b("ghost"), [])


def test_reorder_children_of_leaf_with_empty_list() -> None:
    graph = build_payments_graph()

    graph.reorder_children("payments", b("feat/b"), [])

    assert graph.children_of(b("feat/b")) == ()


def test_update_tip_moves_tip_and_bumps_updated_at() -> None:
    graph = build_payments_graph()
    later = BASE_TIME + timedelta(hours=5)

    node = graph.update_tip(b("feat/b"), sha(99), now=later)

    assert node.tip == sha(99)
    assert node.updated_at == later
    assert node.created_at == BASE_TIME
    assert graph.node(b("feat/b")) == node


def test_update_tip_unknown_branch() -> None:
    graph = build_payments_graph()

    with pytest.raises(UnknownBranchError):
        graph.update_tip(b("ghost"), sha(1))


def test_set_status() -> None:
    graph = build_payments_graph()

    node = graph.set_status(b("feat/a"), BranchStatus.LANDED)

    assert node.status == BranchStatus.LANDED
    assert graph.stacks["payments"].branches[b("feat/a")].status == BranchStatus.LANDED


def test_set_status_unknown_branch() -> None:
    graph = build_payments_graph()

    with pytest.raises(UnknownBranchError):
        graph.set_status(b("ghost"), BranchStatus.OPEN)


def test_every_non_root_branch_has_resolvable_parent() -> None:
    graph = build_payments_graph()
    graph.new_stack("search", b("search/base"), "dave")
    graph.add_child("search", b("search/base"), b("search/index"), "dave")
    graph.add_child("search", b("search/base"), b("search/query"), "dave")
    graph.reorder_children("search", b("search/base"), [b("search/query"), b("search/index")])

    _assert_tree_invariants(graph)
    for stack in graph.stacks.values():
        for name, node in stack.branches.items():
            if name == stack.root:
                assert graph.parent_of(name) is None
            else:
                parent = graph.parent_of(name)
                assert parent is not None
                assert parent.name == node.parent


def test_reindex_rebuilds_index() -> None:
    graph = build_payments_graph()
    graph.branch_to_stack = {}

    graph.reindex()

    assert graph.branch_to_stack == {
        b("payments/base"): "payments",
        b("feat/a"): "payments",
        b("feat/a-1"): "payments",
        b("feat/b"): "payments",
    }


def test_reindex_rejects_branch_in_two_stacks() -> None:
    payments = build_payments_graph().stacks["payments"]
    clash = Stack(
        name="clash",
        root=b("feat/a"),
        branches={b("feat/a"): payments.branches[b("payments/base")]},
        children={b("feat/a"): []},
    )

    with pytest.raises(BranchExistsError):
        StackGraph.from_stacks([payments, clash])


def test_graph_equality_ignores_index() -> None:
    graph = build_payments_graph()
    other = build_payments_graph()
    other.branch_to_stack = {}

    assert graph == other


def test_invariant_violations_reports_broken_links() -> None:
    stack = build_payments_graph().stacks["payments"]
    stack.children[b("payments/base")] = [b("feat/a")]

    problems = stack.invariant_violations()

    assert any("feat/b is missing from children of payments/base" in p for p in problems)
