"""Tests for stack graph persistence."""

import json
from pathlib import Path

import pytest

from branchstack.core.errors import BranchExistsError, GraphSerdeError
from branchstack.core.graph_store import (
    FakeGraphStore,
    JsonGraphStore,
    graph_from_dict,
    graph_to_dict,
)
from branchstack.core.stack_graph import StackGraph
from branchstack.core.stack_types import BranchStatus
from tests.test_utils.stack_helpers import b, build_payments_graph, sha


def _make_repo(tmp_path: Path) -> Path:
    repo_root = tmp_path / "repo"
    (repo_root / ".git").mkdir(parents=True)
    return repo_root


def test_load_missing_file_returns_empty_graph(tmp_path: Path) -> None:
    store = JsonGraphStore()

    graph = store.load_or_default(_make_repo(tmp_path))

    assert graph == StackGraph()
    assert graph.branch_to_stack == {}


def test_save_writes_inside_git_dir(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()

    store.save(build_payments_graph(), repo_root)

    assert store.path(repo_root) == repo_root / ".git" / "branchstack.json"
    assert store.path(repo_root).exists()


def test_custom_stack_file_name(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore(stack_file="stacks.json")

    store.save(build_payments_graph(), repo_root)

    assert (repo_root / ".git" / "stacks.json").exists()


def test_round_trip_preserves_graph(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()
    graph = build_payments_graph()
    graph.set_status(b("feat/a"), BranchStatus.OPEN)
    graph.reorder_children("payments", b("payments/base"), [b("feat/b"), b("feat/a")])
    graph.new_stack("search", b("search/base"), "dave")

    store.save(graph, repo_root)
    loaded = store.load_or_default(repo_root)

    assert loaded == graph
    assert loaded.branch_to_stack == graph.branch_to_stack
    assert loaded.children_of(b("payments/base")) == (b("feat/b"), b("feat/a"))
    assert loaded.node(b("feat/a")).status == BranchStatus.OPEN  # type: ignore[union-attr]
    assert loaded.node(b("search/base")).tip is None  # type: ignore[union-attr]


def test_saved_json_layout(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()

    store.save(build_payments_graph(), repo_root)
    data = json.loads(store.path(repo_root).read_text(encoding="utf-8"))

    assert list(data) == ["stacks"]
    stack = data["stacks"]["payments"]
    assert stack["root"] == "payments/base"
    assert stack["children"]["payments/base"] == ["feat/a", "feat/b"]
    node = stack["branches"]["feat/a-1"]
    assert node["parent"] == "feat/a"
    assert node["tip"] == str(sha(3))
    assert node["status"] == "draft"
    assert node["author"] == "bob"
    assert node["created_at"] == "2025-01-01T00:00:00+00:00"
    assert "branch_to_stack" not in json.dumps(data)


def test_load_corrupt_json_raises(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()
    store.path(repo_root).write_text("{not json", encoding="utf-8")

    with pytest.raises(GraphSerdeError):
        store.load_or_default(repo_root)


def test_load_invalid_utf8_raises(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()
    store.path(repo_root).write_bytes(b'{"stacks": "\xff\xfe"}')

    with pytest.raises(GraphSerdeError, match="not valid UTF-8"):
        store.load_or_default(repo_root)


def test_load_non_object_raises(tmp_path: Path) -> None:
    repo_root = _make_repo(tmp_path)
    store = JsonGraphStore()
    store.path(repo_root).write_text("[]", encoding="utf-8")

    with pytest.raises(GraphSerdeError, match="JSON object"):
        store.load_or_default(repo_root)


def test_decode_missing_field_raises() -> None:
    data = graph_to_dict(build_payments_graph())
    del data["stacks"]["payments"]["branches"]["feat/a"]["author"]

    with pytest.raises(GraphSerdeError, match="malformed"):
        graph_from_dict(data)


def test_decode_bad_status_raises() -> None:
    data = graph_to_dict(build_payments_graph())
    data["stacks"]["payments"]["branches"]["feat/a"]["status"] = "merged"

    with pytest.raises(GraphSerdeError):
        graph_from_dict(data)


def test_decode_inconsistent_children_raises() -> None:
    data = graph_to_dict(build_payments_graph())
    data["stacks"]["payments"]["children"]["payments/base"] = ["feat/a"]

    with pytest.raises(GraphSerdeError, match="inconsistent"):
        graph_from_dict(data)


def test_decode_branch_in_two_stacks_raises() -> None:
    graph = build_payments_graph()
    graph.new_stack("search", b("search/base"), "dave")
    data = graph_to_dict(graph)
    search = data["stacks"]["search"]
    search["branches"]["feat/b"] = dict(
        data["stacks"]["payments"]["branches"]["feat/b"], parent="search/base"
    )
    search["children"]["search/base"] = ["feat/b"]
    search["children"]["feat/b"] = []

    with pytest.raises(BranchExistsError):
        graph_from_dict(data)


def test_fake_store_returns_fresh_copy() -> None:
    repo_root = Path("/repo")
    graph = build_payments_graph()
    store = FakeGraphStore(graphs={repo_root: graph})

    loaded = store.load_or_default(repo_root)
    loaded.set_status(b("feat/a"), BranchStatus.ABANDONED)

    assert store.load_or_default(repo_root) == graph
    assert store.save_count == 0


def test_fake_store_save_counts() -> None:
    repo_root = Path("/repo")
    store = FakeGraphStore()

    store.save(build_payments_graph(), repo_root)

    assert store.save_count == 1
    assert store.load_or_default(repo_root) == build_payments_graph()
    assert store.load_or_default(Path("/other")) == StackGraph()
