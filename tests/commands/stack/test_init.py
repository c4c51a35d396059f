"""Tests for the init command."""

from branchstack.core.config_store import StackConfig
from branchstack.core.identifiers import BranchName
from branchstack.core.stack_types import BranchStatus
from tests.fakes.time import DEFAULT_NOW
from tests.test_utils.cli_helpers import stack_env
from tests.test_utils.stack_helpers import b, build_payments_graph, make_history, sha


def test_init_creates_stack_at_head() -> None:
    env = stack_env(commits=make_history(1, 2))

    result = env.invoke(["init", "payments", "payments/base"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "payments\n"
    assert "Created stack payments rooted at payments/base" in result.stderr
    graph = env.saved_graph()
    node = graph.node(b("payments/base"))
    assert node is not None
    assert node.tip == sha(2)
    assert node.author == "alice"
    assert node.status == BranchStatus.DRAFT
    assert node.created_at == DEFAULT_NOW
    assert env.graph_store.save_count == 1


def test_init_with_explicit_tip() -> None:
    env = stack_env(commits=make_history(1, 2))

    result = env.invoke(["init", "payments", "payments/base", "--tip", str(sha(1))])

    assert result.exit_code == 0, result.output
    assert env.saved_graph().node(b("payments/base")).tip == sha(1)  # type: ignore[union-attr]


def test_init_in_empty_repository_has_no_tip() -> None:
    env = stack_env()

    result = env.invoke(["init", "payments", "payments/base"])

    assert result.exit_code == 0, result.output
    node = env.saved_graph().node(BranchName("payments/base"))
    assert node is not None
    assert node.tip is None


def test_init_duplicate_stack_fails() -> None:
    env = stack_env(graph=build_payments_graph())

    result = env.invoke(["init", "payments", "other/base"])

    assert result.exit_code == 1
    assert 'Error: stack "payments" already exists' in result.stderr
    assert env.graph_store.save_count == 0


def test_init_root_owned_by_other_stack_fails() -> None:
    env = stack_env(graph=build_payments_graph())

    result = env.invoke(["init", "other", "feat/a"])

    assert result.exit_code == 1
    assert 'branch "feat/a" already exists' in result.stderr


def test_init_invalid_branch_name_fails() -> None:
    env = stack_env()

    result = env.invoke(["init", "payments", "bad..name"])

    assert result.exit_code == 1
    assert "Error: Invalid branch name 'bad..name'" in result.stderr
    assert env.graph_store.save_count == 0


def test_init_invalid_tip_fails() -> None:
    env = stack_env()

    result = env.invoke(["init", "payments", "base", "--tip", "xyz"])

    assert result.exit_code == 1
    assert "Invalid commit id" in result.stderr


def test_init_outside_repository() -> None:
    env = stack_env(in_repo=False)

    result = env.invoke(["init", "payments", "base"])

    assert result.exit_code == 1
    assert "Not inside a git repository" in result.stderr


def test_init_uses_configured_author() -> None:
    env = stack_env(config=StackConfig(default_author="release-bot"))

    result = env.invoke(["init", "payments", "base"])

    assert result.exit_code == 0, result.output
    assert env.saved_graph().node(b("base")).author == "release-bot"  # type: ignore[union-attr]
