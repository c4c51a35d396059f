"""Shared plumbing for CLI commands: argument parsing and graph load/save."""

from pathlib import Path

from branchstack.cli.ensure import Ensure, fail
from branchstack.core.context import StackContext
from branchstack.core.identifiers import (
    BranchName,
    CommitId,
    InvalidBranchNameError,
    InvalidCommitIdError,
)
from branchstack.core.stack_graph import StackGraph


def parse_branch(value: str) -> BranchName:
    """Validate a branch name given on the command line.

    Raises:
        SystemExit: If `value` is not a valid branch name
    """
    try:
        return BranchName(value)
    except InvalidBranchNameError as e:
        fail(str(e))


def parse_commit(value: str) -> CommitId:
    """Validate a commit id given on the command line.

    Raises:
        SystemExit: If `value` is not a valid commit id
    """
    try:
        return CommitId(value)
    except InvalidCommitIdError as e:
        fail(str(e))


def repo_root(ctx: StackContext) -> Path:
    """Root of the current repository, or exit with an error."""
    return Ensure.in_repo(ctx.repo).root


def load_graph(ctx: StackContext) -> StackGraph:
    return ctx.graph_store.load_or_default(repo_root(ctx))


def save_graph(ctx: StackContext, graph: StackGraph) -> None:
    ctx.graph_store.save(graph, repo_root(ctx))


def resolve_branch(ctx: StackContext, branch: str | None) -> BranchName:
    """Use `branch` if given, else the currently checked-out branch.

    Raises:
        SystemExit: If no branch was given and HEAD is detached, or the
            current branch name is not a valid branch name
    """
    if branch is not None:
        return parse_branch(branch)
    current = Ensure.not_none(
        ctx.git.get_current_branch(ctx.cwd),
        "Not currently on a branch (detached HEAD). Pass a branch name explicitly.",
    )
    return parse_branch(current)


def current_branch_or_none(ctx: StackContext) -> BranchName | None:
    current = ctx.git.get_current_branch(ctx.cwd)
    if current is None:
        return None
    try:
        return BranchName(current)
    except InvalidBranchNameError:
        return None
