"""Stack operations that turn graph queries into git intents.

Pure functions over a StackGraph plus the git collaborator's read-only
queries. Nothing here executes git; callers act on the returned intents.
"""

import logging
from datetime import datetime
from pathlib import Path

from branchstack.core.config_store import StackConfig
from branchstack.core.errors import (
    EmptyHistoryError,
    NoAdjacentBranchError,
    UnknownBranchError,
)
from branchstack.core.git.abc import Git
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_graph import StackGraph
from branchstack.core.stack_types import CreateBranchIntent, RebaseIntent
from branchstack.core.topology import DEFAULT_ROOT_NAME, build_graph_from_commits

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "unknown"


def resolve_author(config: StackConfig, git: Git, repo_root: Path) -> str:
    """Author recorded on new branches: config, then git user.name, then a placeholder."""
    if config.default_author is not None:
        return config.default_author
    user_name = git.get_user_name(repo_root)
    if user_name is not None:
        return user_name
    return UNKNOWN_AUTHOR


def discover_graph(
    git: Git,
    repo_root: Path,
    history_depth: int,
    *,
    root_name: str = DEFAULT_ROOT_NAME,
) -> StackGraph:
    """Reconstruct a graph from the last `history_depth` commits reachable from HEAD.

    Raises:
        EmptyHistoryError: If the repository has no commits
    """
    head = git.get_head(repo_root)
    if head is None:
        raise EmptyHistoryError()

    history = git.list_commits(repo_root, head, history_depth)
    logger.debug("Discovering stack from %d commits ending at %s", len(history), head.short())
    return build_graph_from_commits(history, root_name=root_name)


def create_child_branch(
    graph: StackGraph,
    parent: BranchName,
    child: BranchName,
    author: str,
    *,
    fallback_start: CommitId | None,
    now: datetime | None = None,
) -> CreateBranchIntent | None:
    """Register `child` under `parent` and describe the git branch to create.

    The new branch starts at the parent's tip, or at `fallback_start` when the
    parent has no recorded tip. Returns None when neither is known: the child
    is registered but there is nothing for git to create yet.

    Raises:
        UnknownBranchError: If no stack owns `parent`
        BranchExistsError: If any stack already owns `child`
    """
    stack = graph.stack_for_branch(parent)
    if stack is None:
        raise UnknownBranchError(parent)

    parent_node = stack.branches[parent]
    start = parent_node.tip if parent_node.tip is not None else fallback_start

    graph.add_child(stack.name, parent, child, author, tip=start, now=now)
    if start is None:
        return None
    return CreateBranchIntent(name=child, start_commit=start)


def restack_intents(graph: StackGraph, branch: BranchName) -> list[RebaseIntent]:
    """Rebase intents for `branch` and everything above it, parents first.

    Each branch is rebased onto its parent's tip. Branches whose parent has no
    tip are skipped, as is a stack root.

    Raises:
        UnknownBranchError: If no stack owns `branch`
    """
    stack = graph.stack_for_branch(branch)
    if stack is None:
        raise UnknownBranchError(branch)

    intents: list[RebaseIntent] = []
    for name in graph.descendants(branch):
        parent = graph.parent_of(name)
        if parent is None or parent.tip is None:
            continue
        intents.append(RebaseIntent(branch=name, new_base=parent.tip))
    return intents


def adjacent_branch(graph: StackGraph, branch: BranchName, *, forward: bool) -> BranchName:
    """The sibling after (`forward`) or before `branch` in its parent's order.

    Raises:
        UnknownBranchError: If no stack owns `branch`
        NoAdjacentBranchError: If `branch` is the last (or first) sibling, or a root
    """
    if graph.stack_for_branch(branch) is None:
        raise UnknownBranchError(branch)

    sibling = graph.next_of(branch) if forward else graph.prev_of(branch)
    if sibling is None:
        raise NoAdjacentBranchError(branch, "next" if forward else "previous")
    return sibling
