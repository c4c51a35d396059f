"""Reconstruct a stack graph from a linear commit history.

The heuristic walks commits oldest to newest:

1. The first commit seeds a single root branch.
2. A commit that is already a branch tip (a fork point) starts a new child of
   the branch that owns it, named `{parent}/{k}` with `k` the child's 1-based
   position. The child becomes the current branch.
3. Any other commit extends the current branch.

Fork points are found through a reverse index `tip_commit -> branch` kept in
lock-step with every tip move. When a branch moves past a tip, that commit
leaves the index and is remembered as a retired tip so a later commit reusing
it still forks from the branch that owned it.

This is best-effort. A genuine fork and a force-push that reused an old commit
as a new tip look identical in a linear history, and both produce a child
branch.
"""

import logging
from collections.abc import Iterable

from branchstack.core.errors import EmptyHistoryError
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_graph import Descendants, Stack, StackGraph
from branchstack.core.stack_types import Commit, CreateBranchIntent

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "root"


class TopologyBuilder:
    """Single-use builder holding the reverse tip indexes for one history walk."""

    def __init__(self, root_name: str = DEFAULT_ROOT_NAME) -> None:
        self.root = BranchName(root_name)
        self.graph = StackGraph()
        self._tip_index: dict[CommitId, BranchName] = {}
        self._retired_tips: dict[CommitId, BranchName] = {}
        self._current: BranchName = self.root

    @property
    def stack_name(self) -> str:
        return str(self.root)

    def build(self, history: Iterable[Commit]) -> StackGraph:
        commits = iter(history)
        first = next(commits, None)
        if first is None:
            raise EmptyHistoryError()

        self.graph.new_stack(
            self.stack_name, self.root, first.author, tip=first.id, now=first.time
        )
        self._tip_index[first.id] = self.root

        count = 1
        for commit in commits:
            count += 1
            fork_parent = self._fork_parent(commit.id)
            if fork_parent is None:
                self._extend_current(commit)
            else:
                self._fork(fork_parent, commit)

        logger.debug(
            "Reconstructed %d branches from %d commits",
            len(self.graph.branch_to_stack),
            count,
        )
        return self.graph

    def _fork_parent(self, commit_id: CommitId) -> BranchName | None:
        owner = self._tip_index.get(commit_id)
        if owner is not None:
            return owner
        return self._retired_tips.get(commit_id)

    def _fork(self, parent: BranchName, commit: Commit) -> None:
        position = len(self.graph.children_of(parent)) + 1
        child = BranchName(f"{parent}/{position}")
        self.graph.add_child(
            self.stack_name,
            parent,
            child,
            commit.author,
            tip=commit.id,
            now=commit.time,
        )
        # The fork commit keeps its first owner, so forking from it again
        # creates a sibling rather than a grandchild.
        self._current = child
        logger.debug("Fork at %s: %s -> %s", commit.id.short(), parent, child)

    def _extend_current(self, commit: Commit) -> None:
        node = self.graph.node(self._current)
        old_tip = node.tip if node is not None else None
        if old_tip is not None and self._tip_index.get(old_tip) == self._current:
            del self._tip_index[old_tip]
            self._retired_tips.setdefault(old_tip, self._current)

        self.graph.update_tip(self._current, commit.id, now=commit.time)
        self._tip_index[commit.id] = self._current


def build_graph_from_commits(
    history: Iterable[Commit],
    *,
    root_name: str = DEFAULT_ROOT_NAME,
) -> StackGraph:
    """Reconstruct a single-stack graph from commits ordered oldest to newest.

    Args:
        history: Commits, oldest first
        root_name: Name of the seed branch and of the resulting stack

    Returns:
        StackGraph with one stack named `root_name`

    Raises:
        EmptyHistoryError: If `history` is empty
        InvalidBranchNameError: If `root_name` is not a valid branch name
    """
    return TopologyBuilder(root_name).build(history)


def plan_branch_creation(stack: Stack) -> list[CreateBranchIntent]:
    """List branch-creation intents for every branch with a tip, root first.

    Order is breadth-first so a parent is always created before its children.
    """
    intents: list[CreateBranchIntent] = []
    for branch in Descendants(stack, stack.root):
        node = stack.branches[branch]
        if node.tip is None:
            continue
        intents.append(CreateBranchIntent(name=branch, start_commit=node.tip))
    return intents
