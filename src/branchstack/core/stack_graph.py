"""The stack graph: named stacks of branches plus a branch -> stack index.

A `Stack` is a rooted tree of `BranchNode`s. A `StackGraph` holds every stack
of one repository and a derived `branch_to_stack` index that answers "which
stack owns this branch" in O(1). The index is never persisted; `reindex()`
rebuilds it after loading.

Invariants that hold after every successful mutation:

- a branch name belongs to at most one stack in the whole graph
- `children[p]` contains `c` exactly when `branches[c].parent == p`
- every branch has an entry in `children` (possibly empty)
- the root has no parent and is present in `branches`
- reordering permutes an existing children list and nothing else

All mutations validate first and only then write, so a raised `GraphError`
means the graph is unchanged.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from branchstack.core.errors import (
    BranchExistsError,
    InvalidReorderError,
    StackExistsError,
    UnknownBranchError,
    UnknownStackError,
)
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_types import BranchNode, BranchStatus


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    return now


@dataclass
class Stack:
    """A single named tree of dependent branches."""

    name: str
    root: BranchName
    branches: dict[BranchName, BranchNode] = field(default_factory=dict)
    children: dict[BranchName, list[BranchName]] = field(default_factory=dict)

    def contains_branch(self, branch: BranchName) -> bool:
        return branch in self.branches

    def node(self, branch: BranchName) -> BranchNode | None:
        return self.branches.get(branch)

    def children_of(self, branch: BranchName) -> tuple[BranchName, ...]:
        """Immediate children in their stored order (empty if none or unknown)."""
        return tuple(self.children.get(branch, ()))

    def invariant_violations(self) -> list[str]:
        """Describe every way this stack breaks the tree invariants.

        Used when loading a stack that was not built through the mutation API.
        """
        problems: list[str] = []

        root_node = self.branches.get(self.root)
        if root_node is None:
            problems.append(f"root {self.root} is not a branch of the stack")
        elif root_node.parent is not None:
            problems.append(f"root {self.root} has parent {root_node.parent}")

        for name, node in self.branches.items():
            if node.name != name:
                problems.append(f"branch entry {name} holds node named {node.name}")
            if name not in self.children:
                problems.append(f"branch {name} has no children entry")
            if node.parent is None:
                if name != self.root:
                    problems.append(f"branch {name} has no parent but is not the root")
                continue
            if node.parent not in self.branches:
                problems.append(f"branch {name} has unknown parent {node.parent}")
            elif name not in self.children.get(node.parent, []):
                problems.append(f"branch {name} is missing from children of {node.parent}")

        for parent, kids in self.children.items():
            if parent not in self.branches:
                problems.append(f"children listed under unknown branch {parent}")
            if len(set(kids)) != len(kids):
                problems.append(f"children of {parent} contain duplicates")
            for kid in kids:
                kid_node = self.branches.get(kid)
                if kid_node is None or kid_node.parent != parent:
                    problems.append(f"{kid} is listed under {parent} but is not its child")

        return problems


class Descendants:
    """Breadth-first walk over a branch and everything below it.

    The walk is lazy and restartable: each `iter()` starts again from the
    first branch. An unknown branch yields nothing.
    """

    def __init__(self, stack: Stack | None, start: BranchName) -> None:
        self._stack = stack
        self._start = start

    def __iter__(self) -> Iterator[BranchName]:
        if self._stack is None or not self._stack.contains_branch(self._start):
            return
        queue = deque([self._start])
        while queue:
            branch = queue.popleft()
            yield branch
            queue.extend(self._stack.children_of(branch))


@dataclass
class StackGraph:
    """All stacks of one repository."""

    stacks: dict[str, Stack] = field(default_factory=dict)
    branch_to_stack: dict[BranchName, str] = field(
        default_factory=dict, compare=False, repr=False
    )

    @classmethod
    def from_stacks(cls, stacks: Iterable[Stack]) -> "StackGraph":
        """Build a graph from already-populated stacks and index it."""
        graph = cls(stacks={stack.name: stack for stack in stacks})
        graph.reindex()
        return graph

    def reindex(self) -> None:
        """Rebuild `branch_to_stack` from `stacks`.

        Raises:
            BranchExistsError: If two stacks claim the same branch
        """
        index: dict[BranchName, str] = {}
        for stack_name, stack in self.stacks.items():
            for branch in stack.branches:
                if branch in index:
                    raise BranchExistsError(branch)
                index[branch] = stack_name
        self.branch_to_stack = index

    # ------------------------------------------------------------------
    # Stack-level queries
    # ------------------------------------------------------------------

    def has_stack(self, name: str) -> bool:
        return name in self.stacks

    def get_stack(self, name: str) -> Stack | None:
        return self.stacks.get(name)

    def stack_for_branch(self, branch: BranchName) -> Stack | None:
        """Return the stack owning `branch` (O(1) via the reverse index)."""
        stack_name = self.branch_to_stack.get(branch)
        if stack_name is None:
            return None
        return self.stacks.get(stack_name)

    def node(self, branch: BranchName) -> BranchNode | None:
        stack = self.stack_for_branch(branch)
        if stack is None:
            return None
        return stack.node(branch)

    def _require_stack(self, name: str) -> Stack:
        stack = self.stacks.get(name)
        if stack is None:
            raise UnknownStackError(name)
        return stack

    def _require_owner(self, branch: BranchName) -> Stack:
        stack = self.stack_for_branch(branch)
        if stack is None:
            raise UnknownBranchError(branch)
        return stack

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def new_stack(
        self,
        name: str,
        root_branch: BranchName,
        author: str,
        *,
        tip: CommitId | None = None,
        now: datetime | None = None,
    ) -> Stack:
        """Create and register a stack with a single root branch.

        Raises:
            StackExistsError: If a stack called `name` already exists
            BranchExistsError: If any stack already owns `root_branch`
        """
        if name in self.stacks:
            raise StackExistsError(name)
        if root_branch in self.branch_to_stack:
            raise BranchExistsError(root_branch)

        timestamp = _resolve_now(now)
        root_node = BranchNode(
            name=root_branch,
            tip=tip,
            parent=None,
            status=BranchStatus.DRAFT,
            author=author,
            created_at=timestamp,
            updated_at=timestamp,
        )
        stack = Stack(
            name=name,
            root=root_branch,
            branches={root_branch: root_node},
            children={root_branch: []},
        )
        self.stacks[name] = stack
        self.branch_to_stack[root_branch] = name
        return stack

    def add_child(
        self,
        stack_name: str,
        parent: BranchName,
        child: BranchName,
        author: str,
        *,
        tip: CommitId | None = None,
        now: datetime | None = None,
    ) -> BranchNode:
        """Attach a new draft branch `child` under `parent`.

        Raises:
            UnknownStackError: If `stack_name` is not registered
            UnknownBranchError: If `parent` is not a branch of that stack
            BranchExistsError: If any stack already owns `child`
        """
        stack = self._require_stack(stack_name)
        if not stack.contains_branch(parent):
            raise UnknownBranchError(parent)
        if child in self.branch_to_stack or stack.contains_branch(child):
            raise BranchExistsError(child)

        timestamp = _resolve_now(now)
        child_node = BranchNode(
            name=child,
            tip=tip,
            parent=parent,
            status=BranchStatus.DRAFT,
            author=author,
            created_at=timestamp,
            updated_at=timestamp,
        )
        stack.branches[child] = child_node
        stack.children.setdefault(parent, []).append(child)
        stack.children[child] = []
        self.branch_to_stack[child] = stack_name
        return child_node

    def reorder_children(
        self,
        stack_name: str,
        parent: BranchName,
        new_order: list[BranchName],
    ) -> None:
        """Replace `parent`'s children list with a permutation of itself.

        Raises:
            UnknownStackError: If `stack_name` is not registered
            UnknownBranchError: If `parent` is not a branch of that stack
            InvalidReorderError: If `new_order` is not a permutation of the
                current children
        """
        stack = self._require_stack(stack_name)
        if not stack.contains_branch(parent):
            raise UnknownBranchError(parent)

        current = sorted(stack.children.get(parent, []))
        proposed = sorted(new_order)
        if current != proposed:
            raise InvalidReorderError(parent=parent, expected=current, got=proposed)

        stack.children[parent] = list(new_order)

    def update_tip(
        self,
        branch: BranchName,
        tip: CommitId,
        *,
        now: datetime | None = None,
    ) -> BranchNode:
        """Point `branch` at a new tip commit.

        Raises:
            UnknownBranchError: If no stack owns `branch`
        """
        stack = self._require_owner(branch)
        updated = replace(stack.branches[branch], tip=tip, updated_at=_resolve_now(now))
        stack.branches[branch] = updated
        return updated

    def set_status(
        self,
        branch: BranchName,
        status: BranchStatus,
        *,
        now: datetime | None = None,
    ) -> BranchNode:
        """Move `branch` to another life-cycle state.

        Raises:
            UnknownBranchError: If no stack owns `branch`
        """
        stack = self._require_owner(branch)
        updated = replace(stack.branches[branch], status=status, updated_at=_resolve_now(now))
        stack.branches[branch] = updated
        return updated

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def leaves(self, stack_name: str) -> list[BranchNode]:
        """Every branch without children, in branch insertion order."""
        stack = self.stacks.get(stack_name)
        if stack is None:
            return []
        return [node for name, node in stack.branches.items() if not stack.children.get(name)]

    def current_tip(self, stack_name: str) -> BranchNode | None:
        """The stack's tip branch: its first leaf in branch insertion order.

        A fanned-out stack has several leaves and "the tip" is ambiguous. The
        first-inserted leaf wins; insertion order survives a save/load round
        trip, so the answer is stable. Use `leaves()` to see every candidate.
        """
        candidates = self.leaves(stack_name)
        if not candidates:
            return None
        return candidates[0]

    def parent_of(self, branch: BranchName) -> BranchNode | None:
        stack = self.stack_for_branch(branch)
        if stack is None:
            return None
        node = stack.branches[branch]
        if node.parent is None:
            return None
        return stack.branches.get(node.parent)

    def children_of(self, branch: BranchName) -> tuple[BranchName, ...]:
        stack = self.stack_for_branch(branch)
        if stack is None:
            return ()
        return stack.children_of(branch)

    def _siblings_and_index(self, branch: BranchName) -> tuple[list[BranchName], int] | None:
        stack = self.stack_for_branch(branch)
        if stack is None:
            return None
        parent = stack.branches[branch].parent
        if parent is None:
            return None
        siblings = stack.children.get(parent, [])
        if branch not in siblings:
            return None
        return siblings, siblings.index(branch)

    def next_of(self, branch: BranchName) -> BranchName | None:
        """Sibling right after `branch` in its parent's children order."""
        found = self._siblings_and_index(branch)
        if found is None:
            return None
        siblings, idx = found
        if idx + 1 >= len(siblings):
            return None
        return siblings[idx + 1]

    def prev_of(self, branch: BranchName) -> BranchName | None:
        """Sibling right before `branch` in its parent's children order."""
        found = self._siblings_and_index(branch)
        if found is None:
            return None
        siblings, idx = found
        if idx == 0:
            return None
        return siblings[idx - 1]

    def descendants(self, branch: BranchName) -> Descendants:
        """Breadth-first walk starting with `branch` itself."""
        return Descendants(self.stack_for_branch(branch), branch)
