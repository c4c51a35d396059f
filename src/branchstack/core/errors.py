"""Typed errors raised by the stack graph and its store.

Every public graph operation either succeeds or raises one of these without
having modified any state. The CLI layer turns them into a styled message and
a non-zero exit; nothing in the core prints or exits.
"""

from branchstack.core.identifiers import BranchName


class GraphError(Exception):
    """Base class for all stack graph errors."""


class StackExistsError(GraphError):
    """A stack with this name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'stack "{name}" already exists')
        self.name = name


class UnknownStackError(GraphError):
    """No stack with this name is registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'unknown stack "{name}"')
        self.name = name


class BranchExistsError(GraphError):
    """The branch is already owned by a stack (uniqueness is graph-wide)."""

    def __init__(self, branch: BranchName) -> None:
        super().__init__(f'branch "{branch}" already exists')
        self.branch = branch


class UnknownBranchError(GraphError):
    """The referenced branch is not present where it was looked up."""

    def __init__(self, branch: BranchName) -> None:
        super().__init__(f'unknown branch "{branch}"')
        self.branch = branch


class InvalidReorderError(GraphError):
    """A reorder request would add, drop or rename children.

    Both sides are sorted so they can be compared by eye.
    """

    def __init__(
        self,
        parent: BranchName,
        expected: list[BranchName],
        got: list[BranchName],
    ) -> None:
        expected_names = [str(b) for b in expected]
        got_names = [str(b) for b in got]
        super().__init__(
            f'cannot reorder children of "{parent}": lists differ\n'
            f"expected: {expected_names}\n"
            f"   found: {got_names}"
        )
        self.parent = parent
        self.expected = expected
        self.got = got


class EmptyHistoryError(GraphError):
    """The topology builder was given no commits."""

    def __init__(self) -> None:
        super().__init__("cannot build a stack graph from an empty history")


class GraphIOError(GraphError):
    """Reading or writing the persisted graph failed at the filesystem level."""


class GraphSerdeError(GraphError):
    """The persisted graph could not be encoded or decoded."""


class NoAdjacentBranchError(GraphError):
    """The branch is at the end of its sibling list in the requested direction."""

    def __init__(self, branch: BranchName, direction: str) -> None:
        super().__init__(f'branch "{branch}" has no {direction} sibling')
        self.branch = branch
        self.direction = direction
