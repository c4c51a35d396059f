"""Data types shared by the stack graph, its builder and its callers."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from branchstack.core.identifiers import BranchName, CommitId


class BranchStatus(Enum):
    """Life-cycle state of a branch within a stack."""

    DRAFT = "draft"
    OPEN = "open"
    LANDED = "landed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class BranchNode:
    """Everything the graph knows about one branch.

    Nodes are created only by the graph's mutation API. `tip` is None for a
    branch registered before its commit is known.
    """

    name: BranchName
    tip: CommitId | None
    parent: BranchName | None
    status: BranchStatus
    author: str
    created_at: datetime
    updated_at: datetime

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(frozen=True)
class Commit:
    """Immutable commit snapshot supplied by the git collaborator."""

    id: CommitId
    subject: str
    author: str
    time: datetime
    body: str = ""


@dataclass(frozen=True)
class CreateBranchIntent:
    """Request for the caller to run `git branch <name> <start_commit>`."""

    name: BranchName
    start_commit: CommitId


@dataclass(frozen=True)
class RebaseIntent:
    """Request for the caller to rebase `branch` onto `new_base`."""

    branch: BranchName
    new_base: CommitId
