"""Git collaborator interface.

The stack graph never runs git. Everything it needs from a repository (HEAD,
an ordered commit list, the current branch) and everything it asks a caller to
do (create a branch) goes through this interface.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path

from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_types import Commit


class Git(ABC):
    """Abstract interface for git operations.

    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory, or None outside a repository."""
        ...

    @abstractmethod
    def get_head(self, repo_root: Path) -> CommitId | None:
        """Commit HEAD points to, or None in an empty repository."""
        ...

    @abstractmethod
    def list_commits(self, repo_root: Path, head: CommitId, limit: int) -> list[Commit]:
        """Up to `limit` commits reachable from `head`, oldest first."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Currently checked-out branch, or None on a detached HEAD."""
        ...

    @abstractmethod
    def get_user_name(self, repo_root: Path) -> str | None:
        """Configured `user.name`, or None if unset."""
        ...

    @abstractmethod
    def create_branch(self, repo_root: Path, name: BranchName, start_commit: CommitId) -> None:
        """Create a local branch at `start_commit` without checking it out."""
        ...
