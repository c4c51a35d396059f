"""Fake git implementation for testing.

FakeGit is an in-memory implementation that accepts pre-configured state in
its constructor and records mutations for assertions.
"""

from pathlib import Path

from branchstack.core.git.abc import Git
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_types import Commit


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    - All state is provided via constructor
    - create_branch() records the request in `created_branches`
    """

    def __init__(
        self,
        *,
        git_common_dirs: dict[Path, Path] | None = None,
        commits: dict[Path, list[Commit]] | None = None,
        current_branches: dict[Path, str | None] | None = None,
        user_name: str | None = None,
    ) -> None:
        self._git_common_dirs = git_common_dirs or {}
        self._commits = commits or {}
        self._current_branches = current_branches or {}
        self._user_name = user_name
        self._created_branches: list[tuple[BranchName, CommitId]] = []

    @property
    def created_branches(self) -> list[tuple[BranchName, CommitId]]:
        """Branches created via create_branch(), for test assertions."""
        return self._created_branches

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        return self._git_common_dirs.get(cwd)

    def get_head(self, repo_root: Path) -> CommitId | None:
        history = self._commits.get(repo_root)
        if not history:
            return None
        return history[-1].id

    def list_commits(self, repo_root: Path, head: CommitId, limit: int) -> list[Commit]:
        history = self._commits.get(repo_root, [])
        # Everything up to and including the last occurrence of head.
        end = 0
        for idx, commit in enumerate(history):
            if commit.id == head:
                end = idx + 1
        reachable = history[:end]
        return reachable[-limit:] if limit > 0 else []

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def get_user_name(self, repo_root: Path) -> str | None:
        return self._user_name

    def create_branch(self, repo_root: Path, name: BranchName, start_commit: CommitId) -> None:
        self._created_branches.append((name, start_commit))
