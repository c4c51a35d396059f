"""Repository discovery functionality.

Discovers the git repository root from a given path without requiring a full
StackContext.
"""

from dataclasses import dataclass
from pathlib import Path

from branchstack.core.git.abc import Git


@dataclass(frozen=True)
class RepoContext:
    """A git repository root."""

    root: Path


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require a repository check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path, git: Git) -> RepoContext | NoRepoSentinel:
    """Find the repository containing `cwd`.

    Asks git for the common directory first, which resolves linked worktrees
    to the main repository. Falls back to walking up for a `.git` directory.

    Args:
        cwd: Current working directory to start search from
        git: Git operations interface

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    git_common_dir = git.get_git_common_dir(cwd)
    if git_common_dir is not None:
        return RepoContext(root=git_common_dir.parent)

    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    cur = cwd.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / ".git").is_dir():
            return RepoContext(root=parent)

    return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")
