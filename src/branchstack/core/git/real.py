"""Production Git implementation using subprocess."""

import logging
import subprocess
from datetime import datetime
from pathlib import Path

from branchstack.core.git.abc import Git
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_types import Commit
from branchstack.core.subprocess import run_git

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%aI", "%s", "%b"]) + _RECORD_SEP


def parse_log_output(output: str) -> list[Commit]:
    """Parse `git log` output produced with the record/field separators above."""
    commits: list[Commit] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        sha, author, authored_at, subject, body = record.split(_FIELD_SEP, 4)
        commits.append(
            Commit(
                id=CommitId(sha),
                subject=subject,
                author=author,
                time=datetime.fromisoformat(authored_at),
                body=body.strip(),
            )
        )
    return commits


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir

        return git_dir.resolve()

    def get_head(self, repo_root: Path) -> CommitId | None:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return CommitId(result.stdout.strip())

    def list_commits(self, repo_root: Path, head: CommitId, limit: int) -> list[Commit]:
        output = run_git(
            ["log", "--reverse", f"--max-count={limit}", f"--format={_LOG_FORMAT}", str(head)],
            operation="list commits",
            repo_root=repo_root,
        )
        commits = parse_log_output(output)
        logger.debug("Listed %d commits from %s", len(commits), head.short())
        return commits

    def get_current_branch(self, cwd: Path) -> str | None:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_user_name(self, repo_root: Path) -> str | None:
        result = subprocess.run(
            ["git", "config", "user.name"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        name = result.stdout.strip()
        return name or None

    def create_branch(self, repo_root: Path, name: BranchName, start_commit: CommitId) -> None:
        run_git(
            ["branch", str(name), str(start_commit)],
            operation=f"create branch '{name}'",
            repo_root=repo_root,
        )
