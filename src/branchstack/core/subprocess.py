"""Run git for RealGit.

Every git invocation that must succeed goes through `run_git`, so a failure
always surfaces as a RuntimeError naming the operation, the command line and
git's own stderr. The CLI error boundary prints that message verbatim.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_git(args: Sequence[str], operation: str, repo_root: Path) -> str:
    """Run `git <args>` inside `repo_root` and return its stdout.

    Args:
        args: Arguments after `git`, e.g. ["branch", "feat/a", "<sha>"]
        operation: What the caller was doing, e.g. "list commits"
        repo_root: Working directory for git

    Raises:
        RuntimeError: If git exits non-zero or is not installed
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=repo_root,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        message = f"git could not {operation} (exit code {e.returncode})"
        message += f"\nCommand: {' '.join(cmd)}"
        stderr_text = (e.stderr or "").strip()
        if stderr_text:
            message += f"\n{stderr_text}"
        raise RuntimeError(message) from e
    except FileNotFoundError as e:
        raise RuntimeError(f"git is not installed, cannot {operation}") from e

    logger.debug("git %s -> %d bytes", args[0] if args else "", len(result.stdout))
    return result.stdout
