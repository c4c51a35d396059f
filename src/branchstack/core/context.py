"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from branchstack.core.config_store import (
    ConfigStore,
    FilesystemConfigStore,
    InMemoryConfigStore,
    StackConfig,
)
from branchstack.core.git.abc import Git
from branchstack.core.git.real import RealGit
from branchstack.core.graph_store import FakeGraphStore, GraphStore, JsonGraphStore
from branchstack.core.repo_discovery import (
    NoRepoSentinel,
    RepoContext,
    discover_repo_or_sentinel,
)
from branchstack.core.time.abc import Time
from branchstack.core.time.real import RealTime


@dataclass(frozen=True)
class StackContext:
    """Immutable context holding all dependencies for branchstack commands.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    graph_store: GraphStore
    config_store: ConfigStore
    time: Time
    config: StackConfig
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel
    dry_run: bool

    @staticmethod
    def for_test(
        git: Git | None = None,
        graph_store: GraphStore | None = None,
        config_store: ConfigStore | None = None,
        time: Time | None = None,
        config: StackConfig | None = None,
        cwd: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
        dry_run: bool = False,
    ) -> "StackContext":
        """Create a context whose unspecified dependencies are in-memory fakes.

        `cwd` defaults to a sentinel path so tests never touch the real
        working directory, and `repo` defaults to a repository rooted at `cwd`.
        """
        from branchstack.core.git.fake import FakeGit

        resolved_cwd = cwd if cwd is not None else Path("/test/default/cwd")
        resolved_config_store = config_store if config_store is not None else InMemoryConfigStore()
        resolved_config = config if config is not None else resolved_config_store.load()

        return StackContext(
            git=git if git is not None else FakeGit(),
            graph_store=graph_store if graph_store is not None else FakeGraphStore(),
            config_store=resolved_config_store,
            time=time if time is not None else RealTime(),
            config=resolved_config,
            cwd=resolved_cwd,
            repo=repo if repo is not None else RepoContext(root=resolved_cwd),
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool) -> StackContext:
    """Create production context with real implementations.

    Raises:
        ValueError: If the config file is malformed
    """
    cwd = Path.cwd()
    git = RealGit()
    config_store = FilesystemConfigStore()
    config = config_store.load()

    return StackContext(
        git=git,
        graph_store=JsonGraphStore(stack_file=config.stack_file),
        config_store=config_store,
        time=RealTime(),
        config=config,
        cwd=cwd,
        repo=discover_repo_or_sentinel(cwd, git),
        dry_run=dry_run,
    )
