"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
and the cli_error_boundary decorator that turns well-known exceptions into a
clean message. All errors use a red "Error:" prefix and exit code 1.
"""

import functools
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import click

from branchstack.cli.output import user_output
from branchstack.core.errors import GraphError
from branchstack.core.repo_discovery import NoRepoSentinel, RepoContext

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def fail(error_message: str) -> NoReturn:
    """Output a styled error and exit with status 1."""
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            fail(error_message)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing: takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            fail(error_message)
        return value

    @staticmethod
    def in_repo(repo: RepoContext | NoRepoSentinel) -> RepoContext:
        """Ensure the command runs inside a git repository.

        Raises:
            SystemExit: If repo is the NoRepoSentinel
        """
        if isinstance(repo, NoRepoSentinel):
            fail(repo.message)
        return repo


def cli_error_boundary(func: F) -> F:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - GraphError: Any stack graph or persistence failure
        - ValueError: Invalid input or configuration
        - RuntimeError: A git command failed

    All other exceptions bubble up normally with full stack traces.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GraphError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None
        except ValueError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None
        except RuntimeError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
