"""Output helpers for CLI commands with clear intent.

user_output: messages for a human, written to stderr.
machine_output: results meant for scripts and pipes, written to stdout.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Write a machine-readable result to stdout."""
    click.echo(message, nl=nl)
