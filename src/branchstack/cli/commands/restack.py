"""Print the rebases needed to restack a branch."""

import click

from branchstack.cli.core import load_graph, resolve_branch
from branchstack.cli.ensure import cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.stack_ops import restack_intents


@click.command("restack")
@click.argument("branch", required=False)
@click.pass_obj
@cli_error_boundary
def restack_cmd(ctx: StackContext, branch: str | None) -> None:
    """List rebases for BRANCH and everything above it.

    Each line is `<branch> <new-base>`; nothing is rebased.
    """
    target = resolve_branch(ctx, branch)
    graph = load_graph(ctx)

    intents = restack_intents(graph, target)
    if not intents:
        user_output(f"Nothing to restack for {target}")
        return

    for intent in intents:
        machine_output(f"{intent.branch} {intent.new_base}")
