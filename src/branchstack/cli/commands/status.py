"""Change the life-cycle status of a branch."""

import click

from branchstack.cli.core import load_graph, parse_branch, save_graph
from branchstack.cli.ensure import cli_error_boundary
from branchstack.cli.output import user_output
from branchstack.core.context import StackContext
from branchstack.core.stack_types import BranchStatus


@click.command("status")
@click.argument("branch")
@click.argument("status", type=click.Choice([s.value for s in BranchStatus]))
@click.pass_obj
@cli_error_boundary
def status_cmd(ctx: StackContext, branch: str, status: str) -> None:
    """Mark BRANCH as draft, open, landed or abandoned."""
    target = parse_branch(branch)
    graph = load_graph(ctx)
    node = graph.set_status(target, BranchStatus(status), now=ctx.time.now())
    save_graph(ctx, graph)
    user_output(f"{node.name} is now {click.style(node.status.value, fg='yellow')}")
