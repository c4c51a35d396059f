"""Display stacks as trees."""

import click

from branchstack.cli.core import current_branch_or_none, load_graph
from branchstack.cli.ensure import cli_error_boundary, fail
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.tree_utils import format_stack_as_tree


@click.command("show")
@click.argument("stack_name", required=False)
@click.pass_obj
@cli_error_boundary
def show_cmd(ctx: StackContext, stack_name: str | None) -> None:
    """Show STACK_NAME, or every stack if omitted."""
    graph = load_graph(ctx)
    current = current_branch_or_none(ctx)

    if stack_name is not None:
        stack = graph.get_stack(stack_name)
        if stack is None:
            available = ", ".join(sorted(graph.stacks)) if graph.stacks else "(none)"
            fail(f"Stack '{stack_name}' not found\n\nAvailable stacks: {available}")
        stacks = [stack]
    else:
        stacks = list(graph.stacks.values())

    if not stacks:
        user_output("No stacks found. Create one with 'bstack init STACK ROOT'.")
        return

    trees = [format_stack_as_tree(stack, current_branch=current) for stack in stacks]
    machine_output("\n\n".join(trees))
