"""Reorder the children of a branch."""

import click

from branchstack.cli.core import load_graph, parse_branch, save_graph
from branchstack.cli.ensure import Ensure, cli_error_boundary
from branchstack.cli.output import user_output
from branchstack.core.context import StackContext


@click.command("reorder")
@click.argument("parent")
@click.argument("children", nargs=-1, required=True)
@click.pass_obj
@cli_error_boundary
def reorder_cmd(ctx: StackContext, parent: str, children: tuple[str, ...]) -> None:
    """Set the order of PARENT's children to CHILDREN.

    CHILDREN must list exactly the current children of PARENT.
    """
    parent_branch = parse_branch(parent)
    new_order = [parse_branch(child) for child in children]
    graph = load_graph(ctx)
    stack = Ensure.not_none(
        graph.stack_for_branch(parent_branch), f"Branch '{parent}' is not part of any stack"
    )

    graph.reorder_children(stack.name, parent_branch, new_order)
    save_graph(ctx, graph)

    user_output(
        click.style("✓", fg="green")
        + f" Reordered children of {parent}: "
        + ", ".join(children)
    )
