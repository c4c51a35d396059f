"""Read-only navigation commands: tip, parent, next, prev, descendants."""

import click

from branchstack.cli.core import current_branch_or_none, load_graph, resolve_branch
from branchstack.cli.ensure import Ensure, cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.identifiers import BranchName
from branchstack.core.stack_graph import StackGraph
from branchstack.core.stack_ops import adjacent_branch


def _ensure_in_stack(graph: StackGraph, branch: BranchName) -> None:
    Ensure.invariant(
        graph.stack_for_branch(branch) is not None,
        f"Branch '{branch}' is not part of any stack",
    )


@click.command("tip")
@click.argument("stack_name", required=False)
@click.pass_obj
@cli_error_boundary
def tip_cmd(ctx: StackContext, stack_name: str | None) -> None:
    """Print the tip branch of STACK_NAME (default: the current branch's stack)."""
    graph = load_graph(ctx)

    if stack_name is None:
        current = Ensure.not_none(
            current_branch_or_none(ctx),
            "Not currently on a branch. Pass a stack name explicitly.",
        )
        stack = Ensure.not_none(
            graph.stack_for_branch(current), f"Branch '{current}' is not part of any stack"
        )
        stack_name = stack.name

    Ensure.invariant(graph.has_stack(stack_name), f"Stack '{stack_name}' not found")
    leaves = graph.leaves(stack_name)
    tip = Ensure.not_none(graph.current_tip(stack_name), f"Stack '{stack_name}' has no tip")

    if len(leaves) > 1:
        others = ", ".join(str(leaf.name) for leaf in leaves[1:])
        user_output(
            click.style("Warning: ", fg="yellow")
            + f"stack '{stack_name}' has {len(leaves)} tips; also: {others}"
        )
    machine_output(str(tip.name))


@click.command("parent")
@click.argument("branch", required=False)
@click.pass_obj
@cli_error_boundary
def parent_cmd(ctx: StackContext, branch: str | None) -> None:
    """Print the parent of BRANCH (default: current branch)."""
    target = resolve_branch(ctx, branch)
    graph = load_graph(ctx)
    _ensure_in_stack(graph, target)

    parent = Ensure.not_none(
        graph.parent_of(target), f"Branch '{target}' is the root of its stack"
    )
    machine_output(str(parent.name))


@click.command("next")
@click.argument("branch", required=False)
@click.pass_obj
@cli_error_boundary
def next_cmd(ctx: StackContext, branch: str | None) -> None:
    """Print the sibling after BRANCH (default: current branch)."""
    target = resolve_branch(ctx, branch)
    graph = load_graph(ctx)
    _ensure_in_stack(graph, target)

    machine_output(str(adjacent_branch(graph, target, forward=True)))


@click.command("prev")
@click.argument("branch", required=False)
@click.pass_obj
@cli_error_boundary
def prev_cmd(ctx: StackContext, branch: str | None) -> None:
    """Print the sibling before BRANCH (default: current branch)."""
    target = resolve_branch(ctx, branch)
    graph = load_graph(ctx)
    _ensure_in_stack(graph, target)

    machine_output(str(adjacent_branch(graph, target, forward=False)))


@click.command("descendants")
@click.argument("branch", required=False)
@click.pass_obj
@cli_error_boundary
def descendants_cmd(ctx: StackContext, branch: str | None) -> None:
    """Print BRANCH and every branch above it, breadth-first."""
    target = resolve_branch(ctx, branch)
    graph = load_graph(ctx)
    _ensure_in_stack(graph, target)

    for name in graph.descendants(target):
        machine_output(str(name))
