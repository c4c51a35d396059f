"""Reconstruct a stack from the commit history."""

import click

from branchstack.cli.core import load_graph, repo_root, save_graph
from branchstack.cli.ensure import Ensure, cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.stack_ops import discover_graph
from branchstack.core.topology import DEFAULT_ROOT_NAME, plan_branch_creation


@click.command("discover")
@click.option(
    "--root-name",
    default=DEFAULT_ROOT_NAME,
    show_default=True,
    help="Name of the seed branch and of the reconstructed stack.",
)
@click.option(
    "--depth",
    type=click.IntRange(min=1),
    default=None,
    help="Number of commits to inspect (default: history_depth from config).",
)
@click.option("--save", is_flag=True, help="Replace the saved stack graph with the result.")
@click.option("--force", is_flag=True, help="Allow --save to overwrite existing stacks.")
@click.option(
    "--create-branches",
    is_flag=True,
    help="Run git branch for every reconstructed branch.",
)
@click.pass_obj
@cli_error_boundary
def discover_cmd(
    ctx: StackContext,
    root_name: str,
    depth: int | None,
    save: bool,
    force: bool,
    create_branches: bool,
) -> None:
    """Guess the stack layout from HEAD's history.

    Prints one `<branch> <start-commit>` line per reconstructed branch. The
    guess is best-effort: a commit reused after a force-push looks the same
    as a real fork.
    """
    root_path = repo_root(ctx)
    history_depth = depth if depth is not None else ctx.config.history_depth

    graph = discover_graph(ctx.git, root_path, history_depth, root_name=root_name)
    stack = Ensure.not_none(graph.get_stack(root_name), "Reconstruction produced no stack")
    intents = plan_branch_creation(stack)

    user_output(
        f"Reconstructed {len(stack.branches)} branch(es) from up to {history_depth} commits"
    )
    for intent in intents:
        machine_output(f"{intent.name} {intent.start_commit}")

    if create_branches:
        for intent in intents:
            if ctx.dry_run:
                user_output(f"[dry-run] git branch {intent.name} {intent.start_commit}")
            else:
                ctx.git.create_branch(root_path, intent.name, intent.start_commit)

    if save:
        existing = load_graph(ctx)
        Ensure.invariant(
            not existing.stacks or force,
            f"{len(existing.stacks)} stack(s) already saved. Use --force to replace them.",
        )
        save_graph(ctx, graph)
        user_output(click.style("✓", fg="green") + " Saved reconstructed stack graph")
