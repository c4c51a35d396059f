"""Add a child branch to a stack."""

import click

from branchstack.cli.core import (
    load_graph,
    parse_branch,
    repo_root,
    resolve_branch,
    save_graph,
)
from branchstack.cli.ensure import cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.stack_ops import create_child_branch, resolve_author


@click.command("add")
@click.argument("child")
@click.option(
    "--parent",
    default=None,
    help="Parent branch (default: the current branch).",
)
@click.option(
    "--no-create",
    is_flag=True,
    help="Only record the branch in the stack; do not run git branch.",
)
@click.pass_obj
@cli_error_boundary
def add_cmd(ctx: StackContext, child: str, parent: str | None, no_create: bool) -> None:
    """Add CHILD on top of a branch of an existing stack."""
    child_branch = parse_branch(child)
    root_path = repo_root(ctx)
    parent_branch = resolve_branch(ctx, parent)
    graph = load_graph(ctx)

    intent = create_child_branch(
        graph,
        parent_branch,
        child_branch,
        resolve_author(ctx.config, ctx.git, root_path),
        fallback_start=ctx.git.get_head(root_path),
        now=ctx.time.now(),
    )

    if intent is not None and not no_create:
        if ctx.dry_run:
            user_output(f"[dry-run] git branch {intent.name} {intent.start_commit}")
        else:
            ctx.git.create_branch(root_path, intent.name, intent.start_commit)

    save_graph(ctx, graph)

    user_output(
        click.style("✓", fg="green")
        + f" Added {click.style(child, fg='yellow')} on top of {parent_branch}"
    )
    if intent is not None:
        machine_output(f"{intent.name} {intent.start_commit}")
