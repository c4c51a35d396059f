"""Create a new stack."""

import click

from branchstack.cli.core import load_graph, parse_branch, parse_commit, repo_root, save_graph
from branchstack.cli.ensure import cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.context import StackContext
from branchstack.core.stack_ops import resolve_author


@click.command("init")
@click.argument("stack_name")
@click.argument("root")
@click.option("--tip", default=None, help="Tip commit of the root (default: HEAD).")
@click.pass_obj
@cli_error_boundary
def init_cmd(ctx: StackContext, stack_name: str, root: str, tip: str | None) -> None:
    """Create stack STACK_NAME rooted at branch ROOT."""
    root_branch = parse_branch(root)
    root_path = repo_root(ctx)
    tip_commit = parse_commit(tip) if tip is not None else ctx.git.get_head(root_path)
    graph = load_graph(ctx)
    author = resolve_author(ctx.config, ctx.git, root_path)

    graph.new_stack(stack_name, root_branch, author, tip=tip_commit, now=ctx.time.now())
    save_graph(ctx, graph)

    user_output(
        click.style("✓", fg="green")
        + f" Created stack {click.style(stack_name, fg='yellow')} rooted at {root}"
    )
    machine_output(stack_name)
