import logging
import os

import click

from branchstack.cli.commands.add import add_cmd
from branchstack.cli.commands.config import config_group
from branchstack.cli.commands.discover import discover_cmd
from branchstack.cli.commands.init import init_cmd
from branchstack.cli.commands.navigation import (
    descendants_cmd,
    next_cmd,
    parent_cmd,
    prev_cmd,
    tip_cmd,
)
from branchstack.cli.commands.reorder import reorder_cmd
from branchstack.cli.commands.restack import restack_cmd
from branchstack.cli.commands.show import show_cmd
from branchstack.cli.commands.status import status_cmd
from branchstack.cli.ensure import fail
from branchstack.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

DEBUG_ENV_VAR = "BRANCHSTACK_DEBUG"


def configure_logging() -> None:
    """Enable debug logging when BRANCHSTACK_DEBUG is set."""
    if os.environ.get(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="branchstack")
@click.option("--dry-run", is_flag=True, help="Print git commands instead of running them.")
@click.pass_context
def cli(ctx: click.Context, dry_run: bool) -> None:
    """Manage stacks of dependent git branches."""
    configure_logging()
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(dry_run=dry_run)
        except ValueError as e:
            fail(str(e))


cli.add_command(add_cmd)
cli.add_command(config_group)
cli.add_command(descendants_cmd)
cli.add_command(discover_cmd)
cli.add_command(init_cmd)
cli.add_command(next_cmd)
cli.add_command(parent_cmd)
cli.add_command(prev_cmd)
cli.add_command(reorder_cmd)
cli.add_command(restack_cmd)
cli.add_command(show_cmd)
cli.add_command(status_cmd)
cli.add_command(tip_cmd)


def main() -> None:
    """CLI entry point used by the `bstack` console script."""
    cli()
