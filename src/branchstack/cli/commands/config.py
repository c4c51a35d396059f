"""Show and edit configuration."""

import click

from branchstack.cli.ensure import cli_error_boundary
from branchstack.cli.output import machine_output, user_output
from branchstack.core.config_store import apply_setting, config_to_dict
from branchstack.core.context import StackContext


@click.group("config")
def config_group() -> None:
    """Manage branchstack configuration."""


@config_group.command("show")
@click.pass_obj
def config_show(ctx: StackContext) -> None:
    """Print every configuration value."""
    user_output(f"Config file: {ctx.config_store.path()}")
    for key, value in config_to_dict(ctx.config).items():
        machine_output(f"{key}={value}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
@cli_error_boundary
def config_set(ctx: StackContext, key: str, value: str) -> None:
    """Set KEY to VALUE and save the configuration."""
    updated = apply_setting(ctx.config, key, value, ctx.config_store.path())
    ctx.config_store.save(updated)
    user_output(click.style("✓", fg="green") + f" Set {key}={value}")
