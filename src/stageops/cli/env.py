#!/usr/bin/env python3
"""
Env file CLI commands.

Region may be "all" to act on every region of the stage.
"""

import json
import sys

import click

from ..config import ALL_REGIONS
from ..environment import EnvPropagator
from ._context import get_context


@click.group()
def main() -> None:
    """Env var commands."""
    pass


@main.command("list")
@click.option("--stage", "-s", required=True, help="Stage to read")
@click.option("--region", "-r", default=ALL_REGIONS, show_default=True, help="Region to read, or 'all'")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_env(ctx, stage, region, output_json) -> None:
    """Show env vars for a stage."""
    try:
        context = get_context(ctx)
        region_envs = EnvPropagator().fetch_all(stage, region, context)

        if output_json:
            click.echo(
                json.dumps(
                    {
                        env.region_name: {"vars": env.vars, "partial": env.is_partial}
                        for env in region_envs
                    },
                    indent=2,
                )
            )
            return

        for env in region_envs:
            click.echo(f"{env.region_name}:")
            if env.is_partial:
                click.echo("  (env file could not be read)")
            for key, value in env.vars.items():
                click.echo(f"  {key}={value}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option("--stage", "-s", required=True, help="Stage to unset env var from")
@click.option("--region", "-r", required=True, help="Region to unset env var from, or 'all'")
@click.option("--key", "-k", required=True, help="The key of the env var to unset")
@click.pass_context
def unset(ctx, stage, region, key) -> None:
    """Unset an env var for a stage and region."""
    try:
        context = get_context(ctx)
        EnvPropagator().unset_key(stage, region, key, context)
        click.echo(f"Successfully unset env var: {key}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("set")
@click.option("--stage", "-s", required=True, help="Stage to set env var in")
@click.option("--region", "-r", required=True, help="Region to set env var in, or 'all'")
@click.option("--key", "-k", required=True, help="The key of the env var")
@click.option("--value", required=True, help="The value of the env var")
@click.pass_context
def set_env(ctx, stage, region, key, value) -> None:
    """Set an env var for a stage and region."""
    try:
        context = get_context(ctx)
        EnvPropagator().set_key(stage, region, key, value, context)
        click.echo(f"Successfully set env var: {key}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
