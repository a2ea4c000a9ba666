#!/usr/bin/env python3
"""Main CLI entry point for stageops."""

import logging

import click

from .env import main as env_commands
from .stack import main as stack_commands


@click.group()
@click.version_option(package_name="stageops")
@click.option(
    "--project-file",
    "-f",
    default="s-project.json",
    show_default=True,
    help="Project file (JSON or YAML)",
)
@click.option("--project-root", help="Project directory (defaults to the project file's)")
@click.option("--profile", help="AWS profile to use")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, project_file, project_root, profile, verbose) -> None:
    """Deploy CloudFormation stacks and manage env files across stages and regions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = ctx.ensure_object(dict)
    settings.update(
        project_file=project_file, project_root=project_root, profile=profile
    )


cli.add_command(stack_commands, name="stack")
cli.add_command(env_commands, name="env")


if __name__ == "__main__":
    cli()
