#!/usr/bin/env python3
"""
CloudFormation stack CLI commands.
"""

import json
import sys

import click

from ..cloudformation import ResourceCatalog, StackManager, StackStatusMonitor
from ..cloudformation.monitor import CREATE, DEFAULT_INTERVAL, UPDATE
from ..naming import LAMBDAS, RESOURCES, stack_name
from ._context import get_context


def _await(context, region, descriptor, operation, interval) -> None:
    click.echo(f"Waiting for {descriptor.stack_name} to {operation}...")
    monitor = StackStatusMonitor(context.stack_controller(region), interval=interval)
    record = monitor.wait(descriptor.stack_id, operation)
    click.echo(f"✅ {descriptor.stack_name}: {record['StackStatus']}")


@click.group()
def main() -> None:
    """CloudFormation stack commands."""
    pass


@main.command()
@click.option("--stage", "-s", required=True, help="Stage to deploy")
@click.option("--region", "-r", required=True, help="Region to deploy to")
@click.option("--resources", is_flag=True, help="Create the resources stack")
@click.option("--domain", help="Project domain (resources stack only)")
@click.option("--notification-email", help="Notification email (resources stack only)")
@click.option("--wait", "-w", is_flag=True, help="Wait for the stack to finish")
@click.option("--interval", default=DEFAULT_INTERVAL, show_default=True, help="Poll interval in seconds")
@click.pass_context
def create(ctx, stage, region, resources, domain, notification_email, wait, interval) -> None:
    """Create the lambdas or resources stack."""
    try:
        context = get_context(ctx)
        manager = StackManager()

        if resources:
            descriptor = manager.create_resources_stack(
                stage, region, context, domain, notification_email
            )
        else:
            descriptor = manager.create(stage, region, context)

        click.echo(f"Stack {descriptor.stack_name} submitted: {descriptor.stack_id}")

        if wait:
            _await(context, region, descriptor, CREATE, interval)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option("--stage", "-s", required=True, help="Stage to deploy")
@click.option("--region", "-r", required=True, help="Region to deploy to")
@click.option("--resources", is_flag=True, help="Update the resources stack")
@click.option("--wait", "-w", is_flag=True, help="Wait for the stack to finish")
@click.option("--interval", default=DEFAULT_INTERVAL, show_default=True, help="Poll interval in seconds")
@click.pass_context
def update(ctx, stage, region, resources, wait, interval) -> None:
    """Update the lambdas or resources stack."""
    try:
        context = get_context(ctx)
        manager = StackManager()

        if resources:
            descriptor = manager.update_resources_stack(stage, region, context)
        else:
            descriptor = manager.update(stage, region, context)

        click.echo(f"Stack {descriptor.stack_name} submitted: {descriptor.stack_id}")

        if wait:
            _await(context, region, descriptor, UPDATE, interval)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("resources")
@click.option("--stage", "-s", required=True, help="Stage of the stack")
@click.option("--region", "-r", required=True, help="Region of the stack")
@click.option("--resources", is_flag=True, help="List the resources stack instead of the lambdas stack")
@click.option("--type", "resource_type", help="Only show this resource type")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_resources(ctx, stage, region, resources, resource_type, output_json) -> None:
    """List the provisioned resources of a stack."""
    try:
        context = get_context(ctx)
        stack_type = RESOURCES if resources else LAMBDAS
        name = stack_name(context.project_name, stage, stack_type)
        result = ResourceCatalog(context.stack_controller(region)).list_resources(name)

        summaries = result.value
        if resource_type:
            by_type = ResourceCatalog.physical_ids_by_type(summaries, resource_type)
            summaries = [s for s in summaries if s.logical_id in by_type]

        if output_json:
            click.echo(
                json.dumps(
                    [
                        {
                            "LogicalResourceId": s.logical_id,
                            "PhysicalResourceId": s.physical_id,
                            "ResourceType": s.resource_type,
                        }
                        for s in summaries
                    ],
                    indent=2,
                )
            )
        else:
            click.echo(f"Stack: {name}")
            for s in summaries:
                click.echo(f"  {s.logical_id}: {s.physical_id} ({s.resource_type})")

        if result.is_partial:
            click.echo(f"⚠️  Listing incomplete: {result.cause}", err=True)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
