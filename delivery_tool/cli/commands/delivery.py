"""Delivery management command"""

import os
import sys
from pathlib import Path
from typing import Optional

import click

from ...api.exceptions import DeliveryCreationError, DeliveryToolError
from ...core.project import Project
from ...models.delivery import Delivery
from ...models.result import OperationStatus
from ..utils.output import (
    console,
    delivery_table,
    format_delivery_result,
    print_success,
    print_warning,
    report_failure,
)

SOURCE_OPTION = click.option('--source', type=click.Path(exists=True, dir_okay=False, path_type=Path),
                             help='Project document to open')
OUTPUT_OPTION = click.option('--output', type=click.Path(dir_okay=False, path_type=Path),
                             help='Where to save the project (default: the source document)')


def _current_user() -> str:
    return os.environ.get('USER') or os.environ.get('USERNAME', '')


def save_project(ctx, project: Project, target: Optional[Path]) -> None:
    """Save the project to ``target``, or warn that nothing was written"""
    if target is None:
        print_warning("Project not saved. Use --output to write the project document.")
        return
    try:
        written = project.save(target)
    except DeliveryToolError as e:
        report_failure(ctx, f"Error saving project: {e}")
    else:
        print_success(f"Project saved to {written}")


@click.group()
@click.pass_context
def delivery(ctx):
    """Create, remove and list deliveries

    A delivery is a named, timestamped release. Creating one computes the
    information of every component for every registered data source.
    """
    pass


@delivery.command()
@click.argument('name')
@click.option('--integrator', default=_current_user, show_default='current user',
              help='Person responsible for the delivery')
@SOURCE_OPTION
@OUTPUT_OPTION
@click.pass_context
def add(ctx, name, integrator, source, output):
    """Create a delivery

    Examples:
        # Create a delivery in an existing project
        delivery-tool delivery add 2.1.0 --source project.xml

        # Keep the original document and write a new one
        delivery-tool delivery add 2.1.0 --source project.xml --output project-2.1.0.xml
    """
    try:
        project = ctx.obj.create_project(source)
        with console.status(f"Computing delivery {name}..."):
            result = project.add_delivery(Delivery(name=name, integrator=integrator))
    except DeliveryCreationError as e:
        report_failure(ctx, str(e))
    except DeliveryToolError as e:
        report_failure(ctx, f"Error creating delivery: {e}")

    format_delivery_result(result)
    if result.status == OperationStatus.FAILED:
        sys.exit(1)

    save_project(ctx, project, output or source)


@delivery.command()
@click.argument('name')
@SOURCE_OPTION
@OUTPUT_OPTION
@click.pass_context
def remove(ctx, name, source, output):
    """Remove a delivery and all of its information"""
    try:
        project = ctx.obj.create_project(source)
    except DeliveryToolError as e:
        report_failure(ctx, f"Error opening project: {e}")

    target = project.get_delivery(name)
    if target is None:
        report_failure(ctx, f"Delivery '{name}' not found")

    project.remove_delivery(target)
    print_success(f"Removed delivery {name}")
    save_project(ctx, project, output or source)


@delivery.command(name='list')
@SOURCE_OPTION
@click.pass_context
def list_deliveries(ctx, source):
    """List the deliveries of a project, newest first"""
    try:
        project = ctx.obj.create_project(source)
    except DeliveryToolError as e:
        report_failure(ctx, f"Error opening project: {e}")

    if not len(project.deliveries):
        console.print("[yellow]No deliveries found[/yellow]")
        return

    console.print(delivery_table(project.deliveries))
