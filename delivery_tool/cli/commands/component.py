"""Component management command"""

import click

from ...api.exceptions import DeliveryToolError
from ..utils.output import component_tree, console, print_success, report_failure
from .delivery import OUTPUT_OPTION, SOURCE_OPTION, save_project


def _open(ctx, source):
    try:
        return ctx.obj.create_project(source)
    except DeliveryToolError as e:
        report_failure(ctx, f"Error opening project: {e}")


def _require_component(ctx, project, name):
    component = project.find_component(name)
    if component is None:
        report_failure(ctx, f"Component '{name}' not found")
    return component


@click.group()
@click.pass_context
def component(ctx):
    """Manage the component tree

    Components are the parts of the product a delivery documents. Each
    component selects, per data source, the assignment strategy that
    computes its information.
    """
    pass


@component.command(name='list')
@SOURCE_OPTION
@click.option('--strategies', is_flag=True, help='Show the configured assignment strategies')
@click.pass_context
def list_components(ctx, source, strategies):
    """Show the component tree"""
    project = _open(ctx, source)
    if not project.root.has_sub_components():
        console.print("[yellow]No components found[/yellow]")
        return

    importers = project.import_strategies_in_view_order() if strategies else None
    console.print(component_tree(project.root, importers))


@component.command()
@click.argument('name')
@click.option('--parent', help='Name of the parent component (default: top level)')
@click.option('--internal', is_flag=True, help='Leave the component out of customer exports')
@SOURCE_OPTION
@OUTPUT_OPTION
@click.pass_context
def add(ctx, name, parent, internal, source, output):
    """Add a component

    Examples:
        # Add a top level component
        delivery-tool component add Firmware --source project.xml

        # Add a sub component that customers do not see
        delivery-tool component add Bootloader --parent Firmware --internal --source project.xml
    """
    project = _open(ctx, source)
    parent_component = _require_component(ctx, project, parent) if parent else project.root

    try:
        added = project.add_component(parent_component, name)
    except DeliveryToolError as e:
        report_failure(ctx, f"Error adding component: {e}")

    added.customer_relevant = not internal
    print_success(f"Added component {added.full_name}")
    save_project(ctx, project, output or source)


@component.command()
@click.argument('name')
@SOURCE_OPTION
@OUTPUT_OPTION
@click.pass_context
def remove(ctx, name, source, output):
    """Remove a component with all of its sub components"""
    project = _open(ctx, source)
    target = _require_component(ctx, project, name)
    project.remove_component(target)
    print_success(f"Removed component {name}")
    save_project(ctx, project, output or source)


@component.command()
@click.argument('name')
@click.argument('importer_name')
@click.argument('strategy_name')
@click.argument('parameters', nargs=-1)
@SOURCE_OPTION
@OUTPUT_OPTION
@click.pass_context
def assign(ctx, name, importer_name, strategy_name, parameters, source, output):
    """Select the assignment strategy of a component for a data source

    Examples:
        # Read the version from a file
        delivery-tool component assign Firmware Version "File Parser" ./version.txt "(\\d+\\.\\d+)" "$1"
    """
    project = _open(ctx, source)
    target = _require_component(ctx, project, name)

    try:
        importer = project.registry.require_import_strategy(importer_name)
    except DeliveryToolError as e:
        report_failure(ctx, str(e))

    strategy = importer.get_assignment_strategy(strategy_name)
    if strategy is None:
        available = ", ".join(s.name for s in importer.assignment_strategies)
        report_failure(ctx, f"Unknown strategy '{strategy_name}' for {importer.name}. Available: {available}")

    target.set_assignment_strategy(importer.name, strategy)
    for index, value in enumerate(parameters):
        target.set_parameter(importer.name, index, value)
    project.needs_saving = True

    print_success(f"{target.full_name}: {importer.name} uses {strategy.name}")
    save_project(ctx, project, output or source)
