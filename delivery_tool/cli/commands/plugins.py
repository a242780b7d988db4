"""Plugin inspection command"""

import click
from rich.markup import escape
from rich.panel import Panel

from ...api.exceptions import NotFoundError
from ..utils.output import console, plugin_table, report_failure


@click.group()
@click.pass_context
def plugins(ctx):
    """Inspect the registered data sources"""
    pass


@plugins.command(name='list')
@click.pass_context
def list_plugins(ctx):
    """List data sources in view order"""
    importers = ctx.obj.registry.import_strategies_in_view_order(ctx.obj.settings)
    if not importers:
        console.print("[yellow]No data sources registered[/yellow]")
        return
    console.print(plugin_table(importers))


@plugins.command()
@click.argument('name')
@click.pass_context
def show(ctx, name):
    """Show the assignment strategies of a data source"""
    try:
        importer = ctx.obj.registry.require_import_strategy(name)
    except NotFoundError as e:
        report_failure(ctx, str(e))

    lines = [
        f"[bold]Version:[/bold] {importer.version}",
        f"[bold]License:[/bold] {importer.license} ({importer.license_source})",
        f"[bold]Information:[/bold] {importer.information_name}",
    ]
    for strategy in importer.assignment_strategies:
        lines.append("")
        lines.append(f"[cyan]{strategy.name}[/cyan] ({strategy.nr_of_parameters} parameters)")
        if strategy.usage:
            lines.append(f"[dim]{escape(strategy.usage)}[/dim]")

    console.print(Panel("\n".join(lines), title=importer.name, border_style="cyan"))
