# delivery_tool/cli/utils/output.py
"""Output formatting utilities"""

from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING, XML_ATTR_COMPONENT, XML_ATTR_IMPORTER
from ...models.component import Component
from ...models.delivery import Delivery
from ...models.result import DeliveryResult, OperationStatus
from ...plugins.base import ImportStrategy

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]{EMOJI_SUCCESS}[/green] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{EMOJI_WARNING}[/yellow] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]{EMOJI_ERROR} {message}[/red]")


def format_delivery_result(result: DeliveryResult) -> None:
    """Format and display the result of a delivery creation"""
    if result.status == OperationStatus.FAILED:
        panel = Panel(
            f"[red]{EMOJI_ERROR} Delivery creation failed:[/red] {result.message}",
            title="Delivery Error",
            border_style="red"
        )
        console.print(panel)
        return

    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Delivery created successfully!",
        "",
        f"[bold]Delivery:[/bold] {result.delivery_name}",
        f"[bold]Computed:[/bold] {result.computed} entries",
    ]
    if result.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {result.duration:.2f}s")
    for warning in result.warnings:
        lines.append(f"[yellow]{EMOJI_WARNING}[/yellow] {escape(warning)}")

    border_style = "green"
    if result.report_entries:
        border_style = "yellow"
        lines.append("")
        lines.append(f"[bold yellow]Creation report ({result.report_entries} errors):[/bold yellow]")
        for error in result.creation_report:
            origin = f"{error.get(XML_ATTR_COMPONENT, '?')}/{error.get(XML_ATTR_IMPORTER, '?')}"
            lines.append(f"  • {origin}: {escape((error.text or '').strip())}")

    panel = Panel(
        "\n".join(lines),
        title="Delivery Result",
        border_style=border_style
    )
    console.print(panel)


def delivery_table(deliveries: Iterable[Delivery]) -> Table:
    """Table of deliveries, newest first"""
    table = Table(title="Deliveries", box=box.ROUNDED)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Integrator", style="green")
    table.add_column("Created", style="dim")

    for delivery in deliveries:
        table.add_row(delivery.name, delivery.integrator, delivery.created_text)
    return table


def component_tree(root: Component, importers: Optional[List[ImportStrategy]] = None) -> Tree:
    """Component hierarchy with the configured strategy per data source"""
    tree = Tree("[bold]Components[/bold]")

    def add_children(parent: Component, node: Tree) -> None:
        for child in parent.sub_components:
            label = f"[cyan]{child.name}[/cyan]"
            if not child.customer_relevant:
                label += " [dim](internal)[/dim]"
            branch = node.add(label)
            for importer in importers or []:
                strategy = child.get_assignment_strategy(importer.name)
                if strategy is not None and strategy.nr_of_parameters:
                    parameters = ", ".join(child.get_parameters(importer.name)[:strategy.nr_of_parameters])
                    branch.add(f"[dim]{importer.name}: {strategy.name} ({escape(parameters)})[/dim]")
            add_children(child, branch)

    add_children(root, tree)
    return tree


def plugin_table(importers: Iterable[ImportStrategy]) -> Table:
    """Table of registered data sources"""
    table = Table(title="Data Sources", box=box.ROUNDED)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version", style="green")
    table.add_column("Information", style="dim")
    table.add_column("All deliveries", justify="center")
    table.add_column("Assignment strategies")

    for importer in importers:
        table.add_row(
            importer.name,
            importer.version,
            importer.information_name,
            EMOJI_SUCCESS if importer.needs_all_deliveries else "",
            ", ".join(s.name for s in importer.assignment_strategies),
        )
    return table


def report_failure(ctx, message: str) -> None:
    """Print an error, the traceback in debug mode, and exit with status 1"""
    print_error(message)
    if ctx.obj is not None and ctx.obj.debug:
        console.print_exception()
    ctx.exit(1)
