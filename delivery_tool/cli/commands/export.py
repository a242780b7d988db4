"""Export command"""

from pathlib import Path
from typing import List, Optional, Sequence

import click

from ...api.exceptions import DeliveryToolError, NotFoundError
from ...models.delivery import Delivery
from ..utils.output import print_success, report_failure


def select_deliveries(deliveries: Sequence[Delivery],
                      first: Optional[str] = None,
                      last: Optional[str] = None) -> List[Delivery]:
    """
    Inclusive range of deliveries between two names

    Args:
        deliveries: Deliveries in sorted order (newest first)
        first: Name of one end of the range (default: oldest)
        last: Name of the other end of the range (default: newest)

    Returns:
        Deliveries of the range in sorted order

    Raises:
        NotFoundError: A name does not match any delivery
    """
    names = [d.name for d in deliveries]

    def position(name: Optional[str], default: int) -> int:
        if name is None:
            return default
        if name not in names:
            raise NotFoundError("Delivery", name)
        return names.index(name)

    start = position(first, len(names) - 1)
    end = position(last, 0)
    low, high = sorted((start, end))
    return list(deliveries[low:high + 1])


@click.group()
@click.pass_context
def export(ctx):
    """Export release notes"""
    pass


@export.command()
@click.option('--source', required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Project document to export')
@click.option('--output', required=True, type=click.Path(dir_okay=False, path_type=Path),
              help='DocBook file to write')
@click.option('--from', 'first', help='Oldest delivery of the range (default: oldest)')
@click.option('--to', 'last', help='Newest delivery of the range (default: newest)')
@click.option('--customer', is_flag=True, help='Leave out components not relevant for customers')
@click.pass_context
def docbook(ctx, source, output, first, last, customer):
    """Export deliveries as a DocBook article

    The newest delivery of the range is documented; data sources that
    track changes document every delivery after the oldest one.

    Examples:
        # Release notes of everything since 2.0.0
        delivery-tool export docbook --source project.xml --output notes.xml --from 2.0.0

        # Customer edition for a single delivery
        delivery-tool export docbook --source project.xml --output notes.xml --from 2.1.0 --to 2.1.0 --customer
    """
    try:
        project = ctx.obj.create_project(source)
        selected = select_deliveries(project.deliveries.to_list(), first, last)
        if not selected:
            report_failure(ctx, "The project has no deliveries to export")
        project.export_docbook(output, selected, for_customer=customer)
    except DeliveryToolError as e:
        report_failure(ctx, f"Export failed: {e}")
    except OSError as e:
        report_failure(ctx, f"Could not write {output}: {e}")

    print_success(f"Exported {len(selected)} deliveries to {output}")
