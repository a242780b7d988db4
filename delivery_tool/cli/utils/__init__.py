"""CLI utilities"""

from .output import (
    console,
    component_tree,
    delivery_table,
    format_delivery_result,
    plugin_table,
    print_error,
    print_success,
    print_warning,
    report_failure,
)

__all__ = [
    "console",
    "component_tree",
    "delivery_table",
    "format_delivery_result",
    "plugin_table",
    "print_error",
    "print_success",
    "print_warning",
    "report_failure",
]
