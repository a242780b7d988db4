# delivery_tool/cli/commands/__init__.py
"""CLI commands"""

from . import delivery
from . import component
from . import export
from . import plugins

__all__ = [
    "delivery",
    "component",
    "export",
    "plugins",
]
