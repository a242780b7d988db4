# delivery_tool/plugins/__init__.py
"""Plugin system for delivery-tool"""

from .base import (
    AssignmentStrategy,
    ComponentFactory,
    ImportStrategy,
    PresentationType,
)
from .registry import PluginRegistry, build_registry, get_registry, reset_registry
from .loader import PluginLoader

__all__ = [
    # Base classes
    'AssignmentStrategy',
    'ComponentFactory',
    'ImportStrategy',
    'PresentationType',

    # Registry
    'PluginRegistry',
    'build_registry',
    'get_registry',
    'reset_registry',

    # Loader
    'PluginLoader',
]
