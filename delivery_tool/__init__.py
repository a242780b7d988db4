"""Delivery Tool - Release documentation for component based products.

Collects, per delivery and component, the information produced by pluggable
data sources (versions, notes, version control history), keeps it in an XML
project document and exports release notes as DocBook.
"""

from .__version__ import __version__, __version_info__, __author__, __license__

# Data models
from .models.delivery import Delivery, DeliveryKey
from .models.component import Component
from .models.information import DeliveryInformation
from .models.config import Settings
from .models.result import DeliveryResult, OperationStatus

# Plugins
from .plugins.base import AssignmentStrategy, ImportStrategy
from .plugins.registry import PluginRegistry, build_registry, get_registry, reset_registry

# Project
from .core.project import Project

# Exceptions
from .api.exceptions import (
    DeliveryToolError,
    InternalError,
    InternalRuntimeError,
    DeliveryCreationError,
    PersistenceError,
    UnknownStrategyError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",

    # Data models
    "Delivery",
    "DeliveryKey",
    "Component",
    "DeliveryInformation",
    "Settings",
    "DeliveryResult",
    "OperationStatus",

    # Plugins
    "AssignmentStrategy",
    "ImportStrategy",
    "PluginRegistry",
    "build_registry",
    "get_registry",
    "reset_registry",

    # Project
    "Project",

    # Exceptions
    "DeliveryToolError",
    "InternalError",
    "InternalRuntimeError",
    "DeliveryCreationError",
    "PersistenceError",
    "UnknownStrategyError",
]
