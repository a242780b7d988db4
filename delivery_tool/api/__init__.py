# delivery_tool/api/__init__.py
"""API layer for delivery-tool"""

from .exceptions import (
    DeliveryToolError,
    InternalError,
    InvalidParametersError,
    VersionControlError,
    ALMError,
    NotFoundError,
    UnknownStrategyError,
    PersistenceError,
    ConfigError,
    ProjectNotFoundError,
    InternalRuntimeError,
    VersionControlRuntimeError,
    ALMRuntimeError,
    DeliveryCreationError,
)

__all__ = [
    "DeliveryToolError",
    "InternalError",
    "InvalidParametersError",
    "VersionControlError",
    "ALMError",
    "NotFoundError",
    "UnknownStrategyError",
    "PersistenceError",
    "ConfigError",
    "ProjectNotFoundError",
    "InternalRuntimeError",
    "VersionControlRuntimeError",
    "ALMRuntimeError",
    "DeliveryCreationError",
]
