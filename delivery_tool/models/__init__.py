# delivery_tool/models/__init__.py
"""Data models for delivery-tool"""

from .delivery import Delivery, DeliveryKey, format_timestamp, parse_timestamp
from .information import (
    DeliveryInformation,
    EmptyInformation,
    EMPTY_INFORMATION,
    error_content,
    string_content,
)
from .component import Component
from .collection import CollectionEvent, ObservableCollection
from .config import OrderEntry, Settings
from .result import DeliveryResult, ErrorDetail, OperationStatus, Result

__all__ = [
    # Deliveries
    'Delivery',
    'DeliveryKey',
    'format_timestamp',
    'parse_timestamp',

    # Delivery information
    'DeliveryInformation',
    'EmptyInformation',
    'EMPTY_INFORMATION',
    'error_content',
    'string_content',

    # Component tree
    'Component',
    'CollectionEvent',
    'ObservableCollection',

    # Configuration
    'OrderEntry',
    'Settings',

    # Results
    'DeliveryResult',
    'ErrorDetail',
    'OperationStatus',
    'Result',
]
