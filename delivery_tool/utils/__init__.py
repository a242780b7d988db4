# delivery_tool/utils/__init__.py
"""Utility functions for delivery-tool"""

from .path_utils import get_absolute_file_path, resolve_path
from .xml_utils import (
    create_element,
    add_element,
    element_text,
    child_text,
    copy_element,
    append_content,
    load_document,
    save_document,
    to_string,
    XmlSink,
)

__all__ = [
    # Path utilities
    'get_absolute_file_path',
    'resolve_path',

    # XML utilities
    'create_element',
    'add_element',
    'element_text',
    'child_text',
    'copy_element',
    'append_content',
    'load_document',
    'save_document',
    'to_string',
    'XmlSink',
]
