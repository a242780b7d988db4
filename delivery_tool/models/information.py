"""Delivery information models

A piece of delivery information is the computed content for one
(component, delivery, data source) triple. The content is kept as an
ElementTree ``content`` element and persisted verbatim.
"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from ..constants import EMPTY_VALUE, XML_CONTENT, XML_ERROR, XML_STRING
from ..utils.xml_utils import child_text, create_element, element_text

if TYPE_CHECKING:
    from .component import Component
    from .delivery import Delivery


def information_text(information: Optional[ET.Element]) -> str:
    """Text value of a content element (all descendant text)"""
    return element_text(information)


def is_text_empty(text: Optional[str]) -> bool:
    """True for missing, empty and placeholder ("-") values"""
    return not text or text == EMPTY_VALUE


def string_content(text: str) -> ET.Element:
    """Build ``<content><string>text</string></content>``"""
    return create_element(XML_CONTENT, create_element(XML_STRING, text=text))


def error_content(message: str) -> ET.Element:
    """Build ``<content><error>message</error></content>``"""
    return create_element(XML_CONTENT, create_element(XML_ERROR, text=message))


def same_text(info: "DeliveryInformation", other: Optional["DeliveryInformation"]) -> bool:
    """
    Compare two pieces of information by their text value

    Returns:
        True if ``other`` carries information and its text equals the text
        of ``info``
    """
    if other is None or other.is_info_null_or_empty():
        return False
    return information_text(info.information) == information_text(other.information)


class DeliveryInformation(ABC):
    """Base class for the content a data source computes for a component"""

    NAME = ""

    def __init__(self, information: Optional[ET.Element] = None, is_new: bool = False):
        self.information = information
        self.is_new = is_new
        # Plugin registry providing service handles, set by the factory
        self.registry = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        """Information type name"""
        return self.NAME

    def is_info_null_or_empty(self) -> bool:
        """True if there is no information or it is only a placeholder"""
        if self.information is None:
            return True
        return is_text_empty(information_text(self.information))

    def compare_info(self, other: Optional["DeliveryInformation"]) -> bool:
        """True if ``other`` carries the same information; variants override"""
        return False

    def has_changed(self, other: Optional["DeliveryInformation"]) -> bool:
        """True if this carries information that differs from ``other``"""
        return not (self.is_info_null_or_empty() or self.compare_info(other))

    def child_text(self, tag: str = XML_STRING) -> str:
        """Text of the first child element named ``tag``"""
        return child_text(self.information, tag)

    def errors(self):
        """All error elements contained in the information"""
        if self.information is None:
            return []
        return list(self.information.iter(XML_ERROR))

    @abstractmethod
    def add_information(self, other: ET.Element) -> bool:
        """
        Accumulate content of another delivery into this information

        Args:
            other: Content element of the other delivery

        Returns:
            True if the content was accepted
        """
        pass

    @abstractmethod
    def add_docbook_section(self,
                            section: ET.Element,
                            component: "Component",
                            other: Optional["Delivery"],
                            for_customer: bool) -> bool:
        """
        Render this information into a DocBook section

        Args:
            section: Section produced by the data source's template
            component: Component the information belongs to
            other: Delivery to compare with, if any
            for_customer: Whether a customer-facing document is exported

        Returns:
            True if content was added
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(is_new={self.is_new}, text={information_text(self.information)!r})"


class EmptyInformation(DeliveryInformation):
    """Sentinel returned for components without information for a key"""

    NAME = "Empty"

    def __init__(self):
        super().__init__(None, False)

    def is_info_null_or_empty(self) -> bool:
        return True

    def add_information(self, other: ET.Element) -> bool:
        return False

    def add_docbook_section(self, section, component, other, for_customer) -> bool:
        return False


EMPTY_INFORMATION = EmptyInformation()
