"""Important information data source: free text notes per component"""

import re
import xml.etree.ElementTree as ET
from typing import Optional

from ...constants import (
    EMPTY_VALUE,
    XML_CONTENT,
    XML_LITERALLAYOUT,
    XML_PARA,
    XML_SECTION,
    XML_STRING,
    XML_TITLE,
)
from ...models.information import DeliveryInformation, same_text
from ...utils.xml_utils import add_element, append_content, create_element, parse_string
from ..base import ImportStrategy, PresentationType
from .assignments import (
    CommandExecuterAssignment,
    ConstTextAssignment,
    FileParserAssignment,
    ImportSubtreeAssignment,
)

IMPORTANT_INFORMATION_IMPORTER_NAME = "Important Information"

# Text containing at least one complete element is taken as embedded markup
EMBEDDED_MARKUP_PATTERN = re.compile(r"(?s)(.*?)<(\S+?)(.*?)>(.*?)</\2>(.*?)")


class DeliveryImportantInformation(DeliveryInformation):
    """Notes of a component in one delivery"""

    NAME = "Delivery Important Information"

    def compare_info(self, other: Optional[DeliveryInformation]) -> bool:
        return same_text(self, other)

    def add_information(self, other: ET.Element) -> bool:
        """Append the text of ``other`` on a new line"""
        if self.information is None:
            self.information = create_element(XML_CONTENT)
        string = self.information.find(XML_STRING)
        if string is None:
            string = add_element(self.information, XML_STRING, "")

        added = other.findtext(XML_STRING, default="") if other is not None else ""
        string.text = f"{string.text or ''}\n{added}"
        return True

    def add_docbook_section(self, section, component, other, for_customer) -> bool:
        """
        Add a subsection titled with the component name

        Text that contains DocBook markup is inserted as markup; everything
        else, and markup that cannot be parsed, becomes a literal layout.
        """
        text = self.child_text()
        if section is None or not text or text == EMPTY_VALUE:
            return False

        component_section = ET.SubElement(section, XML_SECTION)
        add_element(component_section, XML_TITLE, component.full_name)

        if EMBEDDED_MARKUP_PATTERN.fullmatch(text):
            try:
                fragment = parse_string(f"<{XML_CONTENT}>{text}</{XML_CONTENT}>")
            except ET.ParseError as e:
                self.logger.info(f"Important information of {component.full_name} is no valid XML: {e}")
            else:
                append_content(component_section, fragment)
                return True

        add_element(component_section, XML_LITERALLAYOUT, text)
        return True


class ImportantInformationImport(ImportStrategy):
    """Data source collecting important notes"""

    NAME = IMPORTANT_INFORMATION_IMPORTER_NAME
    INFORMATION_TYPE = DeliveryImportantInformation
    NEEDS_ALL_DELIVERIES = False
    PRESENTATION_TYPE = PresentationType.ICON

    def __init__(self):
        super().__init__()
        for strategy_class in (
            ConstTextAssignment,
            FileParserAssignment,
            CommandExecuterAssignment,
            ImportSubtreeAssignment,
        ):
            self.add_assignment_strategy(strategy_class())

    def get_docbook_section_template(self, from_delivery, to_delivery) -> ET.Element:
        section = create_element(XML_SECTION)
        add_element(section, XML_TITLE, self.name)
        add_element(section, XML_PARA)
        return section


def register(registry) -> None:
    """Register the important information data source"""
    registry.register_import_strategy(ImportantInformationImport())
