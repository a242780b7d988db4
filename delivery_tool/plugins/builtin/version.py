"""Version data source: one version string per component and delivery"""

import xml.etree.ElementTree as ET
from typing import Optional

from ...constants import (
    COLWIDTH_NARROW,
    COLWIDTH_WIDE,
    PARA_COMPONENT,
    XML_ATTR_ROLE,
    XML_EMPHASIS,
    XML_ENTRY,
    XML_PARA,
    XML_ROW,
    XML_SECTION,
    XML_TABLE,
    XML_TBODY,
    XML_TGROUP,
    XML_TITLE,
)
from ...core.docbook import ColumnSpec, create_table, para_entry
from ...models.delivery import DeliveryKey
from ...models.information import DeliveryInformation, same_text
from ...utils.xml_utils import add_element, create_element
from ..base import ImportStrategy, PresentationType
from .assignments import (
    CommandExecuterAssignment,
    ConstTextAssignment,
    FileParserAssignment,
    ImportSubtreeAssignment,
    RandomAssignment,
)

VERSION_IMPORTER_NAME = "Version"
EMPHASIS_ROLE_BOLD = "bold"


class DeliveryVersion(DeliveryInformation):
    """Version string of a component in one delivery"""

    NAME = "Delivery Version"

    def compare_info(self, other: Optional[DeliveryInformation]) -> bool:
        return same_text(self, other)

    def add_information(self, other: ET.Element) -> bool:
        # Versions of several deliveries are not combined
        return True

    def add_docbook_section(self, section, component, other, for_customer) -> bool:
        """
        Add a table row ``component | version [| former version]``

        The version is emphasized when it differs from the version of the
        delivery compared with.
        """
        if section is None or self.is_info_null_or_empty():
            return False
        tbody = section.find(f"{XML_TABLE}/{XML_TGROUP}/{XML_TBODY}")
        if tbody is None:
            return False

        row = ET.SubElement(tbody, XML_ROW)
        row.append(para_entry(component.full_name))

        current = self.child_text()
        former = None
        if other is not None:
            former = component.find_delivery_information(DeliveryKey(other.name, VERSION_IMPORTER_NAME))

        if former is None or former.information is None:
            row.append(para_entry(current))
            return True

        former_text = former.child_text()
        if current != former_text:
            emphasis = create_element(XML_EMPHASIS, attrib={XML_ATTR_ROLE: EMPHASIS_ROLE_BOLD})
            add_element(emphasis, XML_PARA, current)
            row.append(create_element(XML_ENTRY, emphasis))
        else:
            row.append(para_entry(current))
        row.append(para_entry(former_text))
        return True


class VersionImport(ImportStrategy):
    """Data source collecting component versions"""

    NAME = VERSION_IMPORTER_NAME
    INFORMATION_TYPE = DeliveryVersion
    NEEDS_ALL_DELIVERIES = False
    PRESENTATION_TYPE = PresentationType.LABEL

    def __init__(self):
        super().__init__()
        for strategy_class in (
            RandomAssignment,
            ConstTextAssignment,
            CommandExecuterAssignment,
            FileParserAssignment,
            ImportSubtreeAssignment,
        ):
            self.add_assignment_strategy(strategy_class())

    def get_docbook_section_template(self, from_delivery, to_delivery) -> ET.Element:
        """``Version`` section with a table of two or three columns"""
        columns = [
            ColumnSpec(PARA_COMPONENT, COLWIDTH_WIDE),
            ColumnSpec(to_delivery.name, COLWIDTH_NARROW),
        ]
        if from_delivery is not None:
            columns.append(ColumnSpec(from_delivery.name, COLWIDTH_NARROW))

        section = create_element(XML_SECTION)
        add_element(section, XML_TITLE, self.name)
        section.append(create_table(columns))
        return section


def register(registry) -> None:
    """Register the version data source"""
    registry.register_import_strategy(VersionImport())
