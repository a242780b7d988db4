"""DocBook sinks and the DocBook export"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union, TYPE_CHECKING

from ..constants import (
    CONFORMANCE_DIRECTSTART,
    DOCBOOK_PUBLIC_ID,
    DOCBOOK_SYSTEM_ID,
    TABSTYLE_SMALLFONT,
    XML_ARTICLE,
    XML_ATTR_COLNUM,
    XML_ATTR_COLS,
    XML_ATTR_COLWIDTH,
    XML_ATTR_CONFORMANCE,
    XML_ATTR_PGWIDE,
    XML_ATTR_TABSTYLE,
    XML_COLSPEC,
    XML_ENTRY,
    XML_PARA,
    XML_ROW,
    XML_SECTION,
    XML_SUBTITLE,
    XML_TABLE,
    XML_TBODY,
    XML_TGROUP,
    XML_THEAD,
    XML_TITLE,
)
from ..models.config import normalize_plugin_name
from ..models.delivery import Delivery
from ..utils.xml_utils import XmlSink, add_element, append_all, create_element, save_document
from .traversal import fill_section, is_section_empty

if TYPE_CHECKING:
    from .project import Project

__all__ = [
    "DOCTYPE",
    "ColumnSpec",
    "DocBookExporter",
    "DocBookSink",
    "XmlSink",
    "create_table",
    "para_entry",
]

DOCTYPE = f'<!DOCTYPE {XML_ARTICLE} PUBLIC "{DOCBOOK_PUBLIC_ID}" "{DOCBOOK_SYSTEM_ID}">'


@dataclass(frozen=True)
class ColumnSpec:
    """Title and relative width (e.g. ``2000*``) of a table column"""
    title: str
    width: str


def para_entry(text: Optional[str]) -> ET.Element:
    """``entry(para text)`` table cell"""
    return create_element(XML_ENTRY, create_element(XML_PARA, text=text or ""))


def create_table(columns: Sequence[ColumnSpec]) -> ET.Element:
    """
    Build an empty DocBook table

    Args:
        columns: Column titles and widths

    Returns:
        ``table`` with title, column specs, header row and empty body
    """
    table = create_element(XML_TABLE, attrib={
        XML_ATTR_CONFORMANCE: CONFORMANCE_DIRECTSTART,
        XML_ATTR_PGWIDE: "1",
        XML_ATTR_TABSTYLE: TABSTYLE_SMALLFONT,
    })
    add_element(table, XML_TITLE)

    tgroup = ET.SubElement(table, XML_TGROUP, {XML_ATTR_COLS: str(len(columns))})
    for number, column in enumerate(columns, start=1):
        ET.SubElement(tgroup, XML_COLSPEC, {
            XML_ATTR_COLNUM: str(number),
            XML_ATTR_COLWIDTH: column.width,
        })

    thead = ET.SubElement(tgroup, XML_THEAD)
    row = ET.SubElement(thead, XML_ROW)
    for column in columns:
        row.append(para_entry(column.title))

    ET.SubElement(tgroup, XML_TBODY)
    return table


class DocBookSink:
    """Table of one component inside a data source section

    A section titled like the component is reused when the target already
    has one with a table body, so several deliveries can be rendered into
    the same table.
    """

    def __init__(self, target: ET.Element, title: str, columns: Sequence[ColumnSpec]):
        """
        Args:
            target: Data source section receiving the component section
            title: Component section title (the component's full name)
            columns: Table columns
        """
        self.target = target
        self.title = title
        self.columns = list(columns)
        self.section, self.tbody = self._locate()

    def _locate(self):
        for section in self.target.findall(XML_SECTION):
            if section.findtext(XML_TITLE) != self.title:
                continue
            tbody = section.find(f"{XML_TABLE}/{XML_TGROUP}/{XML_TBODY}")
            if tbody is not None:
                return section, tbody

        section = ET.SubElement(self.target, XML_SECTION)
        add_element(section, XML_TITLE, self.title)
        table = create_table(self.columns)
        section.append(table)
        return section, table.find(f"{XML_TGROUP}/{XML_TBODY}")

    def add_items(self, rows: Iterable[ET.Element]) -> int:
        """Append rows to the table body"""
        return append_all(self.tbody, rows)


class DocBookExporter:
    """Renders selected deliveries of a project as a DocBook article"""

    def __init__(self, project: "Project"):
        self.project = project
        self.logger = logging.getLogger(self.__class__.__name__)

    def export(self,
               path: Optional[Union[str, Path]],
               deliveries: Iterable[Delivery],
               for_customer: bool = False) -> ET.ElementTree:
        """
        Build the article and optionally write it

        Args:
            path: Target file, or None to only build the document
            deliveries: Deliveries to document
            for_customer: Leave out components not relevant for customers

        Returns:
            Article document

        Raises:
            ValueError: No delivery selected
        """
        selected = sorted(set(deliveries))
        if not selected:
            raise ValueError("No delivery selected for export")

        newest = selected[0]
        oldest = selected[-1] if len(selected) > 1 else None

        article = ET.Element(XML_ARTICLE)
        add_element(article, XML_TITLE, newest.name)
        add_element(article, XML_SUBTITLE,
                    f"Build date: {newest.created_text}, Integrator: {newest.integrator}")

        enabled = self.project.enabled_export_states()
        for importer in self.project.import_strategies_in_export_order():
            if not enabled.get(normalize_plugin_name(importer.name), True):
                self.logger.debug(f"Export of {importer.name} disabled")
                continue

            section = importer.get_docbook_section_template(oldest, newest)
            self._fill(section, importer, selected, newest, oldest, for_customer)
            article.append(section)

        if path is not None:
            save_document(path, article, DOCTYPE)
            self.logger.info(f"DocBook exported to {path}")

        return ET.ElementTree(article)

    def _fill(self, section, importer, selected: List[Delivery], newest: Delivery,
              oldest: Optional[Delivery], for_customer: bool) -> None:
        root = self.project.root

        if importer.needs_all_deliveries:
            documented = [d for d in selected if d != oldest]
            empty = all(is_section_empty(root, importer, d, for_customer) for d in documented)
            if not empty:
                for delivery in documented:
                    fill_section(root, section, importer, delivery, oldest, for_customer)
        else:
            empty = is_section_empty(root, importer, newest, for_customer)
            if not empty:
                fill_section(root, section, importer, newest, oldest, for_customer)

        if empty:
            section.append(importer.get_docbook_section_empty_message())
