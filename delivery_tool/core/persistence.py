"""Saving and loading projects as XML documents"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union, TYPE_CHECKING

from packaging.version import InvalidVersion, Version

from ..__version__ import __version__
from ..api.exceptions import PersistenceError, UnknownStrategyError
from ..constants import (
    XML_ASSIGNER,
    XML_ATTR_CREATED,
    XML_ATTR_INTEGRATOR,
    XML_ATTR_IS_NEW,
    XML_ATTR_NAME,
    XML_ATTR_NUMBER,
    XML_ATTR_RELEVANT,
    XML_ATTR_VERSION,
    XML_COMPONENT,
    XML_COMPONENTS,
    XML_CONTENT,
    XML_DELIVERIES,
    XML_DELIVERY,
    XML_DELIVERY_INFORMATION,
    XML_IMPORTER,
    XML_IMPORTERS,
    XML_PARAMETER,
    XML_PARAMETERS,
)
from ..models.component import Component
from ..models.delivery import Delivery, DeliveryKey, parse_timestamp
from ..utils.xml_utils import add_element, copy_element, load_document, save_document
from .traversal import remove_delivery_information

if TYPE_CHECKING:
    from ..plugins.base import ImportStrategy
    from .project import Project

PathLike = Union[str, Path]


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(text: Optional[str], default: bool = False) -> bool:
    if text is None:
        return default
    return text.strip().lower() == "true"


class ProjectStore:
    """Reads and writes the project document of a project

    Document layout::

        <ReleaseFabProject version="...">
          <deliveries><delivery name integrator created/>*</deliveries>
          <components>
            <component name relevant>
              <importers>
                <importer name version>
                  <assigner name/>
                  <parameters number><parameter/>*</parameters>
                  <deliveryInformation name isNew><content/></deliveryInformation>*
                </importer>*
              </importers>
              <component/>*
            </component>*
          </components>
        </ReleaseFabProject>
    """

    def __init__(self, project: "Project"):
        self.project = project
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def settings(self):
        return self.project.settings

    # Saving

    def to_element(self, deliveries: Optional[Iterable[Delivery]] = None) -> ET.Element:
        """
        Build the project document

        Args:
            deliveries: Deliveries to include (default: all, sorted)

        Returns:
            Document root element
        """
        if deliveries is None:
            deliveries = self.project.deliveries
        deliveries = sorted(deliveries)

        root = ET.Element(self.settings.xml_root_format, {XML_ATTR_VERSION: __version__})

        deliveries_element = ET.SubElement(root, XML_DELIVERIES)
        for delivery in deliveries:
            ET.SubElement(deliveries_element, XML_DELIVERY, {
                XML_ATTR_NAME: delivery.name,
                XML_ATTR_INTEGRATOR: delivery.integrator,
                XML_ATTR_CREATED: delivery.created_text,
            })

        components_element = ET.SubElement(root, XML_COMPONENTS)
        importers = self.project.import_strategies_in_view_order()
        self._save_tree(self.project.root, components_element, importers, deliveries)
        return root

    def _save_tree(self,
                   parent: Component,
                   target: ET.Element,
                   importers: List["ImportStrategy"],
                   deliveries: List[Delivery]) -> None:
        for component in parent.sub_components:
            component_element = ET.SubElement(target, XML_COMPONENT, {
                XML_ATTR_NAME: component.name,
                XML_ATTR_RELEVANT: _bool_text(component.customer_relevant),
            })

            importers_element = ET.SubElement(component_element, XML_IMPORTERS)
            for importer in importers:
                importers_element.append(self._importer_element(component, importer, deliveries))

            self._save_tree(component, component_element, importers, deliveries)

    @staticmethod
    def _importer_element(component: Component,
                          importer: "ImportStrategy",
                          deliveries: List[Delivery]) -> ET.Element:
        element = ET.Element(XML_IMPORTER, {
            XML_ATTR_NAME: importer.name,
            XML_ATTR_VERSION: importer.version,
        })

        strategy = component.get_assignment_strategy(importer.name) or importer.default_assignment_strategy()
        ET.SubElement(element, XML_ASSIGNER, {XML_ATTR_NAME: strategy.name})

        count = strategy.nr_of_parameters
        values = list(component.get_parameters(importer.name)[:count])
        values.extend([""] * (count - len(values)))
        parameters = ET.SubElement(element, XML_PARAMETERS, {XML_ATTR_NUMBER: str(count)})
        for value in values:
            add_element(parameters, XML_PARAMETER, value)

        for delivery in deliveries:
            information = component.find_delivery_information(DeliveryKey.of(delivery, importer.name))
            if information is None:
                continue
            information_element = ET.SubElement(element, XML_DELIVERY_INFORMATION, {
                XML_ATTR_NAME: delivery.name,
                XML_ATTR_IS_NEW: _bool_text(information.is_new),
            })
            if information.information is not None:
                information_element.append(copy_element(information.information))

        return element

    def save(self, path: PathLike, deliveries: Optional[Iterable[Delivery]] = None) -> Path:
        """
        Write the project document

        Args:
            path: Target file
            deliveries: Deliveries to include (default: all)

        Returns:
            Path written

        Raises:
            PersistenceError: File cannot be written
        """
        try:
            written = save_document(path, self.to_element(deliveries))
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e
        self.logger.info(f"Project saved to {written}")
        return written

    def export_delivery(self, path: PathLike, delivery: Delivery) -> Path:
        """Write a project document containing a single delivery"""
        return self.save(path, [delivery])

    # Loading

    def load(self, path: PathLike) -> Set[str]:
        """
        Merge a project document into the project

        Deliveries of the document are added, components are merged by
        name. If anything fails, the deliveries added so far are removed
        again together with their information.

        Args:
            path: Document to load

        Returns:
            Names of the importers found in the document

        Raises:
            PersistenceError: File unreadable, wrong format, duplicate
                delivery or importer version too old
            UnknownStrategyError: Importer or assignment strategy not registered
        """
        try:
            document = load_document(path)
        except (OSError, ET.ParseError) as e:
            raise PersistenceError(f"Could not load {path}: {e}") from e

        self._check_format(path, document)

        added: List[Delivery] = []
        importer_names: Set[str] = set()
        try:
            for element in document.iterfind(f"{XML_DELIVERIES}/{XML_DELIVERY}"):
                delivery = self._read_delivery(element)
                if not self.project.deliveries.add(delivery):
                    raise PersistenceError(
                        f'There\'s already a delivery named "{delivery.name}". '
                        f'Therefore the import was canceled to prevent a loss of information.'
                    )
                added.append(delivery)

            components = document.find(XML_COMPONENTS)
            if components is not None:
                self._load_tree(self.project.root, components, importer_names)
        except Exception:
            self._rollback(added)
            raise

        self.logger.info(f"Loaded {len(added)} deliveries from {path}")
        return importer_names

    def _check_format(self, path: PathLike, document: ET.Element) -> None:
        if document.tag != self.settings.xml_root_format and not self.settings.legacy:
            raise PersistenceError(f"Wrong XML format in {Path(path).resolve()} !")

    @staticmethod
    def _read_delivery(element: ET.Element) -> Delivery:
        name = element.get(XML_ATTR_NAME)
        if not name:
            raise PersistenceError("Delivery without name")
        return Delivery(
            name=name,
            integrator=element.get(XML_ATTR_INTEGRATOR, ""),
            created=parse_timestamp(element.get(XML_ATTR_CREATED, "")),
        )

    def _rollback(self, added: List[Delivery]) -> None:
        importer_names = self.project.registry.import_strategy_names
        for delivery in added:
            remove_delivery_information(self.project.root, delivery, importer_names)
            self.project.deliveries.remove(delivery)
        self.logger.warning(f"Load failed, removed {len(added)} deliveries again")

    def _load_tree(self, parent: Component, element: ET.Element, importer_names: Set[str]) -> None:
        for component_element in element.findall(XML_COMPONENT):
            name = component_element.get(XML_ATTR_NAME, "")
            component = next((c for c in parent.sub_components if c.name == name), None)
            is_new = component is None
            if is_new:
                component = self.project.get_initial_component(name, with_information=False)
                component.customer_relevant = _parse_bool(component_element.get(XML_ATTR_RELEVANT), True)

            for importer_element in component_element.iterfind(f"{XML_IMPORTERS}/{XML_IMPORTER}"):
                importer_names.add(self._load_importer(component, importer_element))

            if is_new:
                parent.add_sub_component(component)
            self._load_tree(component, component_element, importer_names)

    def _load_importer(self, component: Component, element: ET.Element) -> str:
        name = element.get(XML_ATTR_NAME, "")
        importer = self.project.registry.get_import_strategy(name)
        if importer is None:
            raise UnknownStrategyError(f"No such importer found: {name}")
        self._check_version(importer, element.get(XML_ATTR_VERSION, "0"))

        assigner = element.find(XML_ASSIGNER)
        if assigner is not None:
            assigner_name = assigner.get(XML_ATTR_NAME, "")
            strategy = importer.get_assignment_strategy(assigner_name)
            if strategy is None:
                raise UnknownStrategyError(
                    f'No assignment strategy "{assigner_name}" found for importer "{name}"'
                )
            component.set_assignment_strategy(name, strategy)

        for index, parameter in enumerate(element.iterfind(f"{XML_PARAMETERS}/{XML_PARAMETER}")):
            component.set_parameter(name, index, parameter.text or "")

        for information_element in element.findall(XML_DELIVERY_INFORMATION):
            delivery = self.project.get_delivery(information_element.get(XML_ATTR_NAME, ""))
            if delivery is None:
                continue
            key = DeliveryKey.of(delivery, name)
            information = component.find_delivery_information(key) or importer.create_information()
            information.is_new = _parse_bool(information_element.get(XML_ATTR_IS_NEW))
            information.information = information_element.find(XML_CONTENT)
            component.set_delivery_information(key, information)

        return name

    def _check_version(self, importer: "ImportStrategy", stored_version: str) -> None:
        """The registered importer must be at least as new as the one that wrote the document"""
        if self.settings.legacy:
            return
        try:
            too_old = Version(importer.version) < Version(stored_version)
        except InvalidVersion as e:
            raise PersistenceError(f'Invalid version of importer "{importer.name}": {e}') from e
        if too_old:
            raise PersistenceError(
                f'The version of the importer plugin "{importer.name}" is too old to open this document. '
                f'In order to open it update the plugin to version {stored_version} or higher. '
                f'Current version is: {importer.version}'
            )
