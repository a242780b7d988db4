"""Project context: deliveries, component tree and document I/O"""

import logging
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from ..api.exceptions import DeliveryCreationError, InternalError, PersistenceError
from ..constants import EXPORT_ORDER, XML_CREATION_REPORT
from ..models.collection import ObservableCollection
from ..models.component import Component
from ..models.config import Settings
from ..models.delivery import Delivery, DeliveryKey
from ..models.result import DeliveryResult, OperationStatus
from ..plugins.base import ImportStrategy
from ..plugins.registry import PluginRegistry, get_registry
from ..utils.path_utils import resolve_path
from .docbook import DocBookExporter
from .persistence import ProjectStore
from .pipeline import add_delivery_information, compute_delivery_information, get_former_delivery
from .traversal import collect_components, find_component, remove_delivery_information

PathLike = Union[str, Path]

STARTUP_FILE_ERROR = "Couldn't load startup file."


class Project:
    """
    A release documentation project

    Holds the deliveries, the invisible root of the component tree and
    the report of the last delivery creation.
    """

    def __init__(self,
                 registry: Optional[PluginRegistry] = None,
                 settings: Optional[Settings] = None,
                 project_root: PathLike = "."):
        self.registry = registry if registry is not None else get_registry(settings)
        self.settings = settings if settings is not None else self.registry.settings
        self.project_root = Path(project_root)

        self.deliveries: ObservableCollection[Delivery] = ObservableCollection()
        self.root = Component()
        self.creation_report = ET.Element(XML_CREATION_REPORT)
        self.needs_saving = False
        self.open_file_name = ""

        self.logger = logging.getLogger(self.__class__.__name__)

    # Deliveries

    def add_delivery(self, delivery: Delivery) -> DeliveryResult:
        """
        Add a delivery and compute its information for the whole tree

        The computation runs in a worker thread; this call waits for it.

        Args:
            delivery: New delivery

        Returns:
            Result with the creation report. If a delivery with the same
            name already exists, nothing is computed and the result is
            FAILED without a failure cause.

        Raises:
            DeliveryCreationError: The computation failed fatally; the
                delivery has been removed again
        """
        if not self.deliveries.add(delivery):
            result = DeliveryResult(status=OperationStatus.FAILED, delivery_name=delivery.name)
            result.message = f"Delivery {delivery.name} already exists"
            result.complete()
            return result

        self.logger.info(f"Creating delivery {delivery.name}")
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="delivery") as executor:
            future = executor.submit(add_delivery_information, self, delivery)
            result = future.result()

        self.creation_report = result.creation_report
        if result.failure is not None:
            self.logger.error(f"Delivery {delivery.name} could not be created: {result.failure}")
            raise DeliveryCreationError(delivery.name, result.failure) from result.failure

        self.logger.info(result.message)
        return result

    def remove_delivery(self, delivery: Delivery) -> bool:
        """Remove a delivery and all of its information"""
        if delivery not in self.deliveries:
            return False
        removed = remove_delivery_information(self.root, delivery, self.registry.import_strategy_names)
        self.deliveries.remove(delivery)
        self.needs_saving = True
        self.logger.debug(f"Removed delivery {delivery.name} ({removed} information entries)")
        return True

    def get_delivery(self, name: str) -> Optional[Delivery]:
        return self.deliveries.get(name)

    def has_delivery(self, name: str) -> bool:
        return self.get_delivery(name) is not None

    def get_former_delivery(self, delivery: Delivery) -> Optional[Delivery]:
        return get_former_delivery(self.deliveries, delivery)

    # Components

    def get_initial_component(self, name: str = "", with_information: bool = True) -> Component:
        """
        New component configured with the defaults of every data source

        Args:
            name: Component name
            with_information: Compute the information of every existing
                delivery with the default strategies

        Returns:
            Detached component
        """
        component = Component(name)
        for importer in self.registry.import_strategies:
            component.set_assignment_strategy(importer.name, importer.default_assignment_strategy())
            component.parameters[importer.name] = [""] * importer.max_parameter_count()
            if not with_information:
                continue
            for delivery in self.deliveries:
                key = DeliveryKey.of(delivery, importer.name)
                if component.find_delivery_information(key) is None:
                    information = compute_delivery_information(self, component, delivery, importer)
                    component.set_delivery_information(key, information)
        return component

    def add_component(self, parent: Optional[Component], name: str, index: Optional[int] = None) -> Component:
        """Create an initial component below ``parent`` (default: the root)"""
        parent = parent or self.root
        component = self.get_initial_component(name)
        if index is None:
            parent.add_sub_component(component)
        else:
            parent.insert_sub_component(index, component)
        self.needs_saving = True
        return component

    def remove_component(self, component: Component) -> bool:
        if component.parent is None:
            return False
        removed = component.parent.remove_sub_component(component)
        if removed:
            self.needs_saving = True
        return removed

    def find_component(self, name: str) -> Optional[Component]:
        return find_component(self.root, name)

    # Data source order

    def import_strategies_in_view_order(self) -> List[ImportStrategy]:
        return self.registry.import_strategies_in_view_order(self.settings)

    def import_strategies_in_export_order(self) -> List[ImportStrategy]:
        return self.registry.import_strategies_in_export_order(self.settings)

    def enabled_export_states(self) -> Dict[str, bool]:
        """Enabled flag per normalized data source name"""
        return self.settings.enabled_states(EXPORT_ORDER)

    # Documents

    def load(self, path: PathLike) -> Set[str]:
        """Merge a project document into this project"""
        importer_names = ProjectStore(self).load(path)
        self.open_file_name = str(path)
        self.needs_saving = False
        return importer_names

    def open(self, path: PathLike) -> Set[str]:
        """
        Replace the project with a project document

        Raises:
            PersistenceError: The file does not exist or cannot be loaded
        """
        if not Path(path).is_file():
            raise PersistenceError(f'A file with the specified path ("{path}") does not exist.')
        self.reset()
        return self.load(path)

    def save(self, path: Optional[PathLike] = None) -> Path:
        """
        Save the project

        Args:
            path: Target file (default: the file the project was opened from)

        Raises:
            PersistenceError: No file name known or writing failed
        """
        path = path or self.open_file_name
        if not path:
            raise PersistenceError("No file name given to save the project to")
        written = ProjectStore(self).save(path)
        self.open_file_name = str(path)
        self.needs_saving = False
        return written

    def load_startup_file(self) -> Set[str]:
        """
        Open the startup file configured in the settings

        Raises:
            InternalError: No startup file configured or it does not exist
        """
        if not self.settings.startup_file:
            raise InternalError(STARTUP_FILE_ERROR)
        path = resolve_path(self.settings.startup_file, self.project_root)
        if not path.is_file():
            raise InternalError(STARTUP_FILE_ERROR)
        return self.open(path)

    def export_delivery(self, path: PathLike, delivery: Delivery) -> Path:
        """Write a project document containing only ``delivery``"""
        return ProjectStore(self).export_delivery(path, delivery)

    def export_docbook(self,
                       path: Optional[PathLike],
                       deliveries: Optional[Iterable[Delivery]] = None,
                       for_customer: bool = False) -> ET.ElementTree:
        """
        Export release notes as DocBook

        Args:
            path: Target file, or None to only build the document
            deliveries: Deliveries to export (default: all)
            for_customer: Skip components not relevant for customers

        Returns:
            The DocBook document
        """
        if deliveries is None:
            deliveries = list(self.deliveries)
        return DocBookExporter(self).export(path, deliveries, for_customer)

    # Housekeeping

    def reset(self) -> None:
        """Forget all deliveries and components"""
        self.deliveries.clear()
        for child in list(self.root.sub_components):
            self.root.remove_sub_component(child)
        self.creation_report = ET.Element(XML_CREATION_REPORT)
        self.needs_saving = False
        self.open_file_name = ""

    def prune_unregistered_information(self) -> int:
        """
        Drop information of data sources that are not registered

        Returns:
            Number of removed entries
        """
        registered = set(self.registry.import_strategy_names)
        removed = 0
        for component in collect_components(self.root):
            for key in list(component.delivery_information):
                if key.importer_name not in registered:
                    component.remove_delivery_information(key)
                    removed += 1
        if removed:
            self.needs_saving = True
            self.logger.info(f"Removed {removed} information entries of unregistered data sources")
        return removed

    def __repr__(self) -> str:
        return f"Project(deliveries={len(self.deliveries)}, components={len(self.root.sub_components)})"
