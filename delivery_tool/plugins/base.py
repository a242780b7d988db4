# delivery_tool/plugins/base.py
"""Plugin interfaces: data sources and assignment strategies"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Type, TYPE_CHECKING

from ..constants import EMPTY_SECTION_MESSAGE, XML_SUBTITLE
from ..models.config import Settings
from ..models.information import DeliveryInformation, error_content
from ..utils.xml_utils import create_element

if TYPE_CHECKING:
    from ..models.component import Component
    from ..models.delivery import Delivery
    from .registry import PluginRegistry

ComponentFactory = Callable[[str], "Component"]


class PresentationType(Enum):
    """How a data source prefers to be shown in an overview"""
    NONE = "none"
    LABEL = "label"
    ICON = "icon"


class AssignmentStrategy(ABC):
    """Computes the content of one data source for one component

    Strategies are shared between components; everything specific to a
    component arrives through the ``compute`` arguments.
    """

    NAME = ""
    NR_OF_PARAMETERS = 0
    USAGE = ""

    def __init__(self):
        self.external_plugins: List[str] = []
        self.registry: Optional["PluginRegistry"] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def nr_of_parameters(self) -> int:
        return self.NR_OF_PARAMETERS

    @property
    def usage(self) -> str:
        return self.USAGE

    @property
    def settings(self) -> Settings:
        """Settings of the registry this strategy is attached to"""
        if self.registry is not None:
            return self.registry.settings
        return Settings()

    def add_to_external_plugin(self, importer_name: str) -> None:
        """Attach this strategy to a data source it does not belong to"""
        if importer_name not in self.external_plugins:
            self.external_plugins.append(importer_name)

    def wrong_parameters(self, count: int) -> bool:
        """True if ``count`` parameters are not enough for this strategy"""
        return count < self.nr_of_parameters

    def error_header(self, component: "Component", importer: "ImportStrategy") -> str:
        """Log prefix ``component:importer:strategy:``"""
        return f"{component}:{importer}:{self.name}:"

    def report_error(self,
                     component: "Component",
                     importer: "ImportStrategy",
                     message: str,
                     exc_info: bool = False) -> ET.Element:
        """
        Log a recoverable failure and build its error content

        Args:
            component: Component being computed
            importer: Data source being computed
            message: Error text stored in the content
            exc_info: Whether to log the active exception

        Returns:
            ``<content><error>message</error></content>``
        """
        self.logger.error(f"{self.error_header(component, importer)} {message}", exc_info=exc_info)
        return error_content(message)

    @abstractmethod
    def compute(self,
                parameters: List[str],
                component: "Component",
                delivery: "Delivery",
                former_delivery: Optional["Delivery"],
                importer: "ImportStrategy",
                project_root: str,
                initial_component: Optional[ComponentFactory] = None) -> ET.Element:
        """
        Compute the content for a component and delivery

        Args:
            parameters: Parameter values configured on the component
            component: Component to compute for
            delivery: Delivery being created
            former_delivery: Delivery preceding ``delivery``, if any
            importer: Data source the content is computed for
            project_root: Directory project relative paths refer to
            initial_component: Factory creating new components by name

        Returns:
            ``content`` element; recoverable failures are reported as
            ``error`` children

        Raises:
            InternalRuntimeError: Computation cannot continue
        """
        pass

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class ImportStrategy(ABC):
    """A data source contributing one kind of delivery information"""

    NAME = ""
    VERSION = "1.0.0"
    LICENSE = "Eclipse Public License - v 2.0"
    LICENSE_SOURCE = "https://www.eclipse.org/legal/epl-2.0/"
    INFORMATION_TYPE: Type[DeliveryInformation] = DeliveryInformation
    NEEDS_ALL_DELIVERIES = False
    PRESENTATION_TYPE = PresentationType.NONE

    def __init__(self):
        from .builtin.assignments import IgnoreAssignment

        self.registry: Optional["PluginRegistry"] = None
        self.assignment_strategies: List[AssignmentStrategy] = [IgnoreAssignment()]
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def version(self) -> str:
        return self.VERSION

    @property
    def license(self) -> str:
        return self.LICENSE

    @property
    def license_source(self) -> str:
        return self.LICENSE_SOURCE

    @property
    def information_type(self) -> Type[DeliveryInformation]:
        return self.INFORMATION_TYPE

    @property
    def information_name(self) -> str:
        """Name of the delivery information type this source produces"""
        return self.INFORMATION_TYPE.NAME

    @property
    def needs_all_deliveries(self) -> bool:
        """True if the export renders every selected delivery, not only the newest"""
        return self.NEEDS_ALL_DELIVERIES

    @property
    def presentation_type(self) -> PresentationType:
        return self.PRESENTATION_TYPE

    def get_assignment_strategy(self, name: str) -> Optional[AssignmentStrategy]:
        """Strategy with the given name, or None"""
        for strategy in self.assignment_strategies:
            if strategy.name == name:
                return strategy
        return None

    def add_assignment_strategy(self, strategy: AssignmentStrategy) -> bool:
        """
        Add a strategy unless one with the same name exists

        Returns:
            True if the strategy was added
        """
        if self.get_assignment_strategy(strategy.name) is not None:
            return False
        strategy.registry = self.registry
        self.assignment_strategies.append(strategy)
        return True

    def default_assignment_strategy(self) -> AssignmentStrategy:
        """``Ignore`` if present, otherwise the first strategy"""
        from .builtin.assignments import IgnoreAssignment

        return self.get_assignment_strategy(IgnoreAssignment.NAME) or self.assignment_strategies[0]

    def max_parameter_count(self) -> int:
        """Largest parameter count of all strategies"""
        return max((s.nr_of_parameters for s in self.assignment_strategies), default=0)

    def bind(self, registry: "PluginRegistry") -> None:
        """Attach the registry to this source and its strategies"""
        self.registry = registry
        for strategy in self.assignment_strategies:
            strategy.registry = registry

    def create_information(self) -> DeliveryInformation:
        """New, empty instance of the information type"""
        information = self.information_type()
        information.registry = self.registry
        return information

    @abstractmethod
    def get_docbook_section_template(self,
                                     from_delivery: Optional["Delivery"],
                                     to_delivery: "Delivery") -> ET.Element:
        """
        Section the export fills with the information of all components

        Args:
            from_delivery: Oldest selected delivery (None for a single one)
            to_delivery: Newest selected delivery

        Returns:
            ``section`` element
        """
        pass

    def get_docbook_section_empty_message(self) -> ET.Element:
        """Element added to a section without content"""
        return create_element(XML_SUBTITLE, text=EMPTY_SECTION_MESSAGE)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, version={self.version!r})"
