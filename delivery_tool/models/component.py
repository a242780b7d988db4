"""Component tree model"""

from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

from .delivery import DeliveryKey
from .information import DeliveryInformation, EMPTY_INFORMATION

if TYPE_CHECKING:
    from ..plugins.base import AssignmentStrategy

FULL_NAME_SEPARATOR = "\\"


class Component:
    """A node in the hierarchical breakdown of the documented system

    The project owns one invisible root component. Its descendants carry
    the delivery information computed per (delivery, data source) and the
    assignment strategy configured per data source.
    """

    def __init__(self,
                 name: str = "",
                 parent: Optional["Component"] = None,
                 customer_relevant: bool = True):
        self.name = name
        self.parent = parent
        self.customer_relevant = customer_relevant
        self.sub_components: List["Component"] = []
        self.delivery_information: Dict[DeliveryKey, DeliveryInformation] = {}
        self.assignment_strategies: Dict[str, "AssignmentStrategy"] = {}
        self.parameters: Dict[str, List[str]] = {}

    @property
    def full_name(self) -> str:
        """Names from the first visible level down to this node, joined by backslash"""
        names = [self.name]
        component = self
        # The root component is not visible and not part of the name
        while component.parent is not None and component.parent.parent is not None:
            component = component.parent
            names.insert(0, component.name)
        return FULL_NAME_SEPARATOR.join(names)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def has_sub_components(self) -> bool:
        return bool(self.sub_components)

    def _check_insertable(self, child: "Component") -> None:
        node: Optional[Component] = self
        while node is not None:
            if node is child:
                raise ValueError(f"Component '{child.name}' cannot become its own descendant")
            node = node.parent

    def add_sub_component(self, child: "Component") -> "Component":
        """Append a child component"""
        return self.insert_sub_component(len(self.sub_components), child)

    def insert_sub_component(self, index: int, child: "Component") -> "Component":
        """
        Insert a child at a position

        Args:
            index: Position among the children
            child: Component to insert (detached from its former parent)

        Returns:
            The inserted child
        """
        self._check_insertable(child)
        if child.parent is not None and child in child.parent.sub_components:
            child.parent.sub_components.remove(child)
        child.parent = self
        self.sub_components.insert(index, child)
        return child

    def remove_sub_component(self, child: "Component") -> bool:
        """Remove a child; returns False if it is not a child of this node"""
        if child not in self.sub_components:
            return False
        self.sub_components.remove(child)
        child.parent = None
        return True

    def index_of(self, child: "Component") -> int:
        return self.sub_components.index(child)

    def iter_components(self) -> Iterator["Component"]:
        """Pre-order iteration over all descendants"""
        for child in self.sub_components:
            yield child
            yield from child.iter_components()

    # Delivery information

    def get_delivery_information(self, key: DeliveryKey) -> DeliveryInformation:
        """Information stored under ``key``, or the empty sentinel"""
        return self.delivery_information.get(key, EMPTY_INFORMATION)

    def find_delivery_information(self, key: DeliveryKey) -> Optional[DeliveryInformation]:
        return self.delivery_information.get(key)

    def set_delivery_information(self, key: DeliveryKey, information: DeliveryInformation) -> None:
        self.delivery_information[key] = information

    def remove_delivery_information(self, key: DeliveryKey) -> bool:
        return self.delivery_information.pop(key, None) is not None

    def has_delivery_information(self) -> bool:
        return bool(self.delivery_information)

    # Assignment configuration

    def get_assignment_strategy(self, importer_name: str) -> Optional["AssignmentStrategy"]:
        return self.assignment_strategies.get(importer_name)

    def set_assignment_strategy(self, importer_name: str, strategy: "AssignmentStrategy") -> None:
        self.assignment_strategies[importer_name] = strategy

    def get_parameters(self, importer_name: str) -> List[str]:
        """Parameter values for an importer (created empty if missing)"""
        return self.parameters.setdefault(importer_name, [])

    def set_parameter(self, importer_name: str, index: int, value: str) -> None:
        """Set one parameter value, growing the list as needed"""
        parameters = self.get_parameters(importer_name)
        while len(parameters) <= index:
            parameters.append("")
        parameters[index] = value

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Component(name={self.name!r}, children={len(self.sub_components)})"
