"""Generic component tree traversal

Every tree walk of the project is an application of :func:`visit`,
parameterized by the operation applied to each component.
"""

import xml.etree.ElementTree as ET
from typing import Any, Callable, Iterable, List, Optional, TypeVar, TYPE_CHECKING

from ..models.component import Component
from ..models.delivery import Delivery, DeliveryKey

if TYPE_CHECKING:
    from ..plugins.base import ImportStrategy

R = TypeVar("R")
T = TypeVar("T")

Operation = Callable[[Component, T], R]


def is_not_none(result: Any) -> bool:
    """Default hit predicate for quick return walks"""
    return result is not None


def visit(component: Component,
          target: T,
          do_it: Operation,
          quick_return: bool = False,
          is_hit: Callable[[Any], bool] = is_not_none) -> Optional[R]:
    """
    Apply an operation to all descendants of a component

    Children are visited in order, each before its own children. The
    component passed in is never given to ``do_it``.

    With ``quick_return`` the first hit is kept: descendants of a child
    whose result is a hit are not visited, the walk goes on with the next
    sibling and the first hit is returned.

    Args:
        component: Component whose descendants are visited
        target: Second argument of ``do_it`` (usually a delivery)
        do_it: Operation ``(component, target) -> result``
        quick_return: Stop descending on a hit
        is_hit: Predicate telling whether a result is a hit

    Returns:
        First hit with ``quick_return`` if there was one, otherwise the
        last result (None without children)
    """
    result = None
    hit = None
    found = False

    for child in component.sub_components:
        result = do_it(child, target)
        if quick_return and is_hit(result):
            if not found:
                hit, found = result, True
            continue

        if child.has_sub_components():
            result = visit(child, target, do_it, quick_return, is_hit)
            if quick_return and is_hit(result) and not found:
                hit, found = result, True

    if found:
        return hit
    return result


def is_component_empty(component: Component,
                       importer: "ImportStrategy",
                       delivery: Delivery,
                       for_customer: bool = False) -> bool:
    """
    True if the component contributes nothing to an export

    In customer mode components not marked customer relevant count as
    empty.
    """
    if for_customer and not component.customer_relevant:
        return True
    information = component.get_delivery_information(DeliveryKey.of(delivery, importer.name))
    return information.is_info_null_or_empty()


def is_section_empty(root: Component,
                     importer: "ImportStrategy",
                     delivery: Delivery,
                     for_customer: bool = False) -> bool:
    """
    True if no descendant of ``root`` has information for the data source

    Args:
        root: Component whose descendants are checked
        importer: Data source
        delivery: Delivery whose information is checked
        for_customer: Ignore components not relevant for customers

    Returns:
        True if the whole subtree is empty (also without descendants)
    """
    result = True
    for child in root.sub_components:
        result = is_component_empty(child, importer, delivery, for_customer)
        if result and child.has_sub_components():
            result = is_section_empty(child, importer, delivery, for_customer)
        if not result:
            break
    return result


def fill_section(root: Component,
                 section: ET.Element,
                 importer: "ImportStrategy",
                 delivery: Delivery,
                 oldest_delivery: Optional[Delivery],
                 for_customer: bool = False) -> int:
    """
    Render the information of all descendants into an export section

    Args:
        root: Component whose descendants are rendered
        section: Section created by the data source template
        importer: Data source
        delivery: Delivery to document
        oldest_delivery: Delivery to compare with, if any
        for_customer: Skip components not relevant for customers

    Returns:
        Number of components that added content
    """
    added: List[Component] = []

    def add_section(component: Component, target: Delivery) -> bool:
        if not component.has_delivery_information():
            return False
        if for_customer and not component.customer_relevant:
            return False
        information = component.get_delivery_information(DeliveryKey.of(target, importer.name))
        if information.add_docbook_section(section, component, oldest_delivery, for_customer):
            added.append(component)
        return True

    visit(root, delivery, add_section)
    return len(added)


def find_component(root: Component, name: str) -> Optional[Component]:
    """First descendant of ``root`` named ``name`` (pre-order)"""
    return visit(root, name, lambda component, target: component if component.name == name else None,
                 quick_return=True)


def remove_delivery_information(root: Component,
                                delivery: Delivery,
                                importer_names: Iterable[str]) -> int:
    """
    Remove the information of a delivery from all descendants

    Every key of the delivery is removed, including keys of data sources
    not listed in ``importer_names``.

    Returns:
        Number of entries removed
    """
    names = list(importer_names)
    removed = 0
    for component in collect_components(root):
        for importer_name in names:
            if component.remove_delivery_information(DeliveryKey(delivery.name, importer_name)):
                removed += 1
        # Keys of data sources that are no longer registered
        for key in [k for k in component.delivery_information if k.delivery_name == delivery.name]:
            component.remove_delivery_information(key)
            removed += 1
    return removed


def collect_components(root: Component) -> List[Component]:
    """All descendants of ``root`` in pre-order"""
    components: List[Component] = []

    def collect(component: Component, target: List[Component]) -> None:
        target.append(component)

    visit(root, components, collect)
    return components
