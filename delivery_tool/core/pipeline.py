"""Computation of delivery information

For every component and data source the configured assignment strategy
computes the content of a new delivery. Recoverable failures end up as
``error`` elements in the content and in the creation report; a fatal
failure aborts the computation and rolls the delivery back.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..api.exceptions import InternalError, InvalidParametersError
from ..constants import (
    XML_ATTR_ASSIGNER,
    XML_ATTR_COMPONENT,
    XML_ATTR_DELIVERY,
    XML_ATTR_IMPORTER,
    XML_ERROR,
    ErrorCode,
)
from ..models.component import Component
from ..models.delivery import Delivery, DeliveryKey
from ..models.information import DeliveryInformation, error_content
from ..models.result import DeliveryResult, OperationStatus
from ..utils.xml_utils import copy_element
from .traversal import visit

if TYPE_CHECKING:
    from ..plugins.base import AssignmentStrategy, ImportStrategy
    from .project import Project

logger = logging.getLogger(__name__)

NO_FORMER_DELIVERY_WARNING = "No delivery before {}, nothing to compare with"


def get_former_delivery(deliveries: Iterable[Delivery], delivery: Delivery) -> Optional[Delivery]:
    """Youngest delivery whose creation time differs from the one of ``delivery``"""
    candidates = [d for d in deliveries if d.created != delivery.created]
    if not candidates:
        return None
    return max(candidates, key=lambda d: d.created)


def resolve_assignment_strategy(component: Component, importer: "ImportStrategy") -> "AssignmentStrategy":
    """Strategy configured on the component, or the importer's default"""
    return component.get_assignment_strategy(importer.name) or importer.default_assignment_strategy()


def mark_if_new(project: "Project",
                component: Component,
                delivery: Delivery,
                importer_name: str,
                information: DeliveryInformation) -> None:
    """
    Flag information that differs from the delivery created before

    The deliveries are sorted newest first, so the first one created
    before ``delivery`` is the one to compare with.
    """
    previous = next((d for d in project.deliveries if d.created < delivery.created), None)
    previous_information = None
    if previous is not None:
        previous_information = component.get_delivery_information(DeliveryKey.of(previous, importer_name))
    information.is_new = information.has_changed(previous_information)


def compute_delivery_information(project: "Project",
                                 component: Component,
                                 delivery: Delivery,
                                 importer: "ImportStrategy") -> DeliveryInformation:
    """
    Compute the information of one component for one delivery and data source

    Args:
        project: Project providing deliveries, root path and component factory
        component: Component to compute for
        delivery: Delivery being created
        importer: Data source

    Returns:
        New delivery information

    Raises:
        InvalidParametersError: The component has too few parameters
        InternalRuntimeError: The strategy failed fatally
    """
    strategy = resolve_assignment_strategy(component, importer)
    parameters = component.get_parameters(importer.name)
    if strategy.wrong_parameters(len(parameters)):
        raise InvalidParametersError(strategy.name, strategy.nr_of_parameters, len(parameters))

    content = strategy.compute(
        list(parameters),
        component,
        delivery,
        project.get_former_delivery(delivery),
        importer,
        str(project.project_root),
        project.get_initial_component
    )

    information = importer.create_information()
    information.information = content

    if len(project.deliveries) and not information.is_new:
        mark_if_new(project, component, delivery, importer.name, information)

    return information


def annotate_errors(content: Optional[ET.Element],
                    delivery: Delivery,
                    component: Component,
                    importer: "ImportStrategy",
                    strategy: "AssignmentStrategy") -> List[ET.Element]:
    """
    Tag every error element of a content with its origin

    Returns:
        The annotated error elements (still part of the content)
    """
    if content is None:
        return []
    errors = list(content.iter(XML_ERROR))
    for error in errors:
        error.set(XML_ATTR_DELIVERY, delivery.name)
        error.set(XML_ATTR_COMPONENT, component.name)
        error.set(XML_ATTR_IMPORTER, importer.name)
        error.set(XML_ATTR_ASSIGNER, strategy.name)
    return errors


def add_delivery_information(project: "Project", delivery: Delivery) -> DeliveryResult:
    """
    Compute the information of a delivery for the whole component tree

    Missing information is computed for every component and every
    registered data source. On a fatal error the delivery and everything
    computed for it are removed again and the error is stored in the
    result.

    Args:
        project: Project the delivery was added to
        delivery: New delivery

    Returns:
        Result with the creation report
    """
    result = DeliveryResult(status=OperationStatus.IN_PROGRESS, delivery_name=delivery.name)
    importers = project.registry.import_strategies
    former = project.get_former_delivery(delivery)
    result.metadata["former_delivery"] = former.name if former is not None else None
    if former is None:
        result.add_warning(NO_FORMER_DELIVERY_WARNING.format(delivery.name))

    def add_information(component: Component, target: Delivery) -> bool:
        for importer in importers:
            key = DeliveryKey.of(target, importer.name)
            if component.find_delivery_information(key) is not None:
                continue

            strategy = resolve_assignment_strategy(component, importer)
            try:
                information = compute_delivery_information(project, component, target, importer)
            except RuntimeError:
                raise
            except Exception as e:
                code = e.error_code if isinstance(e, InternalError) else ErrorCode.INTERNAL_ERROR
                logger.error(f"{component}:{importer}:{strategy}: {e}", exc_info=not isinstance(e, InternalError))
                result.add_error(code, str(e), component=component.full_name, importer=importer.name)
                information = importer.create_information()
                information.information = error_content(str(e) or e.__class__.__name__)

            for error in annotate_errors(information.information, target, component, importer, strategy):
                result.creation_report.append(copy_element(error))

            component.set_delivery_information(key, information)
            result.computed += 1
        return True

    try:
        visit(project.root, delivery, add_information)
    except Exception as e:
        logger.error(f"Creating delivery {delivery.name} failed: {e}", exc_info=True)
        project.remove_delivery(delivery)
        result.failure = e
        result.message = str(e)
        result.complete(OperationStatus.FAILED)
        return result

    project.needs_saving = True
    status = OperationStatus.PARTIAL if result.report_entries else OperationStatus.SUCCESS
    result.message = f"Computed {result.computed} delivery information entries"
    result.complete(status)
    return result
