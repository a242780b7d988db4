# delivery_tool/plugins/builtin/assignments.py
"""Generic assignment strategies shared by the builtin data sources"""

import random
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from ...api.exceptions import InternalError
from ...constants import (
    DEFAULT_RANDOM_MAX,
    DEFAULT_RANDOM_MIN,
    EMPTY_VALUE,
    XML_ATTR_NAME,
    XML_ATTR_RELEVANT,
    XML_COMPONENT,
    XML_COMPONENTS,
    XML_CONTENT,
    XML_DELIVERY_INFORMATION,
    XML_IMPORTER,
    XML_STRING,
)
from ...core.command_executor import CommandExecutor
from ...models.component import Component
from ...models.delivery import DeliveryKey
from ...models.information import error_content, string_content
from ...utils.path_utils import get_absolute_file_path
from ...utils.xml_utils import add_element, append_content, copy_element, first_descendant, load_document
from ..base import AssignmentStrategy

MISSING_PARAMETER = "Missing Parameter {}"
IMPORT_ONLY = "only"
SUBTREE_READY = "\nSubtree ready to be imported!"
FILE_ENCODING = "iso-8859-1"


def filter_with_regex(text: str, regex: str, output_format: str) -> str:
    """
    Extract a value from text with a regular expression

    ``${n}`` placeholders in the format are replaced by the groups of the
    first match. Without groups or without a format the whole match is
    returned; without a match the format is returned unchanged.

    Args:
        text: Text to search
        regex: Regular expression
        output_format: Output format, e.g. ``${1}.${2}``

    Returns:
        Formatted value

    Raises:
        re.error: Invalid regular expression
    """
    result = output_format
    match = re.search(regex, text)
    if match:
        for index in range(1, len(match.groups()) + 1):
            result = result.replace(f"${{{index}}}", match.group(index) or "")
        if not match.groups() or not output_format:
            result = match.group(0)
    return result


def _parameter(parameters: List[str], index: int) -> str:
    return parameters[index].strip() if index < len(parameters) else ""


class IgnoreAssignment(AssignmentStrategy):
    """Stores the empty marker"""

    NAME = "Ignore"
    NR_OF_PARAMETERS = 0
    USAGE = "Ignore:\nJob: Assigns nothing."

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        return string_content(EMPTY_VALUE)


class ConstTextAssignment(AssignmentStrategy):
    """Stores a fixed text"""

    NAME = "ConstText"
    NR_OF_PARAMETERS = 1
    USAGE = "Constant Text:\nJob: Assigns a given text.\nParameter 1: Text to assign"

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        text = _parameter(parameters, 0)
        if not text:
            return self.report_error(component, importer, MISSING_PARAMETER.format(1))
        return string_content(text)


class FileParserAssignment(AssignmentStrategy):
    """Extracts a value from a text file"""

    NAME = "File Parser"
    NR_OF_PARAMETERS = 3
    USAGE = (
        "File Parser:\n"
        "Job: Extracts value out of a file.\n"
        "Parameter 1: Name of file (incl. path)\n"
        "Parameter 2: Regular Expression\n"
        "Parameter 3: Output format, for example ${1} ${2}"
    )

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        filename = _parameter(parameters, 0)
        regex = _parameter(parameters, 1)
        output_format = _parameter(parameters, 2)

        if not filename:
            return self.report_error(component, importer, MISSING_PARAMETER.format(1))

        path = get_absolute_file_path(filename, project_root)
        if not Path(path).exists():
            return self.report_error(component, importer, f'File "{filename}" does not exist!')

        try:
            with open(path, "r", encoding=FILE_ENCODING) as f:
                text = "".join(f.read().splitlines())
            result = filter_with_regex(text, regex, output_format) if regex else text
        except (OSError, re.error):
            return self.report_error(component, importer, "Fileparser error!", exc_info=True)

        return string_content(result)


class CommandExecuterAssignment(AssignmentStrategy):
    """Stores the output of an external program"""

    NAME = "Command Executer"
    NR_OF_PARAMETERS = 4
    USAGE = (
        "Command Executer:\n"
        "Job: Assigns a value delivered by an external program.\n"
        "Parameter 1: Name of the program (execution call /incl. path)\n"
        "Parameter 2: Parameters for the program\n"
        "Parameter 3: Regular Expression\n"
        "Parameter 4: Output format, for example ${1} ${2}"
    )

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        program = parameters[0] if parameters else ""
        if not program:
            return self.report_error(component, importer, MISSING_PARAMETER.format(1))

        arguments = parameters[1] if len(parameters) > 1 else ""
        regex = parameters[2] if len(parameters) > 2 else ""
        output_format = parameters[3] if len(parameters) > 3 else ""

        command = f'"{program}" {arguments}'
        try:
            result = CommandExecutor(command).execute()
            if not result.success:
                self.logger.warning(
                    f'Command executor for command "{command}" failed with error message:\n'
                    f'{result.error}###\nend of error message'
                )
                return error_content(result.error)

            output = result.output or result.error
            if regex:
                output = filter_with_regex(output, regex, output_format)
        except (InternalError, re.error) as e:
            return self.report_error(component, importer, str(e), exc_info=True)

        return string_content(output)


class RandomAssignment(AssignmentStrategy):
    """Stores a random number of a range"""

    NAME = "Random"
    NR_OF_PARAMETERS = 2
    USAGE = (
        "Assignment Random Number:\n"
        "Job: Assign a random number in a specific range\n"
        "Parameter 1: min value\n"
        "Parameter 2: max value"
    )

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        try:
            low = int(_parameter(parameters, 0))
            high = int(_parameter(parameters, 1))
            if low > high:
                raise ValueError(f"empty range {low}..{high}")
        except ValueError as e:
            self.logger.debug(f"{self.name} compute: using default values ({e})")
            low, high = DEFAULT_RANDOM_MIN, DEFAULT_RANDOM_MAX

        return string_content(str(random.randint(low, high)))


class ImportSubtreeAssignment(AssignmentStrategy):
    """Imports information (and optionally child components) from an exported project"""

    NAME = "Import Subtree"
    NR_OF_PARAMETERS = 3
    USAGE = (
        "Assignment of imported delivery information:\n"
        "Job: Reads components with delivery information from file.\n"
        "Parameter 1: File with exported delivery\n"
        "Parameter 2: Name of the root node\n"
        'Parameter 3: If this parameter is set to "only" only the root node is imported.'
    )

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        filename = _parameter(parameters, 0)
        root_name = _parameter(parameters, 1)
        only = _parameter(parameters, 2).lower() == IMPORT_ONLY

        if not filename:
            return self.report_error(component, importer, MISSING_PARAMETER.format(1))

        path = get_absolute_file_path(filename, project_root)
        if not Path(path).exists():
            return self.report_error(component, importer, f'File "{path}" does not exist!')
        if not root_name:
            return self.report_error(component, importer, MISSING_PARAMETER.format(2))

        try:
            document = load_document(path)
        except (OSError, ET.ParseError) as e:
            return self.report_error(component, importer, str(e), exc_info=True)

        settings = self.settings
        if document.tag != settings.xml_root_format and not settings.legacy:
            return self.report_error(
                component, importer, f"Wrong XML format in {Path(path).resolve()} !"
            )

        source = self._find_component(document, root_name)
        if source is None:
            return self.report_error(component, importer, f'Component "{root_name}" not found!')

        content = ET.Element(XML_CONTENT)
        component.name = source.get(XML_ATTR_NAME, root_name)
        information = self._first_information(source, importer.name)
        if information is not None:
            append_content(content, copy_element(information))

        if only:
            add_element(content, XML_STRING, SUBTREE_READY)
        else:
            self._copy_tree(source, component, delivery, importer, initial_component)

        return content

    @staticmethod
    def _find_component(document: ET.Element, name: str) -> Optional[ET.Element]:
        components = document.find(XML_COMPONENTS)
        if components is None:
            return None
        for element in components.iter(XML_COMPONENT):
            if element.get(XML_ATTR_NAME) == name:
                return element
        return None

    @staticmethod
    def _first_information(element: ET.Element, importer_name: str) -> Optional[ET.Element]:
        """``content`` of the first delivery information stored for an importer"""
        for importer_element in element.iter(XML_IMPORTER):
            if importer_element.get(XML_ATTR_NAME) == importer_name:
                information = first_descendant(importer_element, XML_DELIVERY_INFORMATION)
                if information is None:
                    return None
                return information.find(XML_CONTENT)
        return None

    def _copy_tree(self, source: ET.Element, target: Component, delivery, importer, factory) -> None:
        for child_element in source.findall(XML_COMPONENT):
            name = child_element.get(XML_ATTR_NAME, "")
            child = next((c for c in target.sub_components if c.name == name), None)
            is_new = child is None
            if is_new:
                child = factory(name) if factory is not None else Component(name)
                child.name = name
                child.customer_relevant = child_element.get(XML_ATTR_RELEVANT, "true").lower() == "true"

            information = self._first_information(child_element, importer.name)
            if information is not None:
                delivery_information = importer.create_information()
                delivery_information.information = copy_element(information)
                child.set_delivery_information(DeliveryKey.of(delivery, importer.name), delivery_information)

            if is_new:
                target.add_sub_component(child)
            self._copy_tree(child_element, child, delivery, importer, factory)


GENERIC_STRATEGIES = [
    ConstTextAssignment,
    FileParserAssignment,
    CommandExecuterAssignment,
    RandomAssignment,
    ImportSubtreeAssignment,
]
