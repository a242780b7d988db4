"""XML element helpers built on xml.etree.ElementTree"""

import copy
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = "  "


def create_element(tag: str,
                   *children: ET.Element,
                   text: Optional[str] = None,
                   attrib: Optional[Dict[str, str]] = None) -> ET.Element:
    """
    Create an element with optional text, attributes and children

    Args:
        tag: Element name
        *children: Child elements appended in order
        text: Element text
        attrib: Element attributes

    Returns:
        New element
    """
    element = ET.Element(tag, attrib or {})
    if text is not None:
        element.text = text
    for child in children:
        element.append(child)
    return element


def add_element(parent: ET.Element, tag: str, text: Optional[str] = None) -> ET.Element:
    """Append a child element with the given text and return it"""
    child = ET.SubElement(parent, tag)
    if text is not None:
        child.text = text
    return child


def element_text(element: Optional[ET.Element]) -> str:
    """Concatenated text of an element and all its descendants"""
    if element is None:
        return ""
    return "".join(element.itertext())


def child_text(element: Optional[ET.Element], tag: str) -> str:
    """Text of the first child named ``tag``, empty if there is none"""
    if element is None:
        return ""
    child = element.find(tag)
    if child is None:
        return ""
    return child.text or ""


def iter_descendants(element: ET.Element, tag: str) -> Iterator[ET.Element]:
    """Iterate descendants named ``tag``, excluding the element itself"""
    for candidate in element.iter(tag):
        if candidate is not element:
            yield candidate


def first_descendant(element: Optional[ET.Element], tag: str) -> Optional[ET.Element]:
    """First descendant named ``tag`` in document order"""
    if element is None:
        return None
    return next(iter_descendants(element, tag), None)


def copy_element(element: Optional[ET.Element]) -> Optional[ET.Element]:
    """Deep copy of an element (``None`` stays ``None``)"""
    if element is None:
        return None
    return copy.deepcopy(element)


def append_text(target: ET.Element, text: Optional[str]) -> None:
    """Append text after the last child of ``target``"""
    if not text:
        return
    if len(target):
        last = target[-1]
        last.tail = (last.tail or "") + text
    else:
        target.text = (target.text or "") + text


def append_content(target: ET.Element, source: ET.Element) -> None:
    """
    Splice the mixed content of ``source`` into ``target``

    Leading text and all children (with their tails) of ``source`` are
    appended to ``target``; ``source`` itself is not copied.

    Args:
        target: Element receiving the content
        source: Element whose content is moved
    """
    append_text(target, source.text)
    for child in list(source):
        target.append(child)


def append_all(target: ET.Element, elements: Iterable[ET.Element]) -> int:
    """Append all elements and return how many were appended"""
    count = 0
    for element in elements:
        target.append(element)
        count += 1
    return count


def strip_whitespace(element: ET.Element) -> ET.Element:
    """
    Remove indentation-only text nodes in place

    Text that consists only of whitespace is dropped when it sits between
    child elements. Leaf text is never touched.

    Args:
        element: Root of the subtree to normalize

    Returns:
        The same element
    """
    for node in element.iter():
        if len(node) and node.text is not None and not node.text.strip():
            node.text = None
        for child in node:
            if child.tail is not None and not child.tail.strip():
                child.tail = None
    return element


def parse_string(text: str) -> ET.Element:
    """Parse an XML string and return the root element"""
    return ET.fromstring(text)


def load_document(path: Union[str, Path]) -> ET.Element:
    """
    Load an XML file

    Args:
        path: File to parse

    Returns:
        Root element with indentation whitespace removed

    Raises:
        OSError: File cannot be read
        xml.etree.ElementTree.ParseError: File is not well-formed
    """
    tree = ET.parse(str(path))
    return strip_whitespace(tree.getroot())


def to_string(root: ET.Element, doctype: Optional[str] = None) -> str:
    """
    Serialize an element tree to a pretty-printed document string

    The element is copied before indentation so live trees keep their
    whitespace-free shape.

    Args:
        root: Document root
        doctype: Optional DOCTYPE declaration line

    Returns:
        Document text including XML declaration
    """
    printable = copy.deepcopy(root)
    ET.indent(printable, space=INDENT)
    lines = [XML_DECLARATION]
    if doctype:
        lines.append(doctype)
    lines.append(ET.tostring(printable, encoding="unicode"))
    return "\n".join(lines) + "\n"


def save_document(path: Union[str, Path], root: ET.Element, doctype: Optional[str] = None) -> Path:
    """
    Write an element tree to disk

    Args:
        path: Target file
        root: Document root
        doctype: Optional DOCTYPE declaration line

    Returns:
        Path written
    """
    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(to_string(root, doctype), encoding="utf-8")
    return target


class XmlSink:
    """Accumulates elements below a ``content`` element"""

    def __init__(self, tag: str = "content"):
        self.element = ET.Element(tag)

    def add_element(self, tag: str, text: Optional[str] = None) -> ET.Element:
        """Append a child element with text"""
        return add_element(self.element, tag, text)

    def add_content(self, element: ET.Element) -> None:
        """Append an existing element"""
        self.element.append(element)

    def add_items(self, items: Iterable[ET.Element]) -> int:
        """Append all elements of an iterable"""
        return append_all(self.element, items)
