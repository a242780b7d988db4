"""Version control and ALM service interfaces

Data sources talk to a version control system and to an issue tracker
(ALM) through the interfaces defined here. Handles are context managers
and are acquired per computation.
"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Set, TYPE_CHECKING

from ..api.exceptions import VersionControlError
from ..constants import XML_CONTENT, XML_ENTRY, XML_PARA, XML_ROW
from ..models.delivery import DeliveryKey
from ..utils.xml_utils import XmlSink, add_element, child_text, create_element

if TYPE_CHECKING:
    from ..models.component import Component
    from ..models.delivery import Delivery

GIT_IMPORTER_NAME = "Git Commits"

XML_GIT_COMMIT = "commit"
XML_GIT_HASH = "hash"
XML_GIT_TIME = "time"
XML_GIT_ALM_ID = "alm-id"
XML_GIT_SYNOPSIS = "synopsis"
XML_GIT_INTERNAL_DOC = "internal-doc"
XML_GIT_EXTERNAL_DOC = "external-doc"
XML_GIT_BRANCH = "branch"
XML_GIT_TAG = "tag"
XML_GIT_TAG_ATTR_HASH = "hash"
XML_GIT_TAG_ATTR_TARGET = "target"
XML_GIT_TAG_ATTR_TYPE = "type"
TAG_TYPE_FORMER = "former"
TAG_TYPE_LATEST = "latest"

INITIAL_TAG_TEXT = "[initial]"

# Template keys understood by DescriptionParser
KEY_SHORT_DESCRIPTION = "short description"
KEY_ITEM_ID = "itemID"
KEY_API_YES = "yes"
KEY_INTERNAL_DOC = "internal doc"
KEY_EXTERNAL_DOC = "external doc"
KEY_REVIEWER = "reviewer"


@dataclass
class CommitContainer:
    """One commit with the fields parsed from its message"""

    hash: str = ""
    alm_id: Optional[str] = "0"
    time: int = 0
    short_description: Optional[str] = None
    internal_doc: Optional[str] = None
    external_doc: Optional[str] = None
    reviewer: Optional[str] = None
    api_modified: bool = False

    @property
    def commit_id(self) -> Optional[str]:
        """Tracker item id the commit refers to"""
        return self.alm_id

    def to_xml(self) -> ET.Element:
        """Convert to a ``commit`` element"""
        element = ET.Element(XML_GIT_COMMIT)
        add_element(element, XML_GIT_HASH, self.hash)
        add_element(element, XML_GIT_TIME, str(self.time))
        add_element(element, XML_GIT_ALM_ID, str(self.alm_id))
        add_element(element, XML_GIT_SYNOPSIS, self.short_description)
        add_element(element, XML_GIT_INTERNAL_DOC, self.internal_doc)
        add_element(element, XML_GIT_EXTERNAL_DOC, self.external_doc)
        return element

    @classmethod
    def from_xml(cls, element: ET.Element) -> 'CommitContainer':
        """
        Create from a ``commit`` element

        The tracker id is read from the first child whose tag contains
        ``id``. A missing or malformed time counts as 0.
        """
        try:
            time = int(child_text(element, XML_GIT_TIME).strip())
        except ValueError:
            time = 0

        alm_id = ""
        for child in element:
            if "id" in child.tag:
                alm_id = child.text or ""
                break

        return cls(
            hash=child_text(element, XML_GIT_HASH),
            alm_id=alm_id,
            time=time,
            short_description=child_text(element, XML_GIT_SYNOPSIS),
            internal_doc=child_text(element, XML_GIT_INTERNAL_DOC),
            external_doc=child_text(element, XML_GIT_EXTERNAL_DOC),
            reviewer="",
            api_modified=False,
        )

    def to_docbook_row(self) -> ET.Element:
        """DocBook table row: hash and synopsis"""
        return create_element(
            XML_ROW,
            create_element(XML_ENTRY, create_element(XML_PARA, text=self.hash)),
            create_element(XML_ENTRY, create_element(XML_PARA, text=self.short_description or "")),
        )

    def __str__(self) -> str:
        return f"Hash: {self.hash}\nItemId: {self.alm_id}\nShort description: {self.short_description}"


@dataclass
class TagContainer:
    """Tag reference: name, creation time, tag object and target commit"""

    name: str
    created: datetime = datetime.fromtimestamp(0, tz=timezone.utc)
    hash: str = ""
    target: str = ""

    def to_xml(self, tag_type: str) -> ET.Element:
        """Convert to a ``tag`` element of the given type (former/latest)"""
        return create_element(XML_GIT_TAG, text=self.name, attrib={
            XML_GIT_TAG_ATTR_HASH: self.hash,
            XML_GIT_TAG_ATTR_TARGET: self.target,
            XML_GIT_TAG_ATTR_TYPE: tag_type,
        })

    @classmethod
    def from_xml(cls, element: ET.Element) -> 'TagContainer':
        """Create from a ``tag`` element"""
        return cls(
            name=element.text or "",
            hash=element.get(XML_GIT_TAG_ATTR_HASH, ""),
            target=element.get(XML_GIT_TAG_ATTR_TARGET, ""),
        )


def read_tags(information: Optional[ET.Element]):
    """
    Read the former and latest tag of a commit content element

    Returns:
        Tuple (former, latest); each may be None
    """
    former = latest = None
    if information is None:
        return former, latest
    for tag in information.findall(XML_GIT_TAG):
        tag_type = tag.get(XML_GIT_TAG_ATTR_TYPE)
        if tag_type == TAG_TYPE_FORMER:
            former = TagContainer.from_xml(tag)
        elif tag_type == TAG_TYPE_LATEST:
            latest = TagContainer.from_xml(tag)
    return former, latest


class ALMUtility(ABC):
    """Issue tracker service handle"""

    @abstractmethod
    def check_tracker_item(self, item_id: str) -> bool:
        """True if the tracker accepts the item"""
        pass

    def filter_and_sort_tracker_items(self, items: Iterable[str]) -> List[str]:
        """Items the tracker accepts, in tracker order"""
        return [item for item in items if self.check_tracker_item(item)]

    def close(self) -> None:
        """Release the handle"""
        pass

    def __enter__(self) -> 'ALMUtility':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class CommitFilter:
    """Lazily filters commits by asking the tracker about their item ids

    Decisions are cached per iteration, so every item id is checked at
    most once.
    """

    def __init__(self, source: Iterable[CommitContainer], alm: ALMUtility):
        self.source = source
        self.alm = alm

    def __iter__(self) -> Iterator[CommitContainer]:
        allowed: Set[Optional[str]] = set()
        declined: Set[Optional[str]] = set()
        for commit in self.source:
            item_id = commit.commit_id
            if item_id in allowed:
                yield commit
            elif item_id not in declined:
                if self.alm.check_tracker_item(item_id):
                    allowed.add(item_id)
                    yield commit
                else:
                    declined.add(item_id)


class DescriptionParser:
    """Splits a commit message into fields following a template

    The template contains ``{key}`` placeholders separated by literal text,
    for example ``"{short description}\\n\\nItem: {itemID}"``.
    """

    def __init__(self, template: str):
        self.template = template

    def parse(self, message: str) -> CommitContainer:
        """
        Parse a commit message

        Args:
            message: Full commit message

        Returns:
            Container with the parsed fields; missing fields are None
        """
        text = message
        template = self.template

        prefix, brace, rest = template.partition("{")
        if not brace:
            return CommitContainer(hash="", alm_id=None)

        # Drop everything before the first value in both message and template
        if prefix:
            _, found, after = text.partition(prefix)
            text = after if found else ""
        template = "{" + rest

        entries: Dict[str, str] = {}
        api_modified = False

        while "{" in template:
            key = template[template.index("{") + 1:template.index("}")] if "}" in template else ""
            delimiter = self._delimiter(template)
            if delimiter:
                value, _, text = text.partition(delimiter)
                _, _, template = template.partition(delimiter)
            else:
                value, text, template = text, "", ""

            if key == KEY_API_YES:
                if value.strip():
                    api_modified = True
            else:
                entries[key] = value

        return CommitContainer(
            hash="",
            alm_id=entries.get(KEY_ITEM_ID),
            time=0,
            short_description=entries.get(KEY_SHORT_DESCRIPTION),
            internal_doc=entries.get(KEY_INTERNAL_DOC),
            external_doc=entries.get(KEY_EXTERNAL_DOC),
            reviewer=entries.get(KEY_REVIEWER),
            api_modified=api_modified,
        )

    @staticmethod
    def _delimiter(template: str) -> str:
        """Literal text between the first ``}`` and the following ``{``"""
        end = template.find("}")
        if end < 0:
            return ""
        start = template.find("{", end + 1)
        if start < 0:
            return ""
        return template[end + 1:start]


class VersionControlUtility(ABC):
    """Version control service handle"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def initialize(self, path: str) -> None:
        """
        Open the repository at ``path``

        Raises:
            VersionControlError: Path is not a repository
        """
        pass

    @abstractmethod
    def get_commits(self, former_tag: Optional[TagContainer]) -> Iterable[CommitContainer]:
        """
        Commits between the former tag and the tag HEAD is synced to

        Args:
            former_tag: Tag of the former delivery (None for all history)

        Raises:
            VersionControlError: HEAD is not synced to a tag
        """
        pass

    @abstractmethod
    def is_synced_to_tag(self) -> Optional[TagContainer]:
        """Tag pointing at HEAD, or None"""
        pass

    @abstractmethod
    def get_current_branch(self) -> str:
        """Name of the checked out branch"""
        pass

    def get_commit_filter(self,
                          source: Iterable[CommitContainer],
                          alm: Optional[ALMUtility]) -> Iterable[CommitContainer]:
        """
        Wrap ``source`` in a filter asking the tracker about each item

        Raises:
            VersionControlError: No tracker handle given
        """
        if alm is None:
            raise VersionControlError(f"{self.__class__.__name__} - get_commit_filter: Handler is None")
        return CommitFilter(source, alm)

    def get_former_tag(self,
                       component: "Component",
                       delivery: "Delivery",
                       former_delivery: Optional["Delivery"]) -> Optional[TagContainer]:
        """Latest tag recorded for the component in the former delivery"""
        if former_delivery is None:
            return None
        key = DeliveryKey(former_delivery.name, GIT_IMPORTER_NAME)
        information = component.find_delivery_information(key)
        if information is None:
            return None
        return read_tags(information.information)[1]

    def get_branch_information(self, information: ET.Element) -> str:
        """``Branch: <name>`` line for a commit content element"""
        return f"Branch: {child_text(information, XML_GIT_BRANCH)}"

    def get_tag_information(self, information: ET.Element) -> str:
        """``Tags: <former> - <latest>`` line for a commit content element"""
        former, latest = read_tags(information)
        former_name = former.name if former else INITIAL_TAG_TEXT
        latest_name = latest.name if latest else ""
        return f"Tags: {former_name} - {latest_name}"

    def get_xml_sink(self,
                     former_tag: Optional[TagContainer],
                     latest_tag: Optional[TagContainer]) -> "XmlGitSink":
        """Content sink prefilled with branch and tags"""
        sink = XmlGitSink()
        sink.add_branch(self.get_current_branch())
        sink.add_tags(former_tag, latest_tag)
        return sink

    def close(self) -> None:
        """Release the handle"""
        pass

    def __enter__(self) -> 'VersionControlUtility':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class XmlGitSink(XmlSink):
    """Collects the commit content of one component"""

    def __init__(self):
        super().__init__(XML_CONTENT)

    def add_branch(self, branch: str) -> None:
        self.add_element(XML_GIT_BRANCH, branch)

    def add_tags(self, former: Optional[TagContainer], latest: Optional[TagContainer]) -> None:
        if former is not None:
            self.element.append(former.to_xml(TAG_TYPE_FORMER))
        if latest is not None:
            self.element.append(latest.to_xml(TAG_TYPE_LATEST))
