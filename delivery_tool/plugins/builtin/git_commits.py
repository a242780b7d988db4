"""Git commits data source

Collects the commits between the tag of the former delivery and the tag
HEAD is synced to, and renders them as one table per component.
"""

import xml.etree.ElementTree as ET
from contextlib import nullcontext
from typing import Iterable, List, Optional

from ...api.exceptions import ALMError, InternalError, VersionControlError, VersionControlRuntimeError
from ...constants import COLWIDTH_ID, COLWIDTH_WIDE, XML_CONTENT, XML_PARA, XML_SECTION, XML_TITLE
from ...core.docbook import ColumnSpec, DocBookSink
from ...models.information import DeliveryInformation, string_content
from ...services.git_service import GitUtility
from ...services.vcs import GIT_IMPORTER_NAME, XML_GIT_COMMIT, CommitContainer, VersionControlUtility
from ...utils.path_utils import get_absolute_file_path
from ...utils.xml_utils import add_element, copy_element, create_element
from ..base import AssignmentStrategy, ImportStrategy, PresentationType
from .assignments import ConstTextAssignment, ImportSubtreeAssignment
from .version import VERSION_IMPORTER_NAME

NO_VCS_MESSAGE = "No version control utility available"
NO_FORMER_TAG_MESSAGE = "Git warning: No former tag available. Starting from root."
NO_ALM_MESSAGE = "No ALM plugin loaded, commits will be unordered!"
NO_TAG_MESSAGE = "GIT: No TAG found"

COMMIT_COLUMNS = [ColumnSpec("Id", COLWIDTH_ID), ColumnSpec("Synopsis", COLWIDTH_WIDE)]


def create_vcs_utility(registry) -> Optional[VersionControlUtility]:
    """New version control handle of the registry, or None"""
    if registry is None:
        return None
    return registry.create_vcs_utility()


def sort_commits(commits: Iterable[CommitContainer]) -> List[CommitContainer]:
    """Newest commits first; commits of the same time keep their order"""
    return sorted(commits, key=lambda commit: commit.time, reverse=True)


class DeliveryGitCommits(DeliveryInformation):
    """Commits of a component in one delivery"""

    NAME = "Delivery Git Commits"

    def commits(self) -> List[CommitContainer]:
        """Commit containers read from the content"""
        if self.information is None:
            return []
        return [CommitContainer.from_xml(e) for e in self.information.findall(XML_GIT_COMMIT)]

    def add_information(self, other: ET.Element) -> bool:
        """Append copies of the commits of ``other``"""
        if self.information is None:
            self.information = create_element(XML_CONTENT)
        for commit in other.findall(XML_GIT_COMMIT):
            self.information.append(copy_element(commit))
        return True

    def add_docbook_section(self, section, component, other, for_customer) -> bool:
        """
        Add a commit table for the component

        Commits are filtered by the issue tracker when one is registered
        and sorted newest first.

        Raises:
            VersionControlRuntimeError: The issue tracker failed
        """
        if section is None or self.is_info_null_or_empty():
            return False

        try:
            rows = [commit.to_docbook_row() for commit in self._filtered_commits()]
        except ALMError as e:
            self.logger.error(f"{component}::{self.name}: {e}", exc_info=True)
            raise VersionControlRuntimeError(str(e)) from e

        DocBookSink(section, component.full_name, COMMIT_COLUMNS).add_items(rows)
        return True

    def _filtered_commits(self) -> List[CommitContainer]:
        source = self.commits()
        vcs = create_vcs_utility(self.registry)
        alm = self.registry.create_alm_utility() if self.registry is not None else None

        with vcs or nullcontext(), alm or nullcontext():
            try:
                if vcs is None:
                    raise VersionControlError(NO_VCS_MESSAGE)
                commits = vcs.get_commit_filter(source, alm)
            except InternalError as e:
                self.logger.info(NO_ALM_MESSAGE)
                self.logger.debug(f"No ALM plugin: {e}")
                commits = source
            return sort_commits(commits)


class GitCommitsAssignment(AssignmentStrategy):
    """Reads the commits since the former delivery's tag from git"""

    NAME = "Git Commits"
    NR_OF_PARAMETERS = 1
    USAGE = (
        "Assignment Local Git Tasks:\n"
        "Job: Assign tasks extracted out of git repository\n"
        "Parameter 1: - optional - Git repository (default: project root)"
    )

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        path = parameters[0].strip() if parameters and parameters[0].strip() else project_root
        path = get_absolute_file_path(path, project_root)

        vcs = create_vcs_utility(self.registry)
        if vcs is None:
            return self.report_error(component, importer, NO_VCS_MESSAGE)

        try:
            with vcs:
                vcs.initialize(path)
                former_tag = vcs.get_former_tag(component, delivery, former_delivery)
            if former_tag is None:
                self.logger.warning(NO_FORMER_TAG_MESSAGE)
            return self._git_data(path, former_tag)
        except InternalError as e:
            return self.report_error(component, importer, str(e), exc_info=True)

    def _git_data(self, path, former_tag) -> ET.Element:
        with create_vcs_utility(self.registry) as vcs:
            vcs.initialize(path)
            latest_tag = vcs.is_synced_to_tag()
            if latest_tag is None:
                raise VersionControlError("Head is not synched to a tag. Documentation stopped.")

            commits = vcs.get_commits(former_tag)
            sink = vcs.get_xml_sink(former_tag, latest_tag)
            sink.add_items(commit.to_xml() for commit in commits)
            return sink.element


class LocalTagAssignment(AssignmentStrategy):
    """Version taken from the git tag HEAD is synced to"""

    NAME = "Local git Tag"
    NR_OF_PARAMETERS = 2
    USAGE = (
        "Local Tag:\n"
        "Job: Assigns local git Tag for a given repository.\n"
        "Parameter 1: Path of the local repository (default: project root)\n"
        "Parameter 2: - optional - Baseline used instead of the tag"
    )

    def __init__(self):
        super().__init__()
        self.add_to_external_plugin(VERSION_IMPORTER_NAME)

    def compute(self, parameters, component, delivery, former_delivery, importer, project_root,
                initial_component=None) -> ET.Element:
        repository = parameters[0].strip() if parameters else ""
        baseline = parameters[1].strip() if len(parameters) > 1 else ""

        if baseline:
            return string_content(baseline)

        vcs = create_vcs_utility(self.registry)
        if vcs is None:
            return self.report_error(component, importer, NO_VCS_MESSAGE)

        path = get_absolute_file_path(repository or project_root, project_root)
        try:
            with vcs:
                vcs.initialize(path)
                latest_tag = vcs.is_synced_to_tag()
            if latest_tag is None or not latest_tag.name:
                raise InternalError(NO_TAG_MESSAGE)
        except InternalError as e:
            return self.report_error(component, importer, str(e), exc_info=True)

        return string_content(latest_tag.name)


class GitCommitsImport(ImportStrategy):
    """Data source collecting git commits"""

    NAME = GIT_IMPORTER_NAME
    INFORMATION_TYPE = DeliveryGitCommits
    NEEDS_ALL_DELIVERIES = True
    PRESENTATION_TYPE = PresentationType.ICON

    def __init__(self):
        super().__init__()
        for strategy_class in (GitCommitsAssignment, ConstTextAssignment, ImportSubtreeAssignment):
            self.add_assignment_strategy(strategy_class())

    def get_docbook_section_template(self, from_delivery, to_delivery) -> ET.Element:
        section = create_element(XML_SECTION)
        add_element(section, XML_TITLE, self.name)
        add_element(section, XML_PARA)
        return section


def register(registry) -> None:
    """Register the git data source, the local tag strategy and the git utility"""
    registry.register_vcs_utility(lambda: GitUtility.from_settings(registry.settings))
    registry.register_import_strategy(GitCommitsImport())
    registry.register_assignment_extension(LocalTagAssignment())
