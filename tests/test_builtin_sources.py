"""Tests for the builtin data sources and their information types."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from delivery_tool.models.delivery import Delivery
from delivery_tool.models.information import string_content
from delivery_tool.plugins.base import PresentationType
from delivery_tool.plugins.builtin.git_commits import DeliveryGitCommits, GitCommitsImport
from delivery_tool.plugins.builtin.important_information import (
    DeliveryImportantInformation,
    ImportantInformationImport,
)
from delivery_tool.plugins.builtin.version import DeliveryVersion, VersionImport
from delivery_tool.services.vcs import CommitContainer


class TestVersionImport:
    """Test the version data source."""

    def test_strategies(self) -> None:
        names = [s.name for s in VersionImport().assignment_strategies]

        assert names == ["Ignore", "Random", "ConstText", "Command Executer", "File Parser", "Import Subtree"]

    def test_attributes(self) -> None:
        importer = VersionImport()

        assert importer.information_name == "Delivery Version"
        assert importer.needs_all_deliveries is False
        assert importer.presentation_type == PresentationType.LABEL
        assert importer.max_parameter_count() == 4

    def test_template_columns(self) -> None:
        importer = VersionImport()

        single = importer.get_docbook_section_template(None, Delivery("1.1"))
        compared = importer.get_docbook_section_template(Delivery("1.0"), Delivery("1.1"))

        assert single.findtext("title") == "Version"
        assert single.find("table/tgroup").get("cols") == "2"
        assert compared.find("table/tgroup").get("cols") == "3"

    def test_empty_version_adds_nothing(self) -> None:
        section = VersionImport().get_docbook_section_template(None, Delivery("1.0"))

        assert DeliveryVersion(string_content("-")).add_docbook_section(section, None, None, False) is False
        assert section.find("table/tgroup/tbody/row") is None

    def test_empty_message(self) -> None:
        message = VersionImport().get_docbook_section_empty_message()

        assert (message.tag, message.text) == ("subtitle", "N/A")


class TestImportantInformation:
    """Test the important information data source."""

    def test_add_information_appends_line(self) -> None:
        information = DeliveryImportantInformation(string_content("first"))

        assert information.add_information(string_content("second")) is True

        assert information.child_text() == "first\nsecond"

    def test_add_information_to_empty(self) -> None:
        information = DeliveryImportantInformation()

        information.add_information(string_content("note"))

        assert information.child_text() == "\nnote"

    def test_unparsable_markup_is_literal(self) -> None:
        section = ET.Element("section")
        component = type("Named", (), {"full_name": "Firmware"})()
        information = DeliveryImportantInformation(string_content("<b>bold</b> <i>broken"))

        assert information.add_docbook_section(section, component, None, False) is True

        assert section.findtext("section/literallayout") == "<b>bold</b> <i>broken"

    def test_attributes(self) -> None:
        importer = ImportantInformationImport()

        assert importer.presentation_type == PresentationType.ICON
        assert importer.get_assignment_strategy("Random") is None


class TestGitCommitsSource:
    """Test the git commits data source."""

    def test_attributes(self) -> None:
        importer = GitCommitsImport()

        assert importer.needs_all_deliveries is True
        assert [s.name for s in importer.assignment_strategies] == [
            "Ignore", "Git Commits", "ConstText", "Import Subtree"
        ]

    def test_add_information_copies_commits(self) -> None:
        other = ET.Element("content")
        other.append(CommitContainer(hash="a").to_xml())
        other.append(CommitContainer(hash="b").to_xml())
        information = DeliveryGitCommits()

        information.add_information(other)

        assert [c.hash for c in information.commits()] == ["a", "b"]
        assert len(other) == 2
