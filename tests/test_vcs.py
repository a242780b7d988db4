"""Tests for version control and ALM service interfaces."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List

import pytest
from conftest import FakeVcs

from delivery_tool.api.exceptions import VersionControlError
from delivery_tool.constants import DEFAULT_COMMIT_TEMPLATE
from delivery_tool.models.component import Component
from delivery_tool.models.delivery import Delivery, DeliveryKey
from delivery_tool.plugins.builtin.git_commits import DeliveryGitCommits
from delivery_tool.services.vcs import (
    ALMUtility,
    CommitContainer,
    CommitFilter,
    DescriptionParser,
    TagContainer,
    read_tags,
)


class RecordingAlm(ALMUtility):
    """Tracker accepting a fixed set of items and recording every question"""

    def __init__(self, accepted):
        self.accepted = set(accepted)
        self.asked: List[str] = []

    def check_tracker_item(self, item_id: str) -> bool:
        self.asked.append(item_id)
        return item_id in self.accepted


class TestCommitContainer:
    """Test CommitContainer conversions."""

    def test_xml_conversion(self) -> None:
        commit = CommitContainer(hash="abcd1234", alm_id="42", time=1700000000,
                                 short_description="Fix crash", internal_doc="i", external_doc="e")

        element = commit.to_xml()
        restored = CommitContainer.from_xml(element)

        assert element.tag == "commit"
        assert element.findtext("alm-id") == "42"
        assert restored.hash == "abcd1234"
        assert restored.alm_id == "42"
        assert restored.time == 1700000000
        assert restored.short_description == "Fix crash"

    def test_from_xml_bad_time(self) -> None:
        element = ET.fromstring("<commit><hash>a</hash><time>soon</time></commit>")

        commit = CommitContainer.from_xml(element)

        assert commit.time == 0
        assert commit.alm_id == ""

    def test_from_xml_first_id_wins(self) -> None:
        element = ET.fromstring("<commit><hash>a</hash><alm-id>7</alm-id><review-id>99</review-id></commit>")

        assert CommitContainer.from_xml(element).alm_id == "7"

    def test_docbook_row(self) -> None:
        row = CommitContainer(hash="abcd1234", short_description="Fix").to_docbook_row()

        assert [e.findtext("para") for e in row.findall("entry")] == ["abcd1234", "Fix"]


class TestDescriptionParser:
    """Test DescriptionParser."""

    def test_default_template(self) -> None:
        message = "Fix crash\n\nItem: 4711\nAPI change: \nInternal: intern\nExternal: extern\nReviewer: bob"

        commit = DescriptionParser(DEFAULT_COMMIT_TEMPLATE).parse(message)

        assert commit.short_description == "Fix crash"
        assert commit.alm_id == "4711"
        assert commit.api_modified is False
        assert commit.internal_doc == "intern"
        assert commit.external_doc == "extern"
        assert commit.reviewer == "bob"

    def test_template_with_prefix(self) -> None:
        commit = DescriptionParser("[{itemID}] {short description}").parse("[PRJ-7] Add export")

        assert commit.alm_id == "PRJ-7"
        assert commit.short_description == "Add export"

    def test_template_without_fields(self) -> None:
        commit = DescriptionParser("plain").parse("anything")

        assert commit.alm_id is None
        assert commit.short_description is None


class TestTags:
    """Test tag containers and tag lookup."""

    def test_read_tags(self) -> None:
        content = ET.Element("content")
        content.append(TagContainer("v1", hash="a", target="b").to_xml("former"))
        content.append(TagContainer("v2", hash="c", target="d").to_xml("latest"))

        former, latest = read_tags(content)

        assert (former.name, former.hash, former.target) == ("v1", "a", "b")
        assert latest.name == "v2"
        assert read_tags(None) == (None, None)

    def test_former_tag_from_former_delivery(self) -> None:
        vcs = FakeVcs()
        component = Component("Firmware")
        former = Delivery("1.0")
        sink = vcs.get_xml_sink(None, TagContainer("v1.0", hash="a", target="b"))
        information = DeliveryGitCommits(sink.element)
        component.set_delivery_information(DeliveryKey.of(former, "Git Commits"), information)

        tag = vcs.get_former_tag(component, Delivery("1.1"), former)

        assert tag.name == "v1.0"
        assert vcs.get_former_tag(component, Delivery("1.1"), None) is None
        assert vcs.get_former_tag(Component("Other"), Delivery("1.1"), former) is None

    def test_sink_and_information_lines(self) -> None:
        vcs = FakeVcs(branch="release")

        sink = vcs.get_xml_sink(None, TagContainer("v2", hash="c", target="d"))

        assert sink.element.findtext("branch") == "release"
        assert vcs.get_branch_information(sink.element) == "Branch: release"
        assert vcs.get_tag_information(sink.element) == "Tags: [initial] - v2"


class TestCommitFilter:
    """Test CommitFilter."""

    def test_filters_and_caches_decisions(self) -> None:
        commits = [CommitContainer(hash=str(n), alm_id=item) for n, item in enumerate(["1", "2", "1", "2", "3"])]
        alm = RecordingAlm({"1", "3"})

        kept = [c.hash for c in CommitFilter(commits, alm)]

        assert kept == ["0", "2", "4"]
        assert alm.asked == ["1", "2", "3"]

    def test_requires_alm(self) -> None:
        with pytest.raises(VersionControlError):
            FakeVcs().get_commit_filter([], None)

    def test_filter_from_vcs(self) -> None:
        commits = [CommitContainer(hash="a", alm_id="1")]

        assert list(FakeVcs().get_commit_filter(commits, RecordingAlm({"1"}))) == commits

    def test_sorted_tracker_items(self) -> None:
        assert RecordingAlm({"b"}).filter_and_sort_tracker_items(["a", "b"]) == ["b"]
