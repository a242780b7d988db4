"""Tests for delivery_tool.models.information module."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from delivery_tool.models.information import (
    EMPTY_INFORMATION,
    error_content,
    information_text,
    is_text_empty,
    same_text,
    string_content,
)
from delivery_tool.plugins.builtin.version import DeliveryVersion


class TestContentHelpers:
    """Test content element helpers."""

    def test_string_content(self) -> None:
        content = string_content("1.0")

        assert ET.tostring(content, encoding="unicode") == "<content><string>1.0</string></content>"

    def test_error_content(self) -> None:
        content = error_content("boom")

        assert content.tag == "content"
        assert content.findtext("error") == "boom"

    def test_information_text_joins_descendants(self) -> None:
        content = ET.fromstring("<content><string>a<b>b</b>c</string></content>")
        assert information_text(content) == "abc"
        assert information_text(None) == ""

    @pytest.mark.parametrize("text,expected", [(None, True), ("", True), ("-", True), ("x", False)])
    def test_is_text_empty(self, text, expected: bool) -> None:
        assert is_text_empty(text) is expected


class TestDeliveryInformation:
    """Test change detection of delivery information."""

    def test_placeholder_is_empty(self) -> None:
        assert DeliveryVersion(string_content("-")).is_info_null_or_empty()
        assert DeliveryVersion().is_info_null_or_empty()
        assert not DeliveryVersion(string_content("1.0")).is_info_null_or_empty()

    def test_has_changed(self) -> None:
        current = DeliveryVersion(string_content("1.1"))

        assert current.has_changed(None)
        assert current.has_changed(DeliveryVersion(string_content("1.0")))
        assert not current.has_changed(DeliveryVersion(string_content("1.1")))

    def test_empty_never_changed(self) -> None:
        assert not DeliveryVersion(string_content("-")).has_changed(None)

    def test_same_text_ignores_empty_other(self) -> None:
        current = DeliveryVersion(string_content("-"))
        assert not same_text(current, DeliveryVersion(string_content("-")))

    def test_errors(self) -> None:
        information = DeliveryVersion(error_content("boom"))

        assert [e.text for e in information.errors()] == ["boom"]
        assert DeliveryVersion().errors() == []

    def test_child_text(self) -> None:
        assert DeliveryVersion(string_content("2.0")).child_text() == "2.0"
        assert DeliveryVersion().child_text() == ""

    def test_empty_sentinel(self) -> None:
        assert EMPTY_INFORMATION.is_info_null_or_empty()
        assert EMPTY_INFORMATION.add_information(string_content("x")) is False
        assert EMPTY_INFORMATION.add_docbook_section(ET.Element("section"), None, None, False) is False
