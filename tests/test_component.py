"""Tests for delivery_tool.models.component module."""

from __future__ import annotations

import pytest

from delivery_tool.models.component import Component
from delivery_tool.models.delivery import DeliveryKey
from delivery_tool.models.information import EMPTY_INFORMATION
from delivery_tool.plugins.builtin.version import DeliveryVersion


@pytest.fixture
def tree() -> Component:
    root = Component()
    system = root.add_sub_component(Component("System"))
    system.add_sub_component(Component("Firmware"))
    system.add_sub_component(Component("Bootloader"))
    return root


class TestComponentTree:
    """Test tree structure operations."""

    def test_full_name_excludes_root(self, tree: Component) -> None:
        firmware = tree.sub_components[0].sub_components[0]

        assert firmware.full_name == "System\\Firmware"
        assert tree.sub_components[0].full_name == "System"

    def test_insert_at_position(self, tree: Component) -> None:
        system = tree.sub_components[0]
        system.insert_sub_component(1, Component("Kernel"))

        assert [c.name for c in system.sub_components] == ["Firmware", "Kernel", "Bootloader"]
        assert system.index_of(system.sub_components[1]) == 1

    def test_insert_moves_child(self, tree: Component) -> None:
        system = tree.sub_components[0]
        firmware = system.sub_components[0]

        tree.add_sub_component(firmware)

        assert firmware.parent is tree
        assert [c.name for c in system.sub_components] == ["Bootloader"]
        assert [c.name for c in tree.sub_components] == ["System", "Firmware"]

    def test_insert_into_own_descendant(self, tree: Component) -> None:
        system = tree.sub_components[0]
        firmware = system.sub_components[0]

        with pytest.raises(ValueError):
            firmware.add_sub_component(system)
        with pytest.raises(ValueError):
            system.add_sub_component(system)

    def test_remove_sub_component(self, tree: Component) -> None:
        system = tree.sub_components[0]
        firmware = system.sub_components[0]

        assert system.remove_sub_component(firmware) is True
        assert firmware.parent is None
        assert system.remove_sub_component(firmware) is False

    def test_iter_components_pre_order(self, tree: Component) -> None:
        assert [c.name for c in tree.iter_components()] == ["System", "Firmware", "Bootloader"]
        assert tree.is_root
        assert not tree.sub_components[0].sub_components[0].has_sub_components()


class TestComponentData:
    """Test information and parameter storage."""

    def test_missing_information_is_empty_sentinel(self) -> None:
        component = Component("Firmware")
        key = DeliveryKey("1.0", "Version")

        assert component.get_delivery_information(key) is EMPTY_INFORMATION
        assert component.find_delivery_information(key) is None
        assert not component.has_delivery_information()

    def test_set_and_remove_information(self) -> None:
        component = Component("Firmware")
        key = DeliveryKey("1.0", "Version")
        information = DeliveryVersion()

        component.set_delivery_information(key, information)

        assert component.get_delivery_information(key) is information
        assert component.remove_delivery_information(key) is True
        assert component.remove_delivery_information(key) is False

    def test_set_parameter_grows_list(self) -> None:
        component = Component("Firmware")

        component.set_parameter("Version", 2, "x")

        assert component.get_parameters("Version") == ["", "", "x"]

    def test_get_parameters_creates_list(self) -> None:
        component = Component("Firmware")

        component.get_parameters("Version").append("1.0")

        assert component.parameters == {"Version": ["1.0"]}
