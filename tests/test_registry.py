"""Tests for the plugin registry and loader."""

from __future__ import annotations

import threading
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from delivery_tool.api.exceptions import NotFoundError
from delivery_tool.models.config import Settings
from delivery_tool.plugins.base import ImportStrategy
from delivery_tool.plugins.builtin.assignments import IgnoreAssignment
from delivery_tool.plugins.builtin.git_commits import LocalTagAssignment
from delivery_tool.plugins.builtin.version import DeliveryVersion
from delivery_tool.plugins.loader import PluginLoader
from delivery_tool.plugins.registry import PluginRegistry, build_registry, get_registry, reset_registry

USER_PLUGIN = '''
import xml.etree.ElementTree as ET

from delivery_tool.plugins.base import ImportStrategy
from delivery_tool.plugins.builtin.version import DeliveryVersion


class CoverageImport(ImportStrategy):
    NAME = "Coverage"
    INFORMATION_TYPE = DeliveryVersion

    def get_docbook_section_template(self, from_delivery, to_delivery):
        return ET.Element("section")


def register(registry):
    registry.register_import_strategy(CoverageImport())
'''


class CoverageImport(ImportStrategy):
    """Minimal data source for registry tests"""

    NAME = "Coverage"
    INFORMATION_TYPE = DeliveryVersion

    def get_docbook_section_template(self, from_delivery, to_delivery) -> ET.Element:
        return ET.Element("section")


class TestPluginRegistry:
    """Test PluginRegistry."""

    def test_builtin_sources_registered(self, registry: PluginRegistry) -> None:
        assert registry.import_strategy_names == ["Version", "Important Information", "Git Commits"]
        assert len(registry) == 3
        assert "Version" in registry
        assert registry.has_import_strategy("Git Commits")

    def test_every_source_has_ignore(self, registry: PluginRegistry) -> None:
        for importer in registry.import_strategies:
            assert importer.assignment_strategies[0].name == IgnoreAssignment.NAME
            assert importer.default_assignment_strategy().name == "Ignore"
            assert importer.registry is registry

    def test_extension_attached_to_version(self, registry: PluginRegistry) -> None:
        strategy = registry.get_assignment_strategy("Version", LocalTagAssignment.NAME)

        assert isinstance(strategy, LocalTagAssignment)
        assert strategy.registry is registry
        assert registry.get_assignment_strategy("Important Information", LocalTagAssignment.NAME) is None

    def test_extension_attached_to_later_source(self) -> None:
        registry = PluginRegistry()
        extension = LocalTagAssignment()
        extension.add_to_external_plugin("Coverage")
        registry.register_assignment_extension(extension)

        registry.register_import_strategy(CoverageImport())

        assert registry.get_assignment_strategy("Coverage", LocalTagAssignment.NAME) is extension
        assert registry.assignment_extensions == [extension]

    def test_replacing_source_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = PluginRegistry()
        registry.register_import_strategy(CoverageImport())
        replacement = CoverageImport()

        registry.register_import_strategy(replacement)

        assert registry.get_import_strategy("Coverage") is replacement
        assert "already registered" in caplog.text

    def test_require_unknown_source(self, registry: PluginRegistry) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            registry.require_import_strategy("Coverage")
        assert exc_info.value.name == "Coverage"

    def test_create_information(self, registry: PluginRegistry) -> None:
        information = registry.create_information("Delivery Version")

        assert isinstance(information, DeliveryVersion)
        assert information.registry is registry
        with pytest.raises(NotFoundError):
            registry.create_information("Delivery Coverage")

    def test_service_factories(self) -> None:
        registry = PluginRegistry()
        assert registry.create_vcs_utility() is None
        assert registry.create_alm_utility() is None

        first, second = Mock(), Mock()
        registry.register_vcs_utility(lambda: first)
        registry.register_vcs_utility(lambda: second)
        registry.register_alm_utility(lambda: second)

        assert registry.create_vcs_utility() is first
        assert registry.create_alm_utility() is second

    def test_view_order(self) -> None:
        settings = Settings.from_dict({"view_order": ["Git Commits", "unknown", "important information"]})
        registry = PluginRegistry(settings)
        PluginLoader(registry).load_builtin_plugins()

        names = [i.name for i in registry.import_strategies_in_view_order()]

        assert names == ["Git Commits", "Important Information", "Version"]
        assert [i.name for i in registry.import_strategies_in_export_order()] == registry.import_strategy_names


class TestSharedRegistry:
    """Test the process wide registry."""

    def test_built_once_under_concurrency(self) -> None:
        built = PluginRegistry()

        def slow_build(settings=None):
            time.sleep(0.05)
            return built

        with patch("delivery_tool.plugins.registry.build_registry", side_effect=slow_build) as mock_build:
            results = []
            threads = [threading.Thread(target=lambda: results.append(get_registry())) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert mock_build.call_count == 1
        assert all(result is built for result in results)
        assert len(results) == 8

    def test_reset_rebuilds(self) -> None:
        with patch("delivery_tool.plugins.registry.build_registry", side_effect=lambda settings=None: PluginRegistry()):
            first = get_registry()
            assert get_registry() is first
            reset_registry()
            assert get_registry() is not first

    def test_build_registry_loads_plugin_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))
        plugin_dir = tmp_path / "plugins"
        plugin_dir.mkdir()
        (plugin_dir / "coverage.py").write_text(USER_PLUGIN)

        registry = build_registry(Settings(plugin_dirs=[str(plugin_dir)]))

        assert registry.import_strategy_names[-1] == "Coverage"


class TestPluginLoader:
    """Test PluginLoader."""

    def test_builtins_loaded_once(self) -> None:
        loader = PluginLoader(PluginRegistry())

        assert loader.load_builtin_plugins() == 3
        assert loader.load_builtin_plugins() == 0

    def test_load_from_directory(self, tmp_path: Path) -> None:
        (tmp_path / "coverage.py").write_text(USER_PLUGIN)
        (tmp_path / "broken.py").write_text("raise RuntimeError('broken plugin')\n")
        (tmp_path / "helpers.py").write_text("VALUE = 1\n")
        (tmp_path / "_private.py").write_text("raise RuntimeError('never imported')\n")
        registry = PluginRegistry()

        count = PluginLoader(registry).load_from_directory(tmp_path)

        assert count == 1
        assert registry.import_strategy_names == ["Coverage"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert PluginLoader(PluginRegistry()).load_from_directory(tmp_path / "absent") == 0

    def test_load_from_module(self) -> None:
        registry = PluginRegistry()
        loader = PluginLoader(registry)

        assert loader.load_from_module("delivery_tool.plugins.builtin.version") is True
        assert loader.load_from_module("delivery_tool.plugins.builtin.version") is False
        assert loader.load_from_module("delivery_tool.plugins.builtin.assignments") is False
        assert loader.load_from_module("no_such_module_anywhere") is False
        assert registry.import_strategy_names == ["Version"]
