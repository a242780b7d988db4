"""Tests for settings model and ConfigService."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from delivery_tool.api.exceptions import ConfigError, ProjectNotFoundError
from delivery_tool.constants import DEFAULT_XML_ROOT_FORMAT, PROJECT_CONFIG_FILE
from delivery_tool.models.config import OrderEntry, Settings, normalize_plugin_name
from delivery_tool.services.config_service import ConfigService


class TestSettings:
    """Test Settings model."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.xml_root_format == DEFAULT_XML_ROOT_FORMAT
        assert settings.legacy is False
        assert settings.view_order == []

    def test_normalize_plugin_name(self) -> None:
        assert normalize_plugin_name("Important Information") == "IMPORTANT_INFORMATION"
        assert OrderEntry("git commits").name == "GIT_COMMITS"

    def test_from_dict(self) -> None:
        settings = Settings.from_dict({
            "view_order": ["Git Commits", {"name": "Version", "enabled": False}],
            "export_order": ["Version"],
            "project": {"xml_root_format": "Custom", "legacy": True, "startup_file": "start.xml"},
            "git": {"include_merge_commits": True},
            "plugin_dirs": ["plugins"],
            "plugins": {"Git Commits": {"depth": 3}},
        })

        assert settings.order_names("view_order") == ["GIT_COMMITS", "VERSION"]
        assert settings.enabled_states("view_order") == {"GIT_COMMITS": True, "VERSION": False}
        assert settings.order_names("export_order") == ["VERSION"]
        assert settings.xml_root_format == "Custom"
        assert settings.legacy is True
        assert settings.startup_file == "start.xml"
        assert settings.include_merge_commits is True
        assert settings.plugin_dirs == ["plugins"]
        assert settings.get_plugin_setting("git commits", "depth") == 3
        assert settings.get_plugin_setting("Version", "depth", 1) == 1

    def test_invalid_order_entry(self) -> None:
        with pytest.raises(ValueError):
            Settings.from_dict({"view_order": [42]})

    def test_unknown_order_key(self) -> None:
        with pytest.raises(KeyError):
            Settings().get_order("sideways")

    def test_dict_conversion(self) -> None:
        settings = Settings.from_dict({"view_order": ["Version"], "project": {"legacy": True}})

        restored = Settings.from_dict(settings.to_dict())

        assert restored.order_names("view_order") == ["VERSION"]
        assert restored.legacy is True


class TestConfigService:
    """Test ConfigService."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        service = ConfigService(tmp_path)

        assert service.settings.xml_root_format == DEFAULT_XML_ROOT_FORMAT

    def test_load_expands_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOT_TAG", "MyProject")
        (tmp_path / PROJECT_CONFIG_FILE).write_text("project:\n  xml_root_format: ${ROOT_TAG}\n")

        settings = ConfigService(tmp_path).load_config()

        assert settings.xml_root_format == "MyProject"

    def test_environment_selects_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = tmp_path / "other.yaml"
        other.write_text("project:\n  legacy: true\n")
        monkeypatch.setenv("DELIVERY_TOOL_CONFIG", str(other))

        service = ConfigService(tmp_path)

        assert service.config_path == other
        assert service.settings.legacy is True

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("view_order: [unclosed\n")

        with pytest.raises(ConfigError):
            ConfigService(tmp_path).load_config()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            ConfigService(tmp_path).load_config()

    def test_save_writes_backup(self, tmp_path: Path) -> None:
        config_file = tmp_path / PROJECT_CONFIG_FILE
        config_file.write_text("version: '0.9'\n")
        service = ConfigService(tmp_path)

        service.save_config(Settings(version="1.1"))

        assert yaml.safe_load(config_file.read_text())["version"] == "1.1"
        assert (tmp_path / ".delivery-tool.yaml.bak").read_text() == "version: '0.9'\n"

    def test_find_project_root(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert ConfigService.find_project_root(nested) == tmp_path.resolve()

    def test_find_project_root_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ProjectNotFoundError):
            ConfigService.find_project_root(tmp_path)
