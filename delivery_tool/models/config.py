"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union

from ..constants import (
    DEFAULT_COMMIT_TEMPLATE,
    DEFAULT_XML_ROOT_FORMAT,
    EXPORT_ORDER,
    VIEW_ORDER,
)


def normalize_plugin_name(name: str) -> str:
    """Settings form of a plugin name: upper case, spaces replaced by underscores"""
    return name.replace(" ", "_").upper()


@dataclass
class OrderEntry:
    """One data source in a view or export order list"""

    name: str
    enabled: bool = True

    def __post_init__(self):
        """Normalize the plugin name"""
        self.name = normalize_plugin_name(self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {"name": self.name, "enabled": self.enabled}

    @classmethod
    def from_value(cls, value: Union[str, Dict[str, Any]]) -> 'OrderEntry':
        """Create from a plain name or a ``{name, enabled}`` mapping"""
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, dict) and "name" in value:
            return cls(name=str(value["name"]), enabled=bool(value.get("enabled", True)))
        raise ValueError(f"Invalid order entry: {value!r}")


@dataclass
class Settings:
    """Project settings consumed by the core"""

    version: str = "1.0"
    view_order: List[OrderEntry] = field(default_factory=list)
    export_order: List[OrderEntry] = field(default_factory=list)
    xml_root_format: str = DEFAULT_XML_ROOT_FORMAT
    legacy: bool = False
    commit_template: str = DEFAULT_COMMIT_TEMPLATE
    include_merge_commits: bool = False
    startup_file: Optional[str] = None
    plugin_dirs: List[str] = field(default_factory=list)
    plugins: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    normalize_plugin_name = staticmethod(normalize_plugin_name)

    def get_order(self, order_key: str) -> List[OrderEntry]:
        """Order list for ``view_order`` or ``export_order``"""
        if order_key == VIEW_ORDER:
            return self.view_order
        if order_key == EXPORT_ORDER:
            return self.export_order
        raise KeyError(f"Unknown order setting: {order_key}")

    def order_names(self, order_key: str) -> List[str]:
        """Normalized plugin names of an order list"""
        return [entry.name for entry in self.get_order(order_key)]

    def enabled_states(self, order_key: str) -> Dict[str, bool]:
        """Enabled flag per normalized plugin name of an order list"""
        return {entry.name: entry.enabled for entry in self.get_order(order_key)}

    def get_plugin_setting(self, plugin: str, key: str, default: Any = None) -> Any:
        """Setting of a plugin, looked up by normalized plugin name"""
        plugin_settings = self.plugins.get(normalize_plugin_name(plugin), {})
        return plugin_settings.get(key, default)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Settings':
        """Create from dictionary"""
        data = data or {}
        settings = cls(version=str(data.get("version", "1.0")))

        settings.view_order = [OrderEntry.from_value(v) for v in data.get(VIEW_ORDER) or []]
        settings.export_order = [OrderEntry.from_value(v) for v in data.get(EXPORT_ORDER) or []]

        project = data.get("project", {}) or {}
        settings.xml_root_format = project.get("xml_root_format", DEFAULT_XML_ROOT_FORMAT)
        settings.legacy = bool(project.get("legacy", False))
        settings.startup_file = project.get("startup_file")

        git = data.get("git", {}) or {}
        settings.commit_template = git.get("commit_template", DEFAULT_COMMIT_TEMPLATE)
        settings.include_merge_commits = bool(git.get("include_merge_commits", False))

        settings.plugin_dirs = list(data.get("plugin_dirs") or [])
        settings.plugins = {
            normalize_plugin_name(name): values or {}
            for name, values in (data.get("plugins") or {}).items()
        }

        return settings

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "project": {
                "xml_root_format": self.xml_root_format,
                "legacy": self.legacy,
                "startup_file": self.startup_file,
            },
            VIEW_ORDER: [entry.to_dict() for entry in self.view_order],
            EXPORT_ORDER: [entry.to_dict() for entry in self.export_order],
            "git": {
                "commit_template": self.commit_template,
                "include_merge_commits": self.include_merge_commits,
            },
            "plugin_dirs": self.plugin_dirs,
            "plugins": self.plugins,
        }
