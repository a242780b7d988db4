# delivery_tool/plugins/registry.py
"""Plugin registry

The registry is the catalog of data sources, information types, extension
assignment strategies and service factories. It is built once per process
through :func:`get_registry`; tests construct their own instances.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Type, TYPE_CHECKING

from ..api.exceptions import NotFoundError
from ..constants import EXPORT_ORDER, USER_PLUGIN_DIR, VIEW_ORDER
from ..models.config import Settings, normalize_plugin_name
from ..models.information import DeliveryInformation
from .base import AssignmentStrategy, ImportStrategy

if TYPE_CHECKING:
    from ..services.vcs import ALMUtility, VersionControlUtility

VcsFactory = Callable[[], "VersionControlUtility"]
AlmFactory = Callable[[], "ALMUtility"]


class PluginRegistry:
    """Catalog of all registered plugins"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._import_strategies: Dict[str, ImportStrategy] = {}
        self._information_types: Dict[str, Type[DeliveryInformation]] = {}
        self._extensions: List[AssignmentStrategy] = []
        self._vcs_factories: List[VcsFactory] = []
        self._alm_factories: List[AlmFactory] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    # Registration

    def register_import_strategy(self, importer: ImportStrategy) -> None:
        """
        Register a data source

        Its information type is registered as well, and every extension
        strategy naming the data source is attached to it.

        Args:
            importer: Data source to register
        """
        if importer.name in self._import_strategies:
            self.logger.warning(f"Import strategy {importer.name} already registered, replacing")

        importer.bind(self)
        self._import_strategies[importer.name] = importer
        self.register_information_type(importer.information_type)

        for extension in self._extensions:
            if importer.name in extension.external_plugins:
                importer.add_assignment_strategy(extension)

        self.logger.debug(f"Registered import strategy: {importer.name} v{importer.version}")

    def register_information_type(self, information_type: Type[DeliveryInformation]) -> None:
        """Register a delivery information type under its NAME"""
        self._information_types[information_type.NAME] = information_type

    def register_assignment_extension(self, strategy: AssignmentStrategy) -> None:
        """
        Register a strategy extending other data sources

        The strategy is attached to every registered data source named in
        its ``external_plugins`` and to those registered later.
        """
        strategy.registry = self
        self._extensions.append(strategy)
        for importer_name in strategy.external_plugins:
            importer = self._import_strategies.get(importer_name)
            if importer is not None:
                importer.add_assignment_strategy(strategy)
        self.logger.debug(f"Registered assignment extension: {strategy.name}")

    def register_vcs_utility(self, factory: VcsFactory) -> None:
        """Register a factory creating version control handles"""
        self._vcs_factories.append(factory)

    def register_alm_utility(self, factory: AlmFactory) -> None:
        """Register a factory creating issue tracker handles"""
        self._alm_factories.append(factory)

    # Lookups

    def get_import_strategy(self, name: str) -> Optional[ImportStrategy]:
        return self._import_strategies.get(name)

    def require_import_strategy(self, name: str) -> ImportStrategy:
        """
        Data source by name

        Raises:
            NotFoundError: No data source with that name
        """
        importer = self.get_import_strategy(name)
        if importer is None:
            raise NotFoundError("Import strategy", name)
        return importer

    def has_import_strategy(self, name: str) -> bool:
        return name in self._import_strategies

    @property
    def import_strategies(self) -> List[ImportStrategy]:
        """Data sources in registration order"""
        return list(self._import_strategies.values())

    @property
    def import_strategy_names(self) -> List[str]:
        return list(self._import_strategies.keys())

    def get_information_type(self, name: str) -> Optional[Type[DeliveryInformation]]:
        return self._information_types.get(name)

    def create_information(self, name: str) -> DeliveryInformation:
        """
        New instance of a registered information type

        Raises:
            NotFoundError: No information type with that name
        """
        information_type = self.get_information_type(name)
        if information_type is None:
            raise NotFoundError("Delivery information type", name)
        information = information_type()
        information.registry = self
        return information

    def get_assignment_strategy(self, importer_name: str, name: str) -> Optional[AssignmentStrategy]:
        importer = self.get_import_strategy(importer_name)
        if importer is None:
            return None
        return importer.get_assignment_strategy(name)

    @property
    def assignment_extensions(self) -> List[AssignmentStrategy]:
        return list(self._extensions)

    def create_vcs_utility(self) -> Optional["VersionControlUtility"]:
        """New version control handle, or None if none is registered"""
        if not self._vcs_factories:
            return None
        return self._vcs_factories[0]()

    def create_alm_utility(self) -> Optional["ALMUtility"]:
        """New issue tracker handle, or None if none is registered"""
        if not self._alm_factories:
            return None
        return self._alm_factories[0]()

    # Ordering

    def import_strategies_in_order(self, names: Iterable[str]) -> List[ImportStrategy]:
        """
        Data sources ordered by a list of normalized names

        Data sources not named in the list follow in registration order.

        Args:
            names: Normalized names (upper case, underscores)

        Returns:
            All registered data sources
        """
        by_normalized = {normalize_plugin_name(i.name): i for i in self._import_strategies.values()}
        ordered: List[ImportStrategy] = []
        for name in names:
            importer = by_normalized.get(normalize_plugin_name(name))
            if importer is not None and importer not in ordered:
                ordered.append(importer)
        for importer in self._import_strategies.values():
            if importer not in ordered:
                ordered.append(importer)
        return ordered

    def import_strategies_in_view_order(self, settings: Optional[Settings] = None) -> List[ImportStrategy]:
        settings = settings or self.settings
        return self.import_strategies_in_order(settings.order_names(VIEW_ORDER))

    def import_strategies_in_export_order(self, settings: Optional[Settings] = None) -> List[ImportStrategy]:
        settings = settings or self.settings
        return self.import_strategies_in_order(settings.order_names(EXPORT_ORDER))

    def __len__(self) -> int:
        return len(self._import_strategies)

    def __contains__(self, name: str) -> bool:
        return name in self._import_strategies


_registry: Optional[PluginRegistry] = None
_registry_lock = threading.Lock()


def build_registry(settings: Optional[Settings] = None,
                   plugin_dirs: Optional[Iterable[Path]] = None) -> PluginRegistry:
    """
    Create a registry with builtin and user plugins loaded

    Args:
        settings: Project settings (``plugin_dirs`` are loaded as well)
        plugin_dirs: Additional plugin directories

    Returns:
        New registry
    """
    from .loader import PluginLoader

    registry = PluginRegistry(settings)
    loader = PluginLoader(registry)
    loader.load_builtin_plugins()

    directories = [Path.home() / USER_PLUGIN_DIR]
    directories.extend(Path(d) for d in registry.settings.plugin_dirs)
    if plugin_dirs:
        directories.extend(Path(d) for d in plugin_dirs)
    for directory in directories:
        if directory.is_dir():
            loader.load_from_directory(directory)

    return registry


def get_registry(settings: Optional[Settings] = None) -> PluginRegistry:
    """
    Process wide registry, built on first use

    Args:
        settings: Settings used when the registry is built; ignored later

    Returns:
        Shared registry
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = build_registry(settings)
    return _registry


def reset_registry() -> None:
    """Discard the shared registry; the next access rebuilds it"""
    global _registry
    with _registry_lock:
        _registry = None
