"""Plugin loader"""

import importlib
import importlib.util
import logging
from pathlib import Path

from .registry import PluginRegistry

BUILTIN_MODULES = [
    'delivery_tool.plugins.builtin.version',
    'delivery_tool.plugins.builtin.important_information',
    'delivery_tool.plugins.builtin.git_commits',
]

REGISTER_FUNCTION = "register"


class PluginLoader:
    """Load plugin modules into a registry

    A plugin module exposes ``register(registry)``, which registers its
    data sources, information types, extension strategies and service
    factories.
    """

    def __init__(self, registry: PluginRegistry):
        """
        Initialize plugin loader

        Args:
            registry: Registry receiving the plugins
        """
        self.registry = registry
        self.logger = logging.getLogger("PluginLoader")
        self._loaded_modules = set()

    def load_builtin_plugins(self) -> int:
        """
        Load all built-in plugins

        Import errors of builtin modules propagate.

        Returns:
            Number of modules loaded
        """
        count = 0
        for module_name in BUILTIN_MODULES:
            if module_name not in self._loaded_modules:
                module = importlib.import_module(module_name)
                self._register_module(module)
                self._loaded_modules.add(module_name)
                count += 1
        return count

    def load_from_directory(self, plugin_dir: Path) -> int:
        """
        Load plugins from a directory

        Every ``*.py`` file not starting with an underscore that defines
        ``register`` is loaded. Broken files are logged and skipped.

        Args:
            plugin_dir: Directory containing plugin modules

        Returns:
            Number of modules loaded
        """
        plugin_dir = Path(plugin_dir)
        if not plugin_dir.exists() or not plugin_dir.is_dir():
            self.logger.warning(f"Plugin directory does not exist: {plugin_dir}")
            return 0

        count = 0
        for py_file in sorted(plugin_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue

            module_name = f"delivery_tool_user_plugin_{py_file.stem}"
            if module_name in self._loaded_modules:
                continue

            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec and spec.loader:
                    module = importlib.util.module_from_spec(spec)
                    spec.loader.exec_module(module)

                    if self._register_module(module):
                        self._loaded_modules.add(module_name)
                        count += 1

            except Exception as e:
                self.logger.error(f"Failed to load plugin from {py_file}: {e}")

        return count

    def load_from_module(self, module_name: str) -> bool:
        """
        Load plugins from a Python module

        Args:
            module_name: Fully qualified module name

        Returns:
            True if the module was loaded
        """
        if module_name in self._loaded_modules:
            self.logger.info(f"Module {module_name} already loaded")
            return False

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            self.logger.error(f"Failed to import module {module_name}: {e}")
            return False

        if self._register_module(module):
            self._loaded_modules.add(module_name)
            return True
        return False

    def _register_module(self, module) -> bool:
        """
        Call the ``register`` function of a module

        Returns:
            False if the module defines no ``register`` function
        """
        register = getattr(module, REGISTER_FUNCTION, None)
        if not callable(register):
            self.logger.debug(f"Module {module.__name__} has no {REGISTER_FUNCTION}() function")
            return False
        register(self.registry)
        self.logger.debug(f"Loaded plugin module {module.__name__}")
        return True
