"""Configuration management service"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

import yaml

from ..api.exceptions import ConfigError, ProjectNotFoundError
from ..constants import ENV_CONFIG_PATH, PROJECT_CONFIG_FILE
from ..models.config import Settings


class ConfigService:
    """Service for loading and saving project settings"""

    def __init__(self, project_root: Union[str, Path], config_path: Optional[Union[str, Path]] = None):
        """Initialize config service

        Args:
            project_root: Project root directory
            config_path: Explicit settings file (defaults to the project file
                or the file named by ``DELIVERY_TOOL_CONFIG``)
        """
        self.project_root = Path(project_root)
        if config_path is None and os.environ.get(ENV_CONFIG_PATH):
            config_path = os.environ[ENV_CONFIG_PATH]
        self.config_path = Path(config_path) if config_path else self.project_root / PROJECT_CONFIG_FILE
        self._settings: Optional[Settings] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def settings(self) -> Settings:
        """Get current settings (lazy load)"""
        if self._settings is None:
            self.load_config()
        return self._settings

    def load_config(self) -> Settings:
        """Load settings from file

        A missing file yields default settings.

        Returns:
            Loaded settings

        Raises:
            ConfigError: File is not valid YAML or has an invalid shape
        """
        if not self.config_path.exists():
            self.logger.debug(f"No settings file at {self.config_path}, using defaults")
            self._settings = Settings()
            return self._settings

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"Settings file {self.config_path} must contain a mapping")

        try:
            self._settings = Settings.from_dict(data)
        except ValueError as e:
            raise ConfigError(f"Invalid settings in {self.config_path}: {e}") from e

        self.logger.debug(f"Loaded settings from {self.config_path}")
        return self._settings

    def save_config(self, settings: Optional[Settings] = None) -> Path:
        """Save settings to file

        Args:
            settings: Settings to save (uses current if not provided)

        Returns:
            Path of the written file
        """
        if settings:
            self._settings = settings

        if not self._settings:
            raise ValueError("No configuration to save")

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix('.yaml.bak')
            shutil.copy2(self.config_path, backup_path)

        data = self._settings.to_dict()

        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        self.logger.info(f"Settings saved to {self.config_path}")
        return self.config_path

    @staticmethod
    def find_project_root(start_path: Optional[Union[str, Path]] = None) -> Path:
        """Find the project root by looking for the settings file

        Args:
            start_path: Starting directory (defaults to current directory)

        Returns:
            Project root path

        Raises:
            ProjectNotFoundError: No directory up to the file system root
                contains the settings file
        """
        current = Path(start_path).resolve() if start_path else Path.cwd()

        while True:
            if (current / PROJECT_CONFIG_FILE).exists():
                return current
            if current == current.parent:
                break
            current = current.parent

        raise ProjectNotFoundError()
