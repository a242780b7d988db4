# delivery_tool/cli/main.py
"""Main CLI entry point for delivery-tool"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Union

import click
from rich.logging import RichHandler
from rich.markup import escape

from ..__version__ import __version__
from ..constants import APP_NAME, ENV_PROJECT_ROOT, LOG_FORMAT
from ..api.exceptions import ProjectNotFoundError
from ..core.project import Project
from ..models.config import Settings
from ..plugins.registry import PluginRegistry, build_registry
from ..services.config_service import ConfigService
from .utils.output import console

from .commands import (
    delivery,
    component,
    export,
    plugins
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Rich output shares the console with the command output
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        force=True,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )


class Context:
    """CLI context object with lazy project initialization

    Project root, settings and the plugin registry are only resolved when
    a command accesses them.
    """

    def __init__(self,
                 project_root: Optional[Union[str, Path]] = None,
                 config_path: Optional[Union[str, Path]] = None):
        """Initialize CLI context"""
        self._project_root: Optional[Path] = Path(project_root) if project_root else None
        self.config_path = config_path
        self._config_service: Optional[ConfigService] = None
        self._registry: Optional[PluginRegistry] = None
        self.verbose: bool = False
        self.debug: bool = False

    @property
    def project_root(self) -> Path:
        """Get project root directory (lazy loading)

        The ``PROJECT_ROOT`` environment variable wins over the search for
        the settings file; without either the current directory is used.
        """
        if self._project_root is None:
            self._project_root = self._find_project_root_safe()
            if self.debug:
                console.print(f"[dim]Project root: {self._project_root}[/dim]")
        return self._project_root

    @property
    def config_service(self) -> ConfigService:
        if self._config_service is None:
            self._config_service = ConfigService(self.project_root, self.config_path)
        return self._config_service

    @property
    def settings(self) -> Settings:
        return self.config_service.settings

    @property
    def registry(self) -> PluginRegistry:
        """Plugin registry built from the project settings (lazy loading)"""
        if self._registry is None:
            self._registry = build_registry(self.settings)
        return self._registry

    def create_project(self, source: Optional[Union[str, Path]] = None) -> Project:
        """Create a project, opened from ``source`` or the configured startup file

        Raises:
            PersistenceError: The document cannot be loaded
            InternalError: The configured startup file is missing
        """
        project = Project(self.registry, self.settings, self.project_root)
        if source is not None:
            project.open(source)
        elif self.settings.startup_file:
            project.load_startup_file()
        return project

    @staticmethod
    def _find_project_root_safe() -> Path:
        """Find project root without throwing exceptions"""
        if os.environ.get(ENV_PROJECT_ROOT):
            return Path(os.environ[ENV_PROJECT_ROOT])
        try:
            return ConfigService.find_project_root()
        except ProjectNotFoundError:
            return Path.cwd()


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--project-root', type=click.Path(file_okay=False, path_type=Path),
              help='Project root directory (default: search for the settings file)')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Settings file (default: <project root>/.delivery-tool.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, project_root, config_path):
    """Delivery Tool - Release documentation for component based products

    Every delivery collects, per component, the information of the
    registered data sources: versions, important notes and version
    control history. Projects are stored as XML documents and can be
    exported as DocBook release notes.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(project_root, config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(delivery.delivery)
cli.add_command(component.component)
cli.add_command(export.export)
cli.add_command(plugins.plugins)


def main():
    """Console script entry point

    A lone command group name shows the help of that group.
    """
    args = sys.argv[1:]
    try:
        if len(args) == 1 and not args[0].startswith('-'):
            sys.argv.append('--help')
        cli(prog_name=APP_NAME)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        if {'-d', '--debug'} & set(args):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
