"""Shared fixtures for delivery-tool tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Optional

import pytest

from delivery_tool.core.project import Project
from delivery_tool.models.component import Component
from delivery_tool.models.config import Settings
from delivery_tool.models.delivery import Delivery
from delivery_tool.plugins.loader import PluginLoader
from delivery_tool.plugins.registry import PluginRegistry, reset_registry
from delivery_tool.services.vcs import CommitContainer, TagContainer, VersionControlUtility

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeVcs(VersionControlUtility):
    """In-memory version control handle."""

    def __init__(self,
                 latest: Optional[TagContainer] = None,
                 commits: Optional[List[CommitContainer]] = None,
                 branch: str = "main") -> None:
        super().__init__()
        self.latest = latest
        self.commits = commits or []
        self.branch = branch
        self.initialized_with: List[str] = []
        self.closed = 0

    def initialize(self, path: str) -> None:
        self.initialized_with.append(path)

    def get_commits(self, former_tag: Optional[TagContainer]) -> List[CommitContainer]:
        return list(self.commits)

    def is_synced_to_tag(self) -> Optional[TagContainer]:
        return self.latest

    def get_current_branch(self) -> str:
        return self.branch

    def close(self) -> None:
        self.closed += 1


@pytest.fixture(autouse=True)
def _fresh_shared_registry() -> Iterator[None]:
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def registry(settings: Settings) -> PluginRegistry:
    """Registry with the builtin plugins only."""
    registry = PluginRegistry(settings)
    PluginLoader(registry).load_builtin_plugins()
    return registry


@pytest.fixture
def project(registry: PluginRegistry, tmp_path: Path) -> Project:
    return Project(registry, registry.settings, tmp_path)


@pytest.fixture
def make_delivery() -> Callable[..., Delivery]:
    """Factory for deliveries created ``minutes`` after a fixed base time."""

    def factory(name: str, minutes: int = 0, integrator: str = "tester") -> Delivery:
        return Delivery(name=name, integrator=integrator, created=BASE_TIME + timedelta(minutes=minutes))

    return factory


def assign(project: Project, component: Component, importer_name: str, strategy_name: str,
           *parameters: str) -> None:
    """Configure the strategy and parameters of a component for a data source."""
    importer = project.registry.require_import_strategy(importer_name)
    component.set_assignment_strategy(importer_name, importer.get_assignment_strategy(strategy_name))
    for index, value in enumerate(parameters):
        component.set_parameter(importer_name, index, value)

