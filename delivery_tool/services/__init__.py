# delivery_tool/services/__init__.py
"""Services for delivery-tool"""

from .config_service import ConfigService
from .vcs import (
    ALMUtility,
    CommitContainer,
    CommitFilter,
    DescriptionParser,
    TagContainer,
    VersionControlUtility,
    XmlGitSink,
)
from .git_service import GitUtility

__all__ = [
    "ConfigService",
    "ALMUtility",
    "CommitContainer",
    "CommitFilter",
    "DescriptionParser",
    "TagContainer",
    "VersionControlUtility",
    "XmlGitSink",
    "GitUtility",
]
