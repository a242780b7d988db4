"""Git version control utility"""

import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..api.exceptions import VersionControlError, VersionControlRuntimeError
from ..constants import DEFAULT_COMMIT_TEMPLATE, HASH_LENGTH
from ..models.config import Settings
from ..utils import git_utils
from .vcs import CommitContainer, DescriptionParser, TagContainer, VersionControlUtility


def _parse_tag_date(text: str) -> datetime:
    """Parse an ``iso-strict`` tag date; unknown values map to the epoch"""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return datetime.fromtimestamp(0, tz=timezone.utc)


class GitUtility(VersionControlUtility):
    """Version control utility backed by the ``git`` command line"""

    def __init__(self,
                 commit_template: str = DEFAULT_COMMIT_TEMPLATE,
                 include_merge_commits: bool = False):
        super().__init__()
        self.parser = DescriptionParser(commit_template)
        self.include_merge_commits = include_merge_commits
        self.path: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings]) -> 'GitUtility':
        """Create a handle configured from project settings"""
        if settings is None:
            return cls()
        return cls(settings.commit_template, settings.include_merge_commits)

    def _require_path(self) -> Path:
        if self.path is None:
            raise VersionControlError("Git handler is not initialized")
        return self.path

    def initialize(self, path: str) -> None:
        repo_path = Path(path)
        if not repo_path.is_dir() or not git_utils.is_git_repository(repo_path):
            raise VersionControlError(f"IO Error! Not a git repository: {path}")
        self.path = repo_path
        self.logger.debug(f"Opened git repository {repo_path}")

    def is_synced_to_tag(self) -> Optional[TagContainer]:
        """
        Tag whose target commit is HEAD

        When several tags point at HEAD the most recently created one wins.
        """
        path = self._require_path()
        head = git_utils.resolve_ref(path)
        if head is None:
            return None

        try:
            tags = git_utils.list_tags(path)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise VersionControlError(f"Could not list tags: {e}") from e

        latest = None
        for tag in tags:
            if tag.target_hash == head:
                latest = TagContainer(
                    name=tag.name,
                    created=_parse_tag_date(tag.created),
                    hash=tag.object_hash,
                    target=tag.target_hash,
                )
        return latest

    def get_current_branch(self) -> str:
        branch = git_utils.get_current_branch(self._require_path())
        if branch is None:
            raise VersionControlError("Could not determine current branch")
        return branch

    def get_commits(self, former_tag: Optional[TagContainer]) -> Iterable[CommitContainer]:
        latest = self.is_synced_to_tag()
        if latest is None:
            raise VersionControlError("Head is not synched to a tag. Documentation stopped.")

        if former_tag is not None and former_tag.hash == latest.hash:
            return []

        exclude = former_tag.target if former_tag is not None else None
        try:
            records = git_utils.get_log(
                self._require_path(),
                latest.target,
                exclude=exclude,
                include_merges=self.include_merge_commits
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise VersionControlError(f"git log failed: {e}") from e
        except ValueError as e:
            raise VersionControlRuntimeError(str(e)) from e

        return self._to_containers(records)

    def _to_containers(self, records: List[git_utils.LogRecord]) -> Iterator[CommitContainer]:
        for record in records:
            try:
                commit = self.parser.parse(record.message)
            except (ValueError, IndexError) as e:
                raise VersionControlRuntimeError(f"Could not parse commit {record.hash}: {e}") from e
            commit.hash = record.hash[:HASH_LENGTH]
            commit.time = record.commit_time
            yield commit

    def close(self) -> None:
        self.path = None
