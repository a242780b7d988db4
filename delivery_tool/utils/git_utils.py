"""Git operation utilities"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = f"%H{FIELD_SEPARATOR}%ct{FIELD_SEPARATOR}%B{RECORD_SEPARATOR}"
TAG_FORMAT = FIELD_SEPARATOR.join([
    "%(refname:short)",
    "%(objectname)",
    "%(*objectname)",
    "%(creatordate:iso-strict)",
])


@dataclass
class TagRef:
    """Tag reference as listed by ``git for-each-ref``"""
    name: str
    object_hash: str
    target_hash: str
    created: str


@dataclass
class LogRecord:
    """One commit as printed by ``git log``"""
    hash: str
    commit_time: int
    message: str


def run_git(path: Union[str, Path], *args: str) -> str:
    """
    Run a git command and return its stdout

    Args:
        path: Repository path
        *args: Git arguments

    Returns:
        Standard output

    Raises:
        subprocess.CalledProcessError: Git exited with a nonzero status
        FileNotFoundError: Git or the repository path is missing
    """
    result = subprocess.run(
        ['git', *args],
        cwd=str(path),
        capture_output=True,
        text=True,
        check=True
    )
    return result.stdout


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is a Git repository

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--is-inside-work-tree'],
            cwd=path,
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return False


def get_current_branch(path: Path) -> Optional[str]:
    """
    Get current Git branch

    Args:
        path: Repository path

    Returns:
        Branch name or None
    """
    try:
        return run_git(path, 'rev-parse', '--abbrev-ref', 'HEAD').strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def resolve_ref(path: Path, ref: str = 'HEAD') -> Optional[str]:
    """Resolve a ref to a full commit hash, None if it does not exist"""
    try:
        return run_git(path, 'rev-parse', '--verify', '--quiet', f'{ref}^{{commit}}').strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def list_tags(path: Path) -> List[TagRef]:
    """
    List all tags of a repository, oldest first

    Annotated tags report their peeled commit as target; lightweight
    tags point to the commit directly.

    Args:
        path: Repository path

    Returns:
        Tag references
    """
    output = run_git(path, 'for-each-ref', '--sort=creatordate', f'--format={TAG_FORMAT}', 'refs/tags')
    return parse_tag_listing(output)


def parse_tag_listing(output: str) -> List[TagRef]:
    """Parse ``git for-each-ref`` output produced with ``TAG_FORMAT``"""
    tags = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) < 4:
            continue
        name, object_hash, peeled_hash, created = fields[:4]
        tags.append(TagRef(
            name=name,
            object_hash=object_hash,
            target_hash=peeled_hash or object_hash,
            created=created
        ))
    return tags


def get_log(path: Path,
            start: str,
            exclude: Optional[str] = None,
            include_merges: bool = False) -> List[LogRecord]:
    """
    Get commits reachable from ``start`` but not from ``exclude``

    Args:
        path: Repository path
        start: Commit to start from (newest)
        exclude: Commit whose history is excluded
        include_merges: Whether merge commits are listed

    Returns:
        Commits, newest first
    """
    args = ['log', f'--format={LOG_FORMAT}']
    if not include_merges:
        args.append('--no-merges')
    args.append(start)
    if exclude:
        args.append(f'^{exclude}')
    return parse_log(run_git(path, *args))


def parse_log(output: str) -> List[LogRecord]:
    """Parse ``git log`` output produced with ``LOG_FORMAT``"""
    records = []
    for chunk in output.split(RECORD_SEPARATOR):
        chunk = chunk.lstrip("\n")
        if not chunk:
            continue
        fields = chunk.split(FIELD_SEPARATOR, 2)
        if len(fields) < 3:
            raise ValueError(f"Malformed git log record: {chunk[:40]!r}")
        commit_hash, commit_time, message = fields
        records.append(LogRecord(
            hash=commit_hash.strip(),
            commit_time=int(commit_time.strip()),
            message=message.rstrip("\n")
        ))
    return records
