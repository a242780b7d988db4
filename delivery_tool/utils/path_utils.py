"""Path resolution helpers"""

import os
from pathlib import Path
from typing import Union


def get_absolute_file_path(path: str, project_root: Union[str, Path]) -> str:
    """
    Resolve a strategy parameter path against the project root

    Only paths starting with ``./`` are treated as project relative;
    every other path is returned with normalized separators.

    Args:
        path: Path as entered in a parameter
        project_root: Project root directory

    Returns:
        Absolute (or unchanged) path string
    """
    normalized = path.replace("/", os.sep)
    prefix = "." + os.sep
    if normalized.startswith(prefix):
        return str(Path(project_root) / normalized[len(prefix):])
    return normalized


def resolve_path(path: Union[str, Path], project_root: Union[str, Path]) -> Path:
    """Resolve a path relative to project root unless it is absolute"""
    path = Path(path)
    if path.is_absolute():
        return path
    return (Path(project_root) / path).resolve()
