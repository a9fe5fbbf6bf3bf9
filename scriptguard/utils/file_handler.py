"""
file_handler.py - Utilities for file operations

This module provides workflow discovery and the small amount of file I/O the
scanner and the CLI need.
"""

import os
import re
from pathlib import Path
from typing import List

WORKFLOW_DIR = os.path.join(".github", "workflows")


def list_workflow_files(repo_path: str) -> List[str]:
    """
    List all GitHub Actions workflow files in a repository

    Args:
        repo_path: Path to the repository

    Returns:
        Sorted list of workflow file paths
    """
    workflows_dir = os.path.join(repo_path, WORKFLOW_DIR)
    if not os.path.isdir(workflows_dir):
        return []

    return sorted(
        os.path.join(workflows_dir, f)
        for f in os.listdir(workflows_dir)
        if f.endswith((".yml", ".yaml"))
    )


def read_text(file_path: str) -> str:
    """
    Read a file without translating line endings

    Raises:
        OSError: If the file cannot be read
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def relative_path(file_path: str, root: str) -> str:
    """
    Path of a file relative to a root, with forward slashes

    Falls back to the file's own path when it is not below the root.
    """
    try:
        rel = Path(file_path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        rel = Path(file_path)
    return rel.as_posix()


def patch_file_name(path: str, offset: int, envvar_name: str) -> str:
    """
    Name of the file a single patch is written to

    Example: ``.github/workflows/ci.yml`` line 12, ``PR_TITLE`` becomes
    ``ci.yml-L12-PR_TITLE.diff``.
    """
    base = re.sub(r"[^A-Za-z0-9._-]", "_", os.path.basename(path))
    return f"{base}-L{offset}-{envvar_name}.diff"


def write_text(file_path: str, content: str) -> None:
    """
    Write a file, creating its directory if needed

    Raises:
        OSError: If the file cannot be written
    """
    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
