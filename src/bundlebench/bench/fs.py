"""Filesystem helpers for measuring and cleaning benchmark workspaces."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

log = logging.getLogger("bundlebench")


def dir_size(path: str | Path) -> int:
    """Return the total size in bytes of all regular files under *path*.

    Recurses into subdirectories without following symlinks. A path
    that does not exist is treated as empty and yields 0.
    """
    root = Path(path)
    if not root.exists():
        return 0
    if root.is_file():
        return root.stat().st_size

    total = 0
    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                total += dir_size(entry.path)
            elif entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
    return total


def build_output_size(project_dir: Path, output_dirs: Iterable[str]) -> int:
    """Sum the sizes of the build output directories under *project_dir*."""
    return sum(dir_size(project_dir / name) for name in output_dirs)


def ensure_absent(path: str | Path) -> bool:
    """Make sure nothing exists at *path*.

    Removes a file, symlink or directory tree. Returns True if something
    was removed and False if the path was already absent.
    """
    target = Path(path)
    if target.is_symlink() or target.is_file():
        target.unlink(missing_ok=True)
        return True
    if target.is_dir():
        shutil.rmtree(target)
        return True
    return False


def clean_paths(base: Path, names: Iterable[str]) -> list[str]:
    """Apply :func:`ensure_absent` to each name under *base*.

    Returns the names that were actually removed.
    """
    removed = [name for name in names if ensure_absent(base / name)]
    if removed:
        log.debug("Removed %s from %s", ", ".join(removed), base)
    return removed
