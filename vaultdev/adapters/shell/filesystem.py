"""
Filesystem adapter — whole-file writes, directory trees, ownership.

All writes are whole-file overwrites so re-running provisioning always
resets content. Removal is tolerant of paths that are already gone.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def make_dirs(paths: list[Path]) -> list[Path]:
    """Create directories (``mkdir -p``). Returns the ones newly created."""
    created = []
    for path in paths:
        if not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)
            created.append(path)
    return created


def write_file(path: Path, content: str) -> bool:
    """Overwrite ``path`` with ``content``. Returns True if content changed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    changed = not path.is_file() or path.read_text(encoding="utf-8") != content
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s (%d bytes, changed=%s)", path, len(content), changed)
    return changed


def chown_tree(root: Path, uid: int, gid: int) -> int:
    """Recursively set ownership (``chown -R``). Returns entries changed."""
    count = 0
    for current, dirs, files in os.walk(root):
        for name in [*dirs, *files]:
            os.chown(os.path.join(current, name), uid, gid, follow_symlinks=False)
            count += 1
    os.chown(root, uid, gid)
    return count + 1


def remove_paths(paths: list[Path]) -> list[Path]:
    """Delete files and directory trees (``rm -rf``). Returns those removed."""
    removed = []
    for path in paths:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            continue
        removed.append(path)
        logger.debug("Removed %s", path)
    return removed
