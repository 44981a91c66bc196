"""File collector: find the TypeScript sources to review."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from archreview.errors import ReviewError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)

# Directories never descended into.
SKIP_DIRS = frozenset({"node_modules", "dist", "build", ".git", "coverage"})

SOURCE_SUFFIX = ".ts"
DECLARATION_SUFFIX = ".d.ts"


def is_source_file(name: str) -> bool:
    """Return True for ``.ts`` files that are not ``.d.ts`` declarations."""
    return name.endswith(SOURCE_SUFFIX) and not name.endswith(DECLARATION_SUFFIX)


def collect_source_files(
    source_root: Path, *, extra_skip_dirs: Iterable[str] = ()
) -> list[Path]:
    """Recursively collect reviewable source files under *source_root*.

    Entries are visited in sorted name order so repeated runs over the same
    tree return the same list. Symbolic links are never followed.

    Raises
    ------
    ReviewError
        When *source_root* does not exist or is not a directory.
    """
    if not source_root.is_dir():
        msg = f"src directory not found at {source_root}"
        raise ReviewError(msg)

    skip = SKIP_DIRS | frozenset(extra_skip_dirs)
    files: list[Path] = []

    def _walk(directory: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_symlink():
                logger.debug("Skipping symlink %s", entry)
                continue
            if entry.is_dir():
                if entry.name in skip:
                    logger.debug("Skipping directory %s", entry)
                    continue
                _walk(entry)
            elif entry.is_file() and is_source_file(entry.name):
                files.append(entry)

    _walk(source_root)
    logger.info("Found %d TypeScript files under %s", len(files), source_root)
    return files
