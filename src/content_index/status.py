"""Working tree change detection for Content Index."""

import logging
from pathlib import Path

from .config import ContentIndexConfig
from .dirops import walk_files
from .errors import FileNotReadable
from .hasher import compute_file_hash
from .index import ContentIndex, IndexDiff, Orientation

logger = logging.getLogger(__name__)


def hash_working_tree(project_root: Path, config: ContentIndexConfig) -> ContentIndex:
    """
    Hash every non-excluded file below the project root.

    Keys are POSIX paths relative to the root. Files that vanish or become
    unreadable mid-scan are skipped with a warning.
    """
    current = ContentIndex(Orientation.FILENAME, config.hash_algorithm)
    for relative in walk_files(project_root, config.exclude_patterns):
        try:
            file_hash = compute_file_hash(project_root / relative, config.hash_algorithm)
        except FileNotReadable as e:
            logger.warning("Skipping %s: %s", relative, e)
            continue
        current.set(relative, file_hash)
    return current


def compute_status(
    project_root: Path,
    stored: ContentIndex,
    config: ContentIndexConfig,
) -> IndexDiff:
    """Compare a stored index against the current working tree."""
    current = hash_working_tree(project_root, config)
    diff = stored.compare(current)
    logger.debug(
        "Status: %d new, %d modified, %d deleted",
        len(diff.new),
        len(diff.modified),
        len(diff.deleted),
    )
    return diff
