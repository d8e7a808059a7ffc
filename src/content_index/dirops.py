"""Directory utilities used by Content Index."""

import fnmatch
import logging
import shutil
from pathlib import Path

from .errors import DirectoryError

logger = logging.getLogger(__name__)


def should_exclude(path: Path, exclude_patterns: list[str]) -> bool:
    """Check if path matches any exclusion pattern."""
    name = path.name
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
    return False


def list_files(directory: Path | str) -> list[str]:
    """List names of regular files in a directory, sorted.

    Raises:
        DirectoryError: if the directory cannot be read
    """
    directory = Path(directory)
    try:
        return sorted(child.name for child in directory.iterdir() if child.is_file())
    except OSError as e:
        raise DirectoryError(str(directory), e) from e


def list_all(directory: Path | str) -> list[str]:
    """List names of files and subdirectories in a directory, sorted.

    Raises:
        DirectoryError: if the directory cannot be read
    """
    directory = Path(directory)
    try:
        return sorted(
            child.name
            for child in directory.iterdir()
            if child.is_file() or child.is_dir()
        )
    except OSError as e:
        raise DirectoryError(str(directory), e) from e


def walk_files(root: Path | str, exclude_patterns: list[str]) -> list[str]:
    """Relative POSIX paths of regular files below root, sorted.

    Excluded names prune whole subtrees; symlinks are skipped.

    Raises:
        DirectoryError: if a directory cannot be read
    """
    root = Path(root)
    found: list[str] = []

    def visit(directory: Path) -> None:
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise DirectoryError(str(directory), e) from e
        for child in children:
            if should_exclude(child, exclude_patterns) or child.is_symlink():
                continue
            if child.is_file():
                found.append(child.relative_to(root).as_posix())
            elif child.is_dir():
                visit(child)

    visit(root)
    return found


def copy_file(source: Path | str, dest: Path | str) -> bool:
    """Copy a file's bytes over dest. Returns whether the copy succeeded."""
    try:
        shutil.copyfile(source, dest)
    except OSError as e:
        logger.warning("Failed to copy %s to %s: %s", source, dest, e)
        return False
    return True


def copy_directory(source: Path | str, dest: Path | str) -> bool:
    """Copy the regular files of source into dest (not recursive).

    dest is created if missing. Returns whether every copy succeeded;
    stops at the first failure.
    """
    source = Path(source)
    dest = Path(dest)
    try:
        dest.mkdir(parents=True, exist_ok=True)
        names = list_files(source)
    except (OSError, DirectoryError) as e:
        logger.warning("Failed to copy directory %s to %s: %s", source, dest, e)
        return False

    for name in names:
        if not copy_file(source / name, dest / name):
            return False
    return True


def empty_directory(directory: Path | str) -> None:
    """Delete the regular files in a directory, leaving subdirectories.

    Raises:
        DirectoryError: on the first file that cannot be removed
    """
    directory = Path(directory)
    for name in list_files(directory):
        try:
            (directory / name).unlink()
        except OSError as e:
            raise DirectoryError(str(directory / name), e) from e


def remove_directory(directory: Path | str) -> None:
    """Remove a directory and everything below it.

    Raises:
        DirectoryError: if the tree cannot be removed
    """
    directory = Path(directory)
    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise DirectoryError(str(directory), e) from e
