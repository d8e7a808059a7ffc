"""Scoped load/flush handle around a persisted ContentIndex."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType

from .codec import load_file, write_file
from .config import ContentIndexConfig, get_commit_index_path, get_index_path
from .errors import FlushError, HandleDisarmed
from .hasher import DEFAULT_ALGORITHM
from .index import ContentIndex, Orientation

logger = logging.getLogger(__name__)


class IndexHandle:
    """
    Exclusive owner of an index backed by a file.

    The index is loaded when the handle is created and written back in full
    when the ``with`` block exits, whether or not the block raised. Call
    ``commit()`` to flush earlier and observe failures directly.

    Handles cannot be copied. ``transfer()`` moves ownership to a new handle
    and leaves this one without a path, so it never writes again.
    """

    def __init__(
        self,
        path: Path | str,
        orientation: Orientation = Orientation.FILENAME,
        strict: bool = False,
        hash_algorithm: str = DEFAULT_ALGORITHM,
    ):
        self._path: Path | None = Path(path)
        self.index: ContentIndex = load_file(self._path, orientation, strict, hash_algorithm)

    @classmethod
    def from_config(
        cls,
        project_root: Path,
        config: ContentIndexConfig,
        orientation: Orientation = Orientation.FILENAME,
    ) -> IndexHandle:
        """Open the project's index file for the given orientation."""
        if orientation is Orientation.FILENAME:
            path = get_index_path(project_root, config)
        else:
            path = get_commit_index_path(project_root, config)
        return cls(path, orientation, config.strict_records, config.hash_algorithm)

    @property
    def path(self) -> Path | None:
        """Backing file, or None once ownership has been transferred."""
        return self._path

    @property
    def armed(self) -> bool:
        return self._path is not None

    def commit(self) -> int:
        """
        Write the whole index to the backing file.

        Safe to call any number of times.

        Returns:
            Number of entries written

        Raises:
            HandleDisarmed: ownership was transferred away
            FlushError: the file could not be written
        """
        if self._path is None:
            raise HandleDisarmed("Handle no longer owns a backing file")
        try:
            return write_file(self.index, self._path)
        except (OSError, UnicodeError) as e:
            raise FlushError(str(self._path), e) from e

    flush = commit

    def close(self) -> None:
        """Flush and give up the backing file. No-op on a disarmed handle."""
        if self._path is None:
            return
        self.commit()
        self._path = None

    def transfer(self) -> IndexHandle:
        """Move the index and backing file into a new handle, disarming this one."""
        if self._path is None:
            raise HandleDisarmed("Handle no longer owns a backing file")
        moved = object.__new__(type(self))
        moved._path = self._path
        moved.index = self.index
        self._path = None
        return moved

    def __enter__(self) -> IndexHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._path is None:
            return
        try:
            self.commit()
        except FlushError:
            if exc_type is None:
                raise
            # The block's own exception takes precedence
            logger.exception("Index flush to %s failed during error exit", self._path)

    def __copy__(self):
        raise TypeError("IndexHandle cannot be copied; use transfer()")

    def __deepcopy__(self, memo):
        raise TypeError("IndexHandle cannot be copied; use transfer()")

    def __repr__(self) -> str:
        return f"IndexHandle(path={self._path!r}, index={self.index!r})"


def open_index(
    path: Path | str,
    strict: bool = False,
    hash_algorithm: str = DEFAULT_ALGORITHM,
) -> IndexHandle:
    """Open a filename-keyed index file."""
    return IndexHandle(path, Orientation.FILENAME, strict, hash_algorithm)


def open_commit_index(
    path: Path | str,
    strict: bool = False,
    hash_algorithm: str = DEFAULT_ALGORITHM,
) -> IndexHandle:
    """Open a hash-keyed commit index file."""
    return IndexHandle(path, Orientation.HASH, strict, hash_algorithm)
