"""Bidirectional filename <-> content hash index for Content Index."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from pathlib import Path
from typing import Literal

from .dirops import list_files, should_exclude
from .errors import HashCollisionError, KeyNotFound
from .hasher import DEFAULT_ALGORITHM, compute_file_hash

logger = logging.getLogger(__name__)

CollisionPolicy = Literal["keep_last", "error"]


class Orientation(StrEnum):
    """Which attribute of an entry is the unique key."""

    FILENAME = auto()
    HASH = auto()

    @property
    def opposite(self) -> Orientation:
        return Orientation.HASH if self is Orientation.FILENAME else Orientation.FILENAME


@dataclass(frozen=True, order=True)
class Entry:
    """A filename and the hash of its content."""

    filename: str
    hash: str


@dataclass
class IndexDiff:
    """Result of comparing two indexes by filename."""

    new: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Check if there are any changes."""
        return bool(self.new or self.modified or self.deleted)

    @property
    def total_changes(self) -> int:
        """Total number of changed files."""
        return len(self.new) + len(self.modified) + len(self.deleted)


class ContentIndex:
    """
    Bidirectional mapping between filenames and content hashes.

    The orientation picks the unique key: filenames for the working index,
    hashes for the commit index. Lookups by the other attribute are served
    from a reverse index (value -> keys) kept in sync on every mutation.
    """

    def __init__(
        self,
        orientation: Orientation = Orientation.FILENAME,
        hash_algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.orientation = Orientation(orientation)
        self.hash_algorithm = hash_algorithm
        self._map: dict[str, str] = {}
        self._reverse: dict[str, set[str]] = {}

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Entry | tuple[str, str]],
        orientation: Orientation = Orientation.FILENAME,
        hash_algorithm: str = DEFAULT_ALGORITHM,
    ) -> ContentIndex:
        """Build an index from (filename, hash) pairs, later pairs overwriting earlier ones."""
        index = cls(orientation, hash_algorithm)
        for filename, file_hash in (
            (e.filename, e.hash) if isinstance(e, Entry) else e for e in entries
        ):
            index.set(filename, file_hash)
        return index

    # -- mutation -----------------------------------------------------------

    def add(self, filename: str | os.PathLike[str]) -> Entry:
        """
        Hash a file's current content and store the entry.

        The file is always re-read; size and mtime are never consulted, so
        the stored hash reflects the content at the time of this call.

        Raises:
            FileNotReadable: if the file cannot be opened
        """
        name = os.fspath(filename)
        file_hash = compute_file_hash(name, self.hash_algorithm)
        logger.debug("Hashed %s -> %s", name, file_hash)
        return self.set(name, file_hash)

    def add_many(self, filenames: Iterable[str | os.PathLike[str]]) -> list[Entry]:
        """Add each file in turn. Stops at the first unreadable file."""
        return [self.add(filename) for filename in filenames]

    def add_directory(
        self,
        directory: str | os.PathLike[str],
        exclude_patterns: list[str] | None = None,
    ) -> list[Entry]:
        """Add the regular files directly inside a directory (not recursive)."""
        directory = Path(directory)
        patterns = exclude_patterns or []
        added = []
        for name in list_files(directory):
            path = directory / name
            if should_exclude(path, patterns):
                continue
            added.append(self.add(path.as_posix()))
        return added

    def set(self, filename: str, file_hash: str) -> Entry:
        """Store a known (filename, hash) pair without reading the file."""
        key, value = self._key_value(filename, file_hash)
        if key in self._map:
            self._unlink(key, self._map[key])
        self._map[key] = value
        self._reverse.setdefault(value, set()).add(key)
        return Entry(filename, file_hash)

    def remove(self, key: str) -> Entry:
        """
        Remove the entry with the given primary key.

        Raises:
            KeyNotFound: if no entry has that key
        """
        if key not in self._map:
            raise KeyNotFound(key, self.orientation.value)
        value = self._map.pop(key)
        self._unlink(key, value)
        return self._entry(key, value)

    def clear(self) -> None:
        """Remove all entries."""
        self._map.clear()
        self._reverse.clear()

    # -- lookup -------------------------------------------------------------

    def lookup_primary(self, key: str) -> str:
        """
        Look up the value stored under a primary key.

        Raises:
            KeyNotFound: if the key is absent
        """
        try:
            return self._map[key]
        except KeyError:
            raise KeyNotFound(key, self.orientation.value) from None

    def lookup_secondary(self, value: str) -> str:
        """
        Look up the key stored for a value.

        When several keys share the value, the smallest key wins.

        Raises:
            KeyNotFound: if no entry has that value
        """
        keys = self._reverse.get(value)
        if not keys:
            raise KeyNotFound(value, self.orientation.opposite.value)
        return min(keys)

    def keys_for(self, value: str) -> list[str]:
        """All keys sharing a value, sorted. Empty if none."""
        return sorted(self._reverse.get(value, ()))

    def get_hash(self, filename: str) -> str:
        """Hash stored for a filename, whatever the orientation."""
        if self.orientation is Orientation.FILENAME:
            return self.lookup_primary(filename)
        return self.lookup_secondary(filename)

    def get_file(self, file_hash: str) -> str:
        """Filename stored for a hash, whatever the orientation."""
        if self.orientation is Orientation.HASH:
            return self.lookup_primary(file_hash)
        return self.lookup_secondary(file_hash)

    def exists(self, key: str) -> bool:
        """Check if a primary key is present."""
        return key in self._map

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    # -- iteration ----------------------------------------------------------

    def iterate(self) -> Iterator[Entry]:
        """Yield entries in ascending primary-key order.

        Each call starts a fresh pass over a snapshot of the current entries.
        """
        for key, value in sorted(self._map.items()):
            yield self._entry(key, value)

    def __iter__(self) -> Iterator[Entry]:
        return self.iterate()

    def entries(self) -> list[Entry]:
        return list(self.iterate())

    def as_filename_map(self) -> dict[str, str]:
        """View the index as filename -> hash.

        For a hash-keyed index, a filename stored under several hashes keeps
        the one that sorts last.
        """
        return {entry.filename: entry.hash for entry in self.iterate()}

    # -- conversion ---------------------------------------------------------

    def convert_orientation(self, on_collision: CollisionPolicy = "keep_last") -> ContentIndex:
        """
        Build the opposite-orientation index.

        Entries are re-inserted in ascending key order with roles swapped, so
        when several keys share a value only the last of them survives. With
        on_collision="error" that loss raises instead.

        Raises:
            HashCollisionError: on_collision is "error" and values repeat
        """
        collisions = {
            value: sorted(keys) for value, keys in sorted(self._reverse.items()) if len(keys) > 1
        }
        if collisions:
            if on_collision == "error":
                value, keys = next(iter(collisions.items()))
                raise HashCollisionError(value, keys)
            for value, keys in collisions.items():
                logger.warning(
                    "Entries %s share %r; keeping %s", ", ".join(keys[:-1]), value, keys[-1]
                )

        result = ContentIndex(self.orientation.opposite, self.hash_algorithm)
        for entry in self.iterate():
            result.set(entry.filename, entry.hash)
        return result

    def compare(self, other: ContentIndex) -> IndexDiff:
        """
        Compare this index (old) with another index (new) by filename.

        Args:
            other: The newer index (typically freshly hashed working files)

        Returns:
            IndexDiff with sorted lists of new, modified and deleted filenames
        """
        old = self.as_filename_map()
        new = other.as_filename_map()

        diff = IndexDiff()
        diff.new = sorted(new.keys() - old.keys())
        diff.deleted = sorted(old.keys() - new.keys())
        diff.modified = sorted(name for name in old.keys() & new.keys() if old[name] != new[name])
        return diff

    # -- helpers ------------------------------------------------------------

    def _key_value(self, filename: str, file_hash: str) -> tuple[str, str]:
        if self.orientation is Orientation.FILENAME:
            return filename, file_hash
        return file_hash, filename

    def _entry(self, key: str, value: str) -> Entry:
        if self.orientation is Orientation.FILENAME:
            return Entry(key, value)
        return Entry(value, key)

    def _unlink(self, key: str, value: str) -> None:
        keys = self._reverse[value]
        keys.discard(key)
        if not keys:
            del self._reverse[value]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentIndex):
            return NotImplemented
        return self.orientation is other.orientation and self._map == other._map

    def __repr__(self) -> str:
        return f"ContentIndex(orientation={self.orientation.value!r}, entries={len(self)})"
