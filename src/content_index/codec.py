"""Flat text serialization of a ContentIndex.

Each entry is one line, ``filename,hash``, in ascending primary-key order.
Both orientations share the same field layout; only the line order differs.
Fields are not escaped, so a filename containing a comma does not survive a
round trip.
"""

import io
import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import IO

from .errors import FileNotReadable, MalformedRecord
from .hasher import DEFAULT_ALGORITHM
from .index import ContentIndex, Entry, Orientation

logger = logging.getLogger(__name__)

SEPARATOR = ","

# Filenames that are not valid UTF-8 arrive surrogate-escaped from os.fsdecode
ENCODING_ERRORS = "surrogateescape"


def format_record(entry: Entry) -> str:
    """Render one entry as a record line, including the newline."""
    return f"{entry.filename}{SEPARATOR}{entry.hash}\n"


def parse_record(line: str, line_number: int = 0, strict: bool = False) -> Entry:
    """
    Split a record line on its first separator.

    A line without a separator becomes an entry with an empty hash, unless
    strict is set.

    Raises:
        MalformedRecord: strict is set and the line has no separator
    """
    filename, sep, file_hash = line.partition(SEPARATOR)
    if not sep:
        if strict:
            raise MalformedRecord(line_number, line)
        logger.warning("Line %d has no separator, loading with empty hash: %r", line_number, line)
    return Entry(filename, file_hash)


def dump(index: ContentIndex, stream: IO[str]) -> int:
    """Write every entry to a text stream. Returns the number of records."""
    count = 0
    for entry in index.iterate():
        stream.write(format_record(entry))
        count += 1
    return count


def dumps(index: ContentIndex) -> str:
    """Serialize an index to a string."""
    return "".join(format_record(entry) for entry in index.iterate())


def load(
    stream: Iterable[str],
    orientation: Orientation = Orientation.FILENAME,
    strict: bool = False,
    hash_algorithm: str = DEFAULT_ALGORITHM,
) -> ContentIndex:
    """
    Read records until the stream is exhausted.

    Blank lines are skipped. Later records overwrite earlier ones with the
    same primary key.

    Raises:
        MalformedRecord: strict is set and a line has no separator
    """
    index = ContentIndex(orientation, hash_algorithm)
    for line_number, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        if not line:
            continue
        entry = parse_record(line, line_number, strict)
        index.set(entry.filename, entry.hash)
    return index


def loads(
    text: str,
    orientation: Orientation = Orientation.FILENAME,
    strict: bool = False,
    hash_algorithm: str = DEFAULT_ALGORITHM,
) -> ContentIndex:
    """Deserialize an index from a string."""
    return load(io.StringIO(text, newline=""), orientation, strict, hash_algorithm)


def load_file(
    path: Path | str,
    orientation: Orientation = Orientation.FILENAME,
    strict: bool = False,
    hash_algorithm: str = DEFAULT_ALGORITHM,
) -> ContentIndex:
    """
    Load an index file. A missing file yields an empty index.

    Raises:
        FileNotReadable: the path exists but cannot be read as a file
        MalformedRecord: strict is set and a line has no separator
    """
    path = Path(path)
    if not path.exists():
        logger.debug("No index at %s, starting empty", path)
        return ContentIndex(orientation, hash_algorithm)

    try:
        with open(path, encoding="utf-8", errors=ENCODING_ERRORS, newline="") as f:
            index = load(f, orientation, strict, hash_algorithm)
    except OSError as e:
        raise FileNotReadable(str(path), e.strerror or str(e)) from e
    logger.debug("Loaded %d entries from %s", len(index), path)
    return index


def write_file(index: ContentIndex, path: Path | str) -> int:
    """
    Replace the file's contents with the serialized index.

    The records go to a temporary file in the same directory which then
    replaces the target, so readers never see a partial index. The target
    keeps its permission bits; a new file gets the umask default.

    Returns:
        Number of records written

    Raises:
        OSError: the file could not be written
        UnicodeEncodeError: a field holds a lone surrogate that is not an
            escaped filename byte
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", errors=ENCODING_ERRORS, newline="") as f:
            count = dump(index, f)
        if path.exists():
            shutil.copymode(path, temp_path)
        else:
            os.chmod(temp_path, 0o666 & ~_current_umask())
        os.replace(temp_path, path)
    except BaseException:
        # Clean up temp file on error
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise

    logger.debug("Wrote %d entries to %s", count, path)
    return count


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask
