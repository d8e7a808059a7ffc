"""Content hashing for Content Index."""

import hashlib
from pathlib import Path

from .errors import FileNotReadable

DEFAULT_ALGORITHM = "sha256"
CHUNK_SIZE = 8192


def check_algorithm(algorithm: str) -> str:
    """Return the normalized algorithm name, raising ValueError if hashlib lacks it."""
    name = algorithm.lower()
    if name not in hashlib.algorithms_available:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    if name.startswith("shake_"):
        # Variable-length digests have no fixed width
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return name


def hash_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the hex digest of a byte string."""
    return hashlib.new(algorithm, data).hexdigest()


def compute_file_hash(filepath: Path | str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the hex digest of file contents.

    Only the bytes are hashed; name, size and mtime never contribute.

    Raises:
        FileNotReadable: if the file is missing, a directory, or unreadable
    """
    h = hashlib.new(algorithm)
    try:
        with open(filepath, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                h.update(chunk)
    except OSError as e:
        raise FileNotReadable(str(filepath), e.strerror or str(e)) from e
    return h.hexdigest()
