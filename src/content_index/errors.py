"""Exceptions raised by Content Index."""


class ContentIndexError(Exception):
    """Base exception for content index errors."""

    pass


class FileNotReadable(ContentIndexError, OSError):
    """A file could not be opened for hashing."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot read file: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class KeyNotFound(ContentIndexError, KeyError):
    """A lookup key is not present in the index."""

    def __init__(self, key: str, role: str = "key"):
        self.key = key
        self.role = role
        super().__init__(f"No entry for {role} {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message
        return self.args[0]


class MalformedRecord(ContentIndexError, ValueError):
    """A persisted index line has no field separator."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed record on line {line_number}: {line!r}")


class HashCollisionError(ContentIndexError):
    """Several keys share a value and would collapse into one entry on conversion."""

    def __init__(self, value: str, keys: list[str]):
        self.value = value
        self.keys = keys
        super().__init__(f"{len(keys)} entries share {value!r}: {', '.join(keys)}")


class FlushError(ContentIndexError):
    """Writing the index back to disk failed."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write index to {path}: {cause}")


class ConfigError(ContentIndexError):
    """The project configuration could not be read or is invalid."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Invalid configuration in {path}: {cause}")


class HandleDisarmed(ContentIndexError):
    """The handle no longer owns a backing file."""

    pass


class DirectoryError(ContentIndexError):
    """A directory operation failed."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Directory operation failed on {path}: {cause}")


class PathOutsideProject(ContentIndexError):
    """A path given on the command line is not below the project root."""

    def __init__(self, path: str, project_root: str):
        self.path = path
        self.project_root = project_root
        super().__init__(f"{path} is outside the project at {project_root}")
