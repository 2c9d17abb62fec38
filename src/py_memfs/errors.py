"""Error taxonomy for the in-memory file system.

Every failing operation raises exactly one of the classes below, and
each class names one *kind* of failure:

- ``InvalidPathError`` — empty, relative, or otherwise malformed path.
- ``PathNotFoundError`` — a component of the path does not exist.
- ``NotDirectoryError`` — a directory was required, a file was found.
- ``NotFileError`` — a file was required, a directory was found.
- ``IsDirectoryError`` — cannot overwrite a directory with file data.
- ``AlreadyExistsError`` — the destination name is already taken.
- ``DirectoryNotEmptyError`` — removal needs ``recursive=True``.
- ``CyclicMoveError`` — a directory cannot be moved inside itself.

Each class also inherits the closest builtin exception, so callers
that already handle ``FileNotFoundError`` or ``FileExistsError`` keep
working without importing anything from this package.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """The closed set of failure kinds."""

    INVALID_PATH = "invalid_path"
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_FILE = "not_a_file"
    IS_A_DIRECTORY = "is_a_directory"
    ALREADY_EXISTS = "already_exists"
    DIRECTORY_NOT_EMPTY = "directory_not_empty"
    CYCLIC_MOVE = "cyclic_move"


class FileSystemError(Exception):
    """Base class for every file system failure.

    Attributes:
        kind: Which failure this is (set per subclass).
        path: The path the failing operation was given, if any.

    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Store the message and the offending path."""
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        """Return only the message, even for OSError-derived kinds."""
        return str(self.args[0]) if self.args else ""


class InvalidPathError(FileSystemError, ValueError):
    """Raise when a path is empty, relative, or names no entry."""

    kind = ErrorKind.INVALID_PATH


class PathNotFoundError(FileSystemError, FileNotFoundError):
    """Raise when a path component does not exist."""

    kind = ErrorKind.NOT_FOUND


class NotDirectoryError(FileSystemError, NotADirectoryError):
    """Raise when a directory is required but a file was found."""

    kind = ErrorKind.NOT_A_DIRECTORY


class NotFileError(FileSystemError, OSError):
    """Raise when a file is required but a directory was found."""

    kind = ErrorKind.NOT_A_FILE


class IsDirectoryError(FileSystemError, IsADirectoryError):
    """Raise when file data would overwrite a directory."""

    kind = ErrorKind.IS_A_DIRECTORY


class AlreadyExistsError(FileSystemError, FileExistsError):
    """Raise when a copy or move destination is already occupied."""

    kind = ErrorKind.ALREADY_EXISTS


class DirectoryNotEmptyError(FileSystemError, OSError):
    """Raise when removing a non-empty directory without ``recursive``."""

    kind = ErrorKind.DIRECTORY_NOT_EMPTY


class CyclicMoveError(FileSystemError, OSError):
    """Raise when a directory would be moved into its own subtree."""

    kind = ErrorKind.CYCLIC_MOVE
