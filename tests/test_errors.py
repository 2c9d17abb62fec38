"""Tests for the error taxonomy.

Each failure kind is its own exception class, and each one is also a
familiar builtin so ordinary ``except`` clauses keep working.
"""

import pytest

from py_memfs.errors import (
    AlreadyExistsError,
    CyclicMoveError,
    DirectoryNotEmptyError,
    ErrorKind,
    FileSystemError,
    InvalidPathError,
    IsDirectoryError,
    NotDirectoryError,
    NotFileError,
    PathNotFoundError,
)

ALL_ERRORS: list[type[FileSystemError]] = [
    InvalidPathError,
    PathNotFoundError,
    NotDirectoryError,
    NotFileError,
    IsDirectoryError,
    AlreadyExistsError,
    DirectoryNotEmptyError,
    CyclicMoveError,
]


class TestErrorKinds:
    """Verify the kind attached to each class."""

    def test_every_kind_has_a_class(self) -> None:
        """The eight kinds map one-to-one onto the eight classes."""
        assert {cls.kind for cls in ALL_ERRORS} == set(ErrorKind)

    @pytest.mark.parametrize("cls", ALL_ERRORS)
    def test_all_share_the_base(self, cls: type[FileSystemError]) -> None:
        """Every error can be caught as FileSystemError."""
        with pytest.raises(FileSystemError, match="boom"):
            raise cls("boom", path="/x")


class TestBuiltinCompatibility:
    """Verify the builtin parents."""

    def test_not_found_is_file_not_found(self) -> None:
        """PathNotFoundError is a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            raise PathNotFoundError("missing", path="/nope")

    def test_already_exists_is_file_exists(self) -> None:
        """AlreadyExistsError is a FileExistsError."""
        assert issubclass(AlreadyExistsError, FileExistsError)

    def test_directory_kinds(self) -> None:
        """Directory mismatches derive from the matching builtins."""
        assert issubclass(NotDirectoryError, NotADirectoryError)
        assert issubclass(IsDirectoryError, IsADirectoryError)

    def test_invalid_path_is_value_error(self) -> None:
        """InvalidPathError is a ValueError."""
        assert issubclass(InvalidPathError, ValueError)


class TestErrorFields:
    """Verify message and path handling."""

    def test_message_and_path(self) -> None:
        """str() is just the message and path is kept as an attribute."""
        err = NotFileError("Path is not a file: /docs", path="/docs")
        assert str(err) == "Path is not a file: /docs"
        assert err.path == "/docs"

    def test_path_defaults_to_none(self) -> None:
        """path is optional."""
        assert CyclicMoveError("loop").path is None
