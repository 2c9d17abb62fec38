"""In-memory file system — a node tree, path resolution, and shell-like operations.

Re-exports public symbols so callers can write::

    from py_memfs import FileSystem, PathNotFoundError
"""

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
from py_memfs.executor import ExecutionError, Executor, ExecutorConfig, SubprocessExecutor
from py_memfs.filesystem import FileSystem
from py_memfs.logging import LogEntry, Logger, LogLevel
from py_memfs.tree import Inode, NodeInfo, NodeTree, NodeType

__all__ = [
    "AlreadyExistsError",
    "CyclicMoveError",
    "DirectoryNotEmptyError",
    "ErrorKind",
    "ExecutionError",
    "Executor",
    "ExecutorConfig",
    "FileSystem",
    "FileSystemError",
    "Inode",
    "InvalidPathError",
    "IsDirectoryError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "NodeInfo",
    "NodeTree",
    "NodeType",
    "NotDirectoryError",
    "NotFileError",
    "PathNotFoundError",
    "SubprocessExecutor",
]
