"""In-memory file system with shell-like operations.

``FileSystem`` is the public face of the package.  It turns path
strings into nodes of a ``NodeTree`` and applies one mutation per call:

- **Resolution**: ``/home/user/notes.txt`` is walked component by
  component from the root.  Empty components and ``.`` are skipped,
  ``..`` climbs to the parent and stops at the root.  A file in the
  middle of a path is an error; a missing name is an error.

- **Creation targets**: operations that create or remove an entry
  split the path at its last ``/`` into a parent directory (which
  must exist) and a final name.

- **Destinations**: ``cp`` and ``mv`` accept either an existing
  directory (the entry keeps its name and goes *into* it) or a new
  path (the entry is created *as* it).

Every operation checks everything it needs before touching the tree,
so a failing call leaves the tree exactly as it found it.  The one
deliberate exception is ``mkdir``: directories created on the way to a
failing component stay, as with ``mkdir -p``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeAlias

from py_memfs.errors import (
    AlreadyExistsError,
    CyclicMoveError,
    DirectoryNotEmptyError,
    FileSystemError,
    InvalidPathError,
    IsDirectoryError,
    NotDirectoryError,
    NotFileError,
    PathNotFoundError,
)
from py_memfs.executor import ExecutionError, Executor, SubprocessExecutor
from py_memfs.logging import Logger, LogLevel
from py_memfs.tree import ROOT_NAME, Inode, NodeInfo, NodeTree, NodeType

ROOT_PATH = "/"
SEPARATOR = "/"
CURRENT_DIR = "."
PARENT_DIR = ".."
DIR_MARKER = "/"

_FS_SOURCE = "fs"
_EXEC_SOURCE = "exec"

Content: TypeAlias = bytes | bytearray | memoryview | str


def _to_bytes(data: Content) -> bytes:
    """Normalise file content; text is stored as UTF-8."""
    if isinstance(data, str):
        return data.encode()
    return bytes(data)


def _components(path: str) -> list[str]:
    """Split an absolute path into its non-empty components."""
    return [part for part in path.split(SEPARATOR) if part]


class FileSystem:
    """A hierarchical file system that lives entirely in memory.

    All paths are absolute.  Content is stored as immutable ``bytes``,
    so reading a file always hands back an independent value.

    Not thread-safe: there is no internal locking.  If several threads
    share one instance, the caller must serialise every call (one
    mutator at a time, no readers during a mutation).
    """

    def __init__(
        self,
        *,
        logger: Logger | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Create a file system holding only an empty root directory.

        Args:
            logger: Where mutations are recorded (a fresh ``Logger`` if omitted).
            executor: Default collaborator for ``execute`` (a
                ``SubprocessExecutor`` if omitted).

        """
        self._tree = NodeTree()
        self._logger = logger if logger is not None else Logger()
        self._executor: Executor = executor if executor is not None else SubprocessExecutor()

    @property
    def tree(self) -> NodeTree:
        """Return the underlying node tree."""
        return self._tree

    @property
    def logger(self) -> Logger:
        """Return the audit logger."""
        return self._logger

    def dmesg(self) -> list[str]:
        """Return the audit log as formatted lines."""
        return self._logger.lines()

    def _log(self, message: str, *, level: LogLevel = LogLevel.INFO) -> None:
        self._logger.log(level, message, source=_FS_SOURCE)

    # -- Resolution -----------------------------------------------------------

    def _lookup(self, path: str) -> Inode | FileSystemError:
        """Walk *path* from the root.

        Returns the node, or the error describing why the walk stopped.
        Nothing is raised here, which lets ``exists`` stay exception-free.
        """
        if not path:
            return InvalidPathError("Path cannot be empty", path=path)
        if not path.startswith(SEPARATOR):
            return InvalidPathError(f"Paths must be absolute (start with '/'): {path}", path=path)

        current = self._tree.root
        for part in _components(path):
            if not current.is_dir:
                return NotDirectoryError(
                    f"Path component is not a directory: {current.name}",
                    path=path,
                )
            if part == CURRENT_DIR:
                continue
            if part == PARENT_DIR:
                current = self._tree.parent_of(current) or current
                continue
            child = self._tree.child(current, part)
            if child is None:
                return PathNotFoundError(f"Path not found: {path}", path=path)
            current = child
        return current

    def resolve(self, path: str) -> Inode:
        """Return the node at *path*.

        Raises:
            InvalidPathError: If *path* is empty or relative.
            PathNotFoundError: If a component does not exist.
            NotDirectoryError: If a file appears before the last component.

        """
        found = self._lookup(path)
        if isinstance(found, FileSystemError):
            raise found
        return found

    def resolve_parent_and_name(self, path: str) -> tuple[Inode, str]:
        """Split *path* into its (existing) parent directory and final name.

        ``"/docs/readme.txt"`` → (``/docs`` node, ``"readme.txt"``).

        Raises:
            InvalidPathError: If *path* is root, relative, ends with ``/``,
                or ends with ``.`` / ``..``.
            PathNotFoundError: If the parent does not exist.
            NotDirectoryError: If the parent is a file.

        """
        if not path or path == ROOT_PATH:
            msg = f"Invalid path for child creation: {path!r}"
            raise InvalidPathError(msg, path=path)
        last_slash = path.rfind(SEPARATOR)
        if last_slash == -1 or not path.startswith(SEPARATOR):
            msg = f"Paths must be absolute (start with '/'): {path}"
            raise InvalidPathError(msg, path=path)

        parent_path = ROOT_PATH if last_slash == 0 else path[:last_slash]
        name = path[last_slash + 1 :]
        if not name:
            msg = f"Path cannot end with a slash for this operation: {path}"
            raise InvalidPathError(msg, path=path)
        if name in (CURRENT_DIR, PARENT_DIR):
            msg = f"Path must end with an entry name: {path}"
            raise InvalidPathError(msg, path=path)

        parent = self.resolve(parent_path)
        if not parent.is_dir:
            msg = f"Parent path is not a directory: {parent_path}"
            raise NotDirectoryError(msg, path=path)
        return parent, name

    def resolve_destination(self, dest_path: str, source_name: str) -> tuple[Inode, str]:
        """Work out where ``cp``/``mv`` should put an entry named *source_name*.

        - Existing directory → inside it, keeping *source_name*.
        - Existing file → refused.
        - Nothing there yet → created as *dest_path* itself.

        Only a missing *final* component counts as "nothing there";
        a missing directory earlier in *dest_path* is still an error.

        Raises:
            AlreadyExistsError: If the chosen name is already taken.
            InvalidPathError: If the root would have to be placed by name.

        """
        found = self._lookup(dest_path)
        if isinstance(found, PathNotFoundError):
            return self.resolve_parent_and_name(dest_path)
        if isinstance(found, FileSystemError):
            raise found
        if not found.is_dir:
            msg = f"Destination file already exists: {dest_path}"
            raise AlreadyExistsError(msg, path=dest_path)
        if source_name == ROOT_NAME:
            msg = f"The root directory has no name to place inside {dest_path}"
            raise InvalidPathError(msg, path=dest_path)
        if source_name in found.children:
            msg = f"Destination '{dest_path.rstrip(SEPARATOR)}/{source_name}' already exists"
            raise AlreadyExistsError(msg, path=dest_path)
        return found, source_name

    # -- Creation -------------------------------------------------------------

    def mkdir(self, path: str) -> None:
        """Create the directory at *path* and any missing parents.

        Existing directories along the way are reused, so calling this
        again with the same path does nothing.

        Raises:
            InvalidPathError: If *path* is empty or relative.
            NotDirectoryError: If a file occupies a needed component.

        """
        if not path.startswith(SEPARATOR):
            msg = f"Paths must be absolute (start with '/'): {path!r}"
            raise InvalidPathError(msg, path=path)

        current = self._tree.root
        for part in _components(path):
            if part == CURRENT_DIR:
                continue
            if part == PARENT_DIR:
                current = self._tree.parent_of(current) or current
                continue
            child = self._tree.child(current, part)
            if child is None:
                child = self._tree.create(current, part, NodeType.DIRECTORY)
                self._log(f"mkdir {self._tree.path_of(child)}")
            elif not child.is_dir:
                msg = f"A file exists at path component: {part}"
                raise NotDirectoryError(msg, path=path)
            current = child

    def touch(self, path: str) -> None:
        """Create an empty file at *path*; leave an existing file alone.

        Raises:
            NotFileError: If a directory already has that name.

        """
        parent, name = self.resolve_parent_and_name(path)
        existing = self._tree.child(parent, name)
        if existing is not None:
            if existing.is_dir:
                msg = f"Cannot touch '{path}', a directory with that name exists"
                raise NotFileError(msg, path=path)
            return
        self._tree.create(parent, name, NodeType.FILE)
        self._log(f"touch {path}")

    def write_file(self, path: str, data: Content) -> None:
        """Create or overwrite the file at *path* with *data*.

        ``str`` data is encoded as UTF-8.

        Raises:
            IsDirectoryError: If a directory already has that name.

        """
        parent, name = self.resolve_parent_and_name(path)
        content = _to_bytes(data)
        existing = self._tree.child(parent, name)
        if existing is None:
            self._tree.create(parent, name, NodeType.FILE, content)
        elif existing.is_dir:
            msg = f"Cannot write to '{name}', it is a directory"
            raise IsDirectoryError(msg, path=path)
        else:
            existing.data = content
        self._log(f"write {path} ({len(content)} bytes)")

    def append(self, path: str, data: Content) -> None:
        """Append *data* to the end of an existing file.

        Raises:
            PathNotFoundError: If the file does not exist.
            NotFileError: If *path* is a directory.

        """
        node = self._require_file(path)
        content = _to_bytes(data)
        node.data += content
        self._log(f"append {path} ({len(content)} bytes)")

    # -- Reading --------------------------------------------------------------

    def _require_file(self, path: str) -> Inode:
        node = self.resolve(path)
        if node.is_dir:
            msg = f"Path is not a file: {path}"
            raise NotFileError(msg, path=path)
        return node

    def cat(self, path: str) -> bytes:
        """Return the content of the file at *path*.

        Raises:
            PathNotFoundError: If the file does not exist.
            NotFileError: If *path* is a directory.

        """
        return self._require_file(path).data

    def cat_text(self, path: str, encoding: str = "utf-8") -> str:
        """Return the content of the file at *path* decoded as text."""
        return self.cat(path).decode(encoding)

    def ls(self, path: str) -> list[str]:
        """List a directory, marking subdirectories with a trailing ``/``.

        The result is sorted, so it never depends on insertion order.

        Raises:
            NotDirectoryError: If *path* is a file.

        """
        node = self.resolve(path)
        if not node.is_dir:
            msg = f"Path is not a directory: {path}"
            raise NotDirectoryError(msg, path=path)
        return sorted(
            child.name + DIR_MARKER if child.is_dir else child.name
            for child in self._tree.children(node)
        )

    def exists(self, path: str) -> bool:
        """Check whether *path* resolves; never raises."""
        return not isinstance(self._lookup(path), FileSystemError)

    def is_file(self, path: str) -> bool:
        """Check whether *path* resolves to a file; never raises."""
        found = self._lookup(path)
        return not isinstance(found, FileSystemError) and not found.is_dir

    def is_dir(self, path: str) -> bool:
        """Check whether *path* resolves to a directory; never raises."""
        found = self._lookup(path)
        return not isinstance(found, FileSystemError) and found.is_dir

    def node_type(self, path: str) -> NodeType:
        """Return whether *path* is a file or a directory."""
        return self.resolve(path).node_type

    def size(self, path: str) -> int:
        """Return the byte size of *path*; directories sum their contents."""
        return self._tree.size(self.resolve(path))

    def stat(self, path: str) -> NodeInfo:
        """Return a metadata snapshot for *path*."""
        return self._tree.info(self.resolve(path))

    def walk(self, path: str = ROOT_PATH) -> Iterator[tuple[str, NodeType]]:
        """Iterate ``(path, type)`` for *path* and everything below it.

        *path* is resolved before this returns, so a bad path raises here
        rather than on the first ``next()``.  Entries come depth-first
        with siblings in name order.  The tree must not be mutated while
        the iterator is being consumed.
        """
        node = self.resolve(path)
        return ((node_path, found.node_type) for node_path, found in self._tree.walk(node))

    # -- Removal, copy, move --------------------------------------------------

    def rm(self, path: str, *, recursive: bool = False) -> None:
        """Remove the file or directory at *path*.

        Args:
            path: Absolute path to remove.
            recursive: Allow removing a non-empty directory and everything in it.

        Raises:
            InvalidPathError: If *path* is the root or its last component is
                ``.`` or ``..``.
            PathNotFoundError: If nothing exists at *path*.
            DirectoryNotEmptyError: If *path* is a non-empty directory and
                *recursive* is False.

        """
        if path == ROOT_PATH:
            msg = "Cannot remove the root directory"
            raise InvalidPathError(msg, path=path)
        parent, name = self.resolve_parent_and_name(path)
        node = self._tree.child(parent, name)
        if node is None:
            msg = f"Path not found: {path}"
            raise PathNotFoundError(msg, path=path)
        if node.is_dir and node.children and not recursive:
            self._log(f"rm refused, directory not empty: {path}", level=LogLevel.WARNING)
            msg = f"Directory not empty, use recursive flag: {path}"
            raise DirectoryNotEmptyError(msg, path=path)
        dropped = self._tree.release(node)
        self._log(f"rm {path} ({dropped} nodes)")

    def cp(self, src: str, dest: str) -> None:
        """Copy *src* to *dest*, duplicating whole directory trees.

        If *dest* is an existing directory the copy goes inside it under
        the source's name; otherwise *dest* names the copy.

        Raises:
            PathNotFoundError: If *src* does not exist.
            AlreadyExistsError: If the destination is taken.

        """
        source = self.resolve(src)
        target_dir, name = self.resolve_destination(dest, source.name)
        if name in target_dir.children:
            msg = f"Destination already exists: {self._tree.path_of(target_dir)}/{name}"
            raise AlreadyExistsError(msg, path=dest)
        copy = self._tree.copy_subtree(source, target_dir, name)
        self._log(f"cp {src} -> {self._tree.path_of(copy)}")

    def mv(self, src: str, dest: str) -> None:
        """Move or rename *src* to *dest* without copying any content.

        Raises:
            InvalidPathError: If *src* is the root.
            PathNotFoundError: If *src* does not exist.
            AlreadyExistsError: If the destination is taken.
            CyclicMoveError: If a directory would end up inside itself.

        """
        if src == ROOT_PATH:
            msg = "Cannot move the root directory"
            raise InvalidPathError(msg, path=src)
        source = self.resolve(src)
        if source is self._tree.root:
            msg = f"Cannot move the root directory: {src}"
            raise InvalidPathError(msg, path=src)

        target_dir, name = self.resolve_destination(dest, source.name)
        if self._tree.is_ancestor(source, target_dir):
            self._log(f"mv refused, {dest} is inside {src}", level=LogLevel.WARNING)
            msg = f"Cannot move a directory into itself: {src} -> {dest}"
            raise CyclicMoveError(msg, path=src)
        if name in target_dir.children:
            msg = f"Destination already exists: {self._tree.path_of(target_dir)}/{name}"
            raise AlreadyExistsError(msg, path=dest)

        self._tree.detach(source)
        self._tree.attach(source, target_dir, name)
        self._log(f"mv {src} -> {self._tree.path_of(source)}")

    # -- Execution ------------------------------------------------------------

    def execute(self, path: str, executor: Executor | None = None) -> int:
        """Run the file at *path* through an executor and return its exit code.

        The tree is not modified.

        Args:
            path: Absolute path to the file to run.
            executor: Use this instead of the instance's default executor.

        Raises:
            PathNotFoundError: If the file does not exist.
            NotFileError: If *path* is a directory.
            ExecutionError: If the executor cannot run the file.

        """
        node = self._require_file(path)
        runner = executor if executor is not None else self._executor
        try:
            exit_code = runner.run(node.data, node.name)
        except ExecutionError as exc:
            self._logger.log(LogLevel.ERROR, f"{path}: {exc}", source=_EXEC_SOURCE)
            raise
        self._logger.log(LogLevel.INFO, f"{path} exited with {exit_code}", source=_EXEC_SOURCE)
        return exit_code

    # -- Shell-style aliases --------------------------------------------------

    def dir(self, path: str) -> list[str]:  # noqa: A003
        """Alias for ``ls``."""
        return self.ls(path)

    def del_(self, path: str, *, recursive: bool = False) -> None:
        """Alias for ``rm`` (``del`` is a Python keyword)."""
        self.rm(path, recursive=recursive)

    def ren(self, src: str, dest: str) -> None:
        """Alias for ``mv``."""
        self.mv(src, dest)

    def type(self, path: str) -> str:  # noqa: A003
        """Alias for ``cat_text``."""
        return self.cat_text(path)
