"""Node tree — the inode table behind the in-memory file system.

The tree is an **arena**: a single ``dict[int, Inode]`` owns every
node, and nodes refer to each other only by inode number.

- **Inode**: one record per file or directory.  Files keep their bytes
  in ``data``; directories keep a ``dict[str, int]`` of children.
- **Parent link**: every inode except the root stores its parent's
  inode number.  It is a back-reference for walking *up* the tree
  (``..``, moves, removals) and never keeps anything alive, since the
  table alone decides what exists.
- **Name**: each inode also remembers its own name, which must always
  equal the key its parent files it under.

This module knows nothing about path strings.  ``FileSystem`` in
``py_memfs.filesystem`` parses paths and then calls the structural
operations here (create, attach, detach, release, copy).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import count

ROOT_NAME = "/"


class NodeType(StrEnum):
    """The two kinds of node; the set is closed."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class NodeInfo:
    """Read-only snapshot of a node's metadata (returned by stat)."""

    inode_number: int
    name: str
    node_type: NodeType
    size: int


@dataclass
class Inode:
    """One file or directory in the inode table.

    ``parent`` is ``None`` only for the root.
    """

    inode_number: int
    node_type: NodeType
    name: str
    parent: int | None = None
    data: bytes = b""
    children: dict[str, int] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]

    @property
    def is_dir(self) -> bool:
        """Return True for directories."""
        return self.node_type is NodeType.DIRECTORY


@dataclass(frozen=True)
class _CopyStep:
    """One node of a subtree captured before a copy.

    ``parent`` indexes an earlier step in the same plan; ``None`` marks
    the top of the copy.
    """

    parent: int | None
    name: str
    node_type: NodeType
    data: bytes = b""


class NodeTree:
    """Own every node of one file system and keep the links consistent.

    Structural invariants, true between any two calls:

    - ``table[n.parent].children[n.name] == n.inode_number`` for every
      non-root node ``n``.
    - Every inode in the table is reachable from the root.
    - Inode numbers are never reused within one tree.
    """

    def __init__(self) -> None:
        """Create a tree holding only an empty root directory."""
        self._numbers = count(start=0)
        root = Inode(
            inode_number=next(self._numbers),
            node_type=NodeType.DIRECTORY,
            name=ROOT_NAME,
        )
        self._inodes: dict[int, Inode] = {root.inode_number: root}
        self._root_ino = root.inode_number

    @property
    def root(self) -> Inode:
        """Return the root directory."""
        return self._inodes[self._root_ino]

    def get(self, inode_number: int) -> Inode:
        """Return the live inode with this number.

        Raises:
            KeyError: If the inode was released or never existed.

        """
        return self._inodes[inode_number]

    def parent_of(self, node: Inode) -> Inode | None:
        """Return the directory holding *node*, or None for the root."""
        if node.parent is None:
            return None
        return self._inodes[node.parent]

    def child(self, directory: Inode, name: str) -> Inode | None:
        """Look up *name* inside *directory*."""
        child_ino = directory.children.get(name)
        if child_ino is None:
            return None
        return self._inodes[child_ino]

    def children(self, directory: Inode) -> list[Inode]:
        """Return the children of *directory* sorted by name."""
        return [self._inodes[directory.children[name]] for name in sorted(directory.children)]

    # -- Mutation -------------------------------------------------------------

    def create(
        self,
        parent: Inode,
        name: str,
        node_type: NodeType,
        data: bytes = b"",
    ) -> Inode:
        """Allocate a new inode and link it under *parent* as *name*.

        The caller has already checked that *name* is free.
        """
        node = Inode(
            inode_number=next(self._numbers),
            node_type=node_type,
            name=name,
            data=data,
        )
        self._inodes[node.inode_number] = node
        self.attach(node, parent, name)
        return node

    def attach(self, node: Inode, parent: Inode, name: str) -> None:
        """Link a detached *node* under *parent*, renaming it to *name*."""
        node.parent = parent.inode_number
        node.name = name
        parent.children[name] = node.inode_number

    def detach(self, node: Inode) -> None:
        """Unlink *node* from its parent; the node stays in the table."""
        parent = self.parent_of(node)
        if parent is not None:
            del parent.children[node.name]
        node.parent = None

    def release(self, node: Inode) -> int:
        """Detach *node* and drop it and all its descendants.

        Returns:
            The number of inodes dropped.

        """
        self.detach(node)
        dropped = 0
        stack = [node]
        while stack:
            current = stack.pop()
            stack.extend(self._inodes[ino] for ino in current.children.values())
            del self._inodes[current.inode_number]
            dropped += 1
        return dropped

    def copy_subtree(self, source: Inode, parent: Inode, name: str) -> Inode:
        """Deep-copy *source* under *parent* as *name* and return the copy.

        The whole source layout is captured before anything is linked,
        so copying a directory into its own subtree never copies the copy.
        """
        made: list[Inode] = []
        for step in self._plan_copy(source, name):
            target = parent if step.parent is None else made[step.parent]
            made.append(self.create(target, step.name, step.node_type, step.data))
        return made[0]

    def _plan_copy(self, source: Inode, name: str) -> list[_CopyStep]:
        """Flatten the subtree at *source* into pre-order creation steps."""
        plan: list[_CopyStep] = []
        stack: list[tuple[int | None, str, Inode]] = [(None, name, source)]
        while stack:
            parent_index, step_name, node = stack.pop()
            plan.append(_CopyStep(parent_index, step_name, node.node_type, node.data))
            index = len(plan) - 1
            stack.extend((index, child.name, child) for child in reversed(self.children(node)))
        return plan

    # -- Queries --------------------------------------------------------------

    def size(self, node: Inode) -> int:
        """Return the byte size of *node*, summing every file beneath directories."""
        total = 0
        stack = [node]
        while stack:
            current = stack.pop()
            match current.node_type:
                case NodeType.FILE:
                    total += len(current.data)
                case NodeType.DIRECTORY:
                    stack.extend(self._inodes[ino] for ino in current.children.values())
        return total

    def is_ancestor(self, candidate: Inode, node: Inode) -> bool:
        """Return True if *candidate* is *node* or lies on its parent chain."""
        current: Inode | None = node
        while current is not None:
            if current is candidate:
                return True
            current = self.parent_of(current)
        return False

    def path_of(self, node: Inode) -> str:
        """Build the absolute path of *node* by walking up to the root."""
        names: list[str] = []
        current = node
        while current.parent is not None:
            names.append(current.name)
            current = self._inodes[current.parent]
        return "/" + "/".join(reversed(names))

    def walk(self, node: Inode) -> Iterator[tuple[str, Inode]]:
        """Yield ``(path, inode)`` depth-first, *node* first, children sorted."""
        stack = [(self.path_of(node), node)]
        while stack:
            path, current = stack.pop()
            yield path, current
            prefix = path.rstrip("/") + "/"
            stack.extend((prefix + child.name, child) for child in reversed(self.children(current)))

    def info(self, node: Inode) -> NodeInfo:
        """Create a read-only snapshot of *node*."""
        return NodeInfo(
            inode_number=node.inode_number,
            name=node.name,
            node_type=node.node_type,
            size=self.size(node),
        )

    def __len__(self) -> int:
        """Return the number of live inodes, root included."""
        return len(self._inodes)
