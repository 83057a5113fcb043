"""Node representation for cached file system entries in the tree."""

import logging
from typing import Any, Optional

from anytree import NodeMixin

from dirshell.file_system_tree.file_entry import FileEntry

logger = logging.getLogger(__name__)


class FileSystemNode(NodeMixin):  # type: ignore
    """Node class representing one cached file or directory.

    Extends anytree.NodeMixin with a FileEntry payload and an explicit ``fetched``
    flag. Children are owned exclusively by their parent; the parent reference is
    used only for upward lookup. Equality and hashing are delegated to the
    payload, so a node compares equal to any other node for the same path.

    Attributes:
        entry (FileEntry): Snapshot of the filesystem entry this node mirrors.
        fetched (bool): True once the directory's children have been listed from
            disk. Distinguishes a confirmed-empty directory from an unvisited one.
        parent (Optional[FileSystemNode]): The parent node (inherited from anytree).
        children (tuple[FileSystemNode]): The child nodes (inherited from anytree).

    Example:
        >>> root = FileSystemNode(FileEntry("/home/u", is_dir=True))
        >>> child = FileSystemNode(FileEntry("/home/u/a.txt", size=10), parent=root)
        >>> child.name
        'a.txt'
        >>> child.parent is root
        True
    """

    def __init__(self, entry: FileEntry, parent: Optional["FileSystemNode"] = None) -> None:
        """Initialize a FileSystemNode.

        Args:
            entry: The filesystem entry this node mirrors.
            parent: The parent node. Defaults to None.
        """
        super().__init__()
        self.entry = entry
        self.fetched = False
        self.parent = parent

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def absolute_path(self) -> str:
        return self.entry.absolute_path

    @property
    def is_dir(self) -> bool:
        return self.entry.is_dir

    @property
    def size(self) -> int:
        return self.entry.size

    def child(self, name: str) -> Optional["FileSystemNode"]:
        """Return the direct child with the given name, matched case-sensitively."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def clear(self) -> None:
        """Discard all cached descendants and mark the node unfetched.

        The node itself stays attached to its parent. Detached descendants are
        no longer reachable from the tree and are rebuilt from disk on the next
        fetch.
        """
        if self.children:
            logger.debug("Clearing %d cached children of %s", len(self.children), self.absolute_path)
        self.children = ()
        self.fetched = False

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FileSystemNode):
            return False
        return self.entry == other.entry

    def __hash__(self) -> int:
        return hash(self.entry)

    def __repr__(self) -> str:
        return f"FileSystemNode({self.entry!r}, fetched={self.fetched})"
