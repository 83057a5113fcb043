"""Generic n-ary tree of cached filesystem entries.

This module provides the FileSystemTree class, which owns the root node of the
cache and offers search, insertion, iteration and rendering over whatever part
of the filesystem has been fetched so far. It never touches the disk itself.
"""

import logging
from typing import Iterator, Optional

from dirshell.file_system_tree.file_entry import FileEntry
from dirshell.file_system_tree.file_system_node import FileSystemNode

logger = logging.getLogger(__name__)


class FileSystemTree:
    """An n-ary tree of FileSystemNode objects with a single root.

    The tree owns its root; every other node is owned by its parent. Traversals
    use an explicit stack so that deep directory hierarchies cannot exhaust the
    interpreter's recursion limit.

    Attributes:
        root (FileSystemNode): The root node. Its absolute path is the path the
            tree was built from.

    Example:
        >>> tree = FileSystemTree(FileEntry("/home/u", is_dir=True))
        >>> docs = tree.insert(tree.root, FileEntry("/home/u/docs", is_dir=True))
        >>> tree.search(FileEntry("/home/u/docs")) is docs
        True
    """

    def __init__(self, root_entry: FileEntry) -> None:
        """Initialize a one-node tree.

        Args:
            root_entry: The entry for the root node.
        """
        self.root = FileSystemNode(root_entry)

    def contains(self, node: FileSystemNode) -> bool:
        """Check whether a node is currently attached to this tree."""
        return node.root is self.root

    def search(self, entry: FileEntry) -> Optional[FileSystemNode]:
        """Find the first node whose entry equals the query.

        Scans the cached tree depth-first in pre-order. Only nodes that have
        already been fetched are visited; the disk is never consulted.

        Args:
            entry: The entry to look for. Only its absolute path matters.

        Returns:
            The matching node, or None if no cached node has that path.
        """
        for node in self.iter_preorder():
            if node.entry == entry:
                return node
        return None

    def insert(self, parent: FileSystemNode, entry: FileEntry) -> Optional[FileSystemNode]:
        """Append a new child node to a parent.

        Args:
            parent: The node that will own the new child. Must belong to this tree.
            entry: The entry for the new child.

        Returns:
            The new node, or None if the parent is not part of this tree.
        """
        if not self.contains(parent):
            logger.debug("Refusing to insert %s under detached node %s", entry.absolute_path, parent.absolute_path)
            return None
        return FileSystemNode(entry, parent=parent)

    def iter_preorder(self, start: Optional[FileSystemNode] = None) -> Iterator[FileSystemNode]:
        """Iterate over cached nodes depth-first in pre-order.

        Siblings are visited in their stored order.

        Args:
            start: Node to start from. Defaults to the root.

        Yields:
            Each cached node in the subtree, starting with ``start`` itself.
        """
        stack = [start if start is not None else self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def stream_tree_representation(
        self, start: Optional[FileSystemNode] = None, max_depth: Optional[int] = None
    ) -> Iterator[str]:
        """Generate a tree representation of the cached subtree one line at a time.

        Output is similar to the Unix 'tree' command. Only cached nodes are shown;
        unfetched directories appear without children.

        Args:
            start: Node to render from. Defaults to the root.
            max_depth: Maximum depth below ``start`` to render. None means unlimited.

        Yields:
            Lines of the tree representation, including the connecting lines.

        Example:
            >>> tree = FileSystemTree(FileEntry("/home/u", is_dir=True))
            >>> _ = tree.insert(tree.root, FileEntry("/home/u/a.txt"))
            >>> print("\\n".join(tree.stream_tree_representation()))
            u/
            └── a.txt
        """
        start = start if start is not None else self.root
        yield f"{start.name}/" if start.is_dir else start.name

        # Each frame: (node, prefix, is_last, depth)
        stack = [(child, "", i == len(start.children) - 1, 1) for i, child in enumerate(_sorted(start))]
        stack.reverse()
        while stack:
            node, prefix, is_last, depth = stack.pop()
            connector = "└── " if is_last else "├── "
            suffix = "/" if node.is_dir else ""
            yield f"{prefix}{connector}{node.name}{suffix}"

            if max_depth is not None and depth >= max_depth:
                continue
            children = _sorted(node)
            child_prefix = prefix + ("    " if is_last else "│   ")
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], child_prefix, i == len(children) - 1, depth + 1))

    def get_tree_representation(self, start: Optional[FileSystemNode] = None, max_depth: Optional[int] = None) -> str:
        """Get a complete string representation of the cached subtree."""
        return "\n".join(self.stream_tree_representation(start, max_depth))


def _sorted(node: FileSystemNode) -> list:
    # Directories first, then files, both alphabetically
    return sorted(node.children, key=lambda n: (not n.is_dir, n.name.lower()))
