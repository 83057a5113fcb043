"""Resolution of shell path strings to cached tree nodes."""

import logging
from typing import Optional, Tuple

from dirshell.file_system_tree.file_system_node import FileSystemNode
from dirshell.file_system_tree.tree_builder import TreeBuilder
from dirshell.types import SEPARATOR

logger = logging.getLogger(__name__)

CURRENT_SEGMENT = "."
PARENT_SEGMENT = ".."


class PathResolver:
    """Walks the cached tree to find the node for a path string.

    Paths use '/' as separator. A leading '/' means the root of the cached tree
    (the shell's starting directory), not the root of the host filesystem. Every
    directory crossed on the way is fetched through the builder if it has not
    been listed yet. Names are matched case-sensitively.

    Parent Segments:
        By default a '..' segment leaves the position unchanged. Pass
        ``parent_segment_ascends=True`` to make it move to the parent instead;
        it never moves above the root.

    Attributes:
        builder (TreeBuilder): Builder used to fetch children along the way.
        parent_segment_ascends (bool): Whether '..' moves to the parent.

    Example:
        >>> resolver = PathResolver(builder)  # doctest: +SKIP
        >>> resolver.resolve(builder.tree.root, "docs/a.txt").size  # doctest: +SKIP
        10
    """

    def __init__(self, builder: TreeBuilder, parent_segment_ascends: bool = False) -> None:
        self.builder = builder
        self.parent_segment_ascends = parent_segment_ascends

    def resolve(self, start: FileSystemNode, path: str) -> Optional[FileSystemNode]:
        """Translate a path string into a cached node.

        Args:
            start: Node that relative paths are resolved from.
            path: Absolute ('/docs') or relative ('docs/a.txt') path.

        Returns:
            The node for the last segment, or None if a segment is missing or a
            segment before the last one names a file.
        """
        if not path:
            return start

        if path.startswith(SEPARATOR):
            if self.builder.tree is None:
                return None
            target = self.builder.tree.root
        else:
            target = start

        for segment in path.split(SEPARATOR):
            if not segment or segment == CURRENT_SEGMENT:
                continue
            if segment == PARENT_SEGMENT:
                if self.parent_segment_ascends and target.parent is not None:
                    target = target.parent
                continue

            if not target.is_dir:
                logger.debug("Cannot descend into file %s while resolving %r", target.absolute_path, path)
                return None

            self.builder.fetch_children(target)
            next_node = target.child(segment)
            if next_node is None:
                logger.debug("No entry %r under %s", segment, target.absolute_path)
                return None
            target = next_node

        return target

    def resolve_directory(self, start: FileSystemNode, path: str) -> Optional[FileSystemNode]:
        """Resolve a path and return the node only if it is a directory."""
        node = self.resolve(start, path)
        if node is None or not node.is_dir:
            return None
        return node


def split_parent(path: str) -> Tuple[str, str]:
    """Split a shell path into its containing directory path and last segment.

    Trailing separators are ignored. The directory part keeps a leading '/' so
    that it still resolves from the root.

    Args:
        path: The path to split.

    Returns:
        A ``(parent_path, name)`` tuple. ``parent_path`` is empty for bare names.

    Example:
        >>> split_parent("docs/a.txt")
        ('docs', 'a.txt')
        >>> split_parent("/a.txt")
        ('/', 'a.txt')
        >>> split_parent("a.txt")
        ('', 'a.txt')
    """
    stripped = path.rstrip(SEPARATOR)
    if SEPARATOR not in stripped:
        return "", stripped
    parent, name = stripped.rsplit(SEPARATOR, 1)
    if not parent and path.startswith(SEPARATOR):
        parent = SEPARATOR
    return parent, name
