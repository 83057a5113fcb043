"""Mutating shell operations and the cache maintenance that follows them.

Each operation changes the real filesystem first. Only when that succeeds are
the cached listings of the affected directories discarded and fetched again, so
the cache never shows a change that did not happen on disk. A recursive remove
that stops partway refreshes its parent too, since part of the change did happen.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from dirshell import fs_ops
from dirshell.file_system_tree.file_entry import FileEntry
from dirshell.file_system_tree.file_system_node import FileSystemNode
from dirshell.file_system_tree.path_resolver import CURRENT_SEGMENT, PARENT_SEGMENT, PathResolver, split_parent
from dirshell.file_system_tree.tree_builder import TreeBuilder
from dirshell.types import SEPARATOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a mutating operation.

    Attributes:
        success: Whether the filesystem change was made.
        reason: Human-readable failure reason. None on success.
        node: The cached node for the created or renamed entry, if any.
    """

    success: bool
    reason: Optional[str] = None
    node: Optional[FileSystemNode] = None

    def __bool__(self) -> bool:
        return self.success


def _failed(reason: str) -> OperationResult:
    return OperationResult(False, reason)


def _valid_name(name: str) -> bool:
    return bool(name) and name not in (CURRENT_SEGMENT, PARENT_SEGMENT) and SEPARATOR not in name


class FileOperations:
    """Façade over the mutating filesystem operations of the shell.

    Paths are shell paths resolved against a caller-supplied current node. After
    a successful change, the cached parent directory of every affected entry is
    refreshed (cleared and fetched again right away). A parent that is not in the
    cache is not fetched just for this; the current node is refreshed instead.

    The root of the tree can never be removed, renamed or moved.

    Attributes:
        builder (TreeBuilder): Builder owning the tree.
        resolver (PathResolver): Resolver for shell paths.
    """

    def __init__(self, builder: TreeBuilder, resolver: PathResolver) -> None:
        self.builder = builder
        self.resolver = resolver

    def mkdir(self, current: FileSystemNode, path: str) -> OperationResult:
        """Create a directory.

        The new directory is fetched right away, so its node reports as an empty,
        already-fetched directory.

        Args:
            current: Node relative paths are resolved from.
            path: Path of the directory to create. Its parent must exist.
        """
        parent_path, name = split_parent(path)
        if not _valid_name(name):
            return _failed(f"Invalid directory name: {path!r}")
        parent = self.resolver.resolve_directory(current, parent_path)
        if parent is None:
            return _failed(f"Path {parent_path} not found or is not a directory")

        target = os.path.join(parent.absolute_path, name)
        result = fs_ops.make_directory(target)
        if not result:
            return _failed(result.reason or "Cannot create directory")

        self._refresh_directory(current, parent.absolute_path)
        node = self._cached(target)
        if node is not None:
            self.builder.fetch_children(node)
        return OperationResult(True, node=node)

    def remove(self, current: FileSystemNode, path: str) -> OperationResult:
        """Remove a file or a directory with everything below it.

        If the removal stops partway, the parent is still refreshed so the cache
        matches what is left on disk.

        Args:
            current: Node relative paths are resolved from.
            path: Path of the entry to remove.
        """
        node = self.resolver.resolve(current, path)
        if node is None:
            return _failed(f"Path {path} not found")
        if node.parent is None:
            return _failed("Cannot remove the root directory")

        parent_path = node.parent.absolute_path
        result = fs_ops.remove_tree(node.absolute_path)
        if not result:
            if result.partial:
                # Part of the subtree is already gone from disk
                self._refresh_directory(current, parent_path)
            return _failed(result.reason or "Cannot remove")

        self._refresh_directory(current, parent_path)
        return OperationResult(True)

    def rename(self, current: FileSystemNode, path: str, new_name: str) -> OperationResult:
        """Rename an entry within its directory.

        Args:
            current: Node relative paths are resolved from.
            path: Path of the entry to rename.
            new_name: New last path segment. Must not contain '/'.
        """
        if not _valid_name(new_name):
            return _failed(f"Invalid name: {new_name!r}")
        node = self.resolver.resolve(current, path)
        if node is None:
            return _failed(f"Path {path} not found")
        if node.parent is None:
            return _failed("Cannot rename the root directory")

        parent_path = node.parent.absolute_path
        target = os.path.join(parent_path, new_name)
        result = fs_ops.rename_entry(node.absolute_path, target)
        if not result:
            return _failed(result.reason or "Cannot rename")

        self._refresh_directory(current, parent_path)
        return OperationResult(True, node=self._cached(target))

    def move(self, current: FileSystemNode, source: str, destination: str) -> OperationResult:
        """Move an entry into a directory, or to a new path.

        If ``destination`` names an existing directory, the entry keeps its name
        and moves inside it. Otherwise ``destination`` is the new path and its
        parent must exist. Both the source and the destination directories are
        refreshed.

        Args:
            current: Node relative paths are resolved from.
            source: Path of the entry to move.
            destination: Target directory or target path.
        """
        node = self.resolver.resolve(current, source)
        if node is None:
            return _failed(f"Path {source} not found")
        if node.parent is None:
            return _failed("Cannot move the root directory")

        located = self._locate_destination(current, node, destination)
        if isinstance(located, OperationResult):
            return located
        destination_dir, target = located

        source_dir = node.parent.absolute_path
        result = fs_ops.rename_entry(node.absolute_path, target)
        if not result:
            return _failed(result.reason or "Cannot move")

        self._refresh_directory(current, source_dir)
        if destination_dir != source_dir:
            self._refresh_directory(current, destination_dir)
        return OperationResult(True, node=self._cached(target))

    def copy(self, current: FileSystemNode, source: str, destination: str) -> OperationResult:
        """Copy a file or directory into a directory, or to a new path.

        Destination handling is the same as for :meth:`move`. Only the
        destination directory is refreshed.

        Args:
            current: Node relative paths are resolved from.
            source: Path of the entry to copy.
            destination: Target directory or target path.
        """
        node = self.resolver.resolve(current, source)
        if node is None:
            return _failed(f"Path {source} not found")

        located = self._locate_destination(current, node, destination)
        if isinstance(located, OperationResult):
            return located
        destination_dir, target = located

        result = fs_ops.copy_entry(node.absolute_path, target)
        if not result:
            return _failed(result.reason or "Cannot copy")

        self._refresh_directory(current, destination_dir)
        return OperationResult(True, node=self._cached(target))

    def _locate_destination(
        self, current: FileSystemNode, node: FileSystemNode, destination: str
    ) -> Union[Tuple[str, str], OperationResult]:
        """Work out the target directory and absolute target path for move/copy.

        Returns:
            A ``(destination_dir, target_path)`` tuple, or a failed OperationResult.
        """
        existing = self.resolver.resolve(current, destination)
        if existing is not None and existing.is_dir:
            destination_dir = existing.absolute_path
            name = node.name
        elif existing is not None:
            return _failed(f"Destination {destination} already exists")
        else:
            parent_path, name = split_parent(destination)
            if not _valid_name(name):
                return _failed(f"Invalid destination: {destination!r}")
            parent = self.resolver.resolve_directory(current, parent_path)
            if parent is None:
                return _failed(f"Path {parent_path} not found or is not a directory")
            destination_dir = parent.absolute_path

        target = os.path.join(destination_dir, name)
        if node.is_dir and _is_within(target, node.absolute_path):
            return _failed("Cannot place a directory inside itself")
        return destination_dir, target

    def _refresh_directory(self, current: FileSystemNode, directory_path: str) -> None:
        """Refresh the cached node for a directory, or the current node if it is not cached."""
        tree = self.builder.tree
        if tree is None:
            return
        node = tree.search(FileEntry(directory_path, is_dir=True))
        if node is None:
            node = current if tree.contains(current) else tree.root
            logger.debug("%s is not cached; refreshing %s instead", directory_path, node.absolute_path)
        else:
            logger.debug("Refreshing %s", directory_path)
        self.builder.refresh(node)

    def _cached(self, path: str) -> Optional[FileSystemNode]:
        if self.builder.tree is None:
            return None
        return self.builder.tree.search(FileEntry(path))


def _is_within(path: str, directory: str) -> bool:
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)
