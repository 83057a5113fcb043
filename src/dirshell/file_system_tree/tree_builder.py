"""Lazy population of the directory-tree cache.

This module provides the TreeBuilder class, which creates the root of the cache
from a starting path and lists directories from disk on demand. A directory is
listed at most once until its cached children are explicitly invalidated.
"""

import logging
import os
from typing import List, Optional

from dirshell.exclusion_rules.base_rules import BaseExclusionRules
from dirshell.exclusion_rules.composite_rules import CompositeExclusionRules
from dirshell.exclusion_rules.hidden_rules import HiddenEntryExclusionRules
from dirshell.file_system_tree.file_entry import FileEntry
from dirshell.file_system_tree.file_system_node import FileSystemNode
from dirshell.file_system_tree.file_system_tree import FileSystemTree
from dirshell.file_system_tree.permission_action import PermissionAction
from dirshell.types import PathType

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds and lazily populates a FileSystemTree.

    The builder owns the tree it creates. Only the root's immediate children are
    listed at load time; deeper directories are listed the first time something
    asks for their children. Cached listings are never refreshed implicitly:
    callers that change the filesystem call :meth:`refresh` on the affected
    directories.

    Visibility Policy:
        Entries whose name starts with '.' are hidden unless ``show_hidden`` is
        True. Additional exclusion rules (e.g. gitignore patterns) hide more. The
        same policy applies to the lazy and the eager build.

    Permission Handling:
        A directory that cannot be listed (permission denied, vanished, not a
        directory any more) is left without children and stays unfetched, so the
        next access retries. No exception reaches the caller. With
        ``PermissionAction.WARN`` the failure is also logged as a warning.

    Attributes:
        tree (Optional[FileSystemTree]): The tree, or None before a successful load.
        exclusion_rules (Optional[BaseExclusionRules]): Effective visibility rules.
        permission_action (PermissionAction): How listing failures are reported.

    Example:
        >>> builder = TreeBuilder()  # doctest: +SKIP
        >>> tree = builder.load("/home/u")  # doctest: +SKIP
        >>> [child.name for child in tree.root.children]  # doctest: +SKIP
        ['docs', 'notes.txt']
    """

    def __init__(
        self,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        permission_action: PermissionAction = PermissionAction.IGNORE,
        show_hidden: bool = False,
    ) -> None:
        """Initialize a TreeBuilder.

        Args:
            exclusion_rules: Extra rules for hiding entries. Defaults to None.
            permission_action: How to report listing failures. Defaults to IGNORE.
            show_hidden: Whether dot-prefixed entries are cached. Defaults to False.
        """
        rules: List[BaseExclusionRules] = []
        if not show_hidden:
            rules.append(HiddenEntryExclusionRules())
        if exclusion_rules is not None:
            rules.append(exclusion_rules)
        self.exclusion_rules: Optional[BaseExclusionRules] = CompositeExclusionRules(rules) if rules else None
        self.permission_action = permission_action
        self.tree: Optional[FileSystemTree] = None

    def load(self, root_path: PathType) -> Optional[FileSystemTree]:
        """Create the tree from a starting path and fetch the root's children.

        Args:
            root_path: Path of the root. May be a directory or a file.

        Returns:
            The new tree, or None if the path does not exist. In that case the
            builder's tree is left unset.
        """
        root_entry = FileEntry.from_path(root_path)
        if root_entry is None:
            logger.debug("Root path does not exist: %s", root_path)
            self.tree = None
            return None

        self.tree = FileSystemTree(root_entry)
        logger.debug("Loaded tree rooted at %s", root_entry.absolute_path)
        self.fetch_children(self.tree.root)
        return self.tree

    def load_eager(self, root_path: PathType) -> Optional[FileSystemTree]:
        """Create the tree and prefetch the whole subtree.

        Uses an explicit work stack rather than recursion. Symbolic links to
        directories are listed as directories but not descended into, which keeps
        link cycles from looping. Intended for small trees only.

        Args:
            root_path: Path of the root.

        Returns:
            The new tree, or None if the path does not exist.
        """
        tree = self.load(root_path)
        if tree is None:
            return None

        stack = [child for child in tree.root.children if child.is_dir]
        count = len(tree.root.children)
        while stack:
            node = stack.pop()
            if os.path.islink(node.absolute_path):
                continue
            self.fetch_children(node)
            count += len(node.children)
            stack.extend(child for child in node.children if child.is_dir)
        logger.debug("Eagerly cached %d entries under %s", count, tree.root.absolute_path)
        return tree

    def fetch_children(self, node: FileSystemNode) -> None:
        """List a directory from disk and cache its visible children.

        Does nothing for files, for nodes that are already fetched or already
        have children, and for nodes that do not belong to the builder's tree.
        Children are inserted in name order.

        Args:
            node: The directory node to populate.
        """
        if self.tree is None or not node.is_dir or node.fetched or node.children:
            return
        if not self.tree.contains(node):
            return

        try:
            with os.scandir(node.absolute_path) as it:
                dir_entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            if self.permission_action == PermissionAction.WARN:
                logger.warning("Cannot list %s: %s", node.absolute_path, e)
            else:
                logger.debug("Cannot list %s: %s", node.absolute_path, e)
            return

        for dir_entry in dir_entries:
            entry = FileEntry.from_dir_entry(dir_entry)
            if entry is None:
                continue
            if self._is_excluded(entry):
                continue
            self.tree.insert(node, entry)

        node.fetched = True
        logger.debug("Fetched %d children of %s", len(node.children), node.absolute_path)

    def refresh(self, node: FileSystemNode) -> None:
        """Discard a node's cached children and list them again immediately.

        Args:
            node: The directory node whose listing is stale.
        """
        node.clear()
        self.fetch_children(node)

    def _is_excluded(self, entry: FileEntry) -> bool:
        if self.exclusion_rules is None or self.tree is None:
            return False
        relative_path = os.path.relpath(entry.absolute_path, self.tree.root.absolute_path).replace(os.sep, "/")
        if entry.is_dir:
            relative_path += "/"
        return self.exclusion_rules.exclude(relative_path)
