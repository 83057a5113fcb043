"""Recursive statistics and name search over a cached subtree."""

import fnmatch
import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from dirshell.file_system_tree.file_system_node import FileSystemNode
from dirshell.file_system_tree.tree_builder import TreeBuilder
from dirshell.sizes import format_file_size

NO_EXTENSION = "(none)"


@dataclass
class AnalysisResult:
    """Totals gathered by :meth:`FileAnalyzer.analyze`.

    Attributes:
        total_size: Sum of file sizes in bytes.
        file_count: Number of files.
        directory_count: Number of directories below the analyzed node.
        extensions: File count per lower-cased extension (without the dot).
    """

    total_size: int = 0
    file_count: int = 0
    directory_count: int = 0
    extensions: Dict[str, int] = field(default_factory=Counter)

    @property
    def formatted_size(self) -> str:
        return format_file_size(self.total_size)

    def add_file(self, node: FileSystemNode) -> None:
        self.file_count += 1
        self.total_size += node.size
        extension = os.path.splitext(node.name)[1].lstrip(".").lower()
        self.extensions[extension or NO_EXTENSION] += 1


class FileAnalyzer:
    """Walks a subtree of the cache, fetching directories as it goes.

    Walks use an explicit stack and only see entries that pass the builder's
    visibility policy. Symbolic links to directories are counted but not
    descended into.

    Example:
        >>> analyzer = FileAnalyzer(builder)  # doctest: +SKIP
        >>> result = analyzer.analyze(builder.tree.root)  # doctest: +SKIP
        >>> result.file_count, result.formatted_size  # doctest: +SKIP
        (3, '1.5 KiB')
    """

    def __init__(self, builder: TreeBuilder) -> None:
        self.builder = builder

    def walk(self, start: FileSystemNode) -> Iterator[FileSystemNode]:
        """Yield every node below ``start`` in pre-order, fetching lazily."""
        stack = [start]
        while stack:
            node = stack.pop()
            if node is not start:
                yield node
            if node.is_dir and (node is start or not os.path.islink(node.absolute_path)):
                self.builder.fetch_children(node)
                stack.extend(reversed(node.children))

    def analyze(self, start: FileSystemNode) -> AnalysisResult:
        """Collect size, file, directory and extension totals for a subtree.

        Args:
            start: The node to analyze. A file node yields totals for itself.
        """
        result = AnalysisResult()
        if not start.is_dir:
            result.add_file(start)
            return result

        for node in self.walk(start):
            if node.is_dir:
                result.directory_count += 1
            else:
                result.add_file(node)
        return result

    def find(self, start: FileSystemNode, pattern: str, min_size: Optional[int] = None) -> List[FileSystemNode]:
        """Find nodes below ``start`` whose names match a shell-style pattern.

        Matching is case-sensitive, like path resolution.

        Args:
            start: Directory to search under.
            pattern: Glob pattern such as '*.txt'.
            min_size: If given, only files of at least this many bytes match.

        Returns:
            Matching nodes in pre-order.
        """
        matches = []
        for node in self.walk(start):
            if not fnmatch.fnmatchcase(node.name, pattern):
                continue
            if min_size is not None and (node.is_dir or node.size < min_size):
                continue
            matches.append(node)
        return matches
