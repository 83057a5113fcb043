"""Lazy directory-tree cache.

This package provides the node and tree types that mirror filesystem entries,
the builder that populates them on demand, and the resolver that walks them by
path.
"""

from .analyzer import AnalysisResult, FileAnalyzer
from .file_entry import FileEntry
from .file_system_node import FileSystemNode
from .file_system_tree import FileSystemTree
from .path_resolver import PathResolver
from .permission_action import PermissionAction
from .tree_builder import TreeBuilder

__all__ = [
    "AnalysisResult",
    "FileAnalyzer",
    "FileEntry",
    "FileSystemNode",
    "FileSystemTree",
    "PathResolver",
    "PermissionAction",
    "TreeBuilder",
]
