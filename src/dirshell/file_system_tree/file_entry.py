"""Snapshot of a filesystem entry used as the payload of tree nodes."""

import os
from typing import Any, Optional

from dirshell.sizes import format_file_size
from dirshell.types import PathType


class FileEntry:
    """Snapshot of the identity and metadata of a file or directory.

    A FileEntry is captured once, when its node is created, and is never updated
    in place. Identity is the absolute path alone: two entries for the same path
    compare equal even if one of them carries a stale size or directory flag, so
    lookups keep working while metadata ages.

    Attributes:
        name (str): The last path segment.
        absolute_path (str): The absolute, normalized path. Used as the identity key.
        is_dir (bool): True if the entry was a directory when captured.
        size (int): File length in bytes when captured. Meaningless for directories.

    Example:
        >>> entry = FileEntry("/home/u/a.txt", is_dir=False, size=10)
        >>> entry.name
        'a.txt'
        >>> entry == FileEntry("/home/u/a.txt", is_dir=True, size=0)
        True
    """

    def __init__(self, absolute_path: PathType, is_dir: bool = False, size: int = 0, name: Optional[str] = None):
        """Initialize a FileEntry.

        Args:
            absolute_path: Path of the entry. Relative paths are made absolute.
            is_dir: Whether the entry is a directory.
            size: Size in bytes. Negative values are clamped to zero.
            name: Override for the last path segment. Defaults to the basename.
        """
        self.absolute_path = os.path.abspath(os.fspath(absolute_path))
        self.name = name if name is not None else os.path.basename(self.absolute_path)
        self.is_dir = is_dir
        self.size = max(0, size)

    @classmethod
    def from_path(cls, path: PathType) -> Optional["FileEntry"]:
        """Capture an entry by stat-ing a path.

        Symbolic links are followed to decide whether the entry is a directory.
        A dangling link is captured as a file of size zero.

        Args:
            path: The path to capture.

        Returns:
            A new FileEntry, or None if the path does not exist or cannot be stat-ed.
        """
        try:
            stat_info = os.stat(path)
        except FileNotFoundError:
            if os.path.islink(path):
                return cls(path, is_dir=False, size=0)
            return None
        except OSError:
            return None
        is_dir = os.path.isdir(path)
        return cls(path, is_dir=is_dir, size=0 if is_dir else stat_info.st_size)

    @classmethod
    def from_dir_entry(cls, dir_entry: "os.DirEntry[str]") -> Optional["FileEntry"]:
        """Capture an entry from an os.scandir() result.

        Args:
            dir_entry: The directory entry to capture.

        Returns:
            A new FileEntry, or None if the entry vanished before it could be stat-ed.
        """
        try:
            is_dir = dir_entry.is_dir()
            size = 0 if is_dir else dir_entry.stat().st_size
        except FileNotFoundError:
            if dir_entry.is_symlink():
                return cls(dir_entry.path, is_dir=False, size=0, name=dir_entry.name)
            return None
        except OSError:
            return None
        return cls(dir_entry.path, is_dir=is_dir, size=size, name=dir_entry.name)

    @property
    def formatted_size(self) -> str:
        """Human-readable size, e.g. '1.5 KiB'."""
        return format_file_size(self.size)

    def __eq__(self, other: Any) -> bool:
        """Check equality with another FileEntry.

        Args:
            other: Another object to compare with.

        Returns:
            True if the other object is a FileEntry with the same absolute path.
        """
        if not isinstance(other, FileEntry):
            return False
        return self.absolute_path == other.absolute_path

    def __hash__(self) -> int:
        return hash(self.absolute_path)

    def __str__(self) -> str:
        return f"{'[DIR]' if self.is_dir else '[FILE]'} {self.name}"

    def __repr__(self) -> str:
        return f"FileEntry(absolute_path={self.absolute_path!r}, is_dir={self.is_dir}, size={self.size})"
