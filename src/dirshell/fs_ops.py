"""Blocking filesystem primitives used by the mutating shell operations.

Every function performs one real filesystem change and reports the outcome as
an FsResult instead of raising, so callers can decide whether the cache needs
maintenance.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FsResult:
    """Outcome of a filesystem primitive.

    Attributes:
        success: Whether the change was made.
        reason: Why it failed, for display. None on success.
        partial: True if a failed operation still changed the filesystem before
            it stopped, so cached listings may be stale.
    """

    success: bool
    reason: Optional[str] = None
    partial: bool = False

    def __bool__(self) -> bool:
        return self.success


OK = FsResult(True)


def _failure(action: str, path: str, error: OSError, partial: bool = False) -> FsResult:
    reason = error.strerror or str(error)
    logger.debug("%s failed for %s: %s", action, path, error)
    return FsResult(False, reason, partial)


def make_directory(path: str) -> FsResult:
    """Create a single directory. The parent must exist."""
    try:
        os.mkdir(path)
    except OSError as e:
        return _failure("mkdir", path, e)
    return OK


def rename_entry(source: str, destination: str) -> FsResult:
    """Rename or move an entry. Refuses to overwrite an existing destination."""
    if os.path.lexists(destination):
        return FsResult(False, "Destination already exists")
    try:
        os.rename(source, destination)
    except OSError as e:
        return _failure("rename", source, e)
    return OK


def copy_entry(source: str, destination: str) -> FsResult:
    """Copy a file or a whole directory. Refuses to overwrite an existing destination."""
    if os.path.lexists(destination):
        return FsResult(False, "Destination already exists")
    try:
        if os.path.isdir(source) and not os.path.islink(source):
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination, follow_symlinks=False)
    except OSError as e:
        # shutil.Error (an OSError) carries no strerror; _failure falls back to str()
        return _failure("copy", source, e)
    return OK


def remove_tree(path: str) -> FsResult:
    """Remove a file, a symlink, or a directory and everything below it.

    Directories are emptied depth-first with an explicit stack: children are
    removed before their parent. Symbolic links are unlinked, never followed.
    Stops at the first failure; entries removed before it stay removed and the
    result is flagged as partial.

    Args:
        path: The entry to remove.

    Returns:
        OK, or a failure naming the reason of the first error.
    """
    try:
        if os.path.islink(path) or not os.path.isdir(path):
            os.unlink(path)
            return OK
    except OSError as e:
        return _failure("unlink", path, e)

    removed = False
    # Each frame: (directory, children_listed)
    stack = [(path, False)]
    while stack:
        directory, listed = stack.pop()
        if listed:
            try:
                os.rmdir(directory)
            except OSError as e:
                return _failure("rmdir", directory, e, removed)
            removed = True
            continue

        stack.append((directory, True))
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            return _failure("scandir", directory, e, removed)
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append((entry.path, False))
                else:
                    os.unlink(entry.path)
                    removed = True
            except OSError as e:
                return _failure("unlink", entry.path, e, removed)
    return OK
