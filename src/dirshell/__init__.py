"""Interactive shell over a lazily cached view of a directory tree.

This package provides an in-memory mirror of a filesystem subtree that is
populated on demand, resolved by path, and refreshed after the mutations the
shell performs itself.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dirshell")
except PackageNotFoundError:
    __version__ = "unknown"
