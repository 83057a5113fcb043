"""Test configuration and fixtures for dirshell."""

import pytest

from dirshell.file_system_tree.path_resolver import PathResolver
from dirshell.file_system_tree.tree_builder import TreeBuilder


@pytest.fixture
def sample_root(tmp_path):
    """Create a small directory structure.

    root/
    ├── docs/
    │   ├── a.txt        (10 bytes)
    │   └── guide/
    │       └── intro.md
    ├── empty/
    ├── notes.txt
    └── .hidden
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "docs").mkdir()
    (root / "docs" / "a.txt").write_text("0123456789")
    (root / "docs" / "guide").mkdir()
    (root / "docs" / "guide" / "intro.md").write_text("# Intro\n")
    (root / "empty").mkdir()
    (root / "notes.txt").write_text("notes\n")
    (root / ".hidden").write_text("secret")
    return root


@pytest.fixture
def builder(sample_root):
    """A TreeBuilder with the sample tree loaded."""
    builder = TreeBuilder()
    builder.load(sample_root)
    return builder


@pytest.fixture
def resolver(builder):
    return PathResolver(builder)
