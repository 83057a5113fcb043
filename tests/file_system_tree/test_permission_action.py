"""Tests for the PermissionAction enum."""

import logging
import os

import pytest

from dirshell.file_system_tree.permission_action import PermissionAction
from dirshell.file_system_tree.tree_builder import TreeBuilder


def test_permission_action_values():
    assert PermissionAction.IGNORE.value == "ignore"
    assert PermissionAction.WARN.value == "warn"
    assert PermissionAction("warn") is PermissionAction.WARN
    assert PermissionAction.IGNORE == "ignore"


@pytest.fixture
def unreadable_dir(tmp_path):
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        pytest.skip("Permission checks do not apply to root")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "inside.txt").touch()
    locked.chmod(0o000)
    yield locked
    locked.chmod(0o755)


def test_unreadable_directory_is_left_empty_and_unfetched(tmp_path, unreadable_dir):
    builder = TreeBuilder()
    tree = builder.load(tmp_path)
    locked = tree.root.child("locked")

    builder.fetch_children(locked)

    assert locked.children == ()
    assert not locked.fetched


def test_warn_logs_listing_failures(tmp_path, unreadable_dir, caplog):
    builder = TreeBuilder(permission_action=PermissionAction.WARN)
    tree = builder.load(tmp_path)
    with caplog.at_level(logging.WARNING, logger="dirshell.file_system_tree.tree_builder"):
        builder.fetch_children(tree.root.child("locked"))
    assert any("Cannot list" in record.getMessage() for record in caplog.records)


def test_ignore_does_not_warn(tmp_path, unreadable_dir, caplog):
    builder = TreeBuilder(permission_action=PermissionAction.IGNORE)
    tree = builder.load(tmp_path)
    with caplog.at_level(logging.WARNING):
        builder.fetch_children(tree.root.child("locked"))
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
