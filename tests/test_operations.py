"""Tests for mutating operations and the cache maintenance that follows them."""

import os
from unittest.mock import patch

import pytest

from dirshell.file_system_tree.file_entry import FileEntry
from dirshell.fs_ops import FsResult
from dirshell.operations import FileOperations


@pytest.fixture
def operations(builder, resolver):
    return FileOperations(builder, resolver)


def child_names(node):
    return [child.name for child in node.children]


class TestMkdir:
    def test_creates_directory_on_disk_and_in_cache(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        builder.fetch_children(root)

        result = operations.mkdir(root, "newdir")

        assert result
        assert (sample_root / "newdir").is_dir()
        node = resolver.resolve(root, "newdir")
        assert node is not None
        assert node.is_dir
        assert result.node is node

    def test_new_directory_is_fetched_and_empty(self, builder, operations):
        result = operations.mkdir(builder.tree.root, "newdir")
        assert result.node.fetched
        assert result.node.children == ()

    def test_nested_path(self, builder, resolver, operations, sample_root):
        result = operations.mkdir(builder.tree.root, "docs/guide/more")
        assert result
        assert (sample_root / "docs" / "guide" / "more").is_dir()
        assert resolver.resolve(builder.tree.root, "docs/guide/more") is result.node

    def test_missing_parent_fails_without_touching_disk(self, builder, operations, sample_root):
        result = operations.mkdir(builder.tree.root, "missing/newdir")
        assert not result
        assert "missing" in result.reason
        assert not (sample_root / "missing").exists()

    def test_existing_directory_fails_and_cache_is_untouched(self, builder, operations):
        root = builder.tree.root
        builder.fetch_children(root)
        docs = root.child("docs")

        result = operations.mkdir(root, "docs")

        assert not result
        assert result.reason
        assert root.child("docs") is docs

    @pytest.mark.parametrize("path", ["", ".", "..", "docs/.."])
    def test_invalid_names(self, builder, operations, path):
        assert not operations.mkdir(builder.tree.root, path)

    def test_failure_from_filesystem_leaves_cache_alone(self, builder, operations):
        root = builder.tree.root
        builder.fetch_children(root)
        before = list(root.children)

        with patch("dirshell.operations.fs_ops.make_directory", return_value=FsResult(False, "Permission denied")):
            result = operations.mkdir(root, "newdir")

        assert not result
        assert result.reason == "Permission denied"
        assert list(root.children) == before


class TestRemove:
    def test_remove_file(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        assert operations.remove(root, "notes.txt")
        assert not (sample_root / "notes.txt").exists()
        assert resolver.resolve(root, "notes.txt") is None
        assert "notes.txt" not in child_names(root)

    def test_remove_directory_with_nested_content(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        # Cache the nested content first
        assert resolver.resolve(root, "docs/guide/intro.md") is not None

        assert operations.remove(root, "docs")

        assert not (sample_root / "docs").exists()
        assert resolver.resolve(root, "docs") is None
        assert resolver.resolve(root, "docs/guide/intro.md") is None
        docs_path = str(sample_root / "docs")
        assert all(not node.absolute_path.startswith(docs_path) for node in builder.tree.iter_preorder())

    def test_remove_missing(self, builder, operations):
        result = operations.remove(builder.tree.root, "missing")
        assert not result
        assert result.reason == "Path missing not found"

    def test_remove_root_is_refused(self, builder, operations, sample_root):
        result = operations.remove(builder.tree.root, "/")
        assert not result
        assert sample_root.exists()

    def test_remove_relative_to_subdirectory(self, builder, resolver, operations, sample_root):
        docs = resolver.resolve(builder.tree.root, "docs")
        assert operations.remove(docs, "a.txt")
        assert not (sample_root / "docs" / "a.txt").exists()
        assert child_names(docs) == ["guide"]

    def test_partial_removal_refreshes_parent(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        docs = resolver.resolve(root, "docs")
        builder.fetch_children(docs)
        guide_path = str(sample_root / "docs" / "guide")
        real_rmdir = os.rmdir

        def failing_rmdir(path, *args, **kwargs):
            if os.fspath(path) == guide_path:
                raise PermissionError(13, "Permission denied", path)
            return real_rmdir(path, *args, **kwargs)

        with patch("dirshell.fs_ops.os.rmdir", side_effect=failing_rmdir):
            result = operations.remove(root, "docs")

        assert not result
        assert result.reason == "Permission denied"
        assert not (sample_root / "docs" / "a.txt").exists()
        # The cache shows what is left on disk
        assert resolver.resolve(root, "docs/a.txt") is None
        assert resolver.resolve(root, "docs/guide") is not None

    def test_failure_before_any_change_leaves_cache_alone(self, builder, resolver, operations):
        root = builder.tree.root
        docs = resolver.resolve(root, "docs")
        with patch("dirshell.operations.fs_ops.remove_tree", return_value=FsResult(False, "Busy")):
            assert not operations.remove(root, "docs")
        assert root.child("docs") is docs


class TestRename:
    def test_rename_file(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        result = operations.rename(root, "notes.txt", "todo.txt")

        assert result
        assert (sample_root / "todo.txt").exists()
        assert not (sample_root / "notes.txt").exists()
        assert resolver.resolve(root, "notes.txt") is None
        assert resolver.resolve(root, "todo.txt") is result.node

    def test_rename_directory_keeps_contents_reachable(self, builder, resolver, operations):
        root = builder.tree.root
        assert operations.rename(root, "docs", "papers")
        node = resolver.resolve(root, "papers/guide/intro.md")
        assert node is not None
        assert node.absolute_path.endswith(os.path.join("papers", "guide", "intro.md"))

    @pytest.mark.parametrize("new_name", ["", ".", "..", "a/b"])
    def test_invalid_new_name(self, builder, operations, sample_root, new_name):
        assert not operations.rename(builder.tree.root, "notes.txt", new_name)
        assert (sample_root / "notes.txt").exists()

    def test_existing_target_fails(self, builder, operations, sample_root):
        result = operations.rename(builder.tree.root, "notes.txt", "docs")
        assert not result
        assert (sample_root / "notes.txt").exists()

    def test_rename_root_is_refused(self, builder, operations):
        assert not operations.rename(builder.tree.root, "/", "other")


class TestMove:
    def test_move_into_directory_refreshes_both_parents(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        docs = root.child("docs")
        builder.fetch_children(docs)
        assert child_names(docs) == ["a.txt", "guide"]

        result = operations.move(root, "notes.txt", "docs")

        assert result
        assert (sample_root / "docs" / "notes.txt").exists()
        # Source parent lists the entry no more
        assert "notes.txt" not in child_names(root)
        # Destination parent is already listed again, without another lookup
        cached_docs = builder.tree.search(FileEntry(str(sample_root / "docs")))
        assert cached_docs.fetched
        assert child_names(cached_docs) == ["a.txt", "guide", "notes.txt"]
        assert cached_docs.child("notes.txt") is result.node

    def test_move_to_new_path(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        assert operations.move(root, "docs/a.txt", "empty/b.txt")
        assert (sample_root / "empty" / "b.txt").read_text() == "0123456789"
        assert resolver.resolve(root, "docs/a.txt") is None
        assert resolver.resolve(root, "empty/b.txt").size == 10

    def test_move_within_directory(self, builder, resolver, operations):
        root = builder.tree.root
        assert operations.move(root, "notes.txt", "renamed.txt")
        assert resolver.resolve(root, "renamed.txt") is not None
        assert resolver.resolve(root, "notes.txt") is None

    def test_move_onto_existing_file_fails(self, builder, operations, sample_root):
        result = operations.move(builder.tree.root, "notes.txt", "docs/a.txt")
        assert not result
        assert (sample_root / "notes.txt").exists()

    def test_move_into_itself_fails(self, builder, operations, sample_root):
        result = operations.move(builder.tree.root, "docs", "docs/guide")
        assert not result
        assert result.reason == "Cannot place a directory inside itself"
        assert (sample_root / "docs" / "guide").is_dir()

    def test_move_missing_destination_parent(self, builder, operations):
        assert not operations.move(builder.tree.root, "notes.txt", "missing/notes.txt")

    def test_move_root_is_refused(self, builder, operations):
        assert not operations.move(builder.tree.root, "/", "docs")


class TestCopy:
    def test_copy_file_into_directory(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        result = operations.copy(root, "notes.txt", "docs")

        assert result
        assert (sample_root / "notes.txt").exists()
        assert (sample_root / "docs" / "notes.txt").read_text() == "notes\n"
        assert resolver.resolve(root, "docs/notes.txt") is result.node
        assert resolver.resolve(root, "notes.txt") is not None

    def test_copy_directory(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        assert operations.copy(root, "docs", "backup")
        assert (sample_root / "backup" / "guide" / "intro.md").exists()
        assert resolver.resolve(root, "backup/guide/intro.md") is not None
        assert resolver.resolve(root, "docs/guide/intro.md") is not None

    def test_copy_into_itself_fails(self, builder, operations, sample_root):
        assert not operations.copy(builder.tree.root, "docs", "docs/guide")
        assert not (sample_root / "docs" / "guide" / "docs").exists()

    def test_copy_missing_source(self, builder, operations):
        result = operations.copy(builder.tree.root, "missing", "docs")
        assert not result
        assert result.reason == "Path missing not found"


class TestRefreshFallback:
    def test_refresh_directory_falls_back_to_current(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        docs = resolver.resolve(root, "docs")
        with patch.object(builder, "refresh") as refresh:
            operations._refresh_directory(docs, str(sample_root / "not-cached"))
        refresh.assert_called_once_with(docs)

    def test_refresh_directory_falls_back_to_root_for_detached_current(self, builder, resolver, operations, sample_root):
        root = builder.tree.root
        docs = resolver.resolve(root, "docs")
        builder.refresh(root)
        assert not builder.tree.contains(docs)
        with patch.object(builder, "refresh") as refresh:
            operations._refresh_directory(docs, str(sample_root / "not-cached"))
        refresh.assert_called_once_with(root)
