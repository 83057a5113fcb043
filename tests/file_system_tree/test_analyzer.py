"""Unit tests for the FileAnalyzer class."""

import os

import pytest

from dirshell.file_system_tree.analyzer import NO_EXTENSION, FileAnalyzer


@pytest.fixture
def analyzer(builder):
    return FileAnalyzer(builder)


def test_analyze_root(builder, analyzer):
    result = analyzer.analyze(builder.tree.root)
    assert result.file_count == 3
    assert result.directory_count == 3  # docs, docs/guide, empty
    assert result.total_size == 10 + len("# Intro\n") + len("notes\n")
    assert result.extensions == {"txt": 2, "md": 1}


def test_analyze_fetches_lazily(builder, analyzer):
    docs = builder.tree.root.child("docs")
    assert not docs.fetched
    analyzer.analyze(builder.tree.root)
    assert docs.fetched
    assert docs.child("guide").fetched


def test_analyze_single_file(builder, analyzer):
    result = analyzer.analyze(builder.tree.root.child("notes.txt"))
    assert result.file_count == 1
    assert result.directory_count == 0
    assert result.total_size == len("notes\n")


def test_analyze_counts_files_without_extension(sample_root):
    from dirshell.file_system_tree.tree_builder import TreeBuilder

    (sample_root / "Makefile").write_text("all:\n")
    builder = TreeBuilder()
    builder.load(sample_root)
    result = FileAnalyzer(builder).analyze(builder.tree.root)
    assert result.extensions[NO_EXTENSION] == 1


def test_analysis_formatted_size(builder, analyzer):
    result = analyzer.analyze(builder.tree.root.child("docs"))
    assert result.formatted_size.endswith("bytes")


def test_find_by_pattern(builder, analyzer):
    matches = analyzer.find(builder.tree.root, "*.txt")
    assert [node.name for node in matches] == ["a.txt", "notes.txt"]


def test_find_is_case_sensitive(builder, analyzer):
    assert analyzer.find(builder.tree.root, "*.TXT") == []


def test_find_matches_directories(builder, analyzer):
    matches = analyzer.find(builder.tree.root, "gui*")
    assert [node.absolute_path for node in matches] == [os.path.join(builder.tree.root.absolute_path, "docs", "guide")]


def test_find_min_size(builder, analyzer):
    matches = analyzer.find(builder.tree.root, "*", min_size=8)
    assert sorted(node.name for node in matches) == ["a.txt", "intro.md"]


def test_find_does_not_include_start(builder, analyzer):
    docs = builder.tree.root.child("docs")
    assert analyzer.find(docs, "docs") == []


def test_walk_does_not_follow_directory_symlinks(sample_root):
    from dirshell.file_system_tree.tree_builder import TreeBuilder

    try:
        os.symlink(sample_root, sample_root / "docs" / "loop")
    except (OSError, NotImplementedError):
        pytest.skip("Symlink creation not supported on this platform/environment")

    builder = TreeBuilder()
    builder.load(sample_root)
    names = [node.name for node in FileAnalyzer(builder).walk(builder.tree.root)]
    assert names.count("loop") == 1
    assert names.count("a.txt") == 1
