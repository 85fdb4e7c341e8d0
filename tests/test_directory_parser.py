"""Tests for parsers/directory.py - directory trees, merging and flattening."""

import pytest

from gsdgraph.config.defaults import DEFAULT_SRC_IGNORE_PATTERNS
from gsdgraph.fs import MemoryFileSystem
from gsdgraph.models import LinkKind, NodeType, SourceConfig, TreeNode
from gsdgraph.parsers.directory import (
    flatten_tree,
    parse_directories,
    parse_directory,
    parse_directory_with_source,
    should_ignore,
)


class TestParseDirectory:
    def test_missing_directory(self, tmp_path):
        result = parse_directory(tmp_path / "missing")

        assert result.tree is None
        assert result.files == []
        assert result.error == "Directory not found"

    def test_file_instead_of_directory(self, tmp_path):
        (tmp_path / "file.txt").write_text("x")

        result = parse_directory(tmp_path / "file.txt")

        assert result.tree is None
        assert result.error == "Directory not found"

    def test_legacy_root_and_ids(self, memory_fs):
        result = parse_directory("/proj/.planning", memory_fs)

        tree = result.tree
        assert tree.id == "dir-planning"
        assert tree.name == ".planning"
        assert tree.path == ""
        assert tree.source_type == "planning"

        # Entries come back sorted by name, so upper-case names sort first
        assert [child.id for child in tree.children] == [
            "file-REQUIREMENTS.md",
            "file-ROADMAP.md",
            "file-STATE.md",
            "dir-phases",
        ]

    def test_nested_ids_and_paths(self, memory_fs):
        result = parse_directory("/proj/.planning", memory_fs)

        plan = next(f for f in result.files if f.name == "01-01-PLAN.md")
        assert plan.id == "file-phases-01-foundation-01-01-PLAN.md"
        assert plan.path == "phases/01-foundation/01-01-PLAN.md"
        assert plan.extension == ".md"
        assert plan.type == NodeType.FILE
        assert plan.children is None

    def test_files_collected_flat(self, memory_fs):
        result = parse_directory("/proj/.planning", memory_fs)

        assert sorted(f.name for f in result.files) == [
            "01-01-PLAN.md",
            "REQUIREMENTS.md",
            "ROADMAP.md",
            "STATE.md",
        ]

    def test_real_filesystem(self, sample_project):
        result = parse_directory(sample_project / ".planning")

        assert result.error is None
        phases = next(c for c in result.tree.children if c.name == "phases")
        assert phases.id == "dir-phases"
        assert phases.children[0].id == "dir-phases-01-foundation"

    def test_ids_stable_across_parses(self, sample_project):
        first = flatten_tree(parse_directory(sample_project / ".planning").tree)
        second = flatten_tree(parse_directory(sample_project / ".planning").tree)

        assert [n.id for n in first.nodes] == [n.id for n in second.nodes]

    def test_extension_is_lowercased(self):
        fs = MemoryFileSystem({"/d/README.MD": "", "/d/Makefile": ""})

        result = parse_directory("/d", fs)

        extensions = {f.name: f.extension for f in result.files}
        assert extensions == {"README.MD": ".md", "Makefile": ""}


class TestParseDirectoryWithSource:
    def test_source_prefixed_ids(self):
        fs = MemoryFileSystem({"/proj/src/main/app.js": ""})

        result = parse_directory_with_source("/proj/src", "src", fs=fs)

        assert result.tree.id == "src-dir-root"
        assert result.tree.name == "src"
        main = result.tree.children[0]
        assert main.id == "src-dir-main"
        assert main.children[0].id == "src-file-main-app.js"
        assert main.children[0].source_type == "src"

    def test_ignored_entries_are_not_descended(self, memory_fs):
        result = parse_directory_with_source(
            "/proj/src", "src", DEFAULT_SRC_IGNORE_PATTERNS, fs=memory_fs
        )

        assert [c.name for c in result.tree.children] == ["main"]
        assert all("node_modules" not in f.path for f in result.files)


class TestShouldIgnore:
    @pytest.mark.parametrize(
        "name,patterns,expected",
        [
            ("node_modules", ["node_modules"], True),
            ("output", ["out"], True),  # prefix match
            ("src", ["out"], False),
            ("app.pyc", ["*.pyc"], True),
            ("app.py", ["*.pyc"], False),
            ("anything", [], False),
        ],
    )
    def test_should_ignore(self, name, patterns, expected):
        assert should_ignore(name, patterns) is expected


class TestParseDirectories:
    @pytest.fixture
    def configs(self):
        return [
            SourceConfig("/proj/.planning", "planning"),
            SourceConfig("/proj/src", "src", tuple(DEFAULT_SRC_IGNORE_PATTERNS)),
            SourceConfig("/proj/docs", "docs"),
        ]

    def test_synthetic_root(self, configs, memory_fs):
        result = parse_directories(configs, "/proj", memory_fs)

        assert result.tree.id == "dir-root"
        assert result.tree.name == "proj"
        assert result.tree.source_type == "root"
        assert result.tree.path == "/proj"

    def test_missing_sources_are_skipped(self, configs, memory_fs):
        result = parse_directories(configs, "/proj", memory_fs)

        assert [c.id for c in result.tree.children] == ["planning-dir-root", "src-dir-root"]

    def test_files_aggregated_across_sources(self, configs, memory_fs):
        result = parse_directories(configs, "/proj", memory_fs)

        assert {f.source_type for f in result.files} == {"planning", "src"}
        assert "src-file-main-app.js" in {f.id for f in result.files}

    def test_nodes_and_links_are_flattened(self, configs, memory_fs):
        result = parse_directories(configs, "/proj", memory_fs)

        assert result.nodes[0].id == "dir-root"
        assert len(result.nodes) == result.tree.count()
        assert len(result.links) == len(result.nodes) - 1

    def test_no_sources(self, memory_fs):
        result = parse_directories([], "/proj", memory_fs)

        assert result.tree.children == []
        assert [n.id for n in result.nodes] == ["dir-root"]
        assert result.links == []


def _tree():
    leaf = TreeNode("file-a.md", "a.md", NodeType.FILE, "sub/a.md", "planning", ".md")
    sub = TreeNode("dir-sub", "sub", NodeType.DIRECTORY, "sub", "planning", children=[leaf])
    top = TreeNode("file-b.md", "b.md", NodeType.FILE, "b.md", "planning", ".md")
    return TreeNode(
        "dir-planning", ".planning", NodeType.DIRECTORY, "", "planning", children=[sub, top]
    )


class TestFlattenTree:
    def test_none_tree(self):
        graph = flatten_tree(None)
        assert graph.nodes == []
        assert graph.links == []

    def test_single_node(self):
        root = TreeNode("dir-planning", ".planning", NodeType.DIRECTORY, "", children=[])
        graph = flatten_tree(root)
        assert [n.id for n in graph.nodes] == ["dir-planning"]
        assert graph.links == []

    def test_pre_order(self):
        graph = flatten_tree(_tree())
        assert [n.id for n in graph.nodes] == ["dir-planning", "dir-sub", "file-a.md", "file-b.md"]

    def test_n_nodes_n_minus_one_links(self):
        tree = _tree()
        graph = flatten_tree(tree)
        assert len(graph.nodes) == tree.count() == 4
        assert len(graph.links) == 3

    def test_links_are_contains_edges(self):
        graph = flatten_tree(_tree())
        assert [(l.source, l.target) for l in graph.links] == [
            ("dir-planning", "dir-sub"),
            ("dir-sub", "file-a.md"),
            ("dir-planning", "file-b.md"),
        ]
        assert {l.type for l in graph.links} == {LinkKind.CONTAINS}

    def test_node_fields_copied(self):
        graph = flatten_tree(_tree())
        leaf = graph.get_node("file-a.md")
        assert leaf.type == NodeType.FILE
        assert leaf.path == "sub/a.md"
        assert leaf.extension == ".md"
        assert leaf.source_type == "planning"
