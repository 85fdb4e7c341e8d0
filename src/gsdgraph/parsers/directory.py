"""DirectoryTreeBuilder - Typed directory/file trees with stable ids.

Ids are derived from the root-relative path with separators replaced by
"-", prefixed with the source marker and "dir-"/"file-":

    src/components/App.js   ->  src-file-components-App.js

so an unchanged tree always yields the same ids. The single-root legacy
mode (parse_directory) drops the source prefix and names its root
``dir-planning``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase

from gsdgraph.config.defaults import DEFAULT_SRC_IGNORE_PATTERNS
from gsdgraph.fs import FileSystem, PathLike, resolve_fs
from gsdgraph.models import (
    DirectoryResult,
    Graph,
    GraphLink,
    GraphNode,
    LinkKind,
    MultiDirectoryResult,
    NodeType,
    SourceConfig,
    TreeNode,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SRC_IGNORE_PATTERNS",
    "flatten_tree",
    "parse_directories",
    "parse_directory",
    "parse_directory_with_source",
]

PLANNING_ROOT_ID = "dir-planning"
PLANNING_ROOT_NAME = ".planning"
MERGED_ROOT_ID = "dir-root"

_SEPARATORS = re.compile(r"[/\\]")
_GLOB_CHARS = set("*?[")


def should_ignore(name: str, patterns: Iterable[str]) -> bool:
    """True if name equals, starts with, or glob-matches any pattern."""
    for pattern in patterns:
        if name == pattern or name.startswith(pattern):
            return True
        if _GLOB_CHARS & set(pattern) and fnmatchcase(name, pattern):
            return True
    return False


def _make_id(prefix: str, kind: str, rel_path: str) -> str:
    return f"{prefix}{kind}-{_SEPARATORS.sub('-', rel_path)}"


class _TreeWalker:
    """Depth-first walk of one source root."""

    def __init__(
        self,
        fs: FileSystem,
        source_type: str,
        id_prefix: str,
        ignore_patterns: Sequence[str],
    ) -> None:
        self.fs = fs
        self.source_type = source_type
        self.id_prefix = id_prefix
        self.ignore_patterns = list(ignore_patterns)
        self.files: list[TreeNode] = []

    def walk(self, current_path: str, relative_path: str = "") -> list[TreeNode]:
        try:
            entries = self.fs.list_dir(current_path)
        except OSError as e:
            logger.warning("Cannot list %s: %s", current_path, e)
            return []

        children: list[TreeNode] = []
        for entry in entries:
            if should_ignore(entry.name, self.ignore_patterns):
                continue

            full_path = os.path.join(current_path, entry.name)
            rel_path = f"{relative_path}/{entry.name}" if relative_path else entry.name

            if entry.is_dir:
                children.append(
                    TreeNode(
                        id=_make_id(self.id_prefix, "dir", rel_path),
                        name=entry.name,
                        type=NodeType.DIRECTORY,
                        path=rel_path,
                        source_type=self.source_type,
                        children=self.walk(full_path, rel_path),
                    )
                )
            elif entry.is_file:
                file_node = TreeNode(
                    id=_make_id(self.id_prefix, "file", rel_path),
                    name=entry.name,
                    type=NodeType.FILE,
                    path=rel_path,
                    source_type=self.source_type,
                    extension=os.path.splitext(entry.name)[1].lower(),
                )
                children.append(file_node)
                self.files.append(file_node)
        return children


def _basename(path: PathLike) -> str:
    return os.path.basename(os.path.normpath(str(path)))


def parse_directory_with_source(
    dir_path: PathLike,
    source_type: str,
    ignore_patterns: Sequence[str] = (),
    fs: FileSystem | None = None,
) -> DirectoryResult:
    """
    Parse one source root into a tree tagged with source_type.

    The root node is ``<source_type>-dir-root`` with an empty path.

    Returns:
        DirectoryResult; tree is None with error "Directory not found"
        if dir_path is not an existing directory
    """
    fs = resolve_fs(fs)
    if not fs.is_dir(dir_path):
        return DirectoryResult(tree=None, files=[], error="Directory not found")

    walker = _TreeWalker(fs, source_type, f"{source_type}-", ignore_patterns)
    tree = TreeNode(
        id=f"{source_type}-dir-root",
        name=_basename(dir_path),
        type=NodeType.DIRECTORY,
        path="",
        source_type=source_type,
        children=walker.walk(str(dir_path)),
    )
    return DirectoryResult(tree=tree, files=walker.files)


def parse_directory(planning_path: PathLike, fs: FileSystem | None = None) -> DirectoryResult:
    """
    Parse a .planning/ directory in the legacy single-root format.

    Ids carry no source prefix (``dir-phases``, ``file-ROADMAP.md``), the
    root is ``dir-planning`` named ``.planning``, and every node is tagged
    with source type "planning".

    Returns:
        DirectoryResult; tree None with error "Directory not found" if
        the directory does not exist
    """
    fs = resolve_fs(fs)
    if not fs.is_dir(planning_path):
        return DirectoryResult(tree=None, files=[], error="Directory not found")

    walker = _TreeWalker(fs, "planning", "", ())
    tree = TreeNode(
        id=PLANNING_ROOT_ID,
        name=PLANNING_ROOT_NAME,
        type=NodeType.DIRECTORY,
        path="",
        source_type="planning",
        children=walker.walk(str(planning_path)),
    )
    logger.debug("Parsed %d files under %s", len(walker.files), planning_path)
    return DirectoryResult(tree=tree, files=walker.files)


def parse_directories(
    configs: Iterable[SourceConfig],
    project_path: PathLike,
    fs: FileSystem | None = None,
) -> MultiDirectoryResult:
    """
    Parse several source roots and merge them under one synthetic root.

    Args:
        configs: Source roots with their source markers and ignore patterns
        project_path: Project root; its basename labels the merged root
        fs: Filesystem to read through (defaults to the local disk)

    Returns:
        MultiDirectoryResult with the merged tree, all files, and the
        flattened nodes/links. Sources whose path does not exist are skipped.
    """
    fs = resolve_fs(fs)
    subtrees: list[TreeNode] = []
    files: list[TreeNode] = []

    for config in configs:
        if not fs.exists(config.path):
            logger.info("Skipping non-existent directory: %s", config.path)
            continue
        result = parse_directory_with_source(
            config.path, config.source_type, config.ignore_patterns, fs=fs
        )
        if result.tree is not None:
            subtrees.append(result.tree)
            files.extend(result.files)

    root = TreeNode(
        id=MERGED_ROOT_ID,
        name=_basename(project_path),
        type=NodeType.DIRECTORY,
        path=str(project_path),
        source_type="root",
        children=subtrees,
    )
    flat = flatten_tree(root)
    return MultiDirectoryResult(tree=root, files=files, nodes=flat.nodes, links=flat.links)


def _to_graph_node(node: TreeNode) -> GraphNode:
    return GraphNode(
        id=node.id,
        name=node.name,
        type=node.type,
        path=node.path,
        extension=node.extension,
        source_type=node.source_type,
    )


def flatten_tree(tree: TreeNode | None) -> Graph:
    """
    Flatten a tree into nodes and ``contains`` links, pre-order.

    A tree of N nodes yields N nodes and N-1 links; None yields an
    empty Graph.
    """
    nodes: list[GraphNode] = []
    links: list[GraphLink] = []
    if tree is None:
        return Graph(nodes=nodes, links=links)

    stack: list[tuple[TreeNode, str | None]] = [(tree, None)]
    while stack:
        node, parent_id = stack.pop()
        nodes.append(_to_graph_node(node))
        if parent_id is not None:
            links.append(GraphLink(source=parent_id, target=node.id, type=LinkKind.CONTAINS))
        for child in reversed(node.children or []):
            stack.append((child, node.id))
    return Graph(nodes=nodes, links=links)
