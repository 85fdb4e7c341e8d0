"""GraphAssembler - Merge parser outputs into one node/link graph.

Build order is fixed for determinism:

1. project root
2. phases (root -contains-> phase) and their plans (phase -contains-> plan)
3. requirements, each linked -maps-to-> its phase if that phase node exists
4. directory nodes and their contains links; root -contains-> dir-planning
5. blockers from STATE.md, linked -blocked-> the current phase

Node insertion is idempotent by id: the first node added with an id
wins and later ones are dropped. That is the only deduplication.

Every part may be a parser dataclass or a plain mapping with the same
(snake_case) fields, so JSON-shaped input builds the same graph.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from gsdgraph.models import (
    DirectoryResult,
    Graph,
    GraphLink,
    GraphNode,
    LinkKind,
    MultiDirectoryResult,
    NodeType,
    ProjectData,
    Status,
    TreeNode,
    format_phase_number,
)
from gsdgraph.parsers.directory import PLANNING_ROOT_ID, flatten_tree

logger = logging.getLogger(__name__)

ROOT_ID = "project-root"
ROOT_NAME = "Project"
BLOCKER_LABEL_CHARS = 30


def _get(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an object."""
    if isinstance(item, Mapping):
        value = item.get(name)
    else:
        value = getattr(item, name, None)
    return default if value is None else value


def _status(value: Any) -> Status | None:
    if value is None or isinstance(value, Status):
        return value
    try:
        return Status(value)
    except ValueError:
        return Status.UNKNOWN


def _phase_name(phase: Any) -> str:
    number = _get(phase, "number")
    if number is None:
        return str(_get(phase, "name", ""))
    return f"Phase {format_phase_number(float(number))}: {_get(phase, 'name', '')}"


class GraphAssembler:
    """Accumulates nodes and links for one build_graph call.

    Example:
        assembler = GraphAssembler()
        assembler.add_roadmap(roadmap)
        assembler.add_requirements(requirements)
        graph = assembler.build()
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._links: list[GraphLink] = []
        self.add_node(GraphNode(id=ROOT_ID, name=ROOT_NAME, type=NodeType.ROOT))

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_node(self, node: GraphNode) -> GraphNode:
        """Add node unless its id is taken; return the node stored under that id."""
        if node.id not in self._nodes:
            self._nodes[node.id] = node
        return self._nodes[node.id]

    def add_link(self, source: str, target: str, kind: LinkKind = LinkKind.DEFAULT) -> None:
        self._links.append(GraphLink(source=source, target=target, type=kind))

    def add_phase(self, phase: Any) -> None:
        phase_node = self.add_node(
            GraphNode(
                id=_get(phase, "id"),
                name=_phase_name(phase),
                type=NodeType.PHASE,
                status=_status(_get(phase, "status")),
                goal=_get(phase, "goal"),
            )
        )
        self.add_link(ROOT_ID, phase_node.id, LinkKind.CONTAINS)

        for plan in _get(phase, "plans", []):
            plan_node = self.add_node(
                GraphNode(
                    id=_get(plan, "id"),
                    name=_get(plan, "name"),
                    type=NodeType.PLAN,
                    status=_status(_get(plan, "status")),
                    description=_get(plan, "description"),
                    file=_get(plan, "file"),
                )
            )
            self.add_link(phase_node.id, plan_node.id, LinkKind.CONTAINS)

    def add_roadmap(self, roadmap: Any) -> None:
        for phase in _get(roadmap, "phases", []):
            self.add_phase(phase)

    def add_requirements(self, requirements: Any) -> None:
        """Add requirement nodes; link a requirement only to an existing phase node."""
        mapping = _get(requirements, "phase_mapping", {})
        for req in _get(requirements, "requirements", []):
            code = _get(req, "code")
            req_node = self.add_node(
                GraphNode(
                    id=_get(req, "id"),
                    name=code,
                    type=NodeType.REQUIREMENT,
                    status=_status(_get(req, "status")),
                    description=_get(req, "description"),
                    category=_get(req, "category"),
                )
            )
            phase_number = mapping.get(code)
            if phase_number is None:
                continue
            phase_id = f"phase-{phase_number}"
            if self.has_node(phase_id):
                self.add_link(req_node.id, phase_id, LinkKind.MAPS_TO)
            else:
                logger.debug("%s maps to unknown %s, no link", code, phase_id)

    def add_directory(self, directory: Graph) -> None:
        for node in directory.nodes:
            node_type = _get(node, "type")
            is_dir = node_type in (NodeType.DIRECTORY, NodeType.DIRECTORY.value)
            self.add_node(
                GraphNode(
                    id=_get(node, "id"),
                    name=_get(node, "name"),
                    type=NodeType.DIRECTORY if is_dir else NodeType.FILE,
                    path=_get(node, "path"),
                    extension=_get(node, "extension"),
                    source_type=_get(node, "source_type"),
                )
            )
        for link in directory.links:
            self.add_link(_get(link, "source"), _get(link, "target"), LinkKind.CONTAINS)

        # Legacy single-root trees hang off the project root
        if self.has_node(PLANNING_ROOT_ID):
            self.add_link(ROOT_ID, PLANNING_ROOT_ID, LinkKind.CONTAINS)

    def add_blockers(self, state: Any) -> None:
        current_phase = _get(state, "current_phase")
        current_phase_id = f"phase-{current_phase}" if current_phase is not None else None
        for blocker in _get(state, "blockers", []):
            description = _get(blocker, "description", "")
            blocker_node = self.add_node(
                GraphNode(
                    id=_get(blocker, "id"),
                    name=f"Blocker: {description[:BLOCKER_LABEL_CHARS]}...",
                    type=NodeType.BLOCKER,
                    status=Status.BLOCKED,
                    description=description,
                )
            )
            if current_phase_id and self.has_node(current_phase_id):
                self.add_link(blocker_node.id, current_phase_id, LinkKind.BLOCKED)

    def build(self) -> Graph:
        """Return a snapshot of the accumulated nodes and links."""
        return Graph(nodes=list(self._nodes.values()), links=list(self._links))


def _as_directory_graph(directory: Any) -> Graph | None:
    """Accept a flattened Graph or {nodes, links} mapping, a TreeNode, or a parser result."""
    if isinstance(directory, Graph):
        return directory
    if isinstance(directory, MultiDirectoryResult):
        return Graph(nodes=directory.nodes, links=directory.links)
    if isinstance(directory, DirectoryResult):
        return flatten_tree(directory.tree)
    if isinstance(directory, TreeNode):
        return flatten_tree(directory)
    if isinstance(directory, Mapping) and ("nodes" in directory or "links" in directory):
        return Graph(
            nodes=list(directory.get("nodes") or []),
            links=list(directory.get("links") or []),
        )
    logger.warning("Ignoring directory data of unsupported type %s", type(directory).__name__)
    return None


def build_graph(project_data: ProjectData | Mapping[str, Any] | None) -> Graph:
    """
    Build one deduplicated graph from parsed project data.

    Args:
        project_data: ProjectData, or a mapping with any of the keys
            "roadmap", "requirements", "directory" and "state". Missing
            or None parts are skipped.

    Returns:
        Graph whose first node is always the ``project-root`` node
    """
    assembler = GraphAssembler()
    if project_data is None:
        return assembler.build()

    roadmap = _get(project_data, "roadmap")
    if roadmap is not None:
        assembler.add_roadmap(roadmap)

    requirements = _get(project_data, "requirements")
    if requirements is not None:
        assembler.add_requirements(requirements)

    directory = _get(project_data, "directory")
    if directory is not None:
        directory_graph = _as_directory_graph(directory)
        if directory_graph is not None:
            assembler.add_directory(directory_graph)

    state = _get(project_data, "state")
    if state is not None:
        assembler.add_blockers(state)

    graph = assembler.build()
    logger.debug("Built graph with %d nodes, %d links", len(graph.nodes), len(graph.links))
    return graph
