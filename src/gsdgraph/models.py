"""
gsdgraph.models - Data models for parsed planning entities and graphs.

Every record here is produced fresh by a parser call and is not mutated
afterwards. Parser results carry an optional ``error`` string instead of
raising when their source document or directory is missing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Status(Enum):
    """Progress status shared by phases, plans, requirements and state."""

    UNKNOWN = "unknown"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"
    BLOCKED = "blocked"


class NodeType(Enum):
    """Types of nodes in the assembled graph."""

    ROOT = "root"
    PHASE = "phase"
    PLAN = "plan"
    REQUIREMENT = "requirement"
    DIRECTORY = "directory"
    FILE = "file"
    BLOCKER = "blocker"


class LinkKind(Enum):
    """Types of links between graph nodes.

    - CONTAINS: structural parent/child (root->phase, phase->plan, dir->file)
    - MAPS_TO: requirement is traced to a phase
    - BLOCKED: blocker holds up a phase
    - DEFAULT: untyped link
    """

    CONTAINS = "contains"
    MAPS_TO = "maps-to"
    BLOCKED = "blocked"
    DEFAULT = "default"


def format_phase_number(number: float) -> str:
    """Render a phase number the way it reads in the roadmap (1, not 1.0)."""
    if number.is_integer():
        return str(int(number))
    return repr(number)


@dataclass(frozen=True)
class Plan:
    """A unit of work file (``NN-NN-PLAN.md``) nested under one phase."""

    id: str
    file: str
    name: str
    description: str
    status: Status


@dataclass(frozen=True)
class Phase:
    """
    A top-level roadmap milestone.

    Attributes:
        id: ``phase-`` plus the number exactly as written in the roadmap
        number: Numeric phase number, fractional for sub-phases (2.5)
        name: Phase title from the ``### Phase N: Name`` header
        goal: Text of the ``**Goal**:`` line, empty if absent
        status: Resolved phase status
        plans: Plans in document order
    """

    id: str
    number: float
    name: str
    goal: str
    status: Status
    plans: list[Plan] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"Phase {format_phase_number(self.number)}: {self.name}"


@dataclass(frozen=True)
class Requirement:
    """A tracked requirement such as ``GRF-01``."""

    id: str
    code: str
    description: str
    category: str
    status: Status


@dataclass(frozen=True)
class Blocker:
    """An obstacle from STATE.md; ``type`` is ``"todo"`` for promoted todos."""

    id: str
    description: str
    type: str | None = None


@dataclass(frozen=True)
class TreeNode:
    """
    A directory or file record from the tree builder.

    Attributes:
        id: Stable id derived from source marker and relative path
        name: Entry name
        type: NodeType.DIRECTORY or NodeType.FILE
        path: Root-relative, slash-joined path ("" for a source root)
        source_type: Source marker ("planning", "src", "root", ...)
        extension: Lower-cased file extension with dot, None for directories
        children: Child nodes for directories, None for files
    """

    id: str
    name: str
    type: NodeType
    path: str
    source_type: str | None = None
    extension: str | None = None
    children: list[TreeNode] | None = None

    @property
    def is_directory(self) -> bool:
        return self.type == NodeType.DIRECTORY

    def count(self) -> int:
        """Return the number of nodes in this subtree, self included."""
        return 1 + sum(child.count() for child in self.children or [])


@dataclass(frozen=True)
class SourceConfig:
    """One filesystem root to merge into the project tree."""

    path: str
    source_type: str
    ignore_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class GraphNode:
    """
    A flattened, type-tagged graph node.

    Only ``id``, ``name`` and ``type`` are always set; the remaining
    fields are filled according to the node type.
    """

    id: str
    name: str
    type: NodeType
    status: Status | None = None
    goal: str | None = None
    description: str | None = None
    category: str | None = None
    path: str | None = None
    extension: str | None = None
    source_type: str | None = None
    file: str | None = None


@dataclass(frozen=True)
class GraphLink:
    """A typed link between two node ids."""

    source: str
    target: str
    type: LinkKind = LinkKind.DEFAULT


@dataclass(frozen=True)
class Graph:
    """Nodes and links, as produced by flatten_tree and build_graph."""

    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def links_from(self, node_id: str) -> list[GraphLink]:
        return [link for link in self.links if link.source == node_id]


@dataclass(frozen=True)
class RoadmapResult:
    phases: list[Phase] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class RequirementsResult:
    requirements: list[Requirement] = field(default_factory=list)
    phase_mapping: dict[str, int] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class StateResult:
    """
    Current position and blockers from STATE.md.

    ``status`` is UNKNOWN only when STATE.md is missing or unreadable.
    """

    current_phase: int | None = None
    current_plan: int | None = None
    status: Status = Status.UNKNOWN
    blockers: list[Blocker] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class DirectoryResult:
    tree: TreeNode | None = None
    files: list[TreeNode] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class MultiDirectoryResult:
    """Several source roots merged under one synthetic root, plus its flattened form."""

    tree: TreeNode
    files: list[TreeNode] = field(default_factory=list)
    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)


@dataclass
class ProjectData:
    """
    Inputs for build_graph. Any field may be None.

    ``directory`` may be a flattened Graph, a TreeNode, or a
    DirectoryResult/MultiDirectoryResult.
    """

    roadmap: RoadmapResult | None = None
    requirements: RequirementsResult | None = None
    directory: Any = None
    state: StateResult | None = None
