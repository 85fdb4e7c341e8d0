"""
gsdgraph - Planning document parsers and entity graph assembly

gsdgraph reads the markdown planning documents of a GSD project
(ROADMAP.md, REQUIREMENTS.md, STATE.md), walks the project's file tree,
and merges everything into one deduplicated graph of nodes and typed
links for visualization front-ends.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gsdgraph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from gsdgraph.graph.builder import build_graph
from gsdgraph.models import Graph, GraphLink, GraphNode, LinkKind, NodeType, ProjectData, Status
from gsdgraph.parsers.directory import flatten_tree, parse_directories, parse_directory
from gsdgraph.parsers.requirements import parse_requirements
from gsdgraph.parsers.roadmap import parse_roadmap
from gsdgraph.parsers.state import parse_state

__all__ = [
    "__version__",
    "build_graph",
    "flatten_tree",
    "parse_directories",
    "parse_directory",
    "parse_requirements",
    "parse_roadmap",
    "parse_state",
    "Graph",
    "GraphLink",
    "GraphNode",
    "LinkKind",
    "NodeType",
    "ProjectData",
    "Status",
]
