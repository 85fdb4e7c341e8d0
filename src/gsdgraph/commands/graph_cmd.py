"""
gsdgraph.commands.graph_cmd - Assemble and print the project graph.
"""

from __future__ import annotations

import argparse
import json

from gsdgraph.commands import load_command_config
from gsdgraph.models import Graph, NodeType
from gsdgraph.project import build_project_graph
from gsdgraph.serialize import serialize_graph


def run(args: argparse.Namespace) -> int:
    """Run the graph command."""
    config = load_command_config(args)
    graph = build_project_graph(args.project, config, include_state=not args.no_state)

    if args.format == "summary":
        print(format_summary(graph))
    else:
        print(json.dumps(serialize_graph(graph), indent=2))
    return 0


def format_summary(graph: Graph) -> str:
    """Render node/link counts and the phase list as plain text."""
    data = serialize_graph(graph)
    lines = [
        f"Nodes: {data['metadata']['node_count']}",
        f"Links: {data['metadata']['link_count']}",
    ]
    for node_type, count in sorted(data["metadata"]["by_type"].items()):
        lines.append(f"  {node_type}: {count}")

    phases = [node for node in graph.nodes if node.type == NodeType.PHASE]
    plan_ids = {node.id for node in graph.nodes if node.type == NodeType.PLAN}
    if phases:
        lines.append("")
        lines.append("Phases:")
        for phase in phases:
            status = phase.status.value if phase.status else "unknown"
            plans = sum(1 for link in graph.links_from(phase.id) if link.target in plan_ids)
            lines.append(f"  [{status}] {phase.name} ({plans} plans)")
    return "\n".join(lines)
