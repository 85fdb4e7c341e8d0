"""Serialization - Export parsed records and graphs as JSON-compatible dicts.

Attribute names are converted to the camelCase keys front-ends expect
(``current_phase`` -> ``currentPhase``, ``source_type`` -> ``sourceType``)
and enums are replaced by their values.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from gsdgraph.models import Graph, GraphLink, GraphNode


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_dict(value: Any, drop_none: bool = False) -> Any:
    """Convert a model (or list/dict of models) to plain JSON data.

    Args:
        value: Dataclass instance, enum, list, dict, or scalar.
        drop_none: Omit dataclass fields whose value is None.

    Returns:
        JSON-compatible structure.
    """
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None and drop_none:
                continue
            result[_camel(f.name)] = to_dict(item, drop_none)
        return result
    if isinstance(value, (list, tuple)):
        return [to_dict(item, drop_none) for item in value]
    if isinstance(value, dict):
        return {key: to_dict(item, drop_none) for key, item in value.items()}
    return value


def serialize_node(node: GraphNode) -> dict[str, Any]:
    """Serialize a graph node, omitting fields that do not apply to its type."""
    return to_dict(node, drop_none=True)


def serialize_link(link: GraphLink) -> dict[str, Any]:
    return {"source": link.source, "target": link.target, "type": link.type.value}


def serialize_graph(graph: Graph) -> dict[str, Any]:
    """
    Serialize a Graph to a JSON-compatible dict.

    Returns:
        Dict with nodes, links, and metadata counts by node type.
    """
    by_type: dict[str, int] = {}
    for node in graph.nodes:
        by_type[node.type.value] = by_type.get(node.type.value, 0) + 1

    return {
        "nodes": [serialize_node(node) for node in graph.nodes],
        "links": [serialize_link(link) for link in graph.links],
        "metadata": {
            "node_count": len(graph.nodes),
            "link_count": len(graph.links),
            "by_type": by_type,
        },
    }
