"""Graph assembly - joins parser outputs into one node/link graph.

Exports:
- GraphAssembler: Incremental, id-deduplicating node/link accumulator
- build_graph: One-call assembly from ProjectData
"""

from gsdgraph.graph.builder import ROOT_ID, GraphAssembler, build_graph

__all__ = [
    "ROOT_ID",
    "GraphAssembler",
    "build_graph",
]
