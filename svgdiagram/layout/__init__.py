"""Graph assembly and layout invocation."""

from .engine import Box, GraphvizLayout, LayoutEngine, PositionedGraph, RoutedEdge, to_dot
from .graph import ClusterNode, ContentNode, LayoutEdge, LayoutGraph, assemble

__all__ = [
    "assemble",
    "LayoutGraph",
    "ClusterNode",
    "ContentNode",
    "LayoutEdge",
    "GraphvizLayout",
    "LayoutEngine",
    "PositionedGraph",
    "Box",
    "RoutedEdge",
    "to_dot",
]
