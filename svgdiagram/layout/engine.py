"""Layout invocation through Graphviz ``dot``.

The assembled graph is translated into a ``graphviz.Digraph`` (clusters become
``cluster_N`` subgraphs, nodes become fixed-size boxes, label boxes become
fixed-size HTML-like labels), ``dot`` is run with JSON output, and the result
is mapped back into pixel space with a top-left origin. No geometry is
computed here; dot's answer is authoritative.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol

import graphviz

from ..errors import RenderError
from ..theme import DEFAULT_CONFIG, RANK_DIRECTIONS, RenderConfig
from .graph import LayoutEdge, LayoutGraph

Point = tuple[float, float]

POINTS_PER_INCH = 72.0
CLUSTER_HEADER_HEIGHT = 56
CLUSTER_MARGIN = 16
FALLBACK_EXTENT = (1200.0, 800.0)


@dataclass(frozen=True)
class Box:
    """Center-anchored rectangle, as layout engines report them."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    def contains(self, other: "Box") -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and other.left + other.width <= self.left + self.width
            and other.top + other.height <= self.top + self.height
        )


@dataclass
class RoutedEdge:
    edge: LayoutEdge
    points: list[Point]
    label_center: Point | None = None


@dataclass
class PositionedGraph:
    graph: LayoutGraph
    width: float
    height: float
    clusters: dict[str, Box] = field(default_factory=dict)
    nodes: dict[str, Box] = field(default_factory=dict)
    edges: list[RoutedEdge] = field(default_factory=list)


class LayoutEngine(Protocol):
    def layout(self, graph: LayoutGraph, rank_direction: str) -> PositionedGraph: ...


def _inches(px: float) -> str:
    return f"{px / POINTS_PER_INCH:.4f}"


def _spacer_label(width: float, height: float) -> str:
    """HTML-like label that reserves exactly ``width`` x ``height`` points."""
    return (
        '<<TABLE BORDER="0" CELLBORDER="0" CELLPADDING="0" CELLSPACING="0">'
        f'<TR><TD FIXEDSIZE="TRUE" WIDTH="{round(width)}" HEIGHT="{round(height)}"></TD></TR>'
        "</TABLE>>"
    )


def _floats(value: str) -> list[float]:
    return [float(v) for v in value.split(",")]


def _parse_spline(pos: str) -> list[Point]:
    """Routed points of a dot edge ``pos`` (``s,x,y e,x,y p1 p2 ...``)."""
    start: Point | None = None
    end: Point | None = None
    points: list[Point] = []
    for token in pos.split(";")[0].split():
        if token.startswith("s,"):
            x, y = _floats(token[2:])
            start = (x, y)
        elif token.startswith("e,"):
            x, y = _floats(token[2:])
            end = (x, y)
        else:
            x, y = _floats(token)
            points.append((x, y))
    if start is not None:
        points.insert(0, start)
    if end is not None:
        points.append(end)
    return points


class GraphvizLayout:
    """Runs Graphviz ``dot`` over a LayoutGraph."""

    def __init__(
        self,
        config: RenderConfig = DEFAULT_CONFIG,
        *,
        cluster_header_height: int = CLUSTER_HEADER_HEIGHT,
        program: str = "dot",
    ):
        self.config = config
        self.cluster_header_height = cluster_header_height
        self.program = program

    def build(self, graph: LayoutGraph, rank_direction: str) -> tuple[graphviz.Digraph, dict[str, str]]:
        """Digraph for ``graph`` plus a map from dot node names to element ids."""
        if rank_direction not in RANK_DIRECTIONS:
            raise ValueError(f"rank direction must be one of {', '.join(RANK_DIRECTIONS)}")

        dot = graphviz.Digraph("diagram", engine=self.program)
        dot.attr(
            rankdir=rank_direction,
            nodesep=_inches(self.config.nodesep),
            ranksep=_inches(self.config.ranksep),
            splines="polyline",
            pad="0",
            margin="0",
        )
        dot.attr("node", shape="box", fixedsize="true", label="", margin="0")

        names: dict[str, str] = {}
        node_name = {node_id: f"n{i}" for i, node_id in enumerate(graph.nodes)}

        def add_node(target: graphviz.Digraph, node_id: str) -> None:
            node = graph.nodes[node_id]
            names[node_name[node_id]] = node_id
            target.node(node_name[node_id], width=_inches(node.width), height=_inches(node.height))

        for i, cluster in enumerate(graph.clusters.values()):
            names[f"cluster_{i}"] = cluster.key
            with dot.subgraph(name=f"cluster_{i}") as sub:
                header_width = 11 * len(cluster.key) + 48
                sub.attr(
                    label=_spacer_label(header_width, self.cluster_header_height),
                    labelloc="t",
                    margin=str(CLUSTER_MARGIN),
                )
                for member in cluster.members:
                    add_node(sub, member)

        for node_id, node in graph.nodes.items():
            if node.parent is None:
                add_node(dot, node_id)

        for edge in graph.edges:
            attrs: dict[str, str] = {"id": f"edge{edge.index}"}
            if edge.has_label_box:
                attrs["label"] = _spacer_label(edge.label_width, edge.label_height)
            dot.edge(node_name[edge.source], node_name[edge.target], **attrs)

        return dot, names

    def to_dot(self, graph: LayoutGraph, rank_direction: str) -> str:
        dot, _ = self.build(graph, rank_direction)
        return dot.source

    def layout(self, graph: LayoutGraph, rank_direction: str) -> PositionedGraph:
        dot, names = self.build(graph, rank_direction)
        try:
            raw = dot.pipe(format="json", encoding="utf-8")
        except graphviz.ExecutableNotFound as exc:
            raise RenderError(f"Graphviz '{self.program}' executable not found on PATH") from exc
        except graphviz.CalledProcessError as exc:
            raise RenderError(f"Graphviz layout failed: {exc}") from exc
        return self.read(graph, json.loads(raw), names)

    def read(self, graph: LayoutGraph, data: dict[str, Any], names: dict[str, str]) -> PositionedGraph:
        """Map dot's JSON output back onto ``graph`` in top-left pixel space."""
        llx, lly, urx, ury = _floats(data.get("bb") or "0,0,0,0")

        def flip(x: float, y: float) -> Point:
            return (x - llx, ury - y)

        width = (urx - llx) or FALLBACK_EXTENT[0]
        height = (ury - lly) or FALLBACK_EXTENT[1]
        positioned = PositionedGraph(graph=graph, width=width, height=height)

        for obj in data.get("objects", []):
            name = obj.get("name")
            if name not in names:
                continue
            if name.startswith("cluster_") and "bb" in obj:
                c_llx, c_lly, c_urx, c_ury = _floats(obj["bb"])
                cx, cy = flip((c_llx + c_urx) / 2, (c_lly + c_ury) / 2)
                positioned.clusters[names[name]] = Box(cx, cy, c_urx - c_llx, c_ury - c_lly)
            elif "pos" in obj:
                node = graph.nodes[names[name]]
                x, y = flip(*_floats(obj["pos"]))
                positioned.nodes[node.id] = Box(x, y, node.width, node.height)

        by_index = {edge.index: edge for edge in graph.edges}
        for obj in data.get("edges", []):
            edge_id = str(obj.get("id", ""))
            if not edge_id.startswith("edge") or "pos" not in obj:
                continue
            edge = by_index[int(edge_id[4:])]
            points = [flip(x, y) for x, y in _parse_spline(obj["pos"])]
            if "lp" in obj:
                center = flip(*_floats(obj["lp"]))
            else:
                center = points[len(points) // 2] if points else None
            positioned.edges.append(RoutedEdge(edge=edge, points=points, label_center=center))
        positioned.edges.sort(key=lambda r: r.edge.index)

        return positioned


def to_dot(graph: LayoutGraph, rank_direction: str, config: RenderConfig = DEFAULT_CONFIG) -> str:
    return GraphvizLayout(config).to_dot(graph, rank_direction)
