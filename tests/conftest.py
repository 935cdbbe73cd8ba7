"""Pytest configuration and fixtures."""

from __future__ import annotations

import functools
from pathlib import Path

import pytest

from svgdiagram.generator import generate
from svgdiagram.layout.engine import Box, PositionedGraph, RoutedEdge
from svgdiagram.layout.graph import LayoutGraph
from svgdiagram.models import DiagramDocument, parse_document
from svgdiagram.render.overlays import OverlayRegistry
from svgdiagram.theme import THEMES, Palette


class StackLayout:
    """Deterministic stand-in for Graphviz: nodes stacked top to bottom."""

    gap = 40
    cluster_pad = 10
    cluster_header = 56

    def __init__(self) -> None:
        self.calls: list[str] = []

    def layout(self, graph: LayoutGraph, rank_direction: str) -> PositionedGraph:
        self.calls.append(rank_direction)
        column = max((n.width for n in graph.nodes.values()), default=0) + 2 * self.cluster_pad
        y = float(self.cluster_header)
        nodes: dict[str, Box] = {}
        for node in graph.nodes.values():
            nodes[node.id] = Box(column / 2, y + node.height / 2, node.width, node.height)
            y += node.height + self.gap + self.cluster_header

        clusters: dict[str, Box] = {}
        for key, cluster in graph.clusters.items():
            members = [nodes[m] for m in cluster.members]
            left = min(b.left for b in members) - self.cluster_pad
            top = min(b.top for b in members) - self.cluster_header
            right = max(b.left + b.width for b in members) + self.cluster_pad
            bottom = max(b.top + b.height for b in members) + self.cluster_pad
            clusters[key] = Box((left + right) / 2, (top + bottom) / 2, right - left, bottom - top)

        edges = []
        for edge in graph.edges:
            s, t = nodes[edge.source], nodes[edge.target]
            start = (s.x, s.top + s.height)
            end = (t.x, t.top)
            mid = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)
            edges.append(RoutedEdge(edge=edge, points=[start, mid, end], label_center=mid))

        return PositionedGraph(graph=graph, width=column, height=y, clusters=clusters, nodes=nodes, edges=edges)


@pytest.fixture
def stack_layout() -> StackLayout:
    return StackLayout()


@pytest.fixture
def render(stack_layout: StackLayout):
    """``generate`` bound to the stack layout."""
    return functools.partial(generate, layout_engine=stack_layout)


@pytest.fixture
def light() -> Palette:
    return THEMES["light"]


@pytest.fixture
def overlays() -> OverlayRegistry:
    return OverlayRegistry()


@pytest.fixture
def scenario_data() -> dict:
    """Two elements joined by a plain-text relation."""
    return {
        "elements": [
            {"id": "a", "type": "person", "title": "User"},
            {"id": "b", "type": "database", "title": "DB"},
        ],
        "relations": [{"from": "a", "to": "b", "label": "reads"}],
    }


@pytest.fixture
def rich_data() -> dict:
    """Clusters, list content with links and modals, a table and an html node."""
    return {
        "elements": [
            {
                "id": "api",
                "type": "system",
                "title": "Orders API",
                "subtitle": "REST",
                "group": "Backend services",
                "tags": ["service"],
                "content_list": [
                    {
                        "label": "Endpoints",
                        "symbol": "api",
                        "values": [
                            {"label": "GET /orders", "url": "https://example.com/orders"},
                            {
                                "label": "POST /orders",
                                "symbol": "new",
                                "modal": {"title": "Create", "html_content": "<b>body</b>", "on": "click"},
                            },
                            {
                                "label": "DELETE /orders",
                                "modal": {"title": "Remove", "html_content": "<i>gone</i>", "on": "hover"},
                            },
                        ],
                    },
                    {"label": "Empty", "values": []},
                ],
            },
            {
                "id": "db",
                "type": "tableau",
                "title": "orders",
                "group": "Backend services",
                "columns": ["id", "total"],
                "rows": [[1, 10], [2, 20]],
            },
            {"id": "note", "html_content": "<em>hello</em>", "shape": {"type": "diamond"}},
        ],
        "relations": [
            {"from": "api", "to": "db", "title": "writes", "content_list": [{"label": "INSERT", "symbol": "new"}]},
            {"from": "note", "to": "api", "html_label": "<u>see</u>", "style": "dashed"},
            {"from": "db", "to": "note", "style": "dotted", "color": "#ff0000"},
        ],
    }


@pytest.fixture
def scenario_document(scenario_data: dict) -> DiagramDocument:
    return parse_document(scenario_data)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "diagram.yaml"
    path.write_text(
        "\n".join(
            [
                "elements:",
                "  - id: a",
                "    type: person",
                "    title: User",
                "  - id: b",
                "    type: database",
                "    title: DB",
                "relations:",
                "  - from: a",
                "    to: b",
                "    label: reads",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return path
