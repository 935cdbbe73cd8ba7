"""Layout graph model and assembly from a diagram document."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import DanglingReferenceError
from ..models import DiagramDocument, Element, Relation
from ..render.content import NodeContentCompositor
from ..render.labels import label_size
from ..render.overlays import OverlayRegistry
from ..theme import DEFAULT_CONFIG, Palette, RenderConfig


@dataclass
class ClusterNode:
    key: str
    members: list[str] = field(default_factory=list)


@dataclass
class ContentNode:
    id: str
    element: Element
    markup: str
    width: float
    height: float
    parent: str | None = None


@dataclass
class LayoutEdge:
    index: int
    source: str
    target: str
    relation: Relation
    label_width: float | None = None
    label_height: float | None = None

    @property
    def has_label_box(self) -> bool:
        return self.label_width is not None and self.label_height is not None


@dataclass
class LayoutGraph:
    """Compound graph handed to the layout engine.

    Clusters and content nodes live in separate namespaces, so a group key may
    equal an element id without clashing.
    """

    clusters: dict[str, ClusterNode] = field(default_factory=dict)
    nodes: dict[str, ContentNode] = field(default_factory=dict)
    edges: list[LayoutEdge] = field(default_factory=list)

    def add_cluster(self, key: str) -> ClusterNode:
        return self.clusters.setdefault(key, ClusterNode(key))

    def add_node(self, node: ContentNode) -> None:
        self.nodes[node.id] = node
        if node.parent is not None:
            self.add_cluster(node.parent).members.append(node.id)

    def add_edge(self, edge: LayoutEdge) -> None:
        self.edges.append(edge)


def assemble(
    document: DiagramDocument,
    palette: Palette,
    *,
    overlays: OverlayRegistry,
    config: RenderConfig = DEFAULT_CONFIG,
) -> LayoutGraph:
    """Build the layout input graph: clusters, sized content nodes, edges.

    Composing node content here registers every modal in ``overlays``.
    """
    graph = LayoutGraph()
    compositor = NodeContentCompositor(palette, overlays, config)

    for group in document.groups:
        graph.add_cluster(group)

    for element in document.elements:
        content = compositor.compose(element)
        graph.add_node(
            ContentNode(
                id=element.id,
                element=element,
                markup=content.markup,
                width=element.width or content.width,
                height=element.height or content.height,
                parent=element.group,
            )
        )

    for index, relation in enumerate(document.relations):
        for endpoint, element_id in (("from", relation.source), ("to", relation.target)):
            if element_id not in graph.nodes:
                raise DanglingReferenceError(index, endpoint, element_id)
        size = label_size(relation)
        graph.add_edge(
            LayoutEdge(
                index=index,
                source=relation.source,
                target=relation.target,
                relation=relation,
                label_width=size[0] if size else None,
                label_height=size[1] if size else None,
            )
        )

    return graph
