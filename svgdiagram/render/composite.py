"""Final SVG assembly from a positioned graph."""

from __future__ import annotations

from html import escape

from ..icons import icon_svg, infer_group_icon
from ..layout.engine import Box, PositionedGraph, RoutedEdge
from ..theme import DEFAULT_CONFIG, Palette, RenderConfig
from .content import XHTML_NS
from .labels import EdgeLabelCompositor
from .overlays import OverlayRegistry
from .shapes import STROKE_WIDTH, build_shape, fmt_num

SVG_NS = "http://www.w3.org/2000/svg"

CLUSTER_HEADER_HEIGHT = 56
CLUSTER_HEADER_MASK = 14
CLUSTER_ICON_SIZE = 18

DASH_STYLES = {"dashed": "5, 5", "dotted": "2, 3"}

# Reloads the page when the watch service announces a new artifact. Inert when
# the SVG is opened from disk.
LIVE_RELOAD_SCRIPT = """(function(){
if(typeof EventSource==='undefined'||!/^https?:$/.test(location.protocol))return;
var source=new EventSource('/events');
source.onmessage=function(evt){if(evt.data==='reload')location.reload();};
})();"""


class CompositeRenderer:
    """Serializes clusters, edges, nodes and overlays into one SVG document."""

    def __init__(
        self,
        palette: Palette,
        overlays: OverlayRegistry,
        config: RenderConfig = DEFAULT_CONFIG,
    ):
        self.palette = palette
        self.overlays = overlays
        self.config = config
        self.labels = EdgeLabelCompositor(palette, config)

    def render(self, positioned: PositionedGraph) -> str:
        margin = self.config.margin
        parts = [
            self._header(positioned.width + 2 * margin, positioned.height + 2 * margin),
            self._defs(),
            f'<g transform="translate({margin},{margin})">',
        ]
        parts.extend(self._cluster(box) for box in positioned.clusters.values())
        parts.extend(self._edge(routed) for routed in positioned.edges)
        for node_id, box in positioned.nodes.items():
            parts.append(self._node(node_id, box, positioned))
        parts.extend(self._cluster_header(key, box) for key, box in positioned.clusters.items())
        parts.append("</g>")
        parts.append(
            '<foreignObject x="0" y="0" width="100%" height="100%" style="pointer-events:none;">'
            f'<div xmlns="{XHTML_NS}">{self.overlays.markup()}</div></foreignObject>'
        )
        parts.append("</svg>")
        return "".join(parts)

    def _header(self, width: float, height: float) -> str:
        w, h = fmt_num(width), fmt_num(height)
        return (
            f'<svg xmlns="{SVG_NS}" width="{w}" height="{h}" viewBox="0 0 {w} {h}" '
            f'style="background-color:{self.palette["background"]};font-family:{self.config.font_family};">'
        )

    def _defs(self) -> str:
        p = self.palette
        css = (
            f".edge-label{{font-size:11px;fill:{p['textFaded']};text-anchor:middle;dominant-baseline:middle}}"
            f".cluster-label{{color:{p['text']};fill:{p['text']};font-weight:700}}"
            f".diagram-item[data-interactive]:hover{{background-color:{p['hover']}}}"
            + self.overlays.css(p)
        )
        script = self.overlays.script() + "\n" + LIVE_RELOAD_SCRIPT
        return (
            f'<defs><style type="text/css"><![CDATA[{css}]]></style>'
            f'<script type="application/javascript"><![CDATA[{script}]]></script>'
            '<marker id="arrow" viewBox="0 0 10 10" refX="8" refY="5" markerWidth="6" markerHeight="6" '
            f'orient="auto-start-reverse"><path d="M 0 0 L 10 5 L 0 10 z" fill="{p["arrow"]}"/></marker></defs>'
        )

    def _cluster(self, box: Box) -> str:
        r = self.config.border_radius
        return (
            f'<g transform="translate({fmt_num(box.left)},{fmt_num(box.top)})">'
            f'<rect width="{fmt_num(box.width)}" height="{fmt_num(box.height)}" rx="{r}" ry="{r}" '
            f'fill="{self.palette["clusterBg"]}" stroke="{self.palette["border"]}" stroke-width="{STROKE_WIDTH}"/></g>'
        )

    def _edge(self, routed: RoutedEdge) -> str:
        relation = routed.edge.relation
        path = " ".join(
            f"{'M' if i == 0 else 'L'}{fmt_num(x)} {fmt_num(y)}" for i, (x, y) in enumerate(routed.points)
        )
        dash = DASH_STYLES.get(relation.style or "")
        dash_attr = f' stroke-dasharray="{dash}"' if dash else ""
        stroke = relation.color or self.palette["border"]
        svg = (
            f'<path d="{path}" stroke="{escape(stroke, quote=True)}" stroke-width="2" fill="none" '
            f'marker-end="url(#arrow)"{dash_attr}/>'
        )

        edge = routed.edge
        if edge.has_label_box and routed.label_center is not None:
            cx, cy = routed.label_center
            w, h = edge.label_width, edge.label_height
            svg += (
                f'<g class="edge-label-block" transform="translate({fmt_num(cx - w / 2)},{fmt_num(cy - h / 2)})">'
                f"{self.labels.compose(relation, w, h)}</g>"
            )
        return svg

    def _node(self, node_id: str, box: Box, positioned: PositionedGraph) -> str:
        node = positioned.graph.nodes[node_id]
        element = node.element
        shape = build_shape(
            element.shape,
            box.width,
            box.height,
            self.palette.color(element.type),
            self.palette["border"],
            self.config.border_radius,
        )
        return (
            f'<g class="diagram-node" data-element-id="{escape(node_id, quote=True)}" '
            f'transform="translate({fmt_num(box.left)},{fmt_num(box.top)})">{shape}{node.markup}</g>'
        )

    def _cluster_header(self, key: str, box: Box) -> str:
        width = fmt_num(box.width - 2)
        background = self.palette["clusterBg"]
        r = self.config.border_radius
        icon = icon_svg(infer_group_icon(key), CLUSTER_ICON_SIZE)
        icon_html = f'<span style="display:inline-flex;align-items:center;">{icon}</span>' if icon else ""
        return (
            f'<g class="cluster-header" transform="translate({fmt_num(box.left)},{fmt_num(box.top)})">'
            f'<rect x="1" y="1" width="{width}" height="{CLUSTER_HEADER_HEIGHT}" rx="{r}" ry="{r}" fill="{background}"/>'
            f'<rect x="1" y="{CLUSTER_HEADER_HEIGHT - CLUSTER_HEADER_MASK}" width="{width}" '
            f'height="{CLUSTER_HEADER_MASK}" fill="{background}"/>'
            f'<foreignObject width="{fmt_num(box.width)}" height="{CLUSTER_HEADER_HEIGHT}">'
            f'<div xmlns="{XHTML_NS}" class="cluster-label" style="font-family:{self.config.font_family};'
            "height:100%;display:flex;align-items:center;gap:8px;padding:0 15px;box-sizing:border-box;"
            f'font-size:{self.config.title_font_size}px;">{icon_html}<span>{escape(key)}</span></div>'
            "</foreignObject></g>"
        )
