"""Edge label composition."""

from __future__ import annotations

from html import escape

from ..icons import icon_svg
from ..models import Relation
from ..theme import DEFAULT_CONFIG, Palette, RenderConfig
from .content import XHTML_NS

STRUCTURED_LABEL_SIZE = (180, 50)
HTML_LABEL_SIZE = (160, 40)
TEXT_LABEL_HEIGHT = 20


def label_size(relation: Relation) -> tuple[float, float] | None:
    """Box the layout engine must reserve for the relation's label, if any."""
    mode = relation.label_mode
    if mode == "none":
        return None
    if mode == "structured":
        default = STRUCTURED_LABEL_SIZE
    elif mode == "html":
        default = HTML_LABEL_SIZE
    else:
        default = (max(24, 7 * len(relation.label or "") + 12), TEXT_LABEL_HEIGHT)
    return (relation.width or default[0], relation.height or default[1])


class EdgeLabelCompositor:
    """Markup for one relation label, in label-local coordinates."""

    def __init__(self, palette: Palette, config: RenderConfig = DEFAULT_CONFIG):
        self.palette = palette
        self.config = config

    def compose(self, relation: Relation, width: float, height: float) -> str:
        mode = relation.label_mode
        if mode == "structured":
            return self._foreign_object(width, height, self._card(relation))
        if mode == "html":
            html = (
                f'<div xmlns="{XHTML_NS}" style="font-family:{self.config.font_family};'
                f'height:100%;width:100%;box-sizing:border-box;">{relation.html_label}</div>'
            )
            return self._foreign_object(width, height, html)
        if mode == "text":
            return (
                f'<rect width="{width}" height="{height}" fill="{self.palette["background"]}"/>'
                f'<text x="{width / 2:g}" y="{height / 2:g}" class="edge-label">{escape(relation.label or "")}</text>'
            )
        return ""

    @staticmethod
    def _foreign_object(width: float, height: float, html: str) -> str:
        return f'<foreignObject width="{width}" height="{height}">{html}</foreignObject>'

    def _card(self, relation: Relation) -> str:
        p = self.palette
        html = (
            f'<div xmlns="{XHTML_NS}" class="edge-card" style="font-family:{self.config.font_family};'
            f"color:{p['text']};padding:10px;height:100%;width:100%;box-sizing:border-box;"
            "display:flex;flex-direction:column;justify-content:center;"
            f"background-color:{p['api']};border:1px solid {p['border']};"
            f'border-radius:{self.config.border_radius}px;"><div>'
        )
        if relation.title:
            html += f'<h4 style="text-align:center;margin:0 0 8px 0;font-weight:600;">{escape(relation.title)}</h4>'
        if relation.subtitle:
            html += (
                f'<p style="text-align:center;margin:0 0 8px 0;font-size:12px;color:{p["textFaded"]};">'
                f"{escape(relation.subtitle)}</p>"
            )
        if relation.content_list:
            html += '<ul style="text-align:left;padding-left:15px;margin:0;list-style:none;">'
            for item in relation.content_list:
                icon = icon_svg(item.symbol)
                icon_html = f'<div style="margin-right:5px;">{icon}</div>' if icon else ""
                html += (
                    '<li style="display:flex;align-items:center;margin-bottom:5px;font-size:13px;">'
                    f"{icon_html}<span>{escape(item.label)}</span></li>"
                )
            html += "</ul>"
        return html + "</div></div>"
