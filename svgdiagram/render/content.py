"""Node content composition.

Each element becomes a block of markup with explicit pixel dimensions. The
dimensions are what the layout engine sees, so content that does not fit
(table rows) is clipped here rather than left to overflow.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from html import escape
from typing import Any, Mapping, Sequence

from ..icons import icon_svg, infer_element_icon
from ..models import Element, ListItem, Section
from ..theme import DEFAULT_CONFIG, Palette, RenderConfig
from .overlays import OverlayRegistry

XHTML_NS = "http://www.w3.org/1999/xhtml"

LIST_SIZE = (400, 300)
HTML_SIZE = (200, 100)
TABLE_SIZE = (500, 260)
PLACEHOLDER_SIZE = (200, 100)

TABLE_PADDING = 10
TABLE_CELL_PADDING = 8
TABLE_TITLE_BAND = 40
TABLE_ROW_HEIGHT = 28
TABLE_HEADER_ROW_HEIGHT = 30


@dataclass(frozen=True)
class ComposedContent:
    markup: str
    width: float
    height: float


@dataclass(frozen=True)
class TableGeometry:
    column_count: int
    column_width: int
    visible_rows: int


def table_geometry(
    width: float, height: float, columns: Sequence[Any], rows: Sequence[Any], has_title: bool
) -> TableGeometry:
    """Column sizing and row capacity for a table node of the given size."""
    first_row = rows[0] if rows else None
    first_len = len(first_row) if isinstance(first_row, (list, tuple, Mapping)) else 0
    column_count = max(1, len(columns), first_len)
    column_width = math.floor((width - 2 * TABLE_PADDING) / column_count)
    inner_height = height - (TABLE_TITLE_BAND if has_title else 0) - 2 * TABLE_PADDING
    visible = math.floor((inner_height - TABLE_HEADER_ROW_HEIGHT) / TABLE_ROW_HEIGHT)
    return TableGeometry(column_count, column_width, max(0, visible))


def _cell(row: Any, index: int, columns: Sequence[Any]) -> str:
    if isinstance(row, Mapping):
        if index < len(columns):
            value = row.get(columns[index], row.get(str(columns[index])))
        else:
            value = None
    elif isinstance(row, (list, tuple)):
        value = row[index] if index < len(row) else None
    else:
        value = row if index == 0 else None
    return "" if value is None else str(value)


class NodeContentCompositor:
    """Turns one element's declarative content into sized markup."""

    def __init__(
        self,
        palette: Palette,
        overlays: OverlayRegistry,
        config: RenderConfig = DEFAULT_CONFIG,
    ):
        self.palette = palette
        self.overlays = overlays
        self.config = config

    def compose(self, element: Element) -> ComposedContent:
        mode = element.content_mode
        if mode == "table":
            return self.compose_table(element)
        if mode == "list":
            return self.compose_list(element)
        if mode == "html":
            return self.compose_html(element)
        return self.compose_placeholder()

    def _root_div(self, extra_style: str = "") -> str:
        return (
            f'<div xmlns="{XHTML_NS}" style="font-family:{self.config.font_family};'
            f"color:{self.palette['text']};height:100%;width:100%;box-sizing:border-box;"
            f'display:flex;{extra_style}">'
        )

    @staticmethod
    def _foreign_object(width: float, height: float, html: str) -> str:
        return f'<foreignObject width="{width}" height="{height}">{html}</foreignObject>'

    # -- content_list -------------------------------------------------------

    def compose_list(self, element: Element) -> ComposedContent:
        width = element.width or LIST_SIZE[0]
        height = element.height or LIST_SIZE[1]
        background = self.palette.color(element.type)

        html = self._root_div("flex-direction:column;")
        html += self._header(element, background)
        html += self._body(element)
        html += "</div>"
        return ComposedContent(self._foreign_object(width, height, html), width, height)

    def _header(self, element: Element, background: str) -> str:
        if not element.title and not element.subtitle:
            return ""
        pad = self.config.padding
        html = (
            f'<div class="node-header" style="flex-shrink:0;padding:{pad}px {pad}px 10px {pad}px;'
            f'background-color:{background};position:relative;z-index:1;">'
        )
        if element.title:
            icon = icon_svg(infer_element_icon(element.tags, element.type))
            icon_html = f'<span style="display:inline-flex;align-items:center;">{icon}</span>' if icon else ""
            gap = "5px" if element.subtitle else "0"
            html += (
                '<h2 style="display:flex;align-items:center;gap:8px;justify-content:center;'
                f"margin:0 0 {gap} 0;font-size:20px;color:{self.palette['text']};\">"
                f"{icon_html}<span>{escape(element.title)}</span></h2>"
            )
        if element.subtitle:
            html += (
                f'<p style="text-align:center;margin:0;font-size:14px;color:{self.palette["textFaded"]};">'
                f"{escape(element.subtitle)}</p>"
            )
        return html + "</div>"

    def _body(self, element: Element) -> str:
        pad = self.config.padding
        html = f'<div class="node-body" style="flex-grow:1;overflow-y:auto;padding:10px {pad}px {pad}px {pad}px;">'
        for section_index, section in enumerate(element.content_list or ()):
            if section.renderable:
                html += self._section(section, section_index, element.id)
        return html + "</div>"

    def _section(self, section: Section, section_index: int, element_id: str) -> str:
        icon = icon_svg(section.symbol)
        icon_html = f'<div style="margin-right:8px;">{icon}</div>' if icon else ""
        html = (
            '<div class="section" style="margin-top:15px;">'
            f'<h3 style="font-size:16px;margin:0 0 8px 0;padding-bottom:5px;border-bottom:1px solid {self.palette["border"]};'
            'font-weight:600;text-align:left;display:flex;align-items:center;">'
            f"{icon_html}<span>{escape(section.label)}</span></h3>"
            '<ul style="margin:0;padding:0;list-style:none;">'
        )
        for value_index, item in enumerate(section.values):
            html += self._list_item(item, f"{element_id}-{section_index}-{value_index}")
        return html + "</ul></div>"

    def _list_item(self, item: ListItem, key: str) -> str:
        attrs = self._interaction_attrs(item, key)
        icon = icon_svg(item.symbol)
        icon_html = f'<div style="flex-shrink:0;margin-top:3px;">{icon}</div>' if icon else ""
        link_html = f'<span style="margin-left:6px;opacity:0.6;">{icon_svg("link")}</span>' if item.url else ""
        subtitle_html = (
            f'<p style="font-size:12px;color:{self.palette["textFaded"]};margin:2px 0 0 0;text-align:left;">'
            f"{escape(item.subtitle)}</p>"
            if item.subtitle
            else ""
        )
        cursor = "cursor:pointer;" if item.is_interactive else ""
        return (
            f'<li id="item-{escape(key, quote=True)}" class="diagram-item"{attrs} '
            'style="display:flex;align-items:flex-start;margin:2px -8px;padding:8px;border-radius:6px;'
            f'transition:background-color .2s;{cursor}">'
            f'{icon_html}<div style="margin-left:{"8px" if icon else "0"};">'
            f"<span>{escape(item.label)}{link_html}</span>{subtitle_html}</div></li>"
        )

    def _interaction_attrs(self, item: ListItem, key: str) -> str:
        """Declarative hooks for the overlay script; registers the item's modal."""
        if not item.is_interactive:
            return ""
        attrs = ' data-interactive="true"'
        if item.url:
            attrs += f' data-url="{escape(item.url, quote=True)}"'
        if item.modal is not None:
            dom_id = self.overlays.register(key, item.modal)
            attrs += f' data-modal="{escape(dom_id, quote=True)}" data-modal-on="{item.modal.on}"'
        return attrs

    # -- html_content -------------------------------------------------------

    def compose_html(self, element: Element) -> ComposedContent:
        width = element.width or HTML_SIZE[0]
        height = element.height or HTML_SIZE[1]
        html = self._root_div("align-items:center;justify-content:center;")
        html += f"<div>{element.html_content}</div></div>"
        return ComposedContent(self._foreign_object(width, height, html), width, height)

    # -- table --------------------------------------------------------------

    def compose_table(self, element: Element) -> ComposedContent:
        width = element.width or TABLE_SIZE[0]
        height = element.height or TABLE_SIZE[1]
        background = self.palette.color("tableau")
        border = self.palette["border"]
        text = self.palette["text"]
        faded = self.palette["textFaded"]
        pad = self.config.padding
        cell_pad = TABLE_CELL_PADDING

        columns = list(element.columns or ())
        rows = list(element.rows or ())
        geometry = table_geometry(width, height, columns, rows, bool(element.title))
        visible = rows[: geometry.visible_rows]

        def separator(c: int) -> str:
            return f"1px solid {border}" if c < geometry.column_count - 1 else "none"

        html = self._root_div(f"flex-direction:column;background:{background};")
        if element.title:
            subtitle = (
                f'<p style="margin:4px 0 0 0;font-size:13px;color:{faded};text-align:center;">'
                f"{escape(element.subtitle)}</p>"
                if element.subtitle
                else ""
            )
            html += (
                f'<div class="node-header" style="flex-shrink:0;padding:{pad}px {pad}px 8px {pad}px;'
                f'background-color:{background};border-bottom:1px solid {border};">'
                f'<h2 style="margin:0;font-size:18px;color:{text};text-align:center;">{escape(element.title)}</h2>'
                f"{subtitle}</div>"
            )
        html += f'<div style="flex-grow:1;overflow:auto;padding:{TABLE_PADDING}px;">'
        html += f'<div class="table" style="border:1px solid {border};border-radius:6px;overflow:hidden;">'

        html += f'<div class="table-header" style="display:flex;background:{self.palette["background"]};border-bottom:1px solid {border};">'
        for c in range(geometry.column_count):
            label = str(columns[c]) if c < len(columns) and columns[c] is not None else f"Col {c + 1}"
            html += (
                f'<div style="width:{geometry.column_width}px;box-sizing:border-box;padding:{cell_pad}px;'
                f'font-weight:600;color:{text};border-right:{separator(c)};">{escape(label)}</div>'
            )
        html += "</div>"

        for idx, row in enumerate(visible):
            shade = "transparent" if idx % 2 == 0 else self.palette["clusterBg"]
            bottom = f"1px solid {border}" if idx < len(visible) - 1 else "none"
            html += f'<div class="table-row" style="display:flex;background:{shade};border-bottom:{bottom};">'
            for c in range(geometry.column_count):
                html += (
                    f'<div style="width:{geometry.column_width}px;box-sizing:border-box;padding:{cell_pad}px;'
                    f"color:{text};border-right:{separator(c)};white-space:nowrap;overflow:hidden;"
                    f'text-overflow:ellipsis;">{escape(_cell(row, c, columns))}</div>'
                )
            html += "</div>"

        hidden = len(rows) - len(visible)
        if hidden > 0:
            html += (
                f'<div class="table-more" style="padding:{cell_pad}px;color:{faded};font-size:12px;'
                f'border-top:1px dashed {border};text-align:right;">+{hidden} more rows…</div>'
            )
        html += "</div></div></div>"
        return ComposedContent(self._foreign_object(width, height, html), width, height)

    # -- placeholder --------------------------------------------------------

    @staticmethod
    def compose_placeholder() -> ComposedContent:
        width, height = PLACEHOLDER_SIZE
        return ComposedContent('<text x="10" y="20">No content</text>', width, height)
