"""Pipeline entry point: document in, SVG string out."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .errors import DiagramError, RenderError
from .layout.engine import GraphvizLayout, LayoutEngine
from .layout.graph import assemble
from .models import DiagramDocument, parse_document
from .render.composite import CompositeRenderer
from .render.overlays import OverlayRegistry
from .theme import DEFAULT_CONFIG, RenderConfig, normalize_rank_direction, resolve_palette

logger = logging.getLogger(__name__)


def _coerce(document: DiagramDocument | Mapping[str, Any]) -> DiagramDocument:
    if isinstance(document, DiagramDocument):
        return document
    return parse_document(document)


def generate(
    document: DiagramDocument | Mapping[str, Any],
    palette_name: str | None = "light",
    rank_direction: str | None = "TB",
    *,
    layout_engine: LayoutEngine | None = None,
    config: RenderConfig = DEFAULT_CONFIG,
) -> str:
    """Render ``document`` to a self-contained interactive SVG document.

    Each call owns a fresh overlay registry, so calls are independent and the
    output depends only on the arguments.

    Raises:
        MalformedRequestError: the document is invalid (including dangling
            relation endpoints).
        RenderError: composition, layout or serialization failed.
    """
    doc = _coerce(document)
    palette = resolve_palette(palette_name)
    direction = normalize_rank_direction(rank_direction, config.rankdir)
    engine = layout_engine if layout_engine is not None else GraphvizLayout(config)
    overlays = OverlayRegistry()

    try:
        graph = assemble(doc, palette, overlays=overlays, config=config)
        positioned = engine.layout(graph, direction)
        svg = CompositeRenderer(palette, overlays, config).render(positioned)
    except DiagramError:
        raise
    except Exception as exc:
        raise RenderError(f"Failed to render diagram: {exc}") from exc

    logger.debug(
        "Rendered %d elements, %d relations, %d overlays (%s, %s)",
        len(doc.elements),
        len(doc.relations),
        len(overlays),
        palette.name,
        direction,
    )
    return svg


def generate_dot(
    document: DiagramDocument | Mapping[str, Any],
    rank_direction: str | None = "TB",
    *,
    config: RenderConfig = DEFAULT_CONFIG,
) -> str:
    """DOT source of the layout input, for inspecting what Graphviz is given."""
    doc = _coerce(document)
    direction = normalize_rank_direction(rank_direction, config.rankdir)
    graph = assemble(doc, resolve_palette(None), overlays=OverlayRegistry(), config=config)
    return GraphvizLayout(config).to_dot(graph, direction)
