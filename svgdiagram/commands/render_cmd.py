"""Render command - one-shot export of a diagram document."""

from __future__ import annotations

import html
from pathlib import Path

from rich.console import Console

from ..generator import generate, generate_dot
from ..loader import load_document
from ..theme import resolve_palette


def run_render(
    source: Path,
    *,
    theme: str = "light",
    layout: str = "TB",
    fmt: str = "svg",
    out: Path | None = None,
) -> int:
    """Render ``source`` as svg, a standalone html page, or the dot layout input."""
    console = Console(stderr=True)

    _, document = load_document(source)

    if fmt == "dot":
        text = generate_dot(document, layout)
    else:
        text = generate(document, theme, layout)
        if fmt == "html":
            text = wrap_html(text, title=source.stem, theme=theme)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(
            f"Wrote {fmt} for {len(document.elements)} elements, "
            f"{len(document.relations)} relations to {out}",
            style="green",
        )
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return 0


def wrap_html(svg: str, *, title: str, theme: str = "light") -> str:
    """Wrap SVG in a standalone HTML page with pan/zoom (no external deps).

    Panning starts only after the pointer has moved, so clicks still reach
    interactive list items.
    """
    palette = resolve_palette(theme)
    t = html.escape(title, quote=True)
    return (
        "<!doctype html>\n"
        "<html>\n"
        "<head>\n"
        f"  <meta charset=\"utf-8\" />\n  <title>{t}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "  <style>\n"
        "    html, body { height: 100%; }\n"
        f"    body {{ margin: 0; background: {palette['background']}; color: {palette['text']}; "
        "font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial; }\n"
        "    .wrap { padding: 12px; height: 100vh; box-sizing: border-box; display: flex; flex-direction: column; }\n"
        "    .toolbar { display: flex; gap: 8px; align-items: center; margin: 0 0 10px 0; }\n"
        f"    .btn {{ background: {palette['clusterBg']}; color: {palette['text']}; border: 1px solid {palette['border']}; "
        "border-radius: 8px; padding: 6px 10px; cursor: pointer; }\n"
        f"    .btn:hover {{ background: {palette['hover']}; }}\n"
        f"    .hint {{ color: {palette['textFaded']}; font-size: 12px; }}\n"
        f"    .viewport {{ border: 1px solid {palette['border']}; border-radius: 10px; overflow: hidden; flex: 1; min-height: 0; }}\n"
        "    .viewport > svg { width: 100%; height: 100%; display: block; touch-action: none; }\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        "  <div class=\"wrap\">\n"
        "    <div class=\"toolbar\">\n"
        "      <button class=\"btn\" id=\"resetBtn\" type=\"button\">Reset</button>\n"
        "      <button class=\"btn\" id=\"zoomInBtn\" type=\"button\">Zoom +</button>\n"
        "      <button class=\"btn\" id=\"zoomOutBtn\" type=\"button\">Zoom -</button>\n"
        "      <span class=\"hint\">Drag to pan • Scroll to zoom • Click items for details</span>\n"
        "    </div>\n"
        "    <div class=\"viewport\" id=\"viewport\">\n"
        f"{svg}\n"
        "    </div>\n"
        "  </div>\n"
        "  <script>\n"
        "    (function () {\n"
        "      const svg = document.querySelector('#viewport > svg');\n"
        "      if (!svg) return;\n"
        "      const vb = svg.viewBox.baseVal;\n"
        "      const initial = { x: vb.x, y: vb.y, width: vb.width, height: vb.height };\n"
        "      const clamp = (v, min, max) => Math.max(min, Math.min(max, v));\n"
        "\n"
        "      const zoomAt = (px, py, factor) => {\n"
        "        const newW = clamp(vb.width / factor, initial.width * 0.08, initial.width * 3.5);\n"
        "        const newH = newW * (initial.height / initial.width);\n"
        "        vb.x += (vb.width - newW) * px;\n"
        "        vb.y += (vb.height - newH) * py;\n"
        "        vb.width = newW;\n"
        "        vb.height = newH;\n"
        "      };\n"
        "\n"
        "      let drag = null;\n"
        "      svg.addEventListener('pointerdown', (e) => {\n"
        "        if (e.target.closest && e.target.closest('[data-interactive]')) return;\n"
        "        drag = { x: e.clientX, y: e.clientY, vbX: vb.x, vbY: vb.y, moved: false, id: e.pointerId };\n"
        "      });\n"
        "      svg.addEventListener('pointermove', (e) => {\n"
        "        if (!drag) return;\n"
        "        if (!drag.moved && Math.hypot(e.clientX - drag.x, e.clientY - drag.y) < 4) return;\n"
        "        if (!drag.moved) { drag.moved = true; svg.setPointerCapture(drag.id); }\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        vb.x = drag.vbX - (e.clientX - drag.x) * (vb.width / rect.width);\n"
        "        vb.y = drag.vbY - (e.clientY - drag.y) * (vb.height / rect.height);\n"
        "      });\n"
        "      const endDrag = () => { drag = null; };\n"
        "      svg.addEventListener('pointerup', endDrag);\n"
        "      svg.addEventListener('pointercancel', endDrag);\n"
        "\n"
        "      svg.addEventListener('wheel', (e) => {\n"
        "        e.preventDefault();\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        const factor = e.deltaY > 0 ? 1 / 1.15 : 1.15;\n"
        "        zoomAt((e.clientX - rect.left) / rect.width, (e.clientY - rect.top) / rect.height, factor);\n"
        "      }, { passive: false });\n"
        "\n"
        "      document.getElementById('resetBtn').addEventListener('click', () => {\n"
        "        vb.x = initial.x; vb.y = initial.y; vb.width = initial.width; vb.height = initial.height;\n"
        "      });\n"
        "      document.getElementById('zoomInBtn').addEventListener('click', () => zoomAt(0.5, 0.5, 1.25));\n"
        "      document.getElementById('zoomOutBtn').addEventListener('click', () => zoomAt(0.5, 0.5, 1 / 1.25));\n"
        "    })();\n"
        "  </script>\n"
        "</body>\n"
        "</html>\n"
    )
