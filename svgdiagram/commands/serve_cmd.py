"""Serve command - live preview with regeneration on save."""

from __future__ import annotations

import logging
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.table import Table

from ..generator import generate
from ..server import ServeSettings, create_app
from ..watcher import LiveRegenerationController


def run_serve(source: Path, settings: ServeSettings) -> int:
    """
    Render ``source``, then serve it and re-render whenever it changes.

    This is a blocking command that runs until interrupted (Ctrl+C). A source
    that cannot be loaded at startup raises; later failures keep the last
    good diagram on screen.
    """
    console = Console(stderr=True)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    controller = LiveRegenerationController(
        source,
        lambda document: generate(document, settings.theme, settings.layout),
        debounce=settings.debounce_seconds,
    )
    controller.start()

    table = Table(title="svgdiagram serve", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Source", str(source))
    table.add_row("URL", f"http://{settings.host}:{settings.port}/")
    table.add_row("Theme", settings.theme)
    table.add_row("Layout", settings.layout)
    table.add_row("Elements", str(len(controller.document.elements)))
    table.add_row("Relations", str(len(controller.document.relations)))
    console.print(table)
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    app = create_app(controller, settings)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_level="warning")
    server = uvicorn.Server(config)
    server.run()

    console.print("[bold]Stopped.[/bold]")
    return 0
