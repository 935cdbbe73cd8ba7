"""CLI entrypoint for svgdiagram."""

import sys
from pathlib import Path

import click

from . import __version__
from .errors import DiagramError
from .theme import RANK_DIRECTIONS, THEMES

SOURCE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.version_option(__version__, prog_name="svgdiagram")
def cli() -> None:
    """svgdiagram - Declarative diagrams rendered to interactive SVG.

    Render a YAML/JSON diagram document once, or serve it with live reload.
    """


@cli.command()
@click.argument("source", type=SOURCE)
@click.option(
    "--theme",
    default="light",
    show_default=True,
    help=f"Palette name ({', '.join(THEMES)}; unknown names fall back to light)",
)
@click.option(
    "--layout",
    type=click.Choice(RANK_DIRECTIONS, case_sensitive=False),
    default="TB",
    show_default=True,
    help="Rank direction",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["svg", "html", "dot"]),
    default="svg",
    show_default=True,
    help="Output format",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
def render(source: Path, theme: str, layout: str, fmt: str, out: Path | None) -> None:
    """Render SOURCE to svg, a standalone pan/zoom html page, or dot."""
    from .commands.render_cmd import run_render

    try:
        exit_code = run_render(source, theme=theme, layout=layout.upper(), fmt=fmt, out=out)
    except DiagramError as exc:
        raise click.ClickException(str(exc))
    sys.exit(exit_code)


@cli.command()
@click.argument("source", type=SOURCE)
@click.option("--theme", default=None, help="Palette name [env: SVGDIAGRAM_THEME, default: light]")
@click.option(
    "--layout",
    type=click.Choice(RANK_DIRECTIONS, case_sensitive=False),
    default=None,
    help="Rank direction [env: SVGDIAGRAM_LAYOUT, default: TB]",
)
@click.option("--host", default=None, help="Bind address [env: SVGDIAGRAM_HOST, default: 127.0.0.1]")
@click.option("--port", type=int, default=None, help="Port [env: SVGDIAGRAM_PORT, default: 3000]")
def serve(source: Path, theme: str | None, layout: str | None, host: str | None, port: int | None) -> None:
    """Serve SOURCE with live reload.

    The diagram is re-rendered whenever SOURCE changes and open viewers
    reload automatically.

    Examples:
        svgdiagram serve diagram.yaml
        svgdiagram serve diagram.yaml --theme dark --layout LR --port 8080
    """
    from .commands.serve_cmd import run_serve
    from .server import ServeSettings

    overrides = {
        "theme": theme,
        "layout": layout.upper() if layout else None,
        "host": host,
        "port": port,
    }
    settings = ServeSettings().model_copy(update={k: v for k, v in overrides.items() if v is not None})

    try:
        exit_code = run_serve(source, settings)
    except DiagramError as exc:
        raise click.ClickException(str(exc))
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
