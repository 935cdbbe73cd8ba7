"""HTTP surface of the live preview service."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import MalformedRequestError, RenderError
from .generator import generate
from .models import DiagramDocument
from .theme import DEFAULT_THEME
from .watcher import DEFAULT_DEBOUNCE_SECONDS, LiveRegenerationController, watch_controller

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"

GenerateFn = Callable[[DiagramDocument | dict[str, Any], str | None, str | None], str]


class ServeSettings(BaseSettings):
    """Service settings; every field can be set through ``SVGDIAGRAM_*`` env vars."""

    model_config = SettingsConfigDict(env_prefix="SVGDIAGRAM_", env_file=".env", extra="ignore")

    host: str = "127.0.0.1"
    port: int = 3000
    theme: str = DEFAULT_THEME
    layout: str = "TB"
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS


async def event_stream(controller: LiveRegenerationController) -> AsyncIterator[str]:
    """SSE frames for one viewer: a retry hint, then one frame per reload."""
    subscriber = controller.subscribe()
    try:
        yield "retry: 1000\n\n"
        async for token in subscriber.tokens():
            yield f"data: {token}\n\n"
    finally:
        controller.unsubscribe(subscriber)


def create_app(
    controller: LiveRegenerationController,
    settings: ServeSettings | None = None,
    *,
    generate_fn: GenerateFn = generate,
    watch: bool = True,
) -> FastAPI:
    settings = settings or ServeSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        observer = None
        if watch:
            observer, _ = watch_controller(controller, asyncio.get_running_loop())
            logger.info("Watching %s", controller.source)
        yield
        controller.cancel()
        if observer is not None:
            observer.stop()
            observer.join()

    app = FastAPI(title="svgdiagram", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def render(document: DiagramDocument | dict[str, Any], theme: str | None) -> Response:
        try:
            svg = generate_fn(document, theme or settings.theme, settings.layout)
        except MalformedRequestError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except RenderError as exc:
            logger.warning("Render failed: %s", exc)
            raise HTTPException(status_code=500, detail=f"Diagram generation failed: {exc}")
        return Response(content=svg, media_type=SVG_MEDIA_TYPE)

    @app.get("/")
    async def current_svg():
        if controller.artifact is None:
            raise HTTPException(status_code=503, detail="Diagram not rendered yet")
        return Response(content=controller.artifact, media_type=SVG_MEDIA_TYPE)

    @app.get("/events")
    async def events():
        return StreamingResponse(
            event_stream(controller),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.post("/api/generate-diagram")
    async def generate_diagram(request: Request):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be JSON")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        theme = payload.get("theme")
        return render(payload, theme if isinstance(theme, str) else None)

    @app.get("/api/current-diagram")
    async def current_diagram(theme: str | None = None):
        if controller.document is None:
            raise HTTPException(status_code=503, detail="No diagram loaded")
        return render(controller.document, theme)

    @app.get("/api/current-data")
    async def current_data():
        if controller.data is None:
            raise HTTPException(status_code=503, detail="No diagram loaded")
        return JSONResponse(jsonable_encoder(controller.data))

    return app
