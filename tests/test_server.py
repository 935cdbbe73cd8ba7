from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from svgdiagram.errors import RenderError
from svgdiagram.server import ServeSettings, create_app, event_stream
from svgdiagram.theme import THEMES
from svgdiagram.watcher import LiveRegenerationController


@pytest.fixture
def controller(source_file: Path, render) -> LiveRegenerationController:
    controller = LiveRegenerationController(source_file, lambda document: render(document, "light", "TB"))
    controller.start()
    return controller


@pytest.fixture
def client(controller: LiveRegenerationController, render):
    app = create_app(controller, ServeSettings(), generate_fn=render, watch=False)
    with TestClient(app) as client:
        yield client


def test_root_serves_current_svg(client: TestClient, controller: LiveRegenerationController) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text == controller.artifact


def test_generate_diagram_renders_payload_with_theme(client: TestClient, scenario_data: dict) -> None:
    response = client.post("/api/generate-diagram", json={**scenario_data, "theme": "dark"})
    assert response.status_code == 200
    assert f'background-color:{THEMES["dark"]["background"]}' in response.text
    assert ">reads</text>" in response.text


@pytest.mark.parametrize(
    "payload",
    [
        {"elements": []},
        {"elements": [{"id": "a"}], "relations": [{"from": "a", "to": "missing"}]},
        [1, 2, 3],
    ],
)
def test_generate_diagram_rejects_malformed_payloads(client: TestClient, payload) -> None:
    response = client.post("/api/generate-diagram", json=payload)
    assert response.status_code == 400


def test_generate_diagram_tolerates_odd_shape_data(client: TestClient, scenario_data: dict) -> None:
    person, database = scenario_data["elements"]
    payload = {
        **scenario_data,
        "elements": [
            {**person, "shape": {"type": "custom-polygon", "points": [[0, 0], ["x", "y"], [1, 0], [0.5, 1]]}},
            {**database, "shape": {"type": "regular-polygon", "sides": 10**9}},
        ],
    }
    response = client.post("/api/generate-diagram", json=payload)
    assert response.status_code == 200
    assert 'points="0,0 ' in response.text


def test_generate_diagram_rejects_non_json(client: TestClient) -> None:
    response = client.post("/api/generate-diagram", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 400


def test_render_errors_map_to_500(controller: LiveRegenerationController, scenario_data: dict) -> None:
    def failing(document, theme, layout):
        raise RenderError("layout exploded")

    app = create_app(controller, ServeSettings(), generate_fn=failing, watch=False)
    with TestClient(app) as client:
        response = client.post("/api/generate-diagram", json=scenario_data)
        # process-wide state is untouched
        assert client.get("/").status_code == 200
    assert response.status_code == 500
    assert "layout exploded" in response.json()["detail"]


def test_current_diagram_rerenders_with_another_theme(client: TestClient) -> None:
    response = client.get("/api/current-diagram", params={"theme": "dark"})
    assert response.status_code == 200
    assert f'background-color:{THEMES["dark"]["background"]}' in response.text
    light = client.get("/api/current-diagram")
    assert f'background-color:{THEMES["light"]["background"]}' in light.text


def test_current_data_returns_raw_document(client: TestClient) -> None:
    response = client.get("/api/current-data")
    assert response.status_code == 200
    assert response.json() == {
        "elements": [
            {"id": "a", "type": "person", "title": "User"},
            {"id": "b", "type": "database", "title": "DB"},
        ],
        "relations": [{"from": "a", "to": "b", "label": "reads"}],
    }


def test_cors_is_enabled(client: TestClient) -> None:
    response = client.get("/api/current-data", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_routes_report_unavailable_before_first_render(source_file: Path, render) -> None:
    controller = LiveRegenerationController(source_file, render)
    app = create_app(controller, ServeSettings(), generate_fn=render, watch=False)
    with TestClient(app) as client:
        assert client.get("/").status_code == 503
        assert client.get("/api/current-data").status_code == 503


def test_event_stream_sends_retry_then_reload(controller: LiveRegenerationController) -> None:
    async def scenario() -> list[str]:
        stream = event_stream(controller)
        frames = [await stream.__anext__()]
        assert len(controller.subscribers) == 1
        controller.broadcast()
        frames.append(await asyncio.wait_for(stream.__anext__(), timeout=1))
        await stream.aclose()
        return frames

    frames = asyncio.run(scenario())
    assert frames == ["retry: 1000\n\n", "data: reload\n\n"]
    assert controller.subscribers == []


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("SVGDIAGRAM_PORT", "9123")
    monkeypatch.setenv("SVGDIAGRAM_THEME", "dark")
    settings = ServeSettings()
    assert settings.port == 9123
    assert settings.theme == "dark"
    assert settings.layout == "TB"
    assert settings.debounce_seconds == 0.1
