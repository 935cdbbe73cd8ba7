"""Node outline synthesis.

``build_shape`` turns a declarative shape spec and a bounding box into a
closed SVG outline. It is a pure function: same inputs, same markup.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

Point = tuple[float, float]

STROKE_WIDTH = 1.5

DEFAULT_SKEW = 0.15
DEFAULT_HEAD = 0.35
DEFAULT_SIDES = 5
MAX_SIDES = 64


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _fraction(spec: Mapping[str, Any], key: str, default: float) -> float:
    value = spec.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def fmt_num(value: float) -> str:
    rounded = round(value, 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def points_to_string(points: Sequence[Point]) -> str:
    return " ".join(f"{fmt_num(x)},{fmt_num(y)}" for x, y in points)


def diamond_points(w: float, h: float) -> list[Point]:
    cx, cy = w / 2, h / 2
    return [(cx, 0), (w, cy), (cx, h), (0, cy)]


def triangle_points(w: float, h: float, orientation: str) -> list[Point]:
    table = {
        "up": [(w / 2, 0), (w, h), (0, h)],
        "down": [(0, 0), (w, 0), (w / 2, h)],
        "left": [(0, h / 2), (w, 0), (w, h)],
        "right": [(0, 0), (w, h / 2), (0, h)],
    }
    return table.get(str(orientation).lower(), table["up"])


def parallelogram_points(w: float, h: float, skew: float) -> list[Point]:
    dx = _clamp(skew, 0.0, 0.4) * w
    return [(dx, 0), (w, 0), (w - dx, h), (0, h)]


def arrow_points(w: float, h: float, direction: str, head: float) -> list[Point]:
    frac = _clamp(head, 0.2, 0.8)
    if direction == "right":
        body = w - frac * w
        return [(0, 0), (body, 0), (w, h / 2), (body, h), (0, h)]
    if direction == "left":
        tip = frac * w
        return [(w, 0), (tip, 0), (0, h / 2), (tip, h), (w, h)]
    if direction == "up":
        tip = frac * h
        return [(0, h), (0, tip), (w / 2, 0), (w, tip), (w, h)]
    body = h - frac * h
    return [(0, 0), (0, body), (w / 2, h), (w, body), (w, 0)]


def regular_polygon_points(w: float, h: float, sides: int, rotation_deg: float = 0.0) -> list[Point]:
    cx, cy = w / 2, h / 2
    r = min(w, h) / 2
    rot = math.radians(rotation_deg or 0.0)
    return [
        (cx + r * math.cos(rot + i * 2 * math.pi / sides), cy + r * math.sin(rot + i * 2 * math.pi / sides))
        for i in range(sides)
    ]


def rotate_points(points: Sequence[Point], degrees: float, cx: float, cy: float) -> list[Point]:
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    out = []
    for x, y in points:
        dx, dy = x - cx, y - cy
        out.append((cx + dx * cos - dy * sin, cy + dx * sin + dy * cos))
    return out


def _custom_points(spec: Mapping[str, Any], w: float, h: float) -> list[Point]:
    raw = spec.get("points")
    points: list[Point] = []
    if isinstance(raw, (list, tuple)):
        for p in raw:
            if not isinstance(p, (list, tuple)) or len(p) < 2:
                continue
            try:
                x, y = float(p[0]), float(p[1])
            except (TypeError, ValueError):
                continue
            if math.isfinite(x) and math.isfinite(y):
                points.append((x * w, y * h))
    rotation = _fraction(spec, "rotation", 0.0)
    if rotation:
        points = rotate_points(points, rotation, w / 2, h / 2)
    return points


def _rect(w: float, h: float, radius: Any, fill: str, stroke: str) -> str:
    r = fmt_num(float(radius))
    return (
        f'<rect width="{fmt_num(w)}" height="{fmt_num(h)}" rx="{r}" ry="{r}" '
        f'fill="{fill}" stroke="{stroke}" stroke-width="{STROKE_WIDTH}"/>'
    )


def _polygon(points: Sequence[Point], fill: str, stroke: str) -> str:
    return (
        f'<polygon points="{points_to_string(points)}" '
        f'fill="{fill}" stroke="{stroke}" stroke-width="{STROKE_WIDTH}"/>'
    )


def build_shape(
    spec: Mapping[str, Any] | None,
    width: float,
    height: float,
    fill: str,
    stroke: str,
    default_radius: float,
) -> str:
    """Closed outline for ``spec`` inside a ``width`` x ``height`` box.

    Unknown or missing shape types render as a rect with ``default_radius``.
    """
    spec = spec or {}
    kind = str(spec.get("type") or "rect").strip().lower()

    if kind in ("rect", "rounded", "rounded-rect"):
        radius = _fraction(spec, "radius", default_radius)
        return _rect(width, height, radius, fill, stroke)
    if kind == "diamond":
        return _polygon(diamond_points(width, height), fill, stroke)
    if kind == "hexagon":
        rotation = _fraction(spec, "rotation", 0.0)
        return _polygon(regular_polygon_points(width, height, 6, rotation), fill, stroke)
    if kind == "triangle":
        orientation = spec.get("orientation") or "up"
        return _polygon(triangle_points(width, height, orientation), fill, stroke)
    if kind == "parallelogram":
        skew = _fraction(spec, "skew", DEFAULT_SKEW)
        return _polygon(parallelogram_points(width, height, skew), fill, stroke)
    if kind in ("arrow-right", "arrow-left", "arrow-up", "arrow-down"):
        head = _fraction(spec, "head", DEFAULT_HEAD)
        return _polygon(arrow_points(width, height, kind.split("-", 1)[1], head), fill, stroke)
    if kind == "regular-polygon":
        try:
            sides = int(spec.get("sides") or DEFAULT_SIDES)
        except (TypeError, ValueError, OverflowError):
            sides = DEFAULT_SIDES
        rotation = _fraction(spec, "rotation", 0.0)
        sides = int(_clamp(sides, 3, MAX_SIDES))
        return _polygon(regular_polygon_points(width, height, sides, rotation), fill, stroke)
    if kind == "custom-polygon":
        return _polygon(_custom_points(spec, width, height), fill, stroke)

    return _rect(width, height, default_radius, fill, stroke)
