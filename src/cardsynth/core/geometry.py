"""Circular-arc, gradient and SVG path geometry.

Paths are laid out in a 100x100 viewBox unless a height is given; the
renderer scales them with ``preserveAspectRatio="none"``.
"""

import math
from collections.abc import Sequence
from typing import Any

from cardsynth.core.models import FrozenModel, Gradient, GradientStop, GradientType
from cardsynth.core.parsing import clamp, clean_text, to_finite_number

MIN_SPAN = 1e-6


class ArcGeometry(FrozenModel):
    radius: float
    circumference: float
    thickness: float


class LinearCoords(FrozenModel):
    x1: float
    y1: float
    x2: float
    y2: float


class RadialCoords(FrozenModel):
    cx: float = 50
    cy: float = 50
    r: float = 50


class LinePath(FrozenModel):
    line_path: str
    area_path: str
    min_x: float
    max_x: float
    min_y: float
    max_y: float


class Bar(FrozenModel):
    x: float
    y: float
    width: float
    height: float


def circumference(radius: float) -> float:
    return max(0.0, 2 * math.pi * radius)


def arc_dash_offset(arc_length: float, percent: float, counter_clockwise: bool = False) -> float:
    """Stroke dash offset that reveals ``percent`` of a circle.

    Counter-clockwise arcs use the negated offset.
    """
    progress = clamp(percent, 0, 100) / 100
    offset = arc_length - progress * arc_length
    return -offset if counter_clockwise else offset


def pack_concentric_arcs(
    thicknesses: Sequence[float],
    size: float,
    gap: float = 6,
    padding: float = 8,
) -> list[ArcGeometry]:
    """Pack rings from the outside in; rings that shrink to radius <= 2 are dropped."""
    current_outer = size / 2 - padding
    arcs: list[ArcGeometry] = []
    for thickness in thicknesses:
        radius = current_outer - thickness / 2
        current_outer = radius - thickness / 2 - gap
        arcs.append(ArcGeometry(radius=radius, circumference=circumference(radius), thickness=thickness))
    return [arc for arc in arcs if arc.radius > 2]


def normalize_gradient_stops(stops: Any) -> list[GradientStop]:
    """Keep stops with a color, clamp positions to 0-100, sort ascending."""
    if not isinstance(stops, list):
        return []
    normalized: list[GradientStop] = []
    for stop in stops:
        if not isinstance(stop, dict):
            continue
        color = clean_text(stop.get("color"))
        if color is None:
            continue
        position = clamp(to_finite_number(stop.get("position"), 0), 0, 100)
        normalized.append(GradientStop(color=color, position=position))
    return sorted(normalized, key=lambda s: s.position)


def normalize_gradient(raw: Any) -> Gradient | None:
    """A gradient needs at least two usable stops; otherwise it is dropped."""
    if not isinstance(raw, dict):
        return None
    stops = normalize_gradient_stops(raw.get("stops"))
    if len(stops) < 2:
        return None
    gradient_type = GradientType.radial if raw.get("type") == "radial" else GradientType.linear
    return Gradient(type=gradient_type, angle=to_finite_number(raw.get("angle"), 90), stops=stops)


def angle_to_linear_coords(angle: float) -> LinearCoords:
    """Gradient vector for a CSS-style angle (0deg points up) in a 0-100 box."""
    radians = math.radians(angle - 90)
    x = math.cos(radians)
    y = math.sin(radians)
    return LinearCoords(x1=50 - x * 50, y1=50 - y * 50, x2=50 + x * 50, y2=50 + y * 50)


def radial_gradient_coords() -> RadialCoords:
    return RadialCoords()


def gradient_coords(gradient: Gradient) -> LinearCoords | RadialCoords:
    if gradient.type == GradientType.radial:
        return radial_gradient_coords()
    return angle_to_linear_coords(gradient.angle)


def build_line_path(values: Sequence[float]) -> LinePath:
    """Line and closed area path for a series scaled to fill the box.

    A single value sits at x=50; a flat series avoids dividing by zero.
    """
    if not values:
        return LinePath(line_path="", area_path="", min_x=0, max_x=0, min_y=0, max_y=0)

    low = min(values)
    high = max(values)
    span = max(MIN_SPAN, high - low)
    count = len(values)

    coords = [
        (50.0 if count == 1 else index / (count - 1) * 100, (high - value) / span * 100)
        for index, value in enumerate(values)
    ]
    line_path = " ".join(
        f"{'M' if index == 0 else 'L'} {x:.2f} {y:.2f}" for index, (x, y) in enumerate(coords)
    )
    ys = [y for _, y in coords]
    return LinePath(
        line_path=line_path,
        area_path=f"{line_path} L 100 100 L 0 100 Z",
        min_x=coords[0][0],
        max_x=coords[-1][0],
        min_y=min(ys),
        max_y=max(ys),
    )


def build_metric_line_path(
    values: Sequence[float | None],
    height: float = 148,
    padding: float = 18,
) -> str:
    """Polyline across a padded chart; missing values sit on the minimum."""
    present = [v for v in values if v is not None]
    if not present or len(values) < 2:
        return ""

    low = min(present)
    value_range = (max(present) - low) or 1
    width = 100 - padding * 2
    inner_height = height - padding * 2
    segments = []
    for index, raw in enumerate(values):
        x = padding + index / max(1, len(values) - 1) * width
        normalized = ((low if raw is None else raw) - low) / value_range
        y = padding + (inner_height - normalized * inner_height)
        segments.append(f"{'M' if index == 0 else 'L'} {x:g} {y:g}")
    return " ".join(segments)


def build_bars(
    values: Sequence[float | None],
    height: float = 148,
    padding: float = 18,
) -> list[Bar]:
    """Vertical bars scaled against max(values, 1); returns [] with no data."""
    present = [v for v in values if v is not None]
    if not present:
        return []

    peak = max(*present, 1)
    width = 100 - padding * 2
    inner_height = height - padding * 2
    bar_width = width / max(len(values), 1)
    bars = []
    for index, raw in enumerate(values):
        bar_height = (raw or 0) / peak * inner_height
        bars.append(
            Bar(
                x=padding + index * bar_width + 1,
                y=padding + (inner_height - bar_height),
                width=max(2, bar_width - 2),
                height=max(1, bar_height),
            )
        )
    return bars
