"""Progress ring normalization, runtime values and concentric packing."""

import logging
from typing import Any

from cardsynth.core.color import DEFAULT_COLOR
from cardsynth.core.fields import ConfigReader
from cardsynth.core.geometry import ArcGeometry, arc_dash_offset, normalize_gradient, pack_concentric_arcs
from cardsynth.core.parsing import clamp, clean_text, optional_number, repair_range, to_finite_number
from cardsynth.entities import EntityLookup, resolve_state
from cardsynth.progress_ring.models import (
    AnimationEasing,
    NormalizedProgressRingConfig,
    NormalizedRing,
    RingDirection,
    RingLayout,
    RingRuntime,
    RingThreshold,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN = 0
DEFAULT_MAX = 100
DEFAULT_THICKNESS = 12
MAX_RINGS = 4
MIN_RING_THICKNESS = 4
MAX_RING_THICKNESS = 32


def normalize_thresholds(thresholds: Any) -> list[RingThreshold]:
    if not isinstance(thresholds, list):
        return []
    normalized = []
    for threshold in thresholds:
        if not isinstance(threshold, dict):
            continue
        color = clean_text(threshold.get("color"))
        if color is None:
            continue
        normalized.append(RingThreshold(value=to_finite_number(threshold.get("value"), 0), color=color))
    return sorted(normalized, key=lambda t: t.value)


def _normalize_ring(
    raw: dict[str, Any],
    index: int,
    fallback_thickness: float,
    reader: ConfigReader,
) -> NormalizedRing | None:
    entity = clean_text(raw.get("entity"))
    if entity is None:
        reader.warn(f"Ignored ring {index + 1} without an entity.")
        return None

    minimum = reader.number("min", DEFAULT_MIN, raw, name=f"ring {index + 1} min")
    max_candidate = reader.number("max", DEFAULT_MAX, raw, name=f"ring {index + 1} max")

    return NormalizedRing(
        entity=entity,
        label=clean_text(raw.get("label")) or f"Ring {index + 1}",
        min=minimum,
        max=repair_range(minimum, max_candidate),
        color=clean_text(raw.get("color")) or DEFAULT_COLOR,
        thickness=reader.clamped(
            "thickness",
            fallback_thickness,
            MIN_RING_THICKNESS,
            MAX_RING_THICKNESS,
            raw,
            name=f"ring {index + 1} thickness",
        ),
        gradient=normalize_gradient(raw.get("gradient")),
        thresholds=normalize_thresholds(raw.get("thresholds")),
    )


def normalize_progress_ring_card(raw: Any) -> NormalizedProgressRingConfig:
    reader = ConfigReader(raw, "progress ring", logger)
    card_thickness = reader.clamped("thickness", DEFAULT_THICKNESS, MIN_RING_THICKNESS, MAX_RING_THICKNESS)

    source = reader.get("rings")
    source = source if isinstance(source, list) else []
    if len(source) > MAX_RINGS:
        reader.warn(f"Only the first {MAX_RINGS} rings are shown; ignored {len(source) - MAX_RINGS}.")

    rings = []
    for index, ring in enumerate(source[:MAX_RINGS]):
        normalized = _normalize_ring(ring if isinstance(ring, dict) else {}, index, card_thickness, reader)
        if normalized is not None:
            rings.append(normalized)

    return NormalizedProgressRingConfig(
        title=reader.text("title"),
        rings=rings,
        start_angle=reader.clamped("start_angle", 0, -360, 360),
        direction=reader.choice("direction", list(RingDirection), RingDirection.clockwise),
        animate=reader.boolean("animate", True),
        animation_duration_ms=reader.clamped("animation_duration_ms", 500, 0, 5000),
        animation_easing=reader.choice("animation_easing", list(AnimationEasing), AnimationEasing.ease),
        show_labels=reader.boolean("show_labels", True),
        label_precision=reader.clamped("label_precision", 0, 0, 3, integer=True),
        warnings=reader.warnings,
    )


def resolve_progress_value(raw_state: Any, minimum: float, maximum: float) -> float:
    return clamp(to_finite_number(raw_state, minimum), minimum, maximum)


def value_to_percent(value: float, minimum: float, maximum: float) -> float:
    if maximum <= minimum:
        return 0.0
    return clamp((value - minimum) / (maximum - minimum) * 100, 0, 100)


def resolve_threshold_color(thresholds: list[RingThreshold], value: float, fallback: str) -> str:
    """Highest threshold at or below ``value``, else the ring's base color."""
    color = fallback
    for threshold in thresholds:
        if value >= threshold.value:
            color = threshold.color
    return color


def resolve_ring_stroke(ring: RingRuntime | NormalizedRing, value: float, gradient_id: str) -> str:
    """SVG stroke paint: gradient reference first, then thresholds, then base color."""
    if ring.gradient is not None:
        return f"url(#{gradient_id})"
    return resolve_threshold_color(ring.thresholds, value, ring.color)


def ring_gradient_id(index: int) -> str:
    return f"progress-ring-gradient-{index}"


def resolve_progress_ring_runtime(
    config: NormalizedProgressRingConfig,
    lookup: EntityLookup,
) -> list[RingRuntime]:
    runtime = []
    for index, ring in enumerate(config.rings):
        state = resolve_state(lookup, ring.entity)
        if optional_number(state) is None:
            logger.debug("Ring %s has no numeric state; showing its minimum", ring.entity)
        value = resolve_progress_value(state, ring.min, ring.max)
        runtime.append(
            RingRuntime(
                entity=ring.entity,
                label=ring.label,
                value=value,
                percent=value_to_percent(value, ring.min, ring.max),
                display_value=f"{value:.{config.label_precision}f}",
                color=ring.color,
                stroke=resolve_ring_stroke(ring, value, ring_gradient_id(index)),
                thickness=ring.thickness,
                gradient=ring.gradient,
                thresholds=ring.thresholds,
            )
        )
    return runtime


def build_ring_geometry(
    rings: list[RingRuntime],
    size: float,
    gap: float = 6,
    padding: float = 8,
) -> list[ArcGeometry]:
    thicknesses = [clamp(ring.thickness, MIN_RING_THICKNESS, MAX_RING_THICKNESS) for ring in rings]
    return pack_concentric_arcs(thicknesses, size, gap, padding)


def ring_dash_offset(circumference: float, percent: float, direction: RingDirection) -> float:
    return arc_dash_offset(circumference, percent, direction == RingDirection.counter_clockwise)


def layout_progress_rings(
    config: NormalizedProgressRingConfig,
    runtime: list[RingRuntime],
    size: float = 200,
    gap: float = 6,
    padding: float = 8,
) -> list[RingLayout]:
    """Rings that still fit after packing, each with its dash offset.

    Packing shrinks monotonically, so dropped rings are always the innermost.
    """
    geometry = build_ring_geometry(runtime, size, gap, padding)
    return [
        RingLayout(
            ring=ring,
            geometry=arc,
            dash_offset=ring_dash_offset(arc.circumference, ring.percent, config.direction),
        )
        for ring, arc in zip(runtime, geometry, strict=False)
    ]
