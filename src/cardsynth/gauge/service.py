"""Gauge normalization and reading resolution."""

import logging
from typing import Any

from cardsynth.core.color import DEFAULT_COLOR, interpolate_hex_color
from cardsynth.core.fields import ConfigReader
from cardsynth.core.parsing import clamp, clean_text, optional_number, repair_range
from cardsynth.entities import EntityLookup, resolve_state
from cardsynth.gauge.models import (
    ActiveGaugeSegment,
    GaugeReading,
    GaugeSegment,
    NormalizedGaugeConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN = 0
DEFAULT_MAX = 100


def _default_segments(minimum: float, maximum: float) -> list[GaugeSegment]:
    span = maximum - minimum
    return [
        GaugeSegment(from_=minimum, color="#ff6b6b", label="Low"),
        GaugeSegment(from_=minimum + span * 0.5, color="#ffd166", label="Medium"),
        GaugeSegment(from_=minimum + span * 0.8, color="#6ccf7f", label="High"),
    ]


def normalize_gauge_segments(
    segments: Any,
    minimum: float,
    maximum: float,
    reader: ConfigReader | None = None,
) -> list[GaugeSegment]:
    """Validate, clamp into range and sort segments by threshold.

    No segments at all yields three synthetic bands at 0/50/80% of the range.
    """
    if not isinstance(segments, list) or not segments:
        return _default_segments(minimum, maximum)

    normalized: list[GaugeSegment] = []
    for index, segment in enumerate(segments):
        raw = segment if isinstance(segment, dict) else {}
        start = optional_number(raw.get("from"))
        if start is None:
            if reader:
                reader.warn(f"Ignored segment {index + 1} without a numeric from value.")
            continue
        bounded = clamp(start, minimum, maximum)
        if reader and bounded != start:
            reader.warn(f"Segment {index + 1} from {start:g} is outside {minimum:g}-{maximum:g}; clamped.")
        normalized.append(
            GaugeSegment(
                from_=bounded,
                color=clean_text(raw.get("color")) or DEFAULT_COLOR,
                label=clean_text(raw.get("label")),
            )
        )
    return sorted(normalized, key=lambda s: s.from_)


def normalize_gauge_card(raw: Any) -> NormalizedGaugeConfig:
    reader = ConfigReader(raw, "gauge", logger)
    minimum = reader.number("min", DEFAULT_MIN)
    max_candidate = reader.number("max", DEFAULT_MAX)
    # Degenerate ranges are repaired silently
    maximum = repair_range(minimum, max_candidate)

    segments = normalize_gauge_segments(reader.get("segments"), minimum, maximum, reader)
    value_texts = reader.section("value_texts")

    return NormalizedGaugeConfig(
        entity=reader.text("entity"),
        header=reader.text("header"),
        min=minimum,
        max=maximum,
        unit=reader.text("primary_unit", value_texts) or "",
        needle=reader.boolean("needle", False),
        gradient=reader.boolean("gradient", False),
        segments=segments,
        warnings=reader.warnings,
    )


def resolve_segment_color(segments: list[GaugeSegment], value: float) -> str:
    """Color of the highest segment whose threshold is at or below ``value``."""
    color = segments[0].color if segments else DEFAULT_COLOR
    for segment in segments:
        if value >= segment.from_:
            color = segment.color
    return color


def resolve_gauge_reading(config: NormalizedGaugeConfig, reading: Any) -> GaugeReading:
    """Clamp a reading into the gauge range and work out colors and active bands.

    A missing or non-numeric reading marks the gauge unavailable at ``min``.
    """
    raw_value = optional_number(reading)
    unavailable = raw_value is None
    value = config.min if raw_value is None else clamp(raw_value, config.min, config.max)
    span = config.max - config.min
    percentage = (value - config.min) / span * 100 if span > 0 else 0.0

    segments = config.segments
    if config.gradient and len(segments) >= 2:
        active_color = interpolate_hex_color(segments[0].color, segments[-1].color, percentage / 100)
    else:
        active_color = resolve_segment_color(segments, value)

    resolved = []
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        upper = config.max if is_last else segments[index + 1].from_
        is_active = segment.from_ <= value <= upper if is_last else segment.from_ <= value < upper
        resolved.append(ActiveGaugeSegment(**segment.model_dump(), is_active=is_active))

    return GaugeReading(
        min=config.min,
        max=config.max,
        value=value,
        percentage=percentage,
        unavailable=unavailable,
        segments=resolved,
        active_color=active_color,
    )


def synthesize_gauge(config: NormalizedGaugeConfig, lookup: EntityLookup) -> GaugeReading:
    """Resolve the gauge against its entity's current state."""
    return resolve_gauge_reading(config, resolve_state(lookup, config.entity))
