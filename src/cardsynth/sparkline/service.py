"""Sparkline normalization, synthetic history and extrema-preserving downsampling."""

import logging
import math
from typing import Any

from cardsynth.core.color import DEFAULT_COLOR
from cardsynth.core.fields import ConfigReader
from cardsynth.core.geometry import build_line_path
from cardsynth.core.models import SeriesPoint
from cardsynth.core.noise import hash_string, seeded_unit
from cardsynth.core.parsing import (
    clamp,
    clean_text,
    js_round,
    now_ms,
    optional_number,
    round_to,
)
from cardsynth.sparkline.models import (
    NormalizedSparklineConfig,
    RangePreset,
    SparklineDataset,
    SparklineStyle,
)

logger = logging.getLogger(__name__)

RANGE_PRESET_HOURS = {
    RangePreset.one_hour: 1,
    RangePreset.six_hours: 6,
    RangePreset.one_day: 24,
    RangePreset.one_week: 24 * 7,
}

DEFAULT_HOURS = 24
DEFAULT_LINE_WIDTH = 2
DEFAULT_POINTS_PER_HOUR = 1
DEFAULT_HEIGHT = 96
DEFAULT_MAX_POINTS = 48
DEFAULT_STATE = 50
COMPACT_HEIGHT = 72
MIN_RAW_POINTS = 24
MAX_RAW_POINTS = 720


def parse_range_preset_to_hours(value: Any) -> int | None:
    """``"7d"`` -> 168; anything that is not a known preset -> None."""
    if not isinstance(value, str):
        return None
    for preset, hours in RANGE_PRESET_HOURS.items():
        if value.strip() == preset:
            return hours
    return None


def resolve_range_preset(hours: float) -> RangePreset:
    """Smallest preset that covers ``hours``."""
    if hours <= 1:
        return RangePreset.one_hour
    if hours <= 6:
        return RangePreset.six_hours
    if hours <= 24:
        return RangePreset.one_day
    return RangePreset.one_week


def _primary_entity(reader: ConfigReader) -> str | None:
    entity = reader.text("entity")
    if entity:
        return entity
    entities = reader.get("entities")
    if not isinstance(entities, list) or not entities:
        return None
    first = entities[0]
    if isinstance(first, dict):
        first = first.get("entity")
    return clean_text(first)


def _resolve_hours(reader: ConfigReader) -> int:
    preset_hours = parse_range_preset_to_hours(reader.get("range"))
    if preset_hours is not None:
        return preset_hours
    hours = js_round(reader.number("hours_to_show", DEFAULT_HOURS))
    bounded = int(clamp(hours, 1, RANGE_PRESET_HOURS[RangePreset.one_week]))
    if bounded != hours:
        reader.warn(f"hours_to_show {hours} is outside 1-168; clamped to {bounded}.")
    return bounded


def normalize_sparkline_card(raw: Any) -> NormalizedSparklineConfig:
    reader = ConfigReader(raw, "sparkline", logger)
    hours = _resolve_hours(reader)
    show = reader.section("show")
    raw_height = reader.number("height", DEFAULT_HEIGHT)

    return NormalizedSparklineConfig(
        entity=_primary_entity(reader),
        name=reader.text("name"),
        color=reader.text("color") or DEFAULT_COLOR,
        line_width=reader.clamped("line_width", DEFAULT_LINE_WIDTH, 1, 8),
        points_per_hour=reader.clamped("points_per_hour", DEFAULT_POINTS_PER_HOUR, 0.25, 24),
        hours_to_show=hours,
        range_preset=resolve_range_preset(hours),
        style=SparklineStyle.area if show.get("fill") else SparklineStyle.line,
        show_name=show.get("name") is not False,
        show_current=show.get("state") is not False,
        show_icon=show.get("icon") is not False,
        show_min_max=show.get("extrema") is True,
        compact=raw_height <= COMPACT_HEIGHT,
        height=reader.clamped("height", DEFAULT_HEIGHT, 52, 200),
        warnings=reader.warnings,
    )


def find_extrema_indices(points: list[SeriesPoint]) -> tuple[int, int]:
    """First index of the minimum and of the maximum value."""
    if not points:
        return 0, 0
    indices = range(len(points))
    min_index = min(indices, key=lambda i: points[i].value)
    max_index = max(indices, key=lambda i: points[i].value)
    return min_index, max_index


def downsample_sparkline_data(
    points: list[SeriesPoint],
    max_points: int = DEFAULT_MAX_POINTS,
) -> list[SeriesPoint]:
    """Reduce ``points`` to at most ``max_points`` keeping endpoints and extrema.

    An even stride fills the budget first; if the protected points push the
    count over, the interior point whose neighbours sit closest together is
    removed until the cap holds. Caps below four keep only the endpoints.
    """
    if len(points) <= max_points:
        return list(points)
    if max_points < 4:
        return [points[0], points[-1]]

    min_index, max_index = find_extrema_indices(points)
    last = len(points) - 1
    required = {0, last, min_index, max_index}

    step = last / (max_points - 1)
    sampled = {js_round(i * step) for i in range(max_points)} | required

    while len(sampled) > max_points:
        indices = sorted(sampled)
        candidate = None
        smallest_gap = math.inf
        for position in range(1, len(indices) - 1):
            index = indices[position]
            if index in required:
                continue
            gap = indices[position + 1] - indices[position - 1]
            if gap < smallest_gap:
                smallest_gap = gap
                candidate = index
        if candidate is None:
            break
        sampled.discard(candidate)

    return [points[index] for index in sorted(sampled)]


def _synthetic_value(index: int, count: int, seed: int, base: float) -> float:
    trend = math.sin((index + seed % 13) / 8) * 6
    seasonal = math.cos((index + seed % 29) / 21) * 2.5
    noise = (seeded_unit(index * 31 + seed) - 0.5) * 2.2
    slope = ((index / max(1, count - 1)) - 0.5) * (seed % 11) * 0.4
    return round_to(base + trend + seasonal + noise + slope)


def build_sparkline_dataset(
    config: NormalizedSparklineConfig,
    current_state: Any,
    now: int | None = None,
    max_points: int = DEFAULT_MAX_POINTS,
) -> SparklineDataset:
    """Synthetic history ending at ``now``, downsampled for display.

    The last raw point is pinned to the live reading when one is numeric.
    """
    now = now_ms() if now is None else now
    count = int(clamp(js_round(config.hours_to_show * config.points_per_hour), MIN_RAW_POINTS, MAX_RAW_POINTS))
    range_ms = config.hours_to_show * 60 * 60 * 1000
    step_ms = range_ms // (count - 1)
    seed = hash_string(config.entity or "sparkline")

    reading = optional_number(current_state)
    base = DEFAULT_STATE if reading is None else reading

    raw_points = [
        SeriesPoint(
            timestamp=now - (count - index - 1) * step_ms,
            value=_synthetic_value(index, count, seed, base),
        )
        for index in range(count)
    ]
    if reading is not None:
        raw_points[-1] = SeriesPoint(timestamp=raw_points[-1].timestamp, value=round_to(reading))
    else:
        logger.debug("Sparkline %s has no numeric state; previewing around %s", config.entity, DEFAULT_STATE)

    points = downsample_sparkline_data(raw_points, max_points)
    min_index, max_index = find_extrema_indices(points)
    current_index = max(0, len(points) - 1)

    return SparklineDataset(
        points=points,
        min_index=min_index,
        max_index=max_index,
        current_index=current_index,
        min=points[min_index].value if points else 0,
        max=points[max_index].value if points else 0,
        current=points[current_index].value if points else 0,
        path=build_line_path([point.value for point in points]),
    )
