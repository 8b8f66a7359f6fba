"""Native graph normalization and synthetic series generation."""

import logging
import math
from collections.abc import Sequence
from typing import Any

from cardsynth.config import DEFAULT_PALETTE
from cardsynth.core.fields import ConfigReader
from cardsynth.core.noise import centered_noise
from cardsynth.core.parsing import (
    clamp,
    clean_text,
    format_duration,
    humanize_entity_id,
    is_present,
    js_round,
    now_ms,
    optional_number,
    round_to,
)
from cardsynth.graph.models import (
    AxisBound,
    AxisSide,
    ChartType,
    GraphData,
    GraphPoint,
    GraphSeries,
    NormalizedGraphConfig,
    PieSlice,
    XAxisMode,
    YAxis,
)

logger = logging.getLogger(__name__)

DEFAULT_RANGE_SECONDS = 24 * 60 * 60
DEFAULT_REFRESH_SECONDS = 30
MIN_POINTS = 24
MAX_POINTS = 180
MIN_PIE_VALUE = 0.01
PLACEHOLDER_ENTITY = "sensor.example_temperature"


def parse_axis_bound(value: Any, reader: ConfigReader | None = None, name: str = "y_axis") -> AxisBound:
    """A finite number, or ``"auto"`` for blank, ``auto`` and unparsable input."""
    if isinstance(value, str) and value.strip().lower() in ("", "auto"):
        return "auto"
    parsed = optional_number(value)
    if parsed is not None:
        return parsed
    if reader and is_present(value):
        reader.warn(f'{name} bound "{value}" is not a number; using auto.')
    return "auto"


def _series_key(index: int) -> str:
    return f"series_{index}"


def normalize_graph_series(
    series: Any,
    reader: ConfigReader,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> list[GraphSeries]:
    entries = series if isinstance(series, list) else []
    normalized: list[GraphSeries] = []
    for position, entry in enumerate(entries):
        raw = entry if isinstance(entry, dict) else {}
        entity = clean_text(raw.get("entity"))
        if entity is None:
            reader.warn(f"Ignored series {position + 1} without an entity.")
            continue
        index = len(normalized)
        normalized.append(
            GraphSeries(
                entity=entity,
                label=clean_text(raw.get("label")) or humanize_entity_id(entity) or f"Series {index + 1}",
                color=clean_text(raw.get("color")) or palette[index % len(palette)],
                axis=reader.choice("axis", list(AxisSide), AxisSide.left, raw, name=f"series {index + 1} axis"),
                smooth=reader.boolean("smooth", True, raw),
                stack=reader.boolean("stack", False, raw),
            )
        )

    if not normalized:
        normalized.append(
            GraphSeries(entity=PLACEHOLDER_ENTITY, label="Series 1", color=palette[0])
        )
    return normalized


def normalize_graph_card(raw: Any, palette: Sequence[str] = DEFAULT_PALETTE) -> NormalizedGraphConfig:
    reader = ConfigReader(raw, "native graph", logger)
    range_seconds = reader.duration("time_range", DEFAULT_RANGE_SECONDS, "24h")
    refresh_seconds = reader.duration("refresh_interval", DEFAULT_REFRESH_SECONDS, "30s")
    y_axis = reader.section("y_axis")

    return NormalizedGraphConfig(
        title=reader.text("title"),
        chart_type=reader.choice("chart_type", list(ChartType), ChartType.line),
        time_range=format_duration(range_seconds, "24h"),
        refresh_interval=format_duration(refresh_seconds, "30s"),
        time_range_seconds=range_seconds,
        refresh_interval_seconds=refresh_seconds,
        x_axis_mode=reader.choice(
            "mode", list(XAxisMode), XAxisMode.time, reader.section("x_axis"), name="x_axis.mode"
        ),
        y_axis=YAxis(
            min=parse_axis_bound(y_axis.get("min"), reader, "y_axis.min"),
            max=parse_axis_bound(y_axis.get("max"), reader, "y_axis.max"),
        ),
        series=normalize_graph_series(reader.get("series"), reader, palette),
        zoom_pan=reader.boolean("zoom_pan", True),
        warnings=reader.warnings,
    )


def graph_point_count(config: NormalizedGraphConfig) -> int:
    ratio = config.time_range_seconds / max(config.refresh_interval_seconds, 1)
    return int(clamp(js_round(ratio), MIN_POINTS, MAX_POINTS))


def series_value(index: int, series_index: int) -> float:
    """Base level per series, a slow sine wave and seeded jitter."""
    base = 30 + series_index * 15
    wave = math.sin((index + series_index * 7) / 10) * 12
    noise = centered_noise(index * 13 + series_index * 101, 6)
    return round_to(base + wave + noise)


def build_graph_data(config: NormalizedGraphConfig, now: int | None = None) -> GraphData:
    """Evenly spaced synthetic points ending at ``now``, plus pie slices."""
    now = now_ms() if now is None else now
    count = graph_point_count(config)
    step_ms = (config.time_range_seconds // count) * 1000

    points = [
        GraphPoint(
            timestamp=now - (count - index - 1) * step_ms,
            values={
                _series_key(series_index): series_value(index, series_index)
                for series_index in range(len(config.series))
            },
        )
        for index in range(count)
    ]

    latest = points[-1].values if points else {}
    pie = [
        PieSlice(
            name=series.label,
            value=max(MIN_PIE_VALUE, latest.get(_series_key(index), MIN_PIE_VALUE)),
            color=series.color,
        )
        for index, series in enumerate(config.series)
    ]
    return GraphData(points=points, pie=pie)


def get_y_axis_domain(y_axis: YAxis) -> tuple[AxisBound, AxisBound] | None:
    """Explicit axis domain, or None when both bounds are automatic."""
    if y_axis.min == "auto" and y_axis.max == "auto":
        return None
    return (y_axis.min, y_axis.max)
