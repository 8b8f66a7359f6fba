"""ApexCharts-compatible normalization and random-walk preview series."""

import enum
import logging
import math
from collections.abc import Mapping
from typing import Any

from cardsynth.apexcharts.models import (
    ApexChart,
    ApexChartType,
    ApexHeader,
    ApexPoint,
    ApexSeries,
    ApexSeriesData,
    ApexSeriesType,
    ApexStroke,
    NormalizedApexChartsConfig,
    StrokeCurve,
)
from cardsynth.core.fields import ConfigReader
from cardsynth.core.noise import hash_string, seeded_unit
from cardsynth.core.parsing import clamp, humanize_entity_id, is_present, js_round, now_ms, parse_duration, round_to

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_SPAN = "24h"
DEFAULT_UPDATE_INTERVAL = "30s"
MIN_HEIGHT = 120
MAX_HEIGHT = 720
MIN_POINTS = 12
MAX_POINTS = 96
POINT_SPACING_SECONDS = 15 * 60

HEADER_KEYS = {"show"}
SERIES_KEYS = {"entity", "name", "type"}
CHART_KEYS = {"type", "height"}
STROKE_KEYS = {"width", "curve"}
CARD_KEYS = {"type", "header", "graph_span", "update_interval", "series", "apex_config"}


def _remainder(source: Mapping[str, Any], known: set[str]) -> dict[str, Any]:
    return {key: value for key, value in source.items() if key not in known}


def _lowered(value: Any) -> str | None:
    return value.strip().lower() if isinstance(value, str) else None


def _as_enum(value: Any, options: type[enum.StrEnum]) -> Any:
    lowered = _lowered(value)
    return options(lowered) if lowered in list(options) else None


def normalize_apex_series(series: Any, reader: ConfigReader) -> list[ApexSeries]:
    if series is None:
        return []
    if not isinstance(series, list):
        reader.warn("Series must be an array for ApexCharts cards.")
        return []

    normalized = []
    for index, entry in enumerate(series):
        raw = entry if isinstance(entry, Mapping) else {}
        entity = reader.text("entity", raw)
        if entity is None:
            reader.warn("Ignored one series entry without a valid entity.")
            continue
        series_type = _as_enum(raw.get("type"), ApexSeriesType)
        extra = _remainder(raw, SERIES_KEYS)
        if is_present(raw.get("type")) and series_type is None:
            reader.warn(
                f'Series {index + 1} uses unsupported type "{raw["type"]}"; '
                "preserving it but using the card-level type in preview."
            )
            extra["type"] = raw["type"]
        normalized.append(
            ApexSeries(
                entity=entity,
                name=reader.text("name", raw) or humanize_entity_id(entity) or f"Series {index + 1}",
                type=series_type,
                extra=extra,
            )
        )
    return normalized


def _duration_text(reader: ConfigReader, key: str, fallback_seconds: int, fallback_text: str) -> tuple[str, int]:
    seconds = reader.duration(key, fallback_seconds, fallback_text)
    text = reader.text(key)
    if text is None or parse_duration(text, -1) == -1:
        text = fallback_text
    return text, seconds


def _resolve_chart_type(chart: Mapping[str, Any], series: list[ApexSeries], reader: ConfigReader) -> ApexChartType:
    configured = _as_enum(chart.get("type"), ApexChartType)
    first_series = _as_enum(series[0].type, ApexChartType) if series else None
    chart_type = configured or first_series or ApexChartType.line
    if is_present(chart.get("type")) and configured is None:
        reader.warn(f'Unsupported apex_config.chart.type "{chart["type"]}"; using "{chart_type}" in preview.')
    return chart_type


def _resolve_curve(stroke: Mapping[str, Any], reader: ConfigReader) -> StrokeCurve:
    curve = _as_enum(stroke.get("curve"), StrokeCurve)
    if curve is None:
        if is_present(stroke.get("curve")):
            reader.warn(f'Unsupported apex_config.stroke.curve "{stroke["curve"]}"; using "smooth" in preview.')
        return StrokeCurve.smooth
    return curve


def normalize_apexcharts_card(raw: Any) -> NormalizedApexChartsConfig:
    reader = ConfigReader(raw, "apexcharts", logger)
    graph_span, graph_span_seconds = _duration_text(reader, "graph_span", 24 * 60 * 60, DEFAULT_GRAPH_SPAN)
    update_interval, update_interval_seconds = _duration_text(reader, "update_interval", 30, DEFAULT_UPDATE_INTERVAL)

    series = normalize_apex_series(reader.get("series"), reader)
    header = reader.section("header")
    apex_config = reader.section("apex_config")
    chart = reader.section("chart", apex_config)
    stroke = reader.section("stroke", apex_config)

    return NormalizedApexChartsConfig(
        header=ApexHeader(show=header.get("show") is not False, extra=_remainder(header, HEADER_KEYS)),
        graph_span=graph_span,
        graph_span_seconds=graph_span_seconds,
        update_interval=update_interval,
        update_interval_seconds=update_interval_seconds,
        series=series,
        chart=ApexChart(
            type=_resolve_chart_type(chart, series, reader),
            height=reader.clamped("height", 280, MIN_HEIGHT, MAX_HEIGHT, chart, name="apex_config.chart.height"),
            extra=_remainder(chart, CHART_KEYS),
        ),
        stroke=ApexStroke(
            width=reader.clamped("width", 2, 0, 12, stroke, name="apex_config.stroke.width"),
            curve=_resolve_curve(stroke, reader),
            extra=_remainder(stroke, STROKE_KEYS),
        ),
        apex_extra=_remainder(apex_config, {"chart", "stroke"}),
        extra=_remainder(reader.raw, CARD_KEYS),
        warnings=reader.warnings,
    )


def to_apex_options(config: NormalizedApexChartsConfig) -> dict[str, Any]:
    """Rebuild ``apex_config``: the validated subset laid over the preserved remainder."""
    return {
        **config.apex_extra,
        "chart": {**config.chart.extra, "type": str(config.chart.type), "height": config.chart.height},
        "stroke": {**config.stroke.extra, "width": config.stroke.width, "curve": str(config.stroke.curve)},
    }


def apex_point_count(graph_span_seconds: int) -> int:
    return int(clamp(js_round(graph_span_seconds / POINT_SPACING_SECONDS), MIN_POINTS, MAX_POINTS))


def build_deterministic_series_data(
    series: ApexSeries,
    graph_span_seconds: int,
    now: int | None = None,
) -> list[ApexPoint]:
    """A seeded random walk ending at ``now``; each value builds on the one before it."""
    now = now_ms() if now is None else now
    points = apex_point_count(graph_span_seconds)
    interval_ms = math.floor(graph_span_seconds * 1000 / points)
    seed = hash_string(series.entity)

    data = []
    value = 30 + seeded_unit(seed) * 40
    for index in range(points - 1, -1, -1):
        wave = math.sin((points - index + seed % 13) / 4) * 6
        variance = (seeded_unit(seed + index * 31) - 0.5) * 5
        value = max(0, value + wave * 0.15 + variance)
        data.append(ApexPoint(x=now - index * interval_ms, y=round_to(value)))
    return data


def synthesize_apexcharts(config: NormalizedApexChartsConfig, now: int | None = None) -> list[ApexSeriesData]:
    now = now_ms() if now is None else now
    return [
        ApexSeriesData(
            entity=series.entity,
            name=series.name,
            data=build_deterministic_series_data(series, config.graph_span_seconds, now),
        )
        for series in config.series
    ]
