"""Weather forecast normalization, unit conversion and summaries."""

import logging
from collections.abc import Mapping
from typing import Any

from cardsynth.core.fields import ConfigReader
from cardsynth.core.geometry import build_bars, build_metric_line_path
from cardsynth.core.parsing import (
    DAY_MS,
    clean_text,
    from_timestamp,
    js_round,
    now_ms,
    optional_number,
    round_to,
    to_iso_datetime,
    to_timestamp,
)
from cardsynth.entities import EntityLookup, resolve_attributes, resolve_state
from cardsynth.weather.models import (
    ForecastMode,
    ForecastPoint,
    ForecastSummary,
    IconAnimation,
    NormalizedWeatherConfig,
    UnitSystem,
    WeatherData,
    WeatherMetric,
)

logger = logging.getLogger(__name__)

DEFAULT_METRICS = [WeatherMetric.temperature, WeatherMetric.precipitation, WeatherMetric.wind_speed]
DEFAULT_DAYS = 5
KMH_PER_MPH = 1.60934
KMH_PER_MS = 3.6


def _normalize_metrics(reader: ConfigReader) -> list[WeatherMetric]:
    raw = reader.get("metrics")
    if not isinstance(raw, list):
        return list(DEFAULT_METRICS)
    metrics = []
    for item in raw:
        if item in list(WeatherMetric):
            metrics.append(WeatherMetric(item))
        else:
            reader.warn(f'Unsupported metric "{item}" ignored.')
    return metrics or list(DEFAULT_METRICS)


def normalize_weather_card(raw: Any) -> NormalizedWeatherConfig:
    reader = ConfigReader(raw, "weather", logger)
    hourly = reader.get("mode") == "hourly" or reader.get("forecast_type") == "hourly"

    return NormalizedWeatherConfig(
        entity=reader.text("entity"),
        mode=ForecastMode.hourly if hourly else ForecastMode.daily,
        metrics=_normalize_metrics(reader),
        icon_animation=reader.choice("icon_animation", list(IconAnimation), IconAnimation.subtle),
        days=reader.clamped("days", DEFAULT_DAYS, 1, 7, integer=True),
        locale=reader.text("locale"),
        unit_system=reader.choice("unit_system", list(UnitSystem), UnitSystem.auto),
        show_forecast=reader.get("show_forecast") is not False,
        warnings=reader.warnings,
    )


def normalize_forecast_point(item: Any) -> ForecastPoint | None:
    """A point needs a parsable ``datetime`` or ``time``; otherwise it is dropped."""
    if not isinstance(item, Mapping):
        return None
    timestamp = to_timestamp(item.get("datetime"))
    if timestamp is None:
        timestamp = to_timestamp(item.get("time"))
    if timestamp is None:
        return None
    condition = item.get("condition")
    return ForecastPoint(
        datetime=to_iso_datetime(timestamp),
        timestamp=timestamp,
        condition=condition if isinstance(condition, str) else "unknown",
        temperature=optional_number(item.get("temperature")),
        templow=optional_number(item.get("templow")),
        precipitation=optional_number(item.get("precipitation")),
        precipitation_probability=optional_number(item.get("precipitation_probability")),
        wind_speed=optional_number(item.get("wind_speed")),
        wind_bearing=optional_number(item.get("wind_bearing")),
    )


def normalize_forecast_payload(raw_forecast: Any, mode: ForecastMode, days: int) -> list[ForecastPoint]:
    """Sorted points, cut to ``days`` entries (or ``days * 24`` hourly)."""
    if not isinstance(raw_forecast, list):
        return []
    points = []
    for item in raw_forecast:
        point = normalize_forecast_point(item)
        if point is None:
            logger.debug("Dropping forecast entry without a parsable datetime: %r", item)
            continue
        points.append(point)
    points.sort(key=lambda point: point.timestamp)
    limit = days * 24 if mode == ForecastMode.hourly else days
    return points[:limit]


def guess_temperature_unit(value: str | None) -> str:
    """``F`` when the unit text mentions an f, ``C`` otherwise."""
    if value and "f" in value.lower():
        return "F"
    return "C"


def convert_temperature(value: float, source_unit: str, target_unit: str) -> float:
    if source_unit == target_unit:
        return value
    if source_unit == "C":
        return value * 9 / 5 + 32
    return (value - 32) * 5 / 9


def convert_wind_speed(value: float, source_unit: str | None, target_unit: str) -> float:
    """Convert through km/h; ``m/s`` and ``mph`` sources are recognized."""
    source = (source_unit or "").lower()
    kmh = value
    if "m/s" in source:
        kmh = value * KMH_PER_MS
    elif "mph" in source:
        kmh = value * KMH_PER_MPH
    return kmh / KMH_PER_MPH if target_unit == "mph" else kmh


def _target_temperature_unit(unit_system: UnitSystem, source_unit: str) -> str:
    if unit_system == UnitSystem.imperial:
        return "F"
    if unit_system == UnitSystem.metric:
        return "C"
    return source_unit


def format_temperature(
    value: float | None,
    unit_system: UnitSystem,
    source_unit_text: str | None = None,
    round_value: bool = True,
) -> str:
    if value is None:
        return "--"
    source_unit = guess_temperature_unit(source_unit_text)
    target_unit = _target_temperature_unit(unit_system, source_unit)
    converted = convert_temperature(value, source_unit, target_unit)
    rendered = js_round(converted) if round_value else round_to(converted, 1)
    return f"{rendered:g}°{target_unit}"


def format_wind_speed(value: float | None, unit_system: UnitSystem, source_unit_text: str | None = None) -> str:
    if value is None:
        return "--"
    source_text = clean_text(source_unit_text)
    if unit_system == UnitSystem.auto and source_text:
        return f"{js_round(value)} {source_unit_text}"
    target_unit = "mph" if unit_system == UnitSystem.imperial else "km/h"
    return f"{js_round(convert_wind_speed(value, source_unit_text, target_unit))} {target_unit}"


def format_forecast_date(timestamp: int, mode: ForecastMode) -> str:
    """Hour of day (``3 PM``) for hourly forecasts, weekday (``Tue``) for daily."""
    dt = from_timestamp(timestamp)
    if mode == ForecastMode.hourly:
        return f"{dt.hour % 12 or 12} {dt:%p}"
    return f"{dt:%a}"


def build_forecast_summary(points: list[ForecastPoint]) -> ForecastSummary:
    temperatures = [p.temperature for p in points if p.temperature is not None]
    precipitation = [p.precipitation for p in points if p.precipitation is not None]
    winds = [p.wind_speed for p in points if p.wind_speed is not None]
    return ForecastSummary(
        min_temperature=min(temperatures) if temperatures else None,
        max_temperature=max(temperatures) if temperatures else None,
        avg_temperature=sum(temperatures) / len(temperatures) if temperatures else None,
        total_precipitation=sum(precipitation) if precipitation else None,
        max_wind_speed=max(winds) if winds else None,
    )


def resolve_forecast_fallback(
    points: list[ForecastPoint],
    now_temperature: float | None,
    now: int | None = None,
) -> list[ForecastPoint]:
    """Two flat points (now and a day later) when only a current temperature is known."""
    if points:
        return points
    if now_temperature is None:
        return []
    now = now_ms() if now is None else now
    return [
        ForecastPoint(
            datetime=to_iso_datetime(timestamp),
            timestamp=timestamp,
            temperature=now_temperature,
            precipitation=0,
        )
        for timestamp in (now, now + DAY_MS)
    ]


def build_forecast_point_label(
    point: ForecastPoint,
    config: NormalizedWeatherConfig,
    temperature_unit: str | None = None,
    wind_unit: str | None = None,
) -> str:
    """Accessible one-line description of a forecast point."""
    parts = [format_forecast_date(point.timestamp, config.mode)]
    if WeatherMetric.temperature in config.metrics:
        parts.append(f"temperature {format_temperature(point.temperature, config.unit_system, temperature_unit)}")
    if WeatherMetric.precipitation in config.metrics:
        precipitation = "--" if point.precipitation is None else f"{point.precipitation:g} mm"
        parts.append(f"precipitation {precipitation}")
    if WeatherMetric.wind_speed in config.metrics:
        parts.append(f"wind {format_wind_speed(point.wind_speed, config.unit_system, wind_unit)}")
    return ", ".join(parts)


def synthesize_weather(
    config: NormalizedWeatherConfig,
    lookup: EntityLookup,
    now: int | None = None,
) -> WeatherData:
    attributes = resolve_attributes(lookup, config.entity)
    points = normalize_forecast_payload(attributes.get("forecast"), config.mode, config.days)

    current = optional_number(attributes.get("temperature"))
    if current is None:
        current = optional_number(resolve_state(lookup, config.entity))
    points = resolve_forecast_fallback(points, current, now)

    temperature_unit = clean_text(attributes.get("temperature_unit"))
    wind_unit = clean_text(attributes.get("wind_speed_unit"))
    return WeatherData(
        points=points,
        summary=build_forecast_summary(points),
        labels=[build_forecast_point_label(point, config, temperature_unit, wind_unit) for point in points],
        temperature_path=build_metric_line_path([point.temperature for point in points]),
        wind_path=build_metric_line_path([point.wind_speed for point in points]),
        precipitation_bars=build_bars([point.precipitation for point in points]),
    )
