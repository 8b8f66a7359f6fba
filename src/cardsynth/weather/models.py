"""Weather forecast visualization models (``weather-forecast``)."""

import enum

from cardsynth.core.geometry import Bar
from cardsynth.core.models import FrozenModel, NormalizedCard


class ForecastMode(enum.StrEnum):
    daily = "daily"
    hourly = "hourly"


class WeatherMetric(enum.StrEnum):
    temperature = "temperature"
    precipitation = "precipitation"
    wind_speed = "wind_speed"


class IconAnimation(enum.StrEnum):
    off = "off"
    subtle = "subtle"
    pulse = "pulse"


class UnitSystem(enum.StrEnum):
    auto = "auto"
    metric = "metric"
    imperial = "imperial"


class NormalizedWeatherConfig(NormalizedCard):
    type: str = "weather-forecast"
    entity: str | None = None
    mode: ForecastMode = ForecastMode.daily
    metrics: list[WeatherMetric]
    icon_animation: IconAnimation = IconAnimation.subtle
    days: int = 5
    locale: str | None = None
    unit_system: UnitSystem = UnitSystem.auto
    show_forecast: bool = True


class ForecastPoint(FrozenModel):
    datetime: str
    timestamp: int
    condition: str = "unknown"
    temperature: float | None = None
    templow: float | None = None
    precipitation: float | None = None
    precipitation_probability: float | None = None
    wind_speed: float | None = None
    wind_bearing: float | None = None


class ForecastSummary(FrozenModel):
    """Aggregates over the points that carry each metric; None when none do."""

    min_temperature: float | None = None
    max_temperature: float | None = None
    avg_temperature: float | None = None
    total_precipitation: float | None = None
    max_wind_speed: float | None = None


class WeatherData(FrozenModel):
    points: list[ForecastPoint]
    summary: ForecastSummary
    labels: list[str]
    temperature_path: str
    wind_path: str
    precipitation_bars: list[Bar]
