"""Sparkline card models (``custom:mini-graph-card``)."""

import enum

from cardsynth.core.geometry import LinePath
from cardsynth.core.models import FrozenModel, NormalizedCard, SeriesPoint


class RangePreset(enum.StrEnum):
    one_hour = "1h"
    six_hours = "6h"
    one_day = "24h"
    one_week = "7d"


class SparklineStyle(enum.StrEnum):
    line = "line"
    area = "area"


class NormalizedSparklineConfig(NormalizedCard):
    type: str = "custom:mini-graph-card"
    entity: str | None = None
    name: str | None = None
    color: str
    line_width: float = 2
    points_per_hour: float = 1
    hours_to_show: int = 24
    range_preset: RangePreset = RangePreset.one_day
    style: SparklineStyle = SparklineStyle.line
    show_name: bool = True
    show_current: bool = True
    show_icon: bool = True
    show_min_max: bool = False
    compact: bool = False
    height: float = 96


class SparklineDataset(FrozenModel):
    """Downsampled points plus the indices a renderer highlights."""

    points: list[SeriesPoint]
    min_index: int
    max_index: int
    current_index: int
    min: float
    max: float
    current: float
    path: LinePath
