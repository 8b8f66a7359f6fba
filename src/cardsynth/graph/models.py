"""Native graph card models (``custom:native-graph-card``)."""

import enum
from typing import Literal

from cardsynth.core.models import FrozenModel, NormalizedCard


class ChartType(enum.StrEnum):
    line = "line"
    bar = "bar"
    area = "area"
    pie = "pie"


class AxisSide(enum.StrEnum):
    left = "left"
    right = "right"


class XAxisMode(enum.StrEnum):
    time = "time"
    category = "category"


AxisBound = float | Literal["auto"]


class YAxis(FrozenModel):
    min: AxisBound = "auto"
    max: AxisBound = "auto"


class GraphSeries(FrozenModel):
    entity: str
    label: str
    color: str
    axis: AxisSide = AxisSide.left
    smooth: bool = True
    stack: bool = False


class NormalizedGraphConfig(NormalizedCard):
    type: str = "custom:native-graph-card"
    title: str | None = None
    chart_type: ChartType = ChartType.line
    time_range: str = "24h"
    refresh_interval: str = "30s"
    time_range_seconds: int
    refresh_interval_seconds: int
    x_axis_mode: XAxisMode = XAxisMode.time
    y_axis: YAxis = YAxis()
    series: list[GraphSeries]
    zoom_pan: bool = True


class GraphPoint(FrozenModel):
    """One timestamp with a value per series, keyed ``series_<index>``."""

    timestamp: int
    values: dict[str, float]


class PieSlice(FrozenModel):
    name: str
    value: float
    color: str


class GraphData(FrozenModel):
    points: list[GraphPoint]
    pie: list[PieSlice]
