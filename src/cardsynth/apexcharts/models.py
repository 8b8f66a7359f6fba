"""ApexCharts-compatible card models (``custom:apexcharts-card``).

The engine only understands a small part of an ApexCharts card. Every
model here splits its input into the validated subset and an ``extra``
mapping holding everything else verbatim.
"""

import enum
from typing import Any

from pydantic import Field

from cardsynth.core.models import FrozenModel, NormalizedCard


class ApexChartType(enum.StrEnum):
    line = "line"
    area = "area"
    bar = "bar"


class ApexSeriesType(enum.StrEnum):
    line = "line"
    area = "area"
    column = "column"
    bar = "bar"


class StrokeCurve(enum.StrEnum):
    smooth = "smooth"
    straight = "straight"
    stepline = "stepline"


class ApexHeader(FrozenModel):
    show: bool = True
    extra: dict[str, Any] = Field(default_factory=dict)


class ApexSeries(FrozenModel):
    entity: str
    name: str
    type: ApexSeriesType | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class ApexChart(FrozenModel):
    type: ApexChartType = ApexChartType.line
    height: float = 280
    extra: dict[str, Any] = Field(default_factory=dict)


class ApexStroke(FrozenModel):
    width: float = 2
    curve: StrokeCurve = StrokeCurve.smooth
    extra: dict[str, Any] = Field(default_factory=dict)


class NormalizedApexChartsConfig(NormalizedCard):
    type: str = "custom:apexcharts-card"
    header: ApexHeader = ApexHeader()
    graph_span: str = "24h"
    graph_span_seconds: int = 24 * 60 * 60
    update_interval: str = "30s"
    update_interval_seconds: int = 30
    series: list[ApexSeries] = []
    chart: ApexChart = ApexChart()
    stroke: ApexStroke = ApexStroke()
    apex_extra: dict[str, Any] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)


class ApexPoint(FrozenModel):
    x: int  # epoch ms
    y: float


class ApexSeriesData(FrozenModel):
    entity: str
    name: str
    data: list[ApexPoint]
