"""Gauge card models (``custom:gauge-card-pro``)."""

from pydantic import ConfigDict, Field

from cardsynth.core.models import FrozenModel, NormalizedCard


class GaugeSegment(FrozenModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: float = Field(alias="from")
    color: str
    label: str | None = None


class ActiveGaugeSegment(GaugeSegment):
    is_active: bool


class NormalizedGaugeConfig(NormalizedCard):
    type: str = "custom:gauge-card-pro"
    entity: str | None = None
    header: str | None = None
    min: float
    max: float
    unit: str = ""
    needle: bool = False
    gradient: bool = False
    segments: list[GaugeSegment]
    value_precision: int = 1


class GaugeReading(FrozenModel):
    """A gauge resolved against one reading."""

    min: float
    max: float
    value: float
    percentage: float
    unavailable: bool
    segments: list[ActiveGaugeSegment]
    active_color: str
