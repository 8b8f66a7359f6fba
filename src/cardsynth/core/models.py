"""Models shared across card kinds."""

import enum

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class NormalizedCard(FrozenModel):
    """Base for every normalized card configuration."""

    warnings: list[str] = Field(default_factory=list)


class SeriesPoint(FrozenModel):
    timestamp: int  # epoch ms
    value: float


class GradientType(enum.StrEnum):
    linear = "linear"
    radial = "radial"


class GradientStop(FrozenModel):
    color: str
    position: float  # 0-100 percent


class Gradient(FrozenModel):
    type: GradientType = GradientType.linear
    angle: float = 90
    stops: list[GradientStop]
