"""Progress ring card models (``custom:modern-circular-gauge``)."""

import enum

from cardsynth.core.geometry import ArcGeometry
from cardsynth.core.models import FrozenModel, Gradient, NormalizedCard


class RingDirection(enum.StrEnum):
    clockwise = "clockwise"
    counter_clockwise = "counter-clockwise"


class AnimationEasing(enum.StrEnum):
    linear = "linear"
    ease = "ease"
    ease_in = "ease-in"
    ease_out = "ease-out"
    ease_in_out = "ease-in-out"


class RingThreshold(FrozenModel):
    value: float
    color: str


class NormalizedRing(FrozenModel):
    entity: str
    label: str
    min: float
    max: float
    color: str
    thickness: float
    gradient: Gradient | None = None
    thresholds: list[RingThreshold] = []


class NormalizedProgressRingConfig(NormalizedCard):
    type: str = "custom:modern-circular-gauge"
    title: str | None = None
    rings: list[NormalizedRing]
    start_angle: float = 0
    direction: RingDirection = RingDirection.clockwise
    animate: bool = True
    animation_duration_ms: float = 500
    animation_easing: AnimationEasing = AnimationEasing.ease
    show_labels: bool = True
    label_precision: int = 0


class RingRuntime(FrozenModel):
    entity: str
    label: str
    value: float
    percent: float
    display_value: str
    color: str
    stroke: str
    thickness: float
    gradient: Gradient | None = None
    thresholds: list[RingThreshold] = []


class RingLayout(FrozenModel):
    """A ring paired with its packed arc and dash offset."""

    ring: RingRuntime
    geometry: ArcGeometry
    dash_offset: float
