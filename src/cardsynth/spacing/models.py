"""Box-model spacing models for card margin and padding."""

import enum

from cardsynth.core.models import FrozenModel


class SpacingPreset(enum.StrEnum):
    none = "none"
    tight = "tight"
    normal = "normal"
    relaxed = "relaxed"
    spacious = "spacious"
    custom = "custom"


class SpacingMode(enum.StrEnum):
    all = "all"
    per_side = "per-side"


class SpacingSide(enum.StrEnum):
    top = "top"
    right = "right"
    bottom = "bottom"
    left = "left"


class SpacingSides(FrozenModel):
    top: int
    right: int
    bottom: int
    left: int

    @property
    def uniform(self) -> bool:
        return self.top == self.right == self.bottom == self.left


class NormalizedSpacing(SpacingSides):
    mode: SpacingMode
