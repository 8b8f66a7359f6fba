"""Resolve hand-written card spacing into four clamped pixel sides.

Accepted shapes, tried in order: a preset name, a number, a numeric
string, a CSS shorthand string of one to four ``<n>``/``<n>px`` tokens,
and a per-side mapping. Anything else is the fallback on every side.
"""

import logging
from collections.abc import Mapping
from typing import Any

from cardsynth.core.parsing import clamp, is_number, js_round, optional_number
from cardsynth.spacing.models import (
    NormalizedSpacing,
    SpacingMode,
    SpacingPreset,
    SpacingSide,
    SpacingSides,
)

logger = logging.getLogger(__name__)

MIN_CARD_SPACING = 0
MAX_CARD_SPACING = 64
DEFAULT_CARD_SPACING = 0

SPACING_PRESET_VALUES = {
    SpacingPreset.none: 0,
    SpacingPreset.tight: 4,
    SpacingPreset.normal: 8,
    SpacingPreset.relaxed: 16,
    SpacingPreset.spacious: 24,
}

SIDE_NAMES = ("top", "right", "bottom", "left")

CardSpacingValue = int | str | Mapping[str, Any]


def clamp_card_spacing(
    value: Any,
    fallback: float = DEFAULT_CARD_SPACING,
    minimum: float = MIN_CARD_SPACING,
    maximum: float = MAX_CARD_SPACING,
) -> int:
    """Round half up, then clamp; non-numeric input uses ``fallback``."""
    parsed = optional_number(value)
    candidate = fallback if parsed is None else parsed
    return int(clamp(js_round(candidate), minimum, maximum))


def is_spacing_preset(value: Any) -> bool:
    return isinstance(value, str) and value in list(SpacingPreset)


def _all_sides(value: int) -> SpacingSides:
    return SpacingSides(top=value, right=value, bottom=value, left=value)


def _parse_css_token(token: str) -> float | None:
    token = token.strip().lower()
    if token.endswith("px"):
        token = token[:-2]
    return optional_number(token)


def _parse_css_shorthand(value: str) -> SpacingSides | None:
    """CSS shorthand expansion: 1 -> all, 2 -> (v, h), 3 -> (t, h, b), 4 -> (t, r, b, l)."""
    tokens = value.split()
    if not 1 <= len(tokens) <= 4:
        return None
    parsed = [_parse_css_token(token) for token in tokens]
    if any(token is None for token in parsed):
        return None
    safe = [clamp_card_spacing(token) for token in parsed]

    if len(safe) == 1:
        return _all_sides(safe[0])
    if len(safe) == 2:
        return SpacingSides(top=safe[0], right=safe[1], bottom=safe[0], left=safe[1])
    if len(safe) == 3:
        return SpacingSides(top=safe[0], right=safe[1], bottom=safe[2], left=safe[1])
    return SpacingSides(top=safe[0], right=safe[1], bottom=safe[2], left=safe[3])


def _with_mode(sides: SpacingSides, mode: SpacingMode) -> NormalizedSpacing:
    return NormalizedSpacing(**sides.model_dump(), mode=mode)


def normalize_spacing_value(value: Any, fallback: float = DEFAULT_CARD_SPACING) -> NormalizedSpacing:
    if is_spacing_preset(value) and value != SpacingPreset.custom:
        return _with_mode(_all_sides(SPACING_PRESET_VALUES[SpacingPreset(value)]), SpacingMode.all)

    if is_number(value):
        return _with_mode(_all_sides(clamp_card_spacing(value, fallback)), SpacingMode.all)

    if isinstance(value, str):
        number = optional_number(value)
        if number is not None:
            return _with_mode(_all_sides(clamp_card_spacing(number, fallback)), SpacingMode.all)
        shorthand = _parse_css_shorthand(value)
        if shorthand is not None:
            return _with_mode(shorthand, SpacingMode.all if shorthand.uniform else SpacingMode.per_side)

    if isinstance(value, Mapping):
        return _with_mode(
            SpacingSides(**{side: clamp_card_spacing(value.get(side), fallback) for side in SIDE_NAMES}),
            SpacingMode.per_side,
        )

    if value is not None:
        logger.debug("Unrecognized spacing value %r; using %s on every side", value, fallback)
    return _with_mode(_all_sides(clamp_card_spacing(None, fallback)), SpacingMode.all)


def resolve_spacing_preset(value: Any) -> SpacingPreset:
    """The preset whose pixel value matches every side, else ``custom``."""
    if is_spacing_preset(value):
        return SpacingPreset(value)
    normalized = normalize_spacing_value(value)
    if not normalized.uniform:
        return SpacingPreset.custom
    for preset, pixels in SPACING_PRESET_VALUES.items():
        if normalized.top == pixels:
            return preset
    return SpacingPreset.custom


def spacing_value_to_form_value(mode: SpacingMode, spacing: SpacingSides) -> CardSpacingValue:
    if mode == SpacingMode.all:
        return spacing.top
    return get_spacing_side_values(spacing).model_dump()


def to_spacing_css_shorthand(value: Any, fallback: float = DEFAULT_CARD_SPACING) -> str:
    """Always four tokens: ``"Tpx Rpx Bpx Lpx"``."""
    sides = normalize_spacing_value(value, fallback)
    return f"{sides.top}px {sides.right}px {sides.bottom}px {sides.left}px"


def resolve_card_spacing_styles(card: Mapping[str, Any]) -> dict[str, str]:
    """CSS declarations for a card's ``card_margin``/``card_padding``; {} when neither is set."""
    if "card_margin" not in card and "card_padding" not in card:
        return {}
    style = {"box-sizing": "border-box"}
    if "card_margin" in card:
        style["margin"] = to_spacing_css_shorthand(card["card_margin"])
    if "card_padding" in card:
        style["padding"] = to_spacing_css_shorthand(card["card_padding"])
    return style


def update_spacing_side(value: Any, side: SpacingSide, next_value: Any) -> dict[str, int]:
    """Per-side mapping with one side replaced; an invalid new value keeps the old one."""
    current = normalize_spacing_value(value)
    updated = get_spacing_side_values(current).model_dump()
    key = normalize_spacing_side(side).value
    updated[key] = clamp_card_spacing(next_value, updated[key])
    return updated


def is_per_side_spacing(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return normalize_spacing_value(value).mode == SpacingMode.per_side


def get_spacing_side_values(value: Any) -> SpacingSides:
    normalized = value if isinstance(value, SpacingSides) else normalize_spacing_value(value)
    return SpacingSides(top=normalized.top, right=normalized.right, bottom=normalized.bottom, left=normalized.left)


def default_per_side_spacing(value: Any = DEFAULT_CARD_SPACING) -> SpacingSides:
    return _all_sides(clamp_card_spacing(value))


def normalize_spacing_side(side: Any) -> SpacingSide:
    """Unknown side names fall back to ``top``."""
    return SpacingSide(side) if side in list(SpacingSide) else SpacingSide.top
