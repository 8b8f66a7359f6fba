"""Hex color parsing and interpolation."""

import re

from cardsynth.core.parsing import clamp, js_round

DEFAULT_COLOR = "#4fa3ff"

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")


def parse_hex_color(color: str) -> tuple[int, int, int] | None:
    """``#rrggbb`` (leading ``#`` optional) -> RGB tuple, None if malformed."""
    if not isinstance(color, str):
        return None
    normalized = color.strip().replace("#", "", 1)
    if not _HEX_RE.match(normalized):
        return None
    return (
        int(normalized[0:2], 16),
        int(normalized[2:4], 16),
        int(normalized[4:6], 16),
    )


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#" + "".join(f"{channel:02x}" for channel in rgb)


def interpolate_hex_color(start: str, end: str, ratio: float, fallback: str = DEFAULT_COLOR) -> str:
    """Linear per-channel blend of two hex colors; ``ratio`` is clamped to [0, 1]."""
    start_rgb = parse_hex_color(start)
    end_rgb = parse_hex_color(end)
    if start_rgb is None or end_rgb is None:
        return fallback

    t = clamp(ratio, 0, 1)
    blended = tuple(
        js_round(a + (b - a) * t) for a, b in zip(start_rgb, end_rgb, strict=True)
    )
    return rgb_to_hex(blended)  # type: ignore[arg-type]
