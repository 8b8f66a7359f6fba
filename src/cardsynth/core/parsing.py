"""Loose-input coercion helpers shared by every card normalizer.

Card configuration is authored by hand, so numbers arrive as strings,
durations as free text and timestamps in whatever shape the entity
integration produced. Everything here returns a fallback instead of
raising.
"""

import math
import re
import time
from datetime import UTC, date, datetime, timedelta
from typing import Any

DURATION_PATTERN = re.compile(r"^(\d+)(s|m|h|d|w)$", re.IGNORECASE)

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
}

DAY_MS = 24 * 60 * 60 * 1000
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(maximum, max(minimum, value))


def repair_range(minimum: float, maximum: float) -> float:
    """An upper bound strictly above ``minimum``: ``maximum`` itself, else ``minimum + 1``.

    Where ``minimum + 1`` rounds back to ``minimum`` the next float up is used.
    """
    if maximum > minimum:
        return maximum
    repaired = minimum + 1
    return repaired if repaired > minimum else math.nextafter(minimum, math.inf)


def js_round(value: float) -> int:
    """Round half up, matching the rounding the card renderers use."""
    return math.floor(value + 0.5)


def round_to(value: float, digits: int = 2) -> float:
    factor = 10**digits
    return js_round(value * factor) / factor


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def optional_number(value: Any) -> float | None:
    """Return a finite number parsed from ``value``, or None."""
    if is_number(value):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or "_" in stripped:
            return None
        try:
            parsed = float(stripped)
        except ValueError:
            return None
        if math.isfinite(parsed):
            return parsed
    return None


def to_finite_number(value: Any, fallback: float) -> float:
    """Accept a number or numeric string; anything else yields ``fallback``."""
    parsed = optional_number(value)
    return fallback if parsed is None else parsed


def is_present(value: Any) -> bool:
    """True when an author actually wrote something for a field."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def to_bool(value: Any, fallback: bool) -> bool:
    return value if isinstance(value, bool) else fallback


def clean_text(value: Any) -> str | None:
    """Stripped string, or None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def humanize_entity_id(entity_id: str) -> str | None:
    """``sensor.living_room_temp`` -> ``living room temp``."""
    _, _, object_id = entity_id.partition(".")
    if not object_id:
        return None
    return object_id.split(".")[0].replace("_", " ") or None


def parse_duration(text: Any, fallback_seconds: int) -> int:
    """Parse ``<integer><s|m|h|d|w>`` into seconds.

    Missing, malformed and zero-length durations return the fallback.
    """
    if not isinstance(text, str):
        return fallback_seconds
    match = DURATION_PATTERN.match(text.strip())
    if not match:
        return fallback_seconds
    amount = int(match.group(1))
    if amount <= 0:
        return fallback_seconds
    return amount * _UNIT_SECONDS[match.group(2).lower()]


def format_duration(seconds: float, fallback: str) -> str:
    """Canonical short form: whole days as ``Nd``, then hours, minutes, seconds."""
    if not is_number(seconds) or not math.isfinite(seconds) or seconds <= 0:
        return fallback
    seconds = int(seconds)
    if seconds % 86400 == 0:
        return f"{seconds // 86400}d"
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def _to_ms(dt: datetime) -> int:
    return (dt - EPOCH) // timedelta(milliseconds=1)


# Accepted timestamps leave room on both sides for week and month grids
MIN_TIMESTAMP = _to_ms(datetime(100, 1, 1, tzinfo=UTC))
MAX_TIMESTAMP = _to_ms(datetime(9999, 1, 1, tzinfo=UTC))


def _parse_iso(text: str) -> datetime | None:
    candidate = text.strip()
    if not candidate:
        return None
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_timestamp(value: Any) -> int | None:
    """Epoch milliseconds from a number, datetime/date or ISO-8601 string.

    Offset-less strings are read as UTC. Anything outside years 100-9998
    yields None, so later date arithmetic stays inside ``datetime``'s range.
    """
    timestamp = None
    if is_number(value):
        timestamp = int(value) if math.isfinite(value) else None
    elif isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=UTC)
        timestamp = _to_ms(dt)
    elif isinstance(value, date):
        timestamp = _to_ms(datetime(value.year, value.month, value.day, tzinfo=UTC))
    elif isinstance(value, str):
        parsed = _parse_iso(value)
        if parsed is not None:
            timestamp = _to_ms(parsed)
    if timestamp is None or not MIN_TIMESTAMP <= timestamp < MAX_TIMESTAMP:
        return None
    return timestamp


def from_timestamp(timestamp: float) -> datetime:
    return EPOCH + timedelta(milliseconds=timestamp)


def to_iso_date(timestamp: float) -> str:
    return from_timestamp(timestamp).date().isoformat()


def to_iso_datetime(timestamp: float) -> str:
    dt = from_timestamp(timestamp)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def start_of_day(timestamp: float) -> int:
    """Midnight UTC of the day containing ``timestamp``."""
    dt = from_timestamp(timestamp)
    return _to_ms(datetime(dt.year, dt.month, dt.day, tzinfo=UTC))
