"""Card-type dispatch: normalize a raw card and synthesize its preview data."""

import enum
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import SerializeAsAny

from cardsynth.apexcharts.service import normalize_apexcharts_card, synthesize_apexcharts
from cardsynth.calendar.service import normalize_calendar_card, synthesize_calendar
from cardsynth.config import Settings, settings as default_settings
from cardsynth.core.models import FrozenModel, NormalizedCard
from cardsynth.core.parsing import now_ms
from cardsynth.entities import EntityLookup, resolve_state
from cardsynth.gauge.service import normalize_gauge_card, synthesize_gauge
from cardsynth.graph.service import build_graph_data, normalize_graph_card
from cardsynth.progress_ring.service import (
    layout_progress_rings,
    normalize_progress_ring_card,
    resolve_progress_ring_runtime,
)
from cardsynth.sparkline.service import build_sparkline_dataset, normalize_sparkline_card
from cardsynth.timeline.service import normalize_timeline_card, synthesize_timeline
from cardsynth.weather.service import normalize_weather_card, synthesize_weather

logger = logging.getLogger(__name__)


class CardKind(enum.StrEnum):
    gauge = "gauge"
    graph = "graph"
    progress_ring = "progress_ring"
    sparkline = "sparkline"
    timeline = "timeline"
    calendar = "calendar"
    weather = "weather"
    apexcharts = "apexcharts"


CARD_TYPES: dict[str, CardKind] = {
    "custom:gauge-card-pro": CardKind.gauge,
    "custom:native-graph-card": CardKind.graph,
    "custom:modern-circular-gauge": CardKind.progress_ring,
    "custom:mini-graph-card": CardKind.sparkline,
    "logbook": CardKind.timeline,
    "calendar": CardKind.calendar,
    "weather-forecast": CardKind.weather,
    "custom:apexcharts-card": CardKind.apexcharts,
}


class UnsupportedCardError(ValueError):
    """Raised when asked to preview a card type the engine has no normalizer for."""

    def __init__(self, card_type: Any) -> None:
        super().__init__(f"Unsupported card type: {card_type!r}")
        self.card_type = card_type


class CardPreview(FrozenModel):
    kind: CardKind
    config: SerializeAsAny[NormalizedCard]
    data: Any
    warnings: list[str]


def configure_logging(cfg: Settings | None = None) -> None:
    """One-line logging setup for host applications; never called on import."""
    cfg = cfg or default_settings
    logging.basicConfig(level=cfg.log_level.upper())


def detect_card_kind(raw: Any) -> CardKind | None:
    if not isinstance(raw, Mapping):
        return None
    card_type = raw.get("type")
    return CARD_TYPES.get(card_type) if isinstance(card_type, str) else None


def _require_kind(raw: Any) -> CardKind:
    kind = detect_card_kind(raw)
    if kind is None:
        card_type = raw.get("type") if isinstance(raw, Mapping) else raw
        raise UnsupportedCardError(card_type)
    return kind


def normalize_card(raw: Any, now: int | None = None, cfg: Settings | None = None) -> NormalizedCard:
    """Normalize ``raw`` with the normalizer its ``type`` selects."""
    cfg = cfg or default_settings
    now = now_ms() if now is None else now
    normalizers: dict[CardKind, Callable[[], NormalizedCard]] = {
        CardKind.gauge: lambda: normalize_gauge_card(raw),
        CardKind.graph: lambda: normalize_graph_card(raw, cfg.palette),
        CardKind.progress_ring: lambda: normalize_progress_ring_card(raw),
        CardKind.sparkline: lambda: normalize_sparkline_card(raw),
        CardKind.timeline: lambda: normalize_timeline_card(raw, now),
        CardKind.calendar: lambda: normalize_calendar_card(raw, now),
        CardKind.weather: lambda: normalize_weather_card(raw),
        CardKind.apexcharts: lambda: normalize_apexcharts_card(raw),
    }
    return normalizers[_require_kind(raw)]()


def _synthesize(kind: CardKind, config: Any, lookup: EntityLookup, now: int, cfg: Settings) -> Any:
    if kind == CardKind.gauge:
        return synthesize_gauge(config, lookup)
    if kind == CardKind.graph:
        return build_graph_data(config, now)
    if kind == CardKind.progress_ring:
        runtime = resolve_progress_ring_runtime(config, lookup)
        return layout_progress_rings(config, runtime, cfg.ring_size, cfg.ring_gap, cfg.ring_padding)
    if kind == CardKind.sparkline:
        state = resolve_state(lookup, config.entity)
        return build_sparkline_dataset(config, state, now, cfg.sparkline_max_points)
    if kind == CardKind.timeline:
        return synthesize_timeline(config, lookup)
    if kind == CardKind.calendar:
        return synthesize_calendar(config, lookup)
    if kind == CardKind.weather:
        return synthesize_weather(config, lookup, now)
    return synthesize_apexcharts(config, now)


def preview_card(
    raw: Any,
    lookup: EntityLookup = None,
    now: int | None = None,
    cfg: Settings | None = None,
) -> CardPreview:
    """Normalize a card and synthesize everything a renderer needs to draw it.

    Raises:
        UnsupportedCardError: ``raw`` has no recognized ``type``.
    """
    cfg = cfg or default_settings
    now = now_ms() if now is None else now
    kind = _require_kind(raw)
    config = normalize_card(raw, now, cfg)
    logger.debug("Previewing %s card with %d warning(s)", kind, len(config.warnings))
    return CardPreview(
        kind=kind,
        config=config,
        data=_synthesize(kind, config, lookup, now, cfg),
        warnings=config.warnings,
    )
