"""Timeline normalization, event resolution and grouping."""

import logging
import math
from collections.abc import Mapping
from typing import Any

from cardsynth.core.fields import ConfigReader
from cardsynth.core.noise import hash_string, seeded_unit
from cardsynth.core.parsing import clean_text, from_timestamp, is_present, now_ms, to_timestamp
from cardsynth.entities import EntityLookup, resolve_attributes
from cardsynth.timeline.models import (
    EventPhase,
    ItemDensity,
    NormalizedTimelineConfig,
    TimelineData,
    TimelineEvent,
    TimelineEventGroup,
    TimelineGroupBy,
    TimelineOrientation,
)

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24
DEFAULT_MAX_ITEMS = 50
DEFAULT_TRUNCATE_LENGTH = 72
PRESENT_WINDOW_MS = 5 * 60 * 1000
SYNTHETIC_EVENT_COUNT = 16

ATTRIBUTE_EVENT_KEYS = ("events", "timeline", "entries")
TIMESTAMP_KEYS = ("timestamp", "time", "date", "created", "updated")
TITLE_KEYS = ("title", "message", "name")
DESCRIPTION_KEYS = ("description", "details")


def event_phase(timestamp: int, selected_timestamp: int) -> EventPhase:
    """Within five minutes either side of the selection counts as present."""
    delta = timestamp - selected_timestamp
    if abs(delta) <= PRESENT_WINDOW_MS:
        return EventPhase.present
    return EventPhase.past if delta < 0 else EventPhase.future


def _first_text(record: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        text = clean_text(record.get(key))
        if text is not None:
            return text
    return None


def _first_timestamp(record: Mapping[str, Any]) -> int | None:
    for key in TIMESTAMP_KEYS:
        timestamp = to_timestamp(record.get(key))
        if timestamp is not None:
            return timestamp
    return None


def normalize_card_events(events: Any, selected_timestamp: int, reader: ConfigReader) -> list[TimelineEvent]:
    if not isinstance(events, list):
        return []
    normalized = []
    for index, event in enumerate(events):
        record = event if isinstance(event, Mapping) else {}
        timestamp = to_timestamp(record.get("timestamp"))
        if timestamp is None:
            reader.warn(f"Ignored event {index + 1} without a valid timestamp.")
            continue
        normalized.append(
            TimelineEvent(
                id=clean_text(record.get("id")) or f"event-{index}",
                timestamp=timestamp,
                title=clean_text(record.get("title")) or f"Event {index + 1}",
                description=clean_text(record.get("description")),
                phase=event_phase(timestamp, selected_timestamp),
            )
        )
    return normalized


def normalize_timeline_card(raw: Any, now: int | None = None) -> NormalizedTimelineConfig:
    now = now_ms() if now is None else now
    reader = ConfigReader(raw, "timeline", logger)

    raw_selected = reader.get("selected_timestamp")
    selected = to_timestamp(raw_selected)
    if selected is None:
        if is_present(raw_selected):
            reader.warn(f'selected_timestamp "{raw_selected}" is not a valid timestamp; using now.')
        selected = now

    return NormalizedTimelineConfig(
        title=reader.text("title"),
        entity=reader.text("entity"),
        hours_to_show=reader.clamped("hours_to_show", DEFAULT_HOURS, 1, 168, integer=True),
        max_items=reader.clamped("max_items", DEFAULT_MAX_ITEMS, 1, 200, integer=True),
        orientation=reader.choice("orientation", list(TimelineOrientation), TimelineOrientation.vertical),
        show_now_marker=reader.boolean("show_now_marker", True),
        group_by=reader.choice("group_by", list(TimelineGroupBy), TimelineGroupBy.day),
        enable_scrubber=reader.boolean("enable_scrubber", True),
        item_density=reader.choice("item_density", list(ItemDensity), ItemDensity.comfortable),
        truncate_length=reader.clamped("truncate_length", DEFAULT_TRUNCATE_LENGTH, 24, 160, integer=True),
        selected_timestamp=selected,
        now_timestamp=now,
        events=normalize_card_events(reader.get("events"), selected, reader),
        warnings=reader.warnings,
    )


def events_from_attributes(attributes: Mapping[str, Any] | None, selected_timestamp: int) -> list[TimelineEvent]:
    """Events from the first list-valued ``events``/``timeline``/``entries`` attribute."""
    if not attributes:
        return []
    source = next(
        (attributes[key] for key in ATTRIBUTE_EVENT_KEYS if isinstance(attributes.get(key), list)),
        None,
    )
    if source is None:
        return []

    events = []
    for index, entry in enumerate(source):
        if not isinstance(entry, Mapping):
            continue
        timestamp = _first_timestamp(entry)
        if timestamp is None:
            logger.debug("Dropping attribute event %d without a timestamp", index)
            continue
        events.append(
            TimelineEvent(
                id=clean_text(entry.get("id")) or f"attr-{index}",
                timestamp=timestamp,
                title=_first_text(entry, TITLE_KEYS) or f"Event {index + 1}",
                description=_first_text(entry, DESCRIPTION_KEYS),
                phase=event_phase(timestamp, selected_timestamp),
            )
        )
    return events


def synthesize_timeline_events(
    entity: str | None,
    selected_timestamp: int,
    hours_to_show: int,
) -> list[TimelineEvent]:
    """Sixteen jittered events, three quarters of the span before the selection."""
    seed = hash_string(entity or "timeline")
    span_ms = hours_to_show * 60 * 60 * 1000
    start = selected_timestamp - math.floor(span_ms * 0.75)
    step = max(PRESENT_WINDOW_MS, math.floor(span_ms * 1.5 / SYNTHETIC_EVENT_COUNT))

    events = []
    for index in range(SYNTHETIC_EVENT_COUNT):
        jitter = math.floor((seeded_unit(seed + index * 19) - 0.5) * step * 0.4)
        timestamp = start + index * step + jitter
        phase = event_phase(timestamp, selected_timestamp)
        if phase == EventPhase.past:
            title = f"Completed step {index + 1}"
        elif phase == EventPhase.present:
            title = "Current checkpoint"
        else:
            title = f"Planned step {index + 1}"
        events.append(
            TimelineEvent(
                id=f"synthetic-{index}",
                timestamp=timestamp,
                title=title,
                description=f"Source: {entity}" if entity else "Synthetic preview data for timeline layout testing",
                phase=phase,
            )
        )
    return events


def resolve_timeline_events(
    config: NormalizedTimelineConfig,
    attributes: Mapping[str, Any] | None = None,
) -> list[TimelineEvent]:
    """Card events, else entity attribute events, else synthetic ones.

    Sorted ascending and cut to the newest ``max_items``.
    """
    events = config.events or events_from_attributes(attributes, config.selected_timestamp)
    if not events:
        events = synthesize_timeline_events(config.entity, config.selected_timestamp, config.hours_to_show)
    ordered = sorted(events, key=lambda event: event.timestamp)
    return ordered[-config.max_items :]


def _group_key(timestamp: int, group_by: TimelineGroupBy) -> str:
    dt = from_timestamp(timestamp)
    key = dt.date().isoformat()
    return f"{key}T{dt.hour:02d}" if group_by == TimelineGroupBy.hour else key


def _group_label(timestamp: int, group_by: TimelineGroupBy) -> str:
    dt = from_timestamp(timestamp)
    label = f"{dt:%a}, {dt:%b} {dt.day}"
    if group_by == TimelineGroupBy.hour:
        label = f"{label}, {dt.hour % 12 or 12} {dt:%p}"
    return label


def group_timeline_events(events: list[TimelineEvent], group_by: TimelineGroupBy) -> list[TimelineEventGroup]:
    """Bucket events by UTC day or hour; groups ordered by their first event."""
    if group_by == TimelineGroupBy.none:
        return [TimelineEventGroup(key="all", label="All events", events=events)]

    buckets: dict[str, list[TimelineEvent]] = {}
    for event in events:
        buckets.setdefault(_group_key(event.timestamp, group_by), []).append(event)

    groups = [
        TimelineEventGroup(key=key, label=_group_label(bucket[0].timestamp, group_by), events=bucket)
        for key, bucket in buckets.items()
    ]
    return sorted(groups, key=lambda group: group.events[0].timestamp)


def truncate_timeline_text(value: str | None, max_length: int) -> str | None:
    if not value:
        return None
    if len(value) <= max_length:
        return value
    return f"{value[: max(0, max_length)].rstrip()}..."


def format_timeline_timestamp(timestamp: int) -> str:
    """``Nov 14, 10:13 PM`` in UTC."""
    dt = from_timestamp(timestamp)
    return f"{dt:%b} {dt.day}, {dt.hour % 12 or 12}:{dt:%M %p}"


def find_nearest_event_index(events: list[TimelineEvent], target_timestamp: int) -> int:
    """Index of the event closest to ``target_timestamp``; earliest wins ties."""
    if not events:
        return 0
    return min(range(len(events)), key=lambda index: abs(events[index].timestamp - target_timestamp))


def synthesize_timeline(config: NormalizedTimelineConfig, lookup: EntityLookup) -> TimelineData:
    events = resolve_timeline_events(config, resolve_attributes(lookup, config.entity))
    return TimelineData(
        events=events,
        groups=group_timeline_events(events, config.group_by),
        selected_index=find_nearest_event_index(events, config.selected_timestamp),
    )
