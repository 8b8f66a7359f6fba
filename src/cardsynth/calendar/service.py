"""Calendar normalization, event resolution and date-grid construction."""

import logging
from collections.abc import Mapping
from typing import Any

from cardsynth.calendar.models import (
    CalendarData,
    CalendarDateCell,
    CalendarEvent,
    CalendarView,
    EventStatus,
    NormalizedCalendarConfig,
)
from cardsynth.core.fields import ConfigReader
from cardsynth.core.parsing import (
    DAY_MS,
    clean_text,
    from_timestamp,
    is_present,
    now_ms,
    start_of_day,
    to_iso_date,
    to_timestamp,
)
from cardsynth.entities import EntityLookup, resolve_attributes

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000

STATUS_VOCABULARY = {
    EventStatus.success: ("confirmed", "ok", "done", "success"),
    EventStatus.warning: ("tentative", "pending", "warning"),
    EventStatus.danger: ("cancelled", "canceled", "error", "failed"),
}


def to_event_status(value: Any) -> EventStatus:
    if not isinstance(value, str):
        return EventStatus.neutral
    normalized = value.strip().lower()
    for status, words in STATUS_VOCABULARY.items():
        if normalized in words:
            return status
    return EventStatus.neutral


def start_of_week(timestamp: int) -> int:
    """Monday 00:00 UTC of the week containing ``timestamp``."""
    day_start = start_of_day(timestamp)
    return day_start - from_timestamp(day_start).weekday() * DAY_MS


def _resolve_view(reader: ConfigReader) -> CalendarView:
    view = reader.get("view")
    if is_present(view):
        if view == "list":
            return CalendarView.week
        return reader.choice("view", list(CalendarView), CalendarView.month)
    initial = reader.get("initial_view")
    if initial == "day":
        return CalendarView.day
    if initial == "list":
        return CalendarView.week
    return CalendarView.month


def _normalize_entities(reader: ConfigReader) -> list[str]:
    source = reader.get("calendar_entities")
    if not isinstance(source, list):
        source = reader.get("entities")
    if not isinstance(source, list):
        return []
    return [entity for entity in (clean_text(item) for item in source) if entity]


def _event_end(start: int, end: int | None) -> int:
    """Missing or non-positive durations become a full day."""
    if end is None or end <= start:
        return start + DAY_MS
    return end


def normalize_card_events(events: Any, reader: ConfigReader) -> list[CalendarEvent]:
    if not isinstance(events, list):
        return []
    normalized = []
    for index, event in enumerate(events):
        record = event if isinstance(event, Mapping) else {}
        start = to_timestamp(record.get("start"))
        if start is None:
            reader.warn(f"Ignored calendar event {index + 1} without a valid start.")
            continue
        normalized.append(
            CalendarEvent(
                id=clean_text(record.get("id")) or f"calendar-event-{index}",
                title=clean_text(record.get("title")) or clean_text(record.get("summary")) or f"Event {index + 1}",
                start=start,
                end=_event_end(start, to_timestamp(record.get("end"))),
                status=to_event_status(record.get("status")),
                all_day=bool(record.get("all_day")),
                source_entity=clean_text(record.get("source_entity")),
            )
        )
    return normalized


def normalize_calendar_card(raw: Any, now: int | None = None) -> NormalizedCalendarConfig:
    now = now_ms() if now is None else now
    reader = ConfigReader(raw, "calendar", logger)
    selected = to_timestamp(reader.get("selected_date"))

    return NormalizedCalendarConfig(
        title=reader.text("title") or "Calendar",
        calendar_entities=_normalize_entities(reader),
        view=_resolve_view(reader),
        show_week_numbers=reader.boolean("show_week_numbers", False),
        show_agenda=reader.boolean("show_agenda", False),
        on_date_select_action=reader.text("action", reader.section("on_date_select")),
        selected_date=to_iso_date(now if selected is None else selected),
        events=normalize_card_events(reader.get("events"), reader),
        warnings=reader.warnings,
    )


def events_from_attributes(entity_id: str, attributes: Mapping[str, Any] | None) -> list[CalendarEvent]:
    if not attributes:
        return []
    source = next(
        (attributes[key] for key in ("events", "entries") if isinstance(attributes.get(key), list)),
        None,
    )
    if source is None:
        return []

    events = []
    for index, entry in enumerate(source):
        if not isinstance(entry, Mapping):
            continue
        start = next(
            (
                timestamp
                for timestamp in (to_timestamp(entry.get(key)) for key in ("start", "start_time", "timestamp", "date"))
                if timestamp is not None
            ),
            None,
        )
        if start is None:
            logger.debug("Dropping %s event %d without a start", entity_id, index)
            continue
        end = to_timestamp(entry.get("end"))
        if end is None:
            end = to_timestamp(entry.get("end_time"))
        status = entry.get("status")
        events.append(
            CalendarEvent(
                id=clean_text(entry.get("id")) or f"{entity_id}-{index}",
                title=clean_text(entry.get("title")) or clean_text(entry.get("summary")) or f"Event {index + 1}",
                start=start,
                end=_event_end(start, end),
                status=to_event_status(entry.get("state") if status is None else status),
                all_day=bool(entry.get("all_day")),
                source_entity=entity_id,
            )
        )
    return events


def synthesize_calendar_events(selected_date: str) -> list[CalendarEvent]:
    """Three fixed events on the selected day."""
    parsed = to_timestamp(selected_date)
    day_start = start_of_day(now_ms() if parsed is None else parsed)
    plan = [
        ("Morning routine", 8, 9, EventStatus.success, "calendar.home"),
        ("Work focus block", 13, 15, EventStatus.warning, "calendar.work"),
        ("Evening lights automation", 19, 20, EventStatus.neutral, "calendar.home"),
    ]
    return [
        CalendarEvent(
            id=f"synthetic-{index}",
            title=title,
            start=day_start + start_hour * HOUR_MS,
            end=day_start + end_hour * HOUR_MS,
            status=status,
            source_entity=entity,
        )
        for index, (title, start_hour, end_hour, status, entity) in enumerate(plan)
    ]


def resolve_calendar_events(config: NormalizedCalendarConfig, lookup: EntityLookup) -> list[CalendarEvent]:
    """Card events, else events from every calendar entity, else the synthetic day."""
    events = config.events
    if not events:
        events = [
            event
            for entity_id in config.calendar_entities
            for event in events_from_attributes(entity_id, resolve_attributes(lookup, entity_id))
        ]
    if not events:
        events = synthesize_calendar_events(config.selected_date)
    return sorted(events, key=lambda event: event.start)


def build_calendar_date_cells(view: CalendarView, selected_date: str) -> list[CalendarDateCell]:
    """1 cell for a day, 7 from Monday for a week, a 6x7 grid for a month."""
    selected = to_timestamp(selected_date)
    anchor = start_of_day(now_ms() if selected is None else selected)

    if view == CalendarView.day:
        return [CalendarDateCell(key=selected_date, timestamp=anchor, iso_date=selected_date, is_current_month=True)]

    if view == CalendarView.week:
        first, count = start_of_week(anchor), 7
    else:
        anchor_dt = from_timestamp(anchor)
        month_start = to_timestamp(f"{anchor_dt.year:04d}-{anchor_dt.month:02d}-01")
        first, count = start_of_week(month_start), 42

    month = from_timestamp(anchor).month
    cells = []
    for index in range(count):
        timestamp = first + index * DAY_MS
        iso_date = to_iso_date(timestamp)
        cells.append(
            CalendarDateCell(
                key=iso_date,
                timestamp=timestamp,
                iso_date=iso_date,
                is_current_month=view == CalendarView.week or from_timestamp(timestamp).month == month,
            )
        )
    return cells


def group_events_by_date(events: list[CalendarEvent]) -> dict[str, list[CalendarEvent]]:
    """Every UTC day an event touches, from its start day to the day before its end."""
    buckets: dict[str, list[CalendarEvent]] = {}
    for event in events:
        day = start_of_day(event.start)
        last_day = start_of_day(event.end - 1)
        while day <= last_day:
            buckets.setdefault(to_iso_date(day), []).append(event)
            day += DAY_MS
    return {key: sorted(items, key=lambda event: event.start) for key, items in buckets.items()}


def get_agenda_events_for_date(events: list[CalendarEvent], iso_date: str) -> list[CalendarEvent]:
    parsed = to_timestamp(iso_date)
    day_start = start_of_day(now_ms() if parsed is None else parsed)
    day_end = day_start + DAY_MS
    return [event for event in events if event.start < day_end and event.end > day_start]


def get_week_number(timestamp: int) -> int:
    """ISO-8601 week: the week belongs to the year holding its Thursday."""
    return from_timestamp(timestamp).isocalendar().week


def format_calendar_date_label(timestamp: int, view: CalendarView) -> str:
    dt = from_timestamp(timestamp)
    if view == CalendarView.day:
        return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"
    if view == CalendarView.week:
        return f"{dt:%a}, {dt:%b} {dt.day}"
    return f"{dt:%b} {dt.day}"


def format_calendar_time_label(timestamp: int) -> str:
    dt = from_timestamp(timestamp)
    return f"{dt.hour % 12 or 12}:{dt:%M %p}"


def synthesize_calendar(config: NormalizedCalendarConfig, lookup: EntityLookup) -> CalendarData:
    events = resolve_calendar_events(config, lookup)
    return CalendarData(
        events=events,
        cells=build_calendar_date_cells(config.view, config.selected_date),
        events_by_date=group_events_by_date(events),
        agenda=get_agenda_events_for_date(events, config.selected_date),
    )
