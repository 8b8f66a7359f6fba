"""Calendar view card models (``calendar``)."""

import enum

from cardsynth.core.models import FrozenModel, NormalizedCard


class CalendarView(enum.StrEnum):
    month = "month"
    week = "week"
    day = "day"


class EventStatus(enum.StrEnum):
    success = "success"
    warning = "warning"
    danger = "danger"
    neutral = "neutral"


class CalendarEvent(FrozenModel):
    id: str
    title: str
    start: int
    end: int
    status: EventStatus = EventStatus.neutral
    all_day: bool = False
    source_entity: str | None = None


class CalendarDateCell(FrozenModel):
    key: str
    timestamp: int
    iso_date: str
    is_current_month: bool


class NormalizedCalendarConfig(NormalizedCard):
    type: str = "calendar"
    title: str = "Calendar"
    calendar_entities: list[str] = []
    view: CalendarView = CalendarView.month
    show_week_numbers: bool = False
    show_agenda: bool = False
    on_date_select_action: str | None = None
    selected_date: str  # YYYY-MM-DD
    events: list[CalendarEvent] = []


class CalendarData(FrozenModel):
    events: list[CalendarEvent]
    cells: list[CalendarDateCell]
    events_by_date: dict[str, list[CalendarEvent]]
    agenda: list[CalendarEvent]
