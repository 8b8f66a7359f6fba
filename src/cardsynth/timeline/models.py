"""Timeline card models (``logbook``)."""

import enum

from cardsynth.core.models import FrozenModel, NormalizedCard


class TimelineOrientation(enum.StrEnum):
    vertical = "vertical"
    horizontal = "horizontal"


class TimelineGroupBy(enum.StrEnum):
    none = "none"
    hour = "hour"
    day = "day"


class ItemDensity(enum.StrEnum):
    comfortable = "comfortable"
    compact = "compact"


class EventPhase(enum.StrEnum):
    past = "past"
    present = "present"
    future = "future"


class TimelineEvent(FrozenModel):
    id: str
    timestamp: int
    title: str
    description: str | None = None
    phase: EventPhase


class TimelineEventGroup(FrozenModel):
    key: str
    label: str
    events: list[TimelineEvent]


class NormalizedTimelineConfig(NormalizedCard):
    type: str = "logbook"
    title: str | None = None
    entity: str | None = None
    hours_to_show: int = 24
    max_items: int = 50
    orientation: TimelineOrientation = TimelineOrientation.vertical
    show_now_marker: bool = True
    group_by: TimelineGroupBy = TimelineGroupBy.day
    enable_scrubber: bool = True
    item_density: ItemDensity = ItemDensity.comfortable
    truncate_length: int = 72
    selected_timestamp: int
    now_timestamp: int
    events: list[TimelineEvent] = []


class TimelineData(FrozenModel):
    events: list[TimelineEvent]
    groups: list[TimelineEventGroup]
    selected_index: int
