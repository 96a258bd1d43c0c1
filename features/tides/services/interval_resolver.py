import logging
from typing import List, Optional, Sequence, Tuple, TypeVar, Union

from core.config import settings
from features.common.models.unknown import Unknown, UNKNOWN, is_known
from features.tides.models.tide_types import (
    DataRequirement,
    DayTideData,
    MarinaEvent,
    MarinaEventKind,
    ResolvedTideState,
    TideExtreme,
    TideReading
)

logger = logging.getLogger(__name__)

Event = TypeVar("Event", TideExtreme, MarinaEvent)

def nearest_height(readings: Sequence[TideReading], now_minute: int) -> Union[float, Unknown]:
    """Height of the reading closest to now, earliest reading wins a tie."""
    best: Optional[TideReading] = None
    best_diff = None
    for reading in readings:
        diff = abs(reading.time - now_minute)
        if best_diff is None or diff < best_diff:
            best, best_diff = reading, diff
    return best.height if best is not None else UNKNOWN

def marina_events(day: Optional[DayTideData], marina: str) -> List[MarinaEvent]:
    """Sorted events for a marina, matched case-insensitively. Empty if absent."""
    if day is None:
        return []
    schedule = day.schedules.get(marina)
    if schedule is None:
        wanted = marina.strip().casefold()
        schedule = next(
            (s for name, s in day.schedules.items() if name.casefold() == wanted),
            None
        )
    return list(schedule.events) if schedule else []

def scan_today(events: Sequence[Event], now_minute: int) -> Tuple[Optional[Event], Optional[Event]]:
    """Most recent event at or before now and first event after now."""
    last = None
    upcoming = None
    for event in sorted(events, key=lambda e: e.time):
        if event.time <= now_minute:
            last = event
        else:
            upcoming = event
            break
    return last, upcoming

def stream_requirement(events: Sequence[Event], now_minute: int) -> DataRequirement:
    last, upcoming = scan_today(events, now_minute)
    return DataRequirement(need_yesterday=last is None, need_tomorrow=upcoming is None)

def probe_requirements(today: DayTideData, marina: str, now_minute: int) -> DataRequirement:
    """Decide which adjacent days must be fetched before resolving.

    Each stream is checked independently for a past and a future event in
    today's data; any missing boundary asks for the matching adjacent day.
    """
    tides = stream_requirement(today.extremes, now_minute)
    gates = stream_requirement(marina_events(today, marina), now_minute)
    return DataRequirement(
        need_yesterday=tides.need_yesterday or gates.need_yesterday,
        need_tomorrow=tides.need_tomorrow or gates.need_tomorrow
    )

def resolve_stream(
    today: Sequence[Event],
    now_minute: int,
    yesterday: Optional[Sequence[Event]] = None,
    tomorrow: Optional[Sequence[Event]] = None
) -> Tuple[Union[Event, Unknown], Union[Event, Unknown]]:
    """Resolve last/next for one stream, falling back to adjacent days.

    Adjacent-day events are returned with their day_offset set. When the
    adjacent day is missing or has no events the result stays UNKNOWN.
    """
    last, upcoming = scan_today(today, now_minute)

    resolved_last: Union[Event, Unknown] = UNKNOWN
    if last is not None:
        resolved_last = last
    elif yesterday:
        final = max(yesterday, key=lambda e: e.time)
        resolved_last = final.model_copy(update={"day_offset": -1})

    resolved_next: Union[Event, Unknown] = UNKNOWN
    if upcoming is not None:
        resolved_next = upcoming
    elif tomorrow:
        first = min(tomorrow, key=lambda e: e.time)
        resolved_next = first.model_copy(update={"day_offset": 1})

    return resolved_last, resolved_next

def has_sill_clearance(current_height: Union[float, Unknown], boat_draft: float) -> bool:
    """Depth over the sill exceeds draft plus the safety margin. False when unknown."""
    if not is_known(current_height):
        return False
    return current_height > boat_draft + settings.sill_margin

def resolve_tide_state(
    today: DayTideData,
    now_minute: int,
    marina: str,
    boat_draft: float,
    yesterday: Optional[DayTideData] = None,
    tomorrow: Optional[DayTideData] = None
) -> ResolvedTideState:
    """Resolve current height, last/next extremes and marina events."""
    current_height = nearest_height(today.readings, now_minute)

    last_extreme, next_extreme = resolve_stream(
        today.extremes,
        now_minute,
        yesterday.extremes if yesterday else None,
        tomorrow.extremes if tomorrow else None
    )
    last_event, next_event = resolve_stream(
        marina_events(today, marina),
        now_minute,
        marina_events(yesterday, marina) if yesterday else None,
        marina_events(tomorrow, marina) if tomorrow else None
    )

    if is_known(last_event):
        marina_open: Union[bool, Unknown] = last_event.kind == MarinaEventKind.OPENED
    else:
        marina_open = UNKNOWN

    for name, value in (
        ("last extreme", last_extreme),
        ("next extreme", next_extreme),
        ("last marina event", last_event),
        ("next marina event", next_event)
    ):
        if not is_known(value):
            logger.warning(f"⚠️  Unable to resolve {name} for {today.date.isoformat()}")

    return ResolvedTideState(
        current_height=current_height,
        last_extreme=last_extreme,
        next_extreme=next_extreme,
        last_marina_event=last_event,
        next_marina_event=next_event,
        marina_open=marina_open,
        sill_clearance=has_sill_clearance(current_height, boat_draft)
    )
