"""Ordering, week labels and date labels for FRC events.

Everything here is a pure function over :class:`~tbaevents.models.Event`.
Display order within a season is:

    Preseason, Week 1 ... Week N (regionals, districts, DCMPs),
    Championship divisions, Championship finals, Offseason, Other
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone as dt_timezone, tzinfo
from functools import cmp_to_key
from typing import Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import Event, EventType

LOGGER = logging.getLogger(__name__)

_CHAMPIONSHIP_TYPES = frozenset({EventType.CHAMPIONSHIP_DIVISION, EventType.CHAMPIONSHIP_FINALS})
_DISTRICT_CHAMPIONSHIP_TYPES = frozenset(
    {EventType.DISTRICT_CHAMPIONSHIP, EventType.DISTRICT_CHAMPIONSHIP_DIVISION}
)

# Same-week order for week-bearing events. A DCMP division is listed before
# its DCMP, matching the order the app has always shown.
_WEEK_TIER = {
    EventType.REGIONAL: 0,
    EventType.DISTRICT: 1,
    EventType.DISTRICT_CHAMPIONSHIP_DIVISION: 2,
    EventType.DISTRICT_CHAMPIONSHIP: 3,
}

# Season order of the categories that do not carry a week.
_SEASON_TIER = {
    EventType.PRESEASON: 0,
    EventType.CHAMPIONSHIP_DIVISION: 2,
    EventType.CHAMPIONSHIP_FINALS: 3,
    EventType.OFFSEASON: 4,
    EventType.UNLABELED: 5,
}
_WEEK_BEARING_TIER = 1

_SHORT_DATE = "%b %d"
_LONG_DATE = "%b %d, %Y"


def _cmp(left: int, right: int) -> int:
    return (left > right) - (left < right)


def _either(a: Event, b: Event, event_type: EventType) -> bool:
    return a.event_type is event_type or b.event_type is event_type


def _pinned(a: Event, b: Event, event_type: EventType, *, first: bool) -> int:
    """Order a pair where one side's type always goes first (or last)."""
    if a.event_type is b.event_type:
        return 0
    a_pinned = a.event_type is event_type
    if first:
        return -1 if a_pinned else 1
    return 1 if a_pinned else -1


def compare_order(a: Event, b: Event) -> int:
    """Compare two events for display order.

    Returns a negative number when ``a`` sorts before ``b``, zero when they
    are interchangeable and a positive number otherwise.
    """
    if a.year != b.year:
        return _cmp(a.year, b.year)

    if _either(a, b, EventType.PRESEASON):
        return _pinned(a, b, EventType.PRESEASON, first=True)
    if _either(a, b, EventType.UNLABELED):
        return _pinned(a, b, EventType.UNLABELED, first=False)
    if _either(a, b, EventType.OFFSEASON):
        return _pinned(a, b, EventType.OFFSEASON, first=False)
    # A DCMP division paired with a championship event still goes first.
    if _either(a, b, EventType.CHAMPIONSHIP_FINALS):
        return _pinned(a, b, EventType.CHAMPIONSHIP_FINALS, first=False)
    if _either(a, b, EventType.CHAMPIONSHIP_DIVISION):
        return _pinned(a, b, EventType.CHAMPIONSHIP_DIVISION, first=False)

    if a.week is not None and b.week is not None and a.week != b.week:
        return _cmp(a.week, b.week)
    if (a.week is None) != (b.week is None):
        # Events without a week go after every scheduled week.
        return 1 if a.week is None else -1
    return _cmp(_WEEK_TIER[a.event_type], _WEEK_TIER[b.event_type])


def sort_key(event: Event) -> tuple[int, int, int, int, int]:
    """Key equivalent to :func:`compare_order`, for ``sorted``/``min``/``max``."""
    if event.event_type.has_week:
        missing_week = 1 if event.week is None else 0
        return (
            event.year,
            _WEEK_BEARING_TIER,
            missing_week,
            event.week or 0,
            _WEEK_TIER[event.event_type],
        )
    return (event.year, _SEASON_TIER[event.event_type], 0, 0, 0)


def sort_events(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=cmp_to_key(compare_order))


def is_championship(event: Event) -> bool:
    return event.event_type in _CHAMPIONSHIP_TYPES


def is_district_championship(event: Event) -> bool:
    return event.event_type in _DISTRICT_CHAMPIONSHIP_TYPES


def week_label(event: Event) -> str:
    if is_championship(event):
        # 2017 onwards there are two championships, one per host city.
        if event.year >= 2017 and event.city:
            return f"Championship - {event.city}"
        return "Championship"

    if event.event_type is EventType.UNLABELED:
        return "Other"
    if event.event_type is EventType.PRESEASON:
        return "Preseason"
    if event.event_type is EventType.OFFSEASON:
        return "Offseason"
    if event.week is None:
        return "Other"

    # 2016 started with a half week, so its weeks are shown unshifted.
    if event.year == 2016:
        if event.week == 0:
            return "Week 0.5"
        return f"Week {event.week}"
    return f"Week {event.week + 1}"


def friendly_name_with_year(event: Event) -> str:
    name = event.short_name or event.name or "Unnamed"
    return f"{event.year} {name} {event.event_type_name or 'Event'}"


def _zone(timezone: str | None) -> tzinfo:
    if timezone:
        try:
            return ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            LOGGER.debug("Unknown timezone %r, falling back to UTC", timezone)
    return dt_timezone.utc


def _calendar_day(value: date | datetime, zone: tzinfo) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(zone)
        return value.date()
    return value


def date_range_label(
    start: date | datetime | None,
    end: date | datetime | None,
    timezone: str | None = None,
) -> str | None:
    """Human readable date range, e.g. ``"Apr 01 to Apr 03"``.

    Returns ``None`` when either date is missing.
    """
    if start is None or end is None:
        return None

    zone = _zone(timezone)
    start_day = _calendar_day(start, zone)
    end_day = _calendar_day(end, zone)

    if start_day == end_day:
        return f"{end_day:{_LONG_DATE}}"
    if start_day.year == end_day.year:
        return f"{start_day:{_SHORT_DATE}} to {end_day:{_SHORT_DATE}}"
    return f"{start_day:{_LONG_DATE}} to {end_day:{_LONG_DATE}}"


def event_date_label(event: Event) -> str | None:
    return date_range_label(event.start_date, event.end_date, event.timezone)
