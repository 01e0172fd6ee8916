from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class EventType(Enum):
    REGIONAL = 0
    DISTRICT = 1
    DISTRICT_CHAMPIONSHIP = 2
    CHAMPIONSHIP_DIVISION = 3
    CHAMPIONSHIP_FINALS = 4
    DISTRICT_CHAMPIONSHIP_DIVISION = 5
    OFFSEASON = 99
    PRESEASON = 100
    UNLABELED = -1

    @classmethod
    def from_code(cls, code: int | None) -> "EventType":
        """Decode a TBA event_type code. Unknown codes are unlabeled."""
        if code is None:
            return cls.UNLABELED
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.UNLABELED

    @property
    def has_week(self) -> bool:
        return self in _WEEK_BEARING


_WEEK_BEARING = frozenset(
    {
        EventType.REGIONAL,
        EventType.DISTRICT,
        EventType.DISTRICT_CHAMPIONSHIP,
        EventType.DISTRICT_CHAMPIONSHIP_DIVISION,
    }
)


@dataclass(frozen=True, slots=True)
class Webcast:
    type: str
    channel: str
    file: str | None = None
    date: str | None = None


@dataclass(frozen=True, slots=True, eq=True)
class Event:
    key: str
    year: int
    event_type: EventType = EventType.UNLABELED
    week: int | None = None
    name: str | None = None
    short_name: str | None = None
    event_type_name: str | None = None
    city: str | None = None
    state_prov: str | None = None
    country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    website: str | None = None
    district_key: str | None = None
    webcasts: tuple[Webcast, ...] = ()

    @property
    def has_website(self) -> bool:
        return bool(self.website)

    @property
    def location(self) -> str:
        parts = [p for p in (self.city, self.state_prov, self.country) if p]
        return ", ".join(parts)

    def __lt__(self, other: "Event") -> bool:
        from .classifier import compare_order

        if not isinstance(other, Event):
            return NotImplemented
        return compare_order(self, other) < 0

