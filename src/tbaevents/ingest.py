from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping

from .models import Event, EventType, Webcast

LOGGER = logging.getLogger(__name__)

_REQUIRED_KEYS = ("key", "year", "start_date", "end_date")


class InvalidEventPayload(ValueError):
    def __init__(self, key: str, payload_key: str | None = None) -> None:
        self.key = key
        self.payload_key = payload_key
        where = f" in {payload_key}" if payload_key else ""
        super().__init__(f"Invalid or missing {key!r}{where}")


def _parse_date(payload: Mapping[str, Any], key: str) -> date:
    raw = payload.get(key)
    try:
        return datetime.strptime(str(raw), "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidEventPayload(key, payload.get("key")) from exc


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _webcasts(raw: Any) -> tuple[Webcast, ...]:
    out: list[Webcast] = []
    for item in raw or []:
        if not isinstance(item, Mapping) or not item.get("type"):
            continue
        out.append(
            Webcast(
                type=str(item["type"]),
                channel=str(item.get("channel") or ""),
                file=_optional_str(item.get("file")),
                date=_optional_str(item.get("date")),
            )
        )
    return tuple(out)


def event_from_api(payload: Mapping[str, Any]) -> Event:
    """Build an :class:`Event` from a TBA API v3 event object."""
    if not isinstance(payload, Mapping):
        raise InvalidEventPayload("key")
    for key in _REQUIRED_KEYS:
        if payload.get(key) in (None, ""):
            raise InvalidEventPayload(key, payload.get("key"))

    year = _optional_int(payload["year"])
    if year is None:
        raise InvalidEventPayload("year", payload.get("key"))

    district = payload.get("district")
    district_key = district.get("key") if isinstance(district, Mapping) else None

    return Event(
        key=str(payload["key"]),
        year=year,
        event_type=EventType.from_code(_optional_int(payload.get("event_type"))),
        week=_optional_int(payload.get("week")),
        name=_optional_str(payload.get("name")),
        short_name=_optional_str(payload.get("short_name")),
        event_type_name=_optional_str(payload.get("event_type_string")),
        city=_optional_str(payload.get("city")),
        state_prov=_optional_str(payload.get("state_prov")),
        country=_optional_str(payload.get("country")),
        start_date=_parse_date(payload, "start_date"),
        end_date=_parse_date(payload, "end_date"),
        timezone=_optional_str(payload.get("timezone")),
        website=_optional_str(payload.get("website")),
        district_key=_optional_str(district_key),
        webcasts=_webcasts(payload.get("webcasts")),
    )


def events_from_api(payloads: Iterable[Mapping[str, Any]]) -> list[Event]:
    events: list[Event] = []
    for payload in payloads:
        try:
            events.append(event_from_api(payload))
        except InvalidEventPayload as exc:
            LOGGER.warning("Skipping event: %s", exc)
    return events
