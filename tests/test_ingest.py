from datetime import date

import pytest

from tbaevents.ingest import InvalidEventPayload, event_from_api, events_from_api
from tbaevents.models import EventType

KETTERING = {
    "key": "2019miket",
    "name": "FIM District Kettering University Event #1",
    "short_name": "Kettering University #1",
    "event_code": "miket",
    "event_type": 1,
    "event_type_string": "District",
    "district": {"abbreviation": "fim", "key": "2019fim", "year": 2019},
    "city": "Flint",
    "state_prov": "MI",
    "country": "USA",
    "start_date": "2019-02-28",
    "end_date": "2019-03-02",
    "year": 2019,
    "week": 0,
    "timezone": "America/Detroit",
    "website": "http://www.firstinmichigan.org",
    "webcasts": [{"type": "twitch", "channel": "firstinmichigan", "date": "2019-03-01"}],
}


def test_event_from_api_maps_fields() -> None:
    event = event_from_api(KETTERING)

    assert event.key == "2019miket"
    assert event.event_type is EventType.DISTRICT
    assert event.week == 0
    assert event.start_date == date(2019, 2, 28)
    assert event.end_date == date(2019, 3, 2)
    assert event.event_type_name == "District"
    assert event.district_key == "2019fim"
    assert event.location == "Flint, MI, USA"
    assert event.has_website
    assert event.webcasts[0].channel == "firstinmichigan"


def test_event_from_api_defaults() -> None:
    payload = {
        "key": "2019cmptx",
        "year": 2019,
        "event_type": 42,
        "short_name": "",
        "start_date": "2019-04-17",
        "end_date": "2019-04-20",
        "week": None,
        "webcasts": [{"channel": "missing-type"}],
    }
    event = event_from_api(payload)

    assert event.event_type is EventType.UNLABELED
    assert event.short_name is None
    assert event.week is None
    assert event.webcasts == ()
    assert not event.has_website


def test_event_from_api_rejects_bad_date() -> None:
    with pytest.raises(InvalidEventPayload) as excinfo:
        event_from_api({**KETTERING, "start_date": "02/28/2019"})
    assert excinfo.value.key == "start_date"
    assert "2019miket" in str(excinfo.value)


def test_event_from_api_requires_end_date() -> None:
    payload = dict(KETTERING)
    del payload["end_date"]
    with pytest.raises(InvalidEventPayload) as excinfo:
        event_from_api(payload)
    assert excinfo.value.key == "end_date"


def test_events_from_api_skips_invalid_entries() -> None:
    events = events_from_api([KETTERING, {"key": "2019broken", "year": 2019}])
    assert [e.key for e in events] == ["2019miket"]


def test_event_from_api_rejects_non_object_payload() -> None:
    with pytest.raises(InvalidEventPayload) as excinfo:
        event_from_api(None)
    assert excinfo.value.key == "key"


def test_events_from_api_skips_non_object_entries() -> None:
    events = events_from_api([None, "2019miket", KETTERING])
    assert [e.key for e in events] == ["2019miket"]
