import asyncio

import httpx
import pytest

from tbaevents.ingest import InvalidEventPayload
from tbaevents.models import EventType
from tbaevents.tba import TBAClient


def _event(key: str, event_type: int, week: int | None) -> dict:
    return {
        "key": key,
        "name": key,
        "year": 2019,
        "event_type": event_type,
        "week": week,
        "start_date": "2019-03-01",
        "end_date": "2019-03-03",
    }


def make_client(handler) -> TBAClient:
    return TBAClient(
        base_url="https://tba.test/api/v3",
        auth_key="secret",
        transport=httpx.MockTransport(handler),
    )


def test_fetch_events_sends_auth_key_and_sorts() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                _event("2019cmptx", 4, None),
                _event("2019casj", 0, 3),
                _event("2019week0", 100, None),
                _event("2019miket", 1, 0),
                {"key": "2019broken"},
            ],
        )

    events = asyncio.run(make_client(handler).fetch_events(2019))

    assert [e.key for e in events] == ["2019week0", "2019miket", "2019casj", "2019cmptx"]
    assert seen[0].url.path == "/api/v3/events/2019"
    assert seen[0].headers["X-TBA-Auth-Key"] == "secret"


def test_fetch_event_returns_none_on_404() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"Errors": [{"event_id": "does not exist"}]})

    assert asyncio.run(make_client(handler).fetch_event("2019nope")) is None


def test_fetch_event_raises_on_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(make_client(handler).fetch_event("2019miket"))


def test_fetch_event_decodes_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v3/event/2019miket"
        return httpx.Response(200, json=_event("2019miket", 5, 6))

    event = asyncio.run(make_client(handler).fetch_event("2019miket"))

    assert event is not None
    assert event.event_type is EventType.DISTRICT_CHAMPIONSHIP_DIVISION


def test_fetch_event_rejects_null_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"null")

    with pytest.raises(InvalidEventPayload):
        asyncio.run(make_client(handler).fetch_event("2019x"))


def test_fetch_event_undecodable_body_is_a_value_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    with pytest.raises(ValueError):
        asyncio.run(make_client(handler).fetch_event("2019x"))
