from __future__ import annotations

import logging
from typing import Any

import httpx

from .classifier import sort_events
from .ingest import event_from_api, events_from_api
from .models import Event

LOGGER = logging.getLogger(__name__)


class TBAClient:
    def __init__(
        self,
        base_url: str = "https://www.thebluealliance.com/api/v3",
        auth_key: str = "",
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth_key = auth_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"X-TBA-Auth-Key": self.auth_key, "Accept": "application/json"},
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    async def _get_json(self, path: str) -> Any:
        async with self._client() as client:
            response = await client.get(path)
            response.raise_for_status()
        return response.json()

    async def fetch_events(self, year: int) -> list[Event]:
        payload = await self._get_json(f"/events/{year}")
        if not isinstance(payload, list):
            LOGGER.warning("Unexpected /events/%d payload type: %s", year, type(payload).__name__)
            return []
        events = sort_events(events_from_api(payload))
        LOGGER.info("Events: %d loaded for %d", len(events), year)
        return events

    async def fetch_event(self, event_key: str) -> Event | None:
        try:
            payload = await self._get_json(f"/event/{event_key}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                LOGGER.info("Event %s not found", event_key)
                return None
            raise
        return event_from_api(payload)
