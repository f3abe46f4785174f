"""
NASA open API client.

Quota: about 1000 requests per hour per key (DEMO_KEY is far lower). The key
travels as the `api_key` query parameter. Date parameters default to today
(UTC) when a stream does not pin them.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from src.core.config.constants import OBSERVER_LATITUDE, OBSERVER_LONGITUDE, UpstreamApi
from src.infrastructure.api_clients.base_client import HttpApiClient


class NASAClient(HttpApiClient):
    """Client for api.nasa.gov."""

    name = UpstreamApi.NASA.value
    API_KEY_PARAM = "api_key"
    ENDPOINTS = {
        "apod": "/planetary/apod",
        "earth_imagery": "/planetary/earth/assets",
        "insight_weather": "/insight_weather/",
        "solar_flares": "/DONKI/FLR",
        "space_weather": "/DONKI/notifications",
        "neo_feed": "/neo/rest/v1/feed",
    }

    def __init__(
        self,
        api_key: str | None = "DEMO_KEY",
        base_url: str = "https://api.nasa.gov",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, api_key, timeout=timeout, transport=transport)

    async def fetch(self, stream_kind: str, params: dict[str, Any] | None = None) -> Any:
        path = self.endpoint_path(stream_kind, {})
        return await self.get_json(path, self._query_for(stream_kind, dict(params or {})))

    async def test_connection(self) -> bool:
        return await self.probe(self.ENDPOINTS["apod"])

    def _query_for(self, stream_kind: str, params: dict[str, Any]) -> dict[str, Any]:
        today = datetime.now(timezone.utc).date()

        if stream_kind == "earth_imagery":
            params.setdefault("lat", OBSERVER_LATITUDE)
            params.setdefault("lon", OBSERVER_LONGITUDE)
            params.setdefault("date", today.isoformat())
            params.setdefault("dim", 0.15)
        elif stream_kind == "insight_weather":
            params.setdefault("feedtype", "json")
            params.setdefault("ver", "1.0")
        elif stream_kind == "solar_flares":
            params.setdefault("startDate", (today - timedelta(days=30)).isoformat())
            params.setdefault("endDate", today.isoformat())
        elif stream_kind == "space_weather":
            params.setdefault("type", "all")
        elif stream_kind == "neo_feed":
            params.setdefault("start_date", today.isoformat())
            params.setdefault("end_date", (today + timedelta(days=7)).isoformat())

        return params
