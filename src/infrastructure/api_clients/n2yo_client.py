"""
N2YO satellite tracking client.

Quota: about 1000 requests per day. The key travels as the `apiKey` query
parameter.

Stream kinds:
    positions        /positions/{satellite_id}/{lat}/{lng}/{alt}/{seconds}/
    multi_positions  positions for several satellites, gathered concurrently
                     (one request, and one rate-limit token, per satellite)
    visualpasses     /visualpasses/{satellite_id}/{lat}/{lng}/{alt}/{days}/{min_visibility}/
    radiopasses      /radiopasses/{satellite_id}/{lat}/{lng}/{alt}/{days}/{min_elevation}/
    above            /above/{lat}/{lng}/{alt}/{search_radius}/{category_id}/
    tle              /tle/{satellite_id}
    info             /info/{satellite_id}
"""

import asyncio
from typing import Any

import httpx

from src.core.config.constants import (
    ISS_NORAD_ID,
    OBSERVER_ALTITUDE,
    OBSERVER_LATITUDE,
    OBSERVER_LONGITUDE,
    DataQuality,
    UpstreamApi,
)
from src.core.exceptions import ApiClientError
from src.infrastructure.api_clients.base_client import HttpApiClient

_DEFAULTS: dict[str, Any] = {
    "satellite_id": ISS_NORAD_ID,
    "lat": OBSERVER_LATITUDE,
    "lng": OBSERVER_LONGITUDE,
    "alt": OBSERVER_ALTITUDE,
    "seconds": 1,
    "days": 10,
    "min_visibility": 300,
    "min_elevation": 40,
    "search_radius": 70,
    "category_id": 0,
}


class N2YOClient(HttpApiClient):
    """Client for the N2YO REST API."""

    name = UpstreamApi.N2YO.value
    API_KEY_PARAM = "apiKey"
    ENDPOINTS = {
        "positions": "/positions/{satellite_id}/{lat}/{lng}/{alt}/{seconds}/",
        "visualpasses": "/visualpasses/{satellite_id}/{lat}/{lng}/{alt}/{days}/{min_visibility}/",
        "radiopasses": "/radiopasses/{satellite_id}/{lat}/{lng}/{alt}/{days}/{min_elevation}/",
        "above": "/above/{lat}/{lng}/{alt}/{search_radius}/{category_id}/",
        "tle": "/tle/{satellite_id}",
        "info": "/info/{satellite_id}",
    }

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.n2yo.com/rest/v1/satellite",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, api_key, timeout=timeout, transport=transport)

    def supported_kinds(self) -> list[str]:
        return [*self.ENDPOINTS, "multi_positions"]

    def request_count(self, stream_kind: str, params: dict[str, Any] | None = None) -> int:
        if stream_kind == "multi_positions":
            return len(_satellite_ids({**_DEFAULTS, **(params or {})}))
        return 1

    async def fetch(self, stream_kind: str, params: dict[str, Any] | None = None) -> Any:
        merged = {**_DEFAULTS, **(params or {})}
        if stream_kind == "multi_positions":
            return await self._fetch_many(merged)
        return await self.get_json(self.endpoint_path(stream_kind, merged))

    async def test_connection(self) -> bool:
        return await self.probe(self.endpoint_path("tle", {"satellite_id": ISS_NORAD_ID}))

    def assess(self, stream_kind: str, data: Any) -> tuple[DataQuality, float]:
        if stream_kind == "positions":
            positions = data.get("positions") if isinstance(data, dict) else None
            if positions:
                return DataQuality.GOOD, 1.0
            return DataQuality.POOR, 0.5

        if stream_kind == "multi_positions":
            satellites = data.get("satellites", [])
            ok = sum(1 for entry in satellites if "error" not in entry)
            if satellites and ok == len(satellites):
                return DataQuality.GOOD, 1.0
            return DataQuality.POOR, ok / len(satellites) if satellites else 0.5

        return DataQuality.GOOD, 1.0

    async def _fetch_many(self, params: dict[str, Any]) -> dict[str, Any]:
        satellite_ids = _satellite_ids(params)
        results = await asyncio.gather(
            *(
                self.get_json(self.endpoint_path("positions", {**params, "satellite_id": sat_id}))
                for sat_id in satellite_ids
            ),
            return_exceptions=True,
        )

        satellites = []
        errors = []
        for sat_id, result in zip(satellite_ids, results):
            if isinstance(result, ApiClientError):
                errors.append(result)
                satellites.append({"satellite_id": sat_id, "error": result.message})
            elif isinstance(result, BaseException):
                raise result
            else:
                satellites.append({"satellite_id": sat_id, "data": result})

        if errors and len(errors) == len(satellite_ids):
            raise errors[0]
        return {"satellites": satellites}


def _satellite_ids(params: dict[str, Any]) -> list[Any]:
    return list(params.get("satellite_ids") or [params["satellite_id"]])

