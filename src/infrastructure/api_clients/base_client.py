#!/usr/bin/env python3
"""
Upstream API Client Base

Abstract contract used by the orchestrator and health checker, plus an
httpx-backed implementation shared by the concrete clients.

Error mapping (HttpApiClient):
    429                      -> ApiRateLimitError (retry_after from header)
    other non-2xx            -> ApiResponseError (status_code)
    undecodable JSON body    -> MalformedResponseError
    httpx.TimeoutException   -> ApiTimeoutError
    other httpx.RequestError -> ApiConnectionError

Author: System Architect
Date: 2025-12-11
"""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from src.core.config.constants import DataQuality, Stage
from src.core.exceptions import (
    ApiClientError,
    ApiConnectionError,
    ApiRateLimitError,
    ApiResponseError,
    ApiTimeoutError,
    MalformedResponseError,
    UnknownEndpointError,
)
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


class BaseApiClient(ABC):
    """
    Contract for upstream API clients.

    Subclasses must implement:
    - fetch(): retrieve data for one stream kind
    - test_connection(): lightweight reachability probe

    assess() grades live data; the default treats every response as good.
    """

    name: str = "base"

    @abstractmethod
    async def fetch(self, stream_kind: str, params: dict[str, Any] | None = None) -> Any:
        """Fetch data for stream_kind. Raises ApiClientError subclasses on failure."""
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """Return True if the upstream answered a lightweight request."""
        pass

    def supported_kinds(self) -> list[str]:
        return []

    def request_count(self, stream_kind: str, params: dict[str, Any] | None = None) -> int:
        """Upstream requests one fetch() of stream_kind sends; one rate-limit token each."""
        return 1

    def assess(self, stream_kind: str, data: Any) -> tuple[DataQuality, float]:
        """
        Grade a live response.

        Returns:
            (quality, confidence factor applied to the stream's base confidence)
        """
        return DataQuality.GOOD, 1.0

    async def close(self) -> None:
        pass


class HttpApiClient(BaseApiClient):
    """
    httpx.AsyncClient based client.

    Subclasses declare ENDPOINTS (stream kind -> path template) and
    API_KEY_PARAM (query parameter carrying the key).
    """

    ENDPOINTS: dict[str, str] = {}
    API_KEY_PARAM = "api_key"

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._requests = 0
        self._failures = 0

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._client

    def supported_kinds(self) -> list[str]:
        return list(self.ENDPOINTS)

    def endpoint_path(self, stream_kind: str, params: dict[str, Any]) -> str:
        template = self.ENDPOINTS.get(stream_kind)
        if template is None:
            raise UnknownEndpointError(
                f"{self.name} does not serve '{stream_kind}'",
                details={"api": self.name, "supported": self.supported_kinds()},
            )
        try:
            return template.format(**params)
        except KeyError as exc:
            raise UnknownEndpointError(
                f"Missing path parameter {exc} for {self.name}/{stream_kind}",
                details={"api": self.name, "stream_kind": stream_kind},
            ) from exc

    async def get_json(self, path: str, query: dict[str, Any] | None = None) -> Any:
        """GET path with the API key attached; returns decoded JSON."""
        query = dict(query or {})
        if self.api_key:
            query[self.API_KEY_PARAM] = self.api_key

        self._requests += 1
        started = time.perf_counter()
        try:
            response = await self.client.get(path, params=query)
        except httpx.TimeoutException as exc:
            self._failures += 1
            raise ApiTimeoutError.from_exception(exc, f"{self.name} request timed out", api=self.name, path=path)
        except httpx.RequestError as exc:
            self._failures += 1
            raise ApiConnectionError.from_exception(exc, f"{self.name} request failed", api=self.name, path=path)

        log_stage(
            logger,
            Stage.FETCH,
            "Upstream response",
            level="debug",
            api=self.name,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return self._handle_response(response, path)

    def _handle_response(self, response: httpx.Response, path: str) -> Any:
        if response.status_code == 429:
            self._failures += 1
            retry_after = response.headers.get("Retry-After")
            raise ApiRateLimitError(
                f"{self.name} rate limit exceeded",
                retry_after=_parse_retry_after(retry_after),
                details={"api": self.name, "path": path},
            )

        if not response.is_success:
            self._failures += 1
            raise ApiResponseError(
                f"{self.name} API error: {response.status_code}",
                status_code=response.status_code,
                details={"api": self.name, "path": path, "body": response.text[:200]},
            )

        try:
            return response.json()
        except ValueError as exc:
            self._failures += 1
            raise MalformedResponseError.from_exception(
                exc, f"{self.name} returned a non-JSON body", api=self.name, path=path
            )

    async def probe(self, path: str, query: dict[str, Any] | None = None) -> bool:
        try:
            await self.get_json(path, query)
        except ApiClientError as exc:
            log_stage(
                logger,
                Stage.HEALTH,
                "Upstream probe failed",
                level="warning",
                api=self.name,
                error=exc.message,
                error_type=type(exc).__name__,
            )
            return False
        return True

    def stats(self) -> dict[str, Any]:
        return {"api": self.name, "requests": self._requests, "failures": self._failures}

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
