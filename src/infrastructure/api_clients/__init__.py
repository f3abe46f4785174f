"""
Upstream API Clients

- BaseApiClient: contract used by the orchestrator and health checker
- HttpApiClient: httpx implementation with typed error mapping
- N2YOClient / NASAClient: concrete upstreams
"""

from .base_client import BaseApiClient, HttpApiClient
from .nasa_client import NASAClient
from .n2yo_client import N2YOClient

__all__ = [
    "BaseApiClient",
    "HttpApiClient",
    "N2YOClient",
    "NASAClient",
]
