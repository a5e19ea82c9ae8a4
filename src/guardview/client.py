"""
AdGuard Home API client.

This module provides the AdGuardClient class for querying the AdGuard Home
control API for the data the dashboard displays.

AdGuardClient receives an injected httpx.AsyncClient with base_url and basic
auth already configured. All methods are async and fail loudly on HTTP
errors; retrying is the caller's decision.
"""

from dataclasses import dataclass

import httpx

from guardview.config import DashboardConfig
from guardview.types import (
    FilteringStatus,
    QueryLogResponse,
    QueryRecord,
    ServiceStatus,
    Statistics,
)


def create_http_client(config: DashboardConfig, timeout: float = 5.0) -> httpx.AsyncClient:
    """
    Build the httpx client used by AdGuardClient.

    Args:
        config: Dashboard configuration with server address and credentials
        timeout: Per-request timeout in seconds

    Returns:
        Unopened httpx.AsyncClient (use as async context manager)
    """
    auth = None
    if config.username:
        auth = httpx.BasicAuth(config.username, config.password)
    return httpx.AsyncClient(base_url=config.base_url, auth=auth, timeout=timeout)


@dataclass
class AdGuardClient:
    """
    AdGuard Home API client with injected httpx client.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the server.

    Example:
        async with create_http_client(config) as http:
            client = AdGuardClient(http=http)
            stats = await client.get_stats()
            print(stats.num_dns_queries)
    """

    http: httpx.AsyncClient

    async def get_query_log(self, limit: int = 100) -> list[QueryRecord]:
        """
        Get the most recent query log records, newest first.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            ValueError: On a non-JSON body or malformed response data
                (pydantic.ValidationError is a ValueError).
        """
        response = await self.http.get("/control/querylog", params={"limit": limit})
        response.raise_for_status()
        return QueryLogResponse.model_validate(response.json()).data

    async def get_stats(self) -> Statistics:
        """
        Get aggregate statistics.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            ValueError: On a non-JSON body or malformed response data
                (pydantic.ValidationError is a ValueError).
        """
        response = await self.http.get("/control/stats")
        response.raise_for_status()
        return Statistics.model_validate(response.json())

    async def get_status(self) -> ServiceStatus:
        """
        Get service status.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            ValueError: On a non-JSON body or malformed response data
                (pydantic.ValidationError is a ValueError).
        """
        response = await self.http.get("/control/status")
        response.raise_for_status()
        return ServiceStatus.model_validate(response.json())

    async def get_filtering_status(self) -> FilteringStatus:
        """
        Get configured filter lists.

        Fetched once at startup; the dashboard never refreshes it.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            ValueError: On a non-JSON body or malformed response data
                (pydantic.ValidationError is a ValueError).
        """
        response = await self.http.get("/control/filtering/status")
        response.raise_for_status()
        return FilteringStatus.model_validate(response.json())
