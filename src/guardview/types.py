"""
AdGuard Home Pydantic response types.

This module provides Pydantic models for parsing responses from the
AdGuard Home control API:
- /control/querylog: Recent DNS queries
- /control/stats: Aggregate counters, history and top-N lists
- /control/status: Service health and version
- /control/filtering/status: Configured filter lists

Notes:
- The API mixes snake_case and camelCase keys (elapsedMs, protection_enabled)
- Top-N lists are lists of single-entry dicts: [{"example.com": 42}, ...]
- Unknown fields are ignored so newer server versions keep parsing
"""

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Query Log Types
# =============================================================================


class QueryQuestion(BaseModel):
    """The question section of a logged DNS query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    type_: str = Field(default="", alias="type")
    class_: str = Field(default="", alias="class")


class QueryRecord(BaseModel):
    """
    Single entry from the query log.

    Example entry:
    {
        "time": "2024-03-01T10:15:02.123Z",
        "question": {"name": "example.com", "type": "A", "class": "IN"},
        "client": "192.168.1.20",
        "elapsedMs": "0.52",
        "reason": "NotFilteredNotFound",
        "upstream": "https://dns10.quad9.net:443/dns-query",
        "status": "NOERROR"
    }
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    time: str = ""
    question: QueryQuestion = Field(default_factory=QueryQuestion)
    client: str = ""
    elapsed_ms: str = Field(default="0", alias="elapsedMs")
    reason: str = ""
    upstream: str = ""
    status: str = ""

    @property
    def domain(self) -> str:
        return self.question.name

    @property
    def record_type(self) -> str:
        return self.question.type_

    @property
    def is_blocked(self) -> bool:
        """True when a filter rule, safe browsing or parental control matched."""
        if self.reason.startswith("NotFiltered"):
            return False
        return self.reason.startswith("Filtered")


class QueryLogResponse(BaseModel):
    """Response from GET /control/querylog."""

    model_config = ConfigDict(extra="ignore")

    data: list[QueryRecord] = Field(default_factory=list)
    oldest: str = ""


# =============================================================================
# Statistics Types
# =============================================================================


class Statistics(BaseModel):
    """
    Response from GET /control/stats.

    dns_queries and blocked_filtering are raw history buckets (hours or days,
    oldest first). The *_chart fields hold the chart-ready (x, y) points and
    stay empty until prepare_chart_data() fills a copy.
    """

    model_config = ConfigDict(extra="ignore")

    num_dns_queries: int = 0
    num_blocked_filtering: int = 0
    num_replaced_safebrowsing: int = 0
    num_replaced_parental: int = 0
    avg_processing_time: float = 0.0
    dns_queries: list[int] = Field(default_factory=list)
    blocked_filtering: list[int] = Field(default_factory=list)
    top_queried_domains: list[dict[str, int]] = Field(default_factory=list)
    top_blocked_domains: list[dict[str, int]] = Field(default_factory=list)
    top_clients: list[dict[str, int]] = Field(default_factory=list)

    dns_queries_chart: list[tuple[float, float]] = Field(default_factory=list)
    blocked_filtering_chart: list[tuple[float, float]] = Field(default_factory=list)

    @property
    def block_percentage(self) -> float:
        """Share of all queries that were blocked by filtering, 0-100."""
        if self.num_dns_queries <= 0:
            return 0.0
        return min(100.0, self.num_blocked_filtering / self.num_dns_queries * 100)


# =============================================================================
# Status Types
# =============================================================================


class ServiceStatus(BaseModel):
    """Response from GET /control/status."""

    model_config = ConfigDict(extra="ignore")

    version: str = ""
    running: bool = False
    protection_enabled: bool = False
    dns_port: int = 53
    http_port: int = 80
    dns_addresses: list[str] = Field(default_factory=list)
    language: str = ""
    uptime: float | None = None  # seconds, only reported by some builds


# =============================================================================
# Filtering Types
# =============================================================================


class Filter(BaseModel):
    """A single configured filter list."""

    model_config = ConfigDict(extra="ignore")

    id: int = 0
    enabled: bool = False
    url: str = ""
    name: str = ""
    rules_count: int = 0
    last_updated: str | None = None


class FilteringStatus(BaseModel):
    """
    Response from GET /control/filtering/status.

    filters is null on a fresh install with no lists configured.
    """

    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    interval: int = 0
    filters: list[Filter] | None = None

    @property
    def filter_items(self) -> list[Filter]:
        return self.filters or []
