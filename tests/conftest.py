"""Shared sample payloads for dashboard tests."""

import io

import pytest
from rich.console import Console

from guardview.types import (
    Filter,
    FilteringStatus,
    QueryQuestion,
    QueryRecord,
    ServiceStatus,
    Statistics,
)


def make_query(i: int = 0, blocked: bool = False) -> QueryRecord:
    """Build a query log record for host-i.example.com."""
    return QueryRecord(
        time=f"2024-03-01T10:15:{i % 60:02d}.123Z",
        question=QueryQuestion(name=f"host-{i}.example.com", type_="A", class_="IN"),
        client="192.168.1.20",
        elapsed_ms="0.52",
        reason="FilteredBlackList" if blocked else "NotFilteredNotFound",
        upstream="https://dns10.quad9.net:443/dns-query",
        status="NOERROR",
    )


def make_stats(**overrides) -> Statistics:
    data = {
        "num_dns_queries": 200,
        "num_blocked_filtering": 50,
        "avg_processing_time": 0.0123,
        "dns_queries": [10, 20, 30, 40],
        "blocked_filtering": [1, 5, 8, 2],
        "top_queried_domains": [{"example.com": 40}, {"example.org": 12}],
        "top_blocked_domains": [{"ads.example.net": 30}],
        "top_clients": [{"192.168.1.20": 150}],
    }
    data.update(overrides)
    return Statistics(**data)


def make_status(**overrides) -> ServiceStatus:
    data = {
        "version": "v0.107.43",
        "running": True,
        "protection_enabled": True,
        "dns_port": 53,
        "http_port": 3000,
        "dns_addresses": ["192.168.1.2"],
    }
    data.update(overrides)
    return ServiceStatus(**data)


@pytest.fixture
def filters() -> FilteringStatus:
    return FilteringStatus(
        enabled=True,
        interval=24,
        filters=[
            Filter(id=1, enabled=True, name="AdGuard DNS filter",
                   url="https://example.com/filter.txt", rules_count=50000),
            Filter(id=2, enabled=False, name="AdAway",
                   url="https://example.com/adaway.txt", rules_count=6500),
        ],
    )


@pytest.fixture
def console() -> Console:
    """Terminal-like console writing into memory, tall enough for the bottom band."""
    return Console(file=io.StringIO(), force_terminal=True, width=100, height=50)
