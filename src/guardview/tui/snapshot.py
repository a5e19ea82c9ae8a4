"""
Snapshot store for the dashboard's three independently updated facets.

Each facet starts absent and is replaced wholesale whenever its producer
delivers; there is no incremental merge. The render loop may only draw once
every facet has been delivered at least once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from guardview.types import QueryRecord, ServiceStatus, Statistics


class Facet(Enum):
    """One independently updated part of the dashboard state."""

    QUERY_LOG = "query_log"
    STATISTICS = "statistics"
    STATUS = "status"


@dataclass
class Snapshot:
    """
    Latest known value of every facet.

    Attributes:
        query_log: Most recent query records, as delivered
        statistics: Most recent aggregate statistics
        status: Most recent service status
    """

    query_log: list[QueryRecord] | None = None
    statistics: Statistics | None = None
    status: ServiceStatus | None = None

    def update(self, facet: Facet, value: Any) -> None:
        """Replace one facet with a newly delivered value."""
        setattr(self, facet.value, value)

    def get(self, facet: Facet) -> Any:
        return getattr(self, facet.value)

    def missing(self) -> list[Facet]:
        """Facets that have not been delivered yet."""
        return [facet for facet in Facet if self.get(facet) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing()
