"""
FacetAggregator: merges three asynchronous facet channels into one Snapshot.

Work is organised in rounds. A round races a receive on every still-open
channel and records whichever value arrives first into the snapshot. The
round completes after three deliveries in total, counted regardless of which
channel delivered them.

Closure handling:
- A channel observed closed is dropped from the open set and never raced
  again, so a finished producer cannot turn the race into a busy re-poll
- The remaining channels can still complete the round on their own
- Once no channel is open and the round is short of three deliveries,
  next_round() returns False and aggregation is over

Receives still pending when a round completes are carried into the next
round instead of being cancelled, so no delivered value is ever dropped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from guardview.tui.channel import FacetChannel
from guardview.tui.shutdown import ShutdownSignal
from guardview.tui.snapshot import Facet, Snapshot

logger = logging.getLogger(__name__)

DELIVERIES_PER_ROUND = 3


class FacetAggregator:
    """
    Round-based driver over the query log, statistics and status channels.

    Owns the snapshot it fills; the render loop reads it between rounds.

    Example:
        aggregator = FacetAggregator(query_rx, stats_rx, status_rx)
        while await aggregator.next_round():
            if aggregator.snapshot.is_complete:
                draw(aggregator.snapshot)
        aggregator.close()
    """

    def __init__(
        self,
        query_log: FacetChannel[Any],
        statistics: FacetChannel[Any],
        status: FacetChannel[Any],
        snapshot: Snapshot | None = None,
        shutdown: ShutdownSignal | None = None,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            query_log: Channel of full query log replacements
            statistics: Channel of statistics replacements
            status: Channel of service status replacements
            snapshot: Store to fill (creates an empty one if None)
            shutdown: When fired, the current round is abandoned
        """
        self.snapshot = snapshot if snapshot is not None else Snapshot()
        self._open: dict[Facet, FacetChannel[Any]] = {
            Facet.QUERY_LOG: query_log,
            Facet.STATISTICS: statistics,
            Facet.STATUS: status,
        }
        self._pending: dict[Facet, asyncio.Task[Any]] = {}
        self._shutdown = shutdown
        self._shutdown_waiter: asyncio.Task[None] | None = None
        self.rounds_completed = 0

    @property
    def open_facets(self) -> list[Facet]:
        """Facets whose channel has not been observed closed."""
        return list(self._open)

    async def next_round(self) -> bool:
        """
        Run one round.

        Returns:
            True once three deliveries have been recorded into the snapshot,
            False if every channel closed first or shutdown fired
        """
        received = 0
        while received < DELIVERIES_PER_ROUND:
            if not self._open:
                logger.info(
                    "All facet channels closed (%d deliveries this round)", received
                )
                return False
            if self._shutdown is not None and self._shutdown.is_fired:
                return False

            for facet, channel in self._open.items():
                if facet not in self._pending:
                    self._pending[facet] = asyncio.create_task(
                        channel.recv(), name=f"recv-{facet.value}"
                    )

            waiters: set[asyncio.Task[Any]] = set(self._pending.values())
            if self._shutdown is not None:
                if self._shutdown_waiter is None:
                    self._shutdown_waiter = asyncio.create_task(
                        self._shutdown.wait(), name="recv-shutdown"
                    )
                waiters.add(self._shutdown_waiter)

            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)

            # Iterate in facet order so simultaneous completions apply deterministically
            for facet in list(self._pending):
                task = self._pending[facet]
                if task not in done:
                    continue
                del self._pending[facet]
                value = task.result()
                if value is None:
                    logger.info("Facet channel closed: %s", facet.value)
                    del self._open[facet]
                    continue
                self.snapshot.update(facet, value)
                received += 1
                logger.debug("Received %s (%d this round)", facet.value, received)

        self.rounds_completed += 1
        return True

    def close(self) -> None:
        """Cancel receives still in flight."""
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
        if self._shutdown_waiter is not None:
            self._shutdown_waiter.cancel()
            self._shutdown_waiter = None
