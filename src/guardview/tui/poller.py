"""
FacetPoller: producer task feeding one facet channel.

Runs as an independent asyncio task next to the dashboard:
- Calls its fetch coroutine at a fixed interval
- Sends every successful result into its channel
- Keeps polling when the API is unreachable or returns bad data
- Stops when the shutdown signal fires, closing its channel on the way out
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from guardview.tui.channel import FacetChannel
from guardview.tui.shutdown import ShutdownSignal

logger = logging.getLogger(__name__)


class FacetPoller:
    """
    Polls one AdGuard Home endpoint into a facet channel.

    Example:
        poller = FacetPoller("statistics", client.get_stats, stats_channel,
                             shutdown, interval=2.0)
        async with asyncio.TaskGroup() as tg:
            tg.create_task(poller.run())
            # ... dashboard task ...
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[Any]],
        channel: FacetChannel[Any],
        shutdown: ShutdownSignal,
        interval: float = 2.0,
    ) -> None:
        """
        Initialize poller.

        Args:
            name: Facet name for logs
            fetch: Coroutine function returning the next facet value
            channel: Channel the values are sent into
            shutdown: Signal that ends the poll loop
            interval: Seconds between polls
        """
        self.name = name
        self._fetch = fetch
        self._channel = channel
        self._shutdown = shutdown
        self._interval = interval
        self.deliveries = 0
        self.failures = 0

    async def run(self) -> None:
        """Poll until shutdown, then close the channel."""
        try:
            while not self._shutdown.is_fired:
                try:
                    value = await self._fetch()
                except (httpx.HTTPError, ValueError) as e:
                    # ValueError covers non-JSON bodies and pydantic validation errors
                    self.failures += 1
                    logger.warning("Fetching %s failed: %s", self.name, e)
                else:
                    if self._channel.offer(value):
                        logger.debug("%s backlog full, dropped oldest value", self.name)
                    self.deliveries += 1

                if await self._shutdown.wait_for(self._interval):
                    break
        finally:
            self._channel.close()
            logger.info("%s poller stopped", self.name)
