"""
FacetChannel: closable async channel between a producer and the dashboard.

asyncio.Queue has no notion of "no more values will ever arrive", which the
aggregator needs in order to drop a finished source from its race. This
wrapper adds it:
- send() enqueues a full replacement value for one facet
- offer() enqueues without waiting, dropping the oldest value when full
- close() marks the channel finished; values already queued are still received
- recv() returns the next value, or None once closed and drained, immediately
  and on every later call
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from guardview.exceptions import ChannelClosedError

T = TypeVar("T")

# Wakes a receiver blocked on an empty queue when the channel closes
_CLOSED = object()


class FacetChannel(Generic[T]):
    """
    Single-consumer channel with explicit closure.

    Example:
        channel: FacetChannel[Statistics] = FacetChannel("statistics")
        await channel.send(stats)
        channel.close()
        await channel.recv()  # stats
        await channel.recv()  # None
    """

    def __init__(self, name: str, maxsize: int = 16) -> None:
        """
        Initialize channel.

        Args:
            name: Channel name used in logs and errors
            maxsize: Queue bound; send() waits while the queue is full
        """
        self.name = name
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, value: T) -> None:
        """
        Send a value to the consumer.

        Raises:
            ChannelClosedError: If close() was already called
        """
        if self._closed:
            raise ChannelClosedError(self.name)
        await self._queue.put(value)

    def offer(self, value: T) -> bool:
        """
        Send without waiting, discarding the oldest queued value when full.

        Values are full replacements, so a backlog only needs its newest entries.

        Returns:
            True if a queued value was discarded to make room

        Raises:
            ChannelClosedError: If close() was already called
        """
        if self._closed:
            raise ChannelClosedError(self.name)
        dropped = False
        if self._queue.full():
            self._queue.get_nowait()
            dropped = True
        self._queue.put_nowait(value)
        return dropped

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        # A non-empty queue means nobody is blocked in get()
        if self._queue.empty():
            self._queue.put_nowait(_CLOSED)

    async def recv(self) -> T | None:
        """
        Receive the next value.

        Returns:
            The next value, or None if the channel is closed and drained
        """
        if self._closed and self._queue.empty():
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]
