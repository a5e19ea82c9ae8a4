"""
ShutdownSignal: one-shot broadcast used to stop the producers.

Wraps asyncio.Event so that firing is idempotent and observable:
the first fire() wakes every waiter, later fires change nothing.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


class ShutdownSignal:
    """
    Process-wide stop notification.

    Any number of tasks may await wait(); waiters that arrive after the
    signal fired return immediately.

    Example:
        shutdown = ShutdownSignal()
        tg.create_task(poller.run())   # poller awaits shutdown.wait()
        ...
        shutdown.fire()
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def fire(self, reason: str = "") -> bool:
        """
        Fire the signal.

        Args:
            reason: Short description for the log

        Returns:
            True if this call fired the signal, False if it was already fired
        """
        if self._event.is_set():
            return False
        logger.info("Shutdown requested%s", f" ({reason})" if reason else "")
        self._event.set()
        return True

    @property
    def is_fired(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the signal fires."""
        await self._event.wait()

    async def wait_for(self, timeout: float) -> bool:
        """
        Wait up to timeout seconds.

        Interruptible sleep for polling loops.

        Returns:
            True if the signal fired, False on timeout
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True
