"""
Dashboard controller: the aggregation and render loop.

This module provides the Dashboard class that:
- Owns the terminal for the whole loop through TerminalSession
- Fills the snapshot round by round through FacetAggregator
- Draws one frame per completed round once every facet is present
- Checks for quit/resize input after each draw without blocking
- Fires the shutdown signal when the loop ends, whatever the reason

Order of operations:
1. Register SIGINT/SIGTERM/SIGWINCH handlers BEFORE taking the terminal
2. Enter TerminalSession (raw mode, mouse capture, alternate screen)
3. Loop: round -> render -> draw -> poll input
4. Show the cursor, release the terminal, fire shutdown
"""

from __future__ import annotations

import asyncio
import functools
import logging
import signal
import time
from typing import Any

from rich.console import Console

from guardview.tui.aggregator import FacetAggregator
from guardview.tui.channel import FacetChannel
from guardview.tui.keyboard import InputPoller, is_quit
from guardview.tui.render import Frame, RenderDispatcher
from guardview.tui.shutdown import ShutdownSignal
from guardview.tui.terminal import TerminalSession
from guardview.types import FilteringStatus

logger = logging.getLogger(__name__)


class Dashboard:
    """
    Runs the dashboard until quit or until every producer has finished.

    The snapshot and the terminal are only touched from the task running
    run(), so no locking is involved.

    Example:
        dashboard = Dashboard(query_rx, stats_rx, status_rx, filters, shutdown)
        await dashboard.run()  # Returns on q / Q / Ctrl+C
    """

    def __init__(
        self,
        query_log: FacetChannel[Any],
        statistics: FacetChannel[Any],
        status: FacetChannel[Any],
        filters: FilteringStatus,
        shutdown: ShutdownSignal,
        console: Console | None = None,
        input_fd: int | None = None,
        min_frame_interval: float = 0.0,
        raw_mode: bool = True,
        install_signal_handlers: bool = True,
    ) -> None:
        """
        Initialize dashboard.

        Args:
            query_log: Channel of query log replacements
            statistics: Channel of statistics replacements
            status: Channel of service status replacements
            filters: Filter list, fixed for the process lifetime
            shutdown: Signal fired when the loop ends
            console: Rich Console to draw on (creates default if None)
            input_fd: Terminal input fd for raw mode and key polling
            min_frame_interval: Minimum seconds between two draws
            raw_mode: Put input_fd in raw mode (False only reads keys from it)
            install_signal_handlers: Register SIGINT/SIGTERM/SIGWINCH handlers
        """
        self.console = console if console is not None else Console()
        self.shutdown = shutdown
        self.aggregator = FacetAggregator(
            query_log, statistics, status, shutdown=shutdown
        )
        self.dispatcher = RenderDispatcher(filters)
        self.poller = InputPoller(input_fd)
        self._input_fd = input_fd
        self._min_frame_interval = min_frame_interval
        self._raw_mode = raw_mode
        self._install_signal_handlers = install_signal_handlers
        self.frames_drawn = 0
        self.last_frame: Frame | None = None

    @property
    def snapshot(self):
        return self.aggregator.snapshot

    async def run(self) -> None:
        """
        Run the render loop.

        Raises:
            TerminalSetupError: If the terminal could not be acquired
            Exception: Whatever a draw raised, after the terminal is restored
        """
        loop = asyncio.get_running_loop()
        installed = self._register_signals(loop) if self._install_signal_handlers else []

        try:
            raw_fd = self._input_fd if self._raw_mode else None
            with TerminalSession(self.console, raw_fd) as session:
                await self._render_loop(session)
                session.show_cursor()
        finally:
            self.shutdown.fire("render loop ended")
            self.aggregator.close()
            for sig in installed:
                loop.remove_signal_handler(sig)

        logger.info("Dashboard stopped after %d frames", self.frames_drawn)

    async def _render_loop(self, session: TerminalSession) -> None:
        last_draw: float | None = None

        while await self.aggregator.next_round():
            if not self.snapshot.is_complete:
                continue

            if last_draw is not None and self._min_frame_interval > 0:
                remaining = self._min_frame_interval - (time.monotonic() - last_draw)
                if remaining > 0:
                    await asyncio.sleep(remaining)

            width, height = self.console.size
            frame = self.dispatcher.render(self.snapshot, width, height)
            session.draw(frame.renderable)
            self.frames_drawn += 1
            self.last_frame = frame
            last_draw = time.monotonic()

            event = self.poller.poll()
            if is_quit(event):
                logger.info("Quit key pressed")
                self.shutdown.fire("quit key")
                break

    def _register_signals(self, loop: asyncio.AbstractEventLoop) -> list[signal.Signals]:
        """
        Install signal handlers; returns the signals actually registered.

        Signal handlers run outside the render task, so they only set flags.
        """
        handlers = {
            signal.SIGINT: functools.partial(self._handle_signal, signal.SIGINT),
            signal.SIGTERM: functools.partial(self._handle_signal, signal.SIGTERM),
        }
        if hasattr(signal, "SIGWINCH"):
            handlers[signal.SIGWINCH] = self.poller.notify_resize

        installed = []
        for sig, handler in handlers.items():
            try:
                loop.add_signal_handler(sig, handler)
            except (NotImplementedError, RuntimeError, ValueError):
                # Not on the main thread or not supported by this loop
                continue
            installed.append(sig)
        return installed

    def _handle_signal(self, sig: signal.Signals) -> None:
        self.shutdown.fire(sig.name)
