"""
End-to-end tests for the Dashboard render loop.

Uses in-memory consoles and os.pipe() for key input so the loop runs
without a real terminal.
"""

import asyncio
import os
import termios
from unittest.mock import patch

import pytest

from conftest import make_query, make_stats, make_status
from guardview.exceptions import TerminalSetupError
from guardview.tui.channel import FacetChannel
from guardview.tui.controller import Dashboard
from guardview.tui.render import RenderDispatcher
from guardview.tui.shutdown import ShutdownSignal
from guardview.tui.terminal import TerminalSession


@pytest.fixture
def channels():
    return FacetChannel("query_log"), FacetChannel("statistics"), FacetChannel("status")


@pytest.fixture
def key_pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    os.close(read_fd)
    os.close(write_fd)


def make_dashboard(channels, filters, console, **kwargs) -> Dashboard:
    kwargs.setdefault("install_signal_handlers", False)
    kwargs.setdefault("raw_mode", False)
    return Dashboard(
        *channels,
        filters=filters,
        shutdown=kwargs.pop("shutdown", ShutdownSignal()),
        console=console,
        **kwargs,
    )


async def deliver_all(channels, queries=1, **stats) -> None:
    query_rx, stats_rx, status_rx = channels
    await query_rx.send([make_query(i) for i in range(queries)])
    await stats_rx.send(make_stats(**stats))
    await status_rx.send(make_status(uptime=10))


async def wait_until(predicate, timeout: float = 2.0) -> None:
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout=timeout)


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_single_round_draws_one_frame(self, channels, filters, console):
        """5 queries, two top clients and an uptime give one complete frame."""
        await deliver_all(channels, queries=5, top_clients=[{"A": 3}, {"B": 1}])
        for channel in channels:
            channel.close()
        dashboard = make_dashboard(channels, filters, console)

        await asyncio.wait_for(dashboard.run(), timeout=2.0)

        assert dashboard.frames_drawn == 1
        frame = dashboard.last_frame
        assert frame.widgets["queries"].row_count == 5
        assert frame.widgets["top_clients"].row_count == 2
        assert dashboard.shutdown.is_fired

    @pytest.mark.asyncio
    async def test_all_closed_before_deliveries_never_draws(self, channels, filters, console):
        for channel in channels:
            channel.close()
        dashboard = make_dashboard(channels, filters, console)

        with patch.object(RenderDispatcher, "render") as render:
            await asyncio.wait_for(dashboard.run(), timeout=2.0)

        render.assert_not_called()
        assert dashboard.frames_drawn == 0
        assert dashboard.shutdown.is_fired

    @pytest.mark.asyncio
    async def test_render_only_with_every_facet_present(self, channels, filters, console):
        query_rx, stats_rx, status_rx = channels
        dashboard = make_dashboard(channels, filters, console)
        original_render = RenderDispatcher.render
        seen_complete = []

        def checking_render(self, snapshot, width, height):
            seen_complete.append(snapshot.is_complete)
            return original_render(self, snapshot, width, height)

        with patch.object(RenderDispatcher, "render", checking_render):
            task = asyncio.create_task(dashboard.run())
            for i in range(3):
                await query_rx.send([make_query(i)])
            await asyncio.sleep(0.05)
            assert dashboard.frames_drawn == 0

            await deliver_all(channels)
            await wait_until(lambda: dashboard.frames_drawn >= 1)
            for channel in channels:
                channel.close()
            await asyncio.wait_for(task, timeout=2.0)

        assert seen_complete and all(seen_complete)

    @pytest.mark.asyncio
    async def test_closed_source_keeps_last_value(self, channels, filters, console):
        query_rx, stats_rx, status_rx = channels
        dashboard = make_dashboard(channels, filters, console)
        task = asyncio.create_task(dashboard.run())

        await deliver_all(channels)
        await wait_until(lambda: dashboard.frames_drawn == 1)
        status_rx.close()

        await query_rx.send([make_query(i) for i in range(3)])
        await stats_rx.send(make_stats())
        await query_rx.send([make_query(i) for i in range(4)])
        await wait_until(lambda: dashboard.frames_drawn == 2)

        assert dashboard.last_frame.widgets["queries"].row_count == 4
        assert dashboard.snapshot.status.uptime == 10

        query_rx.close()
        stats_rx.close()
        await asyncio.wait_for(task, timeout=2.0)


class TestQuit:
    @pytest.mark.parametrize("key", [b"q", b"Q", b"\x03"])
    @pytest.mark.asyncio
    async def test_quit_key_ends_loop_and_releases_once(
        self, channels, filters, console, key_pipe, key
    ):
        read_fd, write_fd = key_pipe
        os.write(write_fd, key)
        dashboard = make_dashboard(channels, filters, console, input_fd=read_fd)
        await deliver_all(channels)

        with patch.object(
            TerminalSession, "_teardown", autospec=True, side_effect=TerminalSession._teardown
        ) as teardown:
            await asyncio.wait_for(dashboard.run(), timeout=2.0)

        assert dashboard.frames_drawn == 1
        assert dashboard.shutdown.is_fired
        teardown.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_keys_ignored(self, channels, filters, console, key_pipe):
        read_fd, write_fd = key_pipe
        os.write(write_fd, b"x")
        dashboard = make_dashboard(channels, filters, console, input_fd=read_fd)
        task = asyncio.create_task(dashboard.run())

        await deliver_all(channels)
        await wait_until(lambda: dashboard.frames_drawn == 1)
        assert not dashboard.shutdown.is_fired

        os.write(write_fd, b"q")
        await deliver_all(channels)
        await asyncio.wait_for(task, timeout=2.0)
        assert dashboard.frames_drawn == 2

    @pytest.mark.asyncio
    async def test_external_shutdown_stops_waiting_loop(self, channels, filters, console):
        shutdown = ShutdownSignal()
        dashboard = make_dashboard(channels, filters, console, shutdown=shutdown)
        task = asyncio.create_task(dashboard.run())
        await asyncio.sleep(0.01)

        shutdown.fire("test")
        await asyncio.wait_for(task, timeout=2.0)
        assert dashboard.frames_drawn == 0


class TestResize:
    @pytest.mark.asyncio
    async def test_resize_relayouts_next_frame(self, channels, filters, console, key_pipe):
        read_fd, _ = key_pipe
        dashboard = make_dashboard(channels, filters, console, input_fd=read_fd)
        task = asyncio.create_task(dashboard.run())
        bottom_shown = []

        for frame_number, height in enumerate([50, 42, 43], start=1):
            console.height = height
            dashboard.poller.notify_resize()
            await deliver_all(channels)
            await wait_until(lambda: dashboard.frames_drawn == frame_number)
            bottom_shown.append(dashboard.last_frame.layout.show_bottom)
            assert dashboard.last_frame.layout.height == height
            assert not dashboard.shutdown.is_fired

        assert bottom_shown == [True, False, True]

        for channel in channels:
            channel.close()
        await asyncio.wait_for(task, timeout=2.0)


class TestErrors:
    @pytest.mark.asyncio
    async def test_draw_error_propagates_after_teardown(self, channels, filters, console):
        await deliver_all(channels)
        dashboard = make_dashboard(channels, filters, console)

        with patch.object(
            TerminalSession, "_teardown", autospec=True, side_effect=TerminalSession._teardown
        ) as teardown, patch.object(
            RenderDispatcher, "render", side_effect=RuntimeError("draw failed")
        ):
            with pytest.raises(RuntimeError, match="draw failed"):
                await asyncio.wait_for(dashboard.run(), timeout=2.0)

        teardown.assert_called_once()
        assert dashboard.shutdown.is_fired

    @pytest.mark.asyncio
    async def test_setup_failure_never_starts_loop(self, channels, filters, console):
        await deliver_all(channels)
        dashboard = make_dashboard(channels, filters, console, input_fd=0, raw_mode=True)

        with patch(
            "guardview.tui.terminal.termios.tcgetattr",
            side_effect=termios.error(25, "Inappropriate ioctl for device"),
        ):
            with pytest.raises(TerminalSetupError) as exc_info:
                await dashboard.run()

        assert exc_info.value.step == "raw_mode"
        assert dashboard.frames_drawn == 0
        assert dashboard.shutdown.is_fired


class TestFrameInterval:
    @pytest.mark.asyncio
    async def test_min_frame_interval_spaces_draws(self, channels, filters, console):
        dashboard = make_dashboard(channels, filters, console, min_frame_interval=0.2)
        loop = asyncio.get_running_loop()
        draw_times = []
        original_draw = TerminalSession.draw

        def timed_draw(self, renderable):
            draw_times.append(loop.time())
            original_draw(self, renderable)

        with patch.object(TerminalSession, "draw", timed_draw):
            await deliver_all(channels)
            await deliver_all(channels)
            for channel in channels:
                channel.close()
            await asyncio.wait_for(dashboard.run(), timeout=2.0)

        assert len(draw_times) == 2
        assert draw_times[1] - draw_times[0] >= 0.19
