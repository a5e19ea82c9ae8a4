"""Tests for FacetChannel closure semantics."""

import asyncio

import pytest

from guardview.exceptions import ChannelClosedError
from guardview.tui.channel import FacetChannel


class TestFacetChannel:
    @pytest.mark.asyncio
    async def test_values_received_in_order(self):
        channel = FacetChannel("test")
        await channel.send(1)
        await channel.send(2)
        assert await channel.recv() == 1
        assert await channel.recv() == 2

    @pytest.mark.asyncio
    async def test_queued_values_survive_close(self):
        """Closing only ends the stream after what was already sent."""
        channel = FacetChannel("test")
        await channel.send("a")
        channel.close()
        assert await channel.recv() == "a"
        assert await channel.recv() is None

    @pytest.mark.asyncio
    async def test_closed_channel_resolves_immediately_every_time(self):
        channel = FacetChannel("test")
        channel.close()
        for _ in range(3):
            assert await asyncio.wait_for(channel.recv(), timeout=0.5) is None

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_receiver(self):
        channel = FacetChannel("test")
        receiver = asyncio.create_task(channel.recv())
        await asyncio.sleep(0)
        assert not receiver.done()

        channel.close()
        assert await asyncio.wait_for(receiver, timeout=0.5) is None

    @pytest.mark.asyncio
    async def test_send_after_close_raises(self):
        channel = FacetChannel("stats")
        channel.close()
        with pytest.raises(ChannelClosedError) as exc_info:
            await channel.send(1)
        assert exc_info.value.name == "stats"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        channel = FacetChannel("test")
        channel.close()
        channel.close()
        assert channel.closed
        assert await channel.recv() is None


class TestOffer:
    @pytest.mark.asyncio
    async def test_offer_drops_oldest_when_full(self):
        channel = FacetChannel("test", maxsize=2)
        assert channel.offer(1) is False
        assert channel.offer(2) is False
        assert channel.offer(3) is True

        assert await channel.recv() == 2
        assert await channel.recv() == 3

    @pytest.mark.asyncio
    async def test_offer_after_close_raises(self):
        channel = FacetChannel("test")
        channel.close()
        with pytest.raises(ChannelClosedError):
            channel.offer(1)
