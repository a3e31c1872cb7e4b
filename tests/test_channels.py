from __future__ import annotations

import asyncio

import pytest

from control_plane.channels import Rendezvous


@pytest.mark.asyncio
async def test_offer_blocks_until_received() -> None:
    channel: Rendezvous[str] = Rendezvous()
    sender = asyncio.create_task(channel.offer("hello"))

    await asyncio.sleep(0.01)
    assert not sender.done()

    assert await channel.receive() == "hello"
    assert await sender is True


@pytest.mark.asyncio
async def test_items_arrive_in_offer_order() -> None:
    channel: Rendezvous[int] = Rendezvous()
    senders = [asyncio.create_task(channel.send(i)) for i in range(3)]
    await asyncio.sleep(0)

    received = [await channel.receive() for _ in range(3)]
    await asyncio.gather(*senders)

    assert received == [0, 1, 2]


@pytest.mark.asyncio
async def test_timed_out_offer_is_withdrawn() -> None:
    channel: Rendezvous[str] = Rendezvous()

    assert await channel.offer("late", timeout=0.01) is False
    assert channel.pending() == 0

    later = asyncio.create_task(channel.offer("next"))
    assert await asyncio.wait_for(channel.receive(), 1) == "next"
    assert await later is True


@pytest.mark.asyncio
async def test_cancelled_offer_is_withdrawn() -> None:
    channel: Rendezvous[str] = Rendezvous()
    sender = asyncio.create_task(channel.offer("gone"))
    await asyncio.sleep(0)

    sender.cancel()
    with pytest.raises(asyncio.CancelledError):
        await sender

    assert channel.pending() == 0


@pytest.mark.asyncio
async def test_receiver_waits_for_an_offer() -> None:
    channel: Rendezvous[str] = Rendezvous()
    receiver = asyncio.create_task(channel.receive())
    await asyncio.sleep(0.01)
    assert not receiver.done()

    assert await channel.offer("ping", timeout=1) is True
    assert await receiver == "ping"


@pytest.mark.asyncio
async def test_receive_nowait_without_offer() -> None:
    channel: Rendezvous[str] = Rendezvous()

    with pytest.raises(asyncio.QueueEmpty):
        channel.receive_nowait()
