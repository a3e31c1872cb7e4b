"""
Control Plane — Rendezvous channel.
An unbuffered hand-off between one producer call and one consumer call: an
offer completes only when a receiver has taken the item. Offers that time out
or are cancelled are withdrawn and never reach a receiver.

A channel serves one event loop at a time. When it is first used from a new
loop (the app was restarted), offers left over from the old loop are dropped.
"""
import asyncio
from collections import deque
from typing import Deque, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class Rendezvous(Generic[T]):
    def __init__(self):
        self._offers: Deque[Tuple[T, asyncio.Future]] = deque()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._arrived: Optional[asyncio.Event] = None

    def _bind(self) -> asyncio.Event:
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._loop = loop
            self._offers.clear()
            self._arrived = asyncio.Event()
        return self._arrived

    async def offer(self, item: T, timeout: Optional[float] = None) -> bool:
        """Hand `item` to a receiver. Returns False if nobody took it within `timeout` seconds."""
        arrived = self._bind()
        taken = self._loop.create_future()
        entry = (item, taken)
        self._offers.append(entry)
        arrived.set()
        try:
            await asyncio.wait({taken}, timeout=timeout)
        finally:
            # a receiver resolves `taken` in the same step it pops the entry
            if not taken.done():
                taken.cancel()
                self._offers.remove(entry)
        return not taken.cancelled()

    async def send(self, item: T) -> None:
        await self.offer(item)

    def receive_nowait(self) -> T:
        """Take a waiting offer, or raise asyncio.QueueEmpty if there is none."""
        self._bind()
        while self._offers:
            item, taken = self._offers.popleft()
            if not taken.done():
                taken.set_result(None)
                return item
        raise asyncio.QueueEmpty

    async def receive(self) -> T:
        arrived = self._bind()
        while True:
            try:
                return self.receive_nowait()
            except asyncio.QueueEmpty:
                pass
            arrived.clear()
            await arrived.wait()

    def pending(self) -> int:
        return len(self._offers)
