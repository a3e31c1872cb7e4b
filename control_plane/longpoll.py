"""
Control Plane — Long-poll coordinator.

A client asks for the next status change. If the executor already latched one,
the current status is returned at once. Otherwise the client offers a one-shot
waiter to whoever signals status changes and blocks until either:

    * the signalling side takes the waiter, after which the client waits for
      the status string it is fulfilled with, or
    * the timeout elapses first, and the client gets an empty answer.

The coordinator never polls the executor itself. An empty fulfilment counts as
"nothing to report" and is answered exactly like a timeout.
"""
import asyncio
import logging
from typing import Optional

from .channels import Rendezvous
from .models import Executor

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60000
MAX_TIMEOUT_MS = 180000


def parse_timeout(raw: Optional[str]) -> int:
    """Client timeout in milliseconds, falling back to the default when absent or out of range."""
    if raw is None:
        return DEFAULT_TIMEOUT_MS
    try:
        timeout = int(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_MS
    if timeout < 0 or timeout > MAX_TIMEOUT_MS:
        return DEFAULT_TIMEOUT_MS
    return timeout


class LongPollCoordinator:
    def __init__(self, executor: Executor):
        self.executor = executor
        self._waiters: "Rendezvous[asyncio.Future]" = Rendezvous()

    async def wait_for_status(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        if self.executor.clear_status_flag():
            return self.executor.status()

        waiter = asyncio.get_running_loop().create_future()
        try:
            if not await self._waiters.offer(waiter, timeout=timeout_ms / 1000):
                return ""
            return await waiter
        finally:
            # abandoned waiters must not be fulfilled later
            if not waiter.done():
                waiter.cancel()

    # ─── Signalling side ──────────────────────────────────────────────────────

    async def next_waiter(self) -> asyncio.Future:
        return await self._waiters.receive()

    async def deliver(self, status: str) -> bool:
        """Wait for one client and hand it `status`. False if that client already gave up."""
        waiter = await self.next_waiter()
        if waiter.done():
            return False
        waiter.set_result(status)
        return True

    def broadcast(self, status: str) -> int:
        """Hand `status` to every client waiting right now. Returns how many got it."""
        delivered = 0
        while True:
            try:
                waiter = self._waiters.receive_nowait()
            except asyncio.QueueEmpty:
                break
            if not waiter.done():
                waiter.set_result(status)
                delivered += 1
        if delivered:
            logger.debug("[longpoll] delivered %r to %d client(s)", status, delivered)
        return delivered

    def waiting(self) -> int:
        return self._waiters.pending()
