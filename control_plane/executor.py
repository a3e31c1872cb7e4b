"""
Control Plane — In-process status board.
Minimal Executor used when the bridge runs standalone: it records the status
string reported by the test runner and latches a flag on every change, which
the long-poll coordinator clears. Once attached to a coordinator, every change
is also handed straight to the clients blocked on a long poll.
"""
import asyncio
import threading
from typing import Optional

from .longpoll import LongPollCoordinator

IDLE = "idle"


class StatusBoard:
    def __init__(self, status: str = IDLE):
        self._lock = threading.Lock()
        self._status = status
        self._changed = False
        self._coordinator: Optional[LongPollCoordinator] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def attach(self, coordinator: LongPollCoordinator, loop: asyncio.AbstractEventLoop) -> None:
        with self._lock:
            self._coordinator = coordinator
            self._loop = loop

    def detach(self) -> None:
        with self._lock:
            self._coordinator = None
            self._loop = None

    def status(self) -> str:
        with self._lock:
            return self._status

    def clear_status_flag(self) -> bool:
        with self._lock:
            changed, self._changed = self._changed, False
            return changed

    def set_status(self, status: str) -> None:
        """Record `status`. Safe to call from any thread."""
        with self._lock:
            if status == self._status:
                return
            self._status = status
            self._changed = True
            loop = self._loop

        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._wake(status)
        else:
            loop.call_soon_threadsafe(self._wake, status)

    def _wake(self, status: str) -> None:
        coordinator = self._coordinator
        if coordinator is None:
            return
        if coordinator.broadcast(status):
            with self._lock:
                # a newer status keeps its flag for the next poll
                if self._status == status:
                    self._changed = False
