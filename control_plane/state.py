"""
Control Plane — Shared state.
Watched root, pause flag and latest run result, guarded by a single lock so
the watcher callback and request handlers never observe a half-applied update.
"""
import threading
from typing import Optional

from .models import RunResult


class ControlState:
    def __init__(self, root: str):
        self._lock = threading.Lock()
        self._root = root
        self._paused = False
        self._latest: Optional[RunResult] = None

    def receive_update(self, root: str, result: RunResult) -> None:
        """Watcher callback: replaces the root and latest result wholesale."""
        with self._lock:
            self._root = root
            self._latest = result

    @property
    def root(self) -> str:
        with self._lock:
            return self._root

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    def set_paused(self, paused: bool) -> None:
        with self._lock:
            self._paused = paused

    def results_snapshot(self) -> Optional[RunResult]:
        """Copy of the latest result carrying the current pause flag, or None before any run."""
        with self._lock:
            if self._latest is None:
                return None
            return self._latest.model_copy(update={"paused": self._paused})
