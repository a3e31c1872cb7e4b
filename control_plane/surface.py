"""
Control Plane — Control surface.
Every operator-facing operation, independent of HTTP. The router only parses
requests and maps outcomes to responses.
"""
import asyncio
from typing import Optional

from .commands import CommandBridge
from .config import NotificationConfig
from .longpoll import DEFAULT_TIMEOUT_MS, LongPollCoordinator
from .models import ConfigStatus, Executor, RunResult
from .notifier import Notifier
from .state import ControlState
from .validators import config_status


class ControlSurface:
    def __init__(
        self,
        root: str,
        executor: Executor,
        config: NotificationConfig,
        bridge: Optional[CommandBridge] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.config = config
        self.executor = executor
        self.state = ControlState(root)
        self.bridge = bridge or CommandBridge()
        self.longpoll = LongPollCoordinator(executor)
        self.notifier = notifier or Notifier()
        self._pause_lock: Optional[asyncio.Lock] = None
        self._pause_loop: Optional[asyncio.AbstractEventLoop] = None

    # ─── Watcher ──────────────────────────────────────────────────────────────

    def receive_update(self, root: str, result: RunResult) -> None:
        self.state.receive_update(root, result)

    def watched_root(self) -> str:
        return self.state.root

    async def adjust_root(self, root: str) -> None:
        await self.bridge.adjust_root(root)

    async def ignore(self, paths: str) -> None:
        await self.bridge.ignore(paths)

    async def reinstate(self, paths: str) -> None:
        await self.bridge.reinstate(paths)

    def execute(self) -> None:
        self.bridge.execute_in_background()

    def _toggle_lock(self) -> asyncio.Lock:
        # one lock per event loop, so the surface outlives an app restart
        loop = asyncio.get_running_loop()
        if self._pause_loop is not loop:
            self._pause_loop = loop
            self._pause_lock = asyncio.Lock()
        return self._pause_lock

    async def toggle_pause(self) -> bool:
        """Flip the pause flag, tell the watcher, and return the new state."""
        async with self._toggle_lock():
            paused = not self.state.paused
            if paused:
                await self.bridge.pause()
            else:
                await self.bridge.resume()
            self.state.set_paused(paused)
            return paused

    # ─── Executor ─────────────────────────────────────────────────────────────

    def status(self) -> str:
        return self.executor.status()

    async def wait_for_status(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        return await self.longpoll.wait_for_status(timeout_ms)

    def results(self) -> Optional[RunResult]:
        return self.state.results_snapshot()

    # ─── Notifications ────────────────────────────────────────────────────────

    def config_status(self) -> ConfigStatus:
        return config_status(self.config)

    def sound_path(self, kind: str = "generic") -> str:
        """
        Configured sound file for `kind`, empty when unset. The generic sound
        only ever uses the legacy path; success and failure fall back to it.
        """
        sound = self.config.sound
        if kind == "success":
            return sound.success_path()
        if kind == "failure":
            return sound.failure_path()
        if kind == "generic":
            return sound.file_path
        raise ValueError(f"unknown sound kind: {kind}")

    async def send_push(self, title: str, body: str) -> None:
        await self.notifier.send(self.config, title, body)
